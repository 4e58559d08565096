class LudoRulesError(Exception):
    """Base class for every error raised by the rules engine."""


class ConfigurationError(LudoRulesError, ValueError):
    """Invalid setup parameters (player count, route geometry, dice)."""


class IllegalActionError(LudoRulesError):
    """A command was issued in the wrong state or referenced a bad piece.

    Raised before any state is touched, so the game can carry on.
    """


class InvariantViolation(LudoRulesError, AssertionError):
    """Board state that the rules should make unreachable."""
