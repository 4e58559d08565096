from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol

from loguru import logger

from .errors import ConfigurationError, IllegalActionError


class ResolverState(Enum):
    ROLLING_INITIAL = "rolling_initial"
    TIE_BREAK = "tie_break"
    RESOLVED = "resolved"


class Roller(Protocol):
    def roll(self) -> int:
        ...


@dataclass(slots=True)
class StartingPlayerResolver:
    """Decides who opens the game.

    Everybody rolls once in seat order; the highest roll starts. Players tied
    on the highest value roll again, in the same relative order, with the
    previous round forgotten. Rounds repeat until a single highest roll exists.
    """

    player_count: int
    state: ResolverState = field(default=ResolverState.ROLLING_INITIAL, init=False)
    contenders: List[int] = field(init=False)
    rolls: Dict[int, int] = field(default_factory=dict, init=False)
    round_number: int = field(default=1, init=False)
    winner: Optional[int] = field(default=None, init=False)
    history: List[Dict[int, int]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.player_count < 2:
            raise ConfigurationError("at least two players are needed to pick a starter")
        self.contenders = list(range(self.player_count))

    @property
    def resolved(self) -> bool:
        return self.state is ResolverState.RESOLVED

    def expected_roller(self) -> Optional[int]:
        if self.resolved:
            return None
        for idx in self.contenders:
            if idx not in self.rolls:
                return idx
        return None

    def record(self, player_index: int, value: int) -> ResolverState:
        expected = self.expected_roller()
        if expected is None:
            raise IllegalActionError("starting player is already resolved")
        if player_index != expected:
            raise IllegalActionError(
                f"player {player_index} rolled out of turn; waiting for player {expected}"
            )
        self.rolls[player_index] = value
        if len(self.rolls) == len(self.contenders):
            self._close_round()
        return self.state

    def _close_round(self) -> None:
        highest = max(self.rolls.values())
        leaders = [idx for idx in self.contenders if self.rolls[idx] == highest]
        self.history.append(dict(self.rolls))
        if len(leaders) == 1:
            self.winner = leaders[0]
            self.state = ResolverState.RESOLVED
            logger.info(
                f"Starting player resolved: {self.winner} after {self.round_number} round(s)"
            )
            return
        logger.debug(f"Tie on {highest} between {leaders}; re-rolling")
        self.contenders = leaders
        self.rolls = {}
        self.round_number += 1
        self.state = ResolverState.TIE_BREAK

    def resolve(self, dice: Roller) -> int:
        """Roll for every remaining contender until a starter emerges."""
        while not self.resolved:
            self.record(self.expected_roller(), dice.roll())
        return self.winner
