import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


@dataclass(slots=True)
class Config:
    # --- Table ---
    NUM_PLAYERS: int = int(os.getenv("NUM_PLAYERS", 4))
    MAX_SEATS: int = 4
    PIECES_PER_PLAYER: int = 4

    # --- Route geometry ---
    ROUTE_LENGTH: int = int(os.getenv("ROUTE_LENGTH", 57))  # shared ring + goal lane
    GOAL_COUNT: int = int(os.getenv("GOAL_COUNT", 6))

    # --- Dice ---
    DICE_FACES: int = 6
    EXIT_ROLL: int = 6  # needed to leave home
    EXTRA_ROLL: int = 6  # grants another roll to the same player

    # --- Autoplay ---
    MAX_TURNS: int = int(os.getenv("MAX_TURNS", 1000))
    RNG_SEED: int | None = _optional_int("RNG_SEED")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        if self.NUM_PLAYERS < 2 or self.NUM_PLAYERS > self.MAX_SEATS:
            raise ConfigurationError(
                f"NUM_PLAYERS must be between 2 and {self.MAX_SEATS}"
            )
        if self.GOAL_COUNT < 1 or self.GOAL_COUNT >= self.ROUTE_LENGTH:
            raise ConfigurationError(
                "GOAL_COUNT must be at least 1 and smaller than ROUTE_LENGTH"
            )
        if not 1 <= self.EXIT_ROLL <= self.DICE_FACES:
            raise ConfigurationError("EXIT_ROLL must be a face of the die")
        if self.MAX_TURNS < 1:
            raise ConfigurationError("MAX_TURNS must be positive")

    @property
    def shared_length(self) -> int:
        return self.ROUTE_LENGTH - self.GOAL_COUNT


config = Config()
