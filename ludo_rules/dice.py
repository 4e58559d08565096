from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger

from .config import config
from .errors import ConfigurationError, LudoRulesError


@dataclass(slots=True)
class Dice:
    """Fair die backed by an injectable ``random.Random``."""

    rng: random.Random = field(default_factory=random.Random)
    faces: int = config.DICE_FACES

    def __post_init__(self) -> None:
        if self.faces < 1:
            raise ConfigurationError("A die needs at least one face")

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "Dice":
        return cls(rng=random.Random(seed))

    def roll(self) -> int:
        value = self.rng.randint(1, self.faces)
        logger.debug(f"Dice rolled: {value}")
        return value


@dataclass(slots=True)
class LoadedDice:
    """Replays a fixed sequence of values, for tests and recorded games."""

    values: Iterable[int]
    faces: int = config.DICE_FACES
    _queue: deque = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._queue = deque(int(v) for v in self.values)
        for v in self._queue:
            if not 1 <= v <= self.faces:
                raise ConfigurationError(f"Loaded value {v} is not a face of the die")

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def push(self, *values: int) -> None:
        for v in values:
            if not 1 <= v <= self.faces:
                raise ConfigurationError(f"Loaded value {v} is not a face of the die")
            self._queue.append(int(v))

    def roll(self) -> int:
        if not self._queue:
            raise LudoRulesError("Loaded dice ran out of values")
        value = self._queue.popleft()
        logger.debug(f"Dice rolled (loaded): {value}")
        return value
