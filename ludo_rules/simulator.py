from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from loguru import logger

from .config import config
from .events import GameEvent, PieceCaptured
from .game import Game

Pick = Callable[[Sequence[int]], int]


def first_movable(movable: Sequence[int]) -> int:
    return movable[0]


def pick_random(rng: Optional[random.Random] = None) -> Pick:
    rng = rng or random.Random()

    def pick(movable: Sequence[int]) -> int:
        return rng.choice(list(movable))

    return pick


@dataclass(slots=True)
class SimulationSummary:
    winner: Optional[int]
    rolls: int
    turns: int
    captures: int
    truncated: bool


@dataclass(slots=True)
class Simulator:
    """Plays a game headlessly by answering every roll with ``pick``."""

    game: Game
    pick: Pick = first_movable
    max_rolls: int = config.MAX_TURNS
    _captures: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.game.subscribe(self._on_event)

    @property
    def captures(self) -> int:
        return self._captures

    def _on_event(self, event: GameEvent) -> None:
        if isinstance(event, PieceCaptured):
            self._captures += 1

    def step(self) -> None:
        """Roll for the current player and move if the roll allows it."""
        state = self.game.state
        outcome = self.game.request_roll(state.current_turn_index)
        if outcome.movable_piece_ids:
            self.game.select_piece(self.pick(outcome.movable_piece_ids))

    def run(self) -> SimulationSummary:
        self.game.resolve_starting_player()
        state = self.game.state
        while not self.game.finished and state.roll_count < self.max_rolls:
            self.step()
        truncated = not self.game.finished
        if truncated:
            logger.warning(f"Simulation stopped after {state.roll_count} rolls without a winner")
        return SimulationSummary(
            winner=state.winner,
            rolls=state.roll_count,
            turns=state.turn_number,
            captures=self._captures,
            truncated=truncated,
        )
