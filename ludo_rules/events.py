from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, List, Tuple, Union

from loguru import logger

from .types import Phase


@dataclass(frozen=True, slots=True)
class TurnStarted:
    player_index: int
    turn_number: int


@dataclass(frozen=True, slots=True)
class DiceRolled:
    player_index: int
    value: int
    phase: Phase


@dataclass(frozen=True, slots=True)
class StartingRollRecorded:
    player_index: int
    value: int
    round_number: int


@dataclass(frozen=True, slots=True)
class TieBreakStarted:
    contenders: Tuple[int, ...]
    round_number: int


@dataclass(frozen=True, slots=True)
class StartingPlayerResolved:
    player_index: int


@dataclass(frozen=True, slots=True)
class NoMovablePieces:
    player_index: int
    roll_value: int


@dataclass(frozen=True, slots=True)
class ExtraRollGranted:
    player_index: int


@dataclass(frozen=True, slots=True)
class PieceMoved:
    player_index: int
    piece_id: int
    from_index: int
    to_index: int


@dataclass(frozen=True, slots=True)
class PieceCaptured:
    player_index: int
    piece_id: int
    by_player: int
    home_slot: int


@dataclass(frozen=True, slots=True)
class PieceEnteredGoal:
    player_index: int
    piece_id: int
    index: int


@dataclass(frozen=True, slots=True)
class GameWon:
    player_index: int


GameEvent = Union[
    TurnStarted,
    DiceRolled,
    StartingRollRecorded,
    TieBreakStarted,
    StartingPlayerResolved,
    NoMovablePieces,
    ExtraRollGranted,
    PieceMoved,
    PieceCaptured,
    PieceEnteredGoal,
    GameWon,
]
Listener = Callable[[GameEvent], None]


@dataclass(slots=True)
class EventBus:
    """Queues events raised by a command and hands them to listeners.

    Nothing is delivered until ``flush`` runs, which the game does once the
    command has finished mutating state. A listener may issue the next command
    from inside its callback; the events that command raises join the same
    queue and are delivered in order by the outer flush.
    """

    history: List[GameEvent] = field(default_factory=list)
    _listeners: List[Listener] = field(default_factory=list, repr=False)
    _pending: Deque[GameEvent] = field(default_factory=deque, repr=False)
    _flushing: bool = field(default=False, repr=False)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: GameEvent) -> None:
        logger.debug(f"event {type(event).__name__}: {event}")
        self.history.append(event)
        self._pending.append(event)

    def flush(self) -> None:
        if self._flushing:
            return
        self._flushing = True
        try:
            while self._pending:
                event = self._pending.popleft()
                for listener in list(self._listeners):
                    listener(event)
        finally:
            self._flushing = False
