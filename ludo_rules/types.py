from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .piece import Piece

HOME = -1


class Color(IntEnum):
    RED = 0
    GREEN = 1
    YELLOW = 2
    BLUE = 3

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Lane(Enum):
    TRACK = "track"
    GOAL = "goal"


class Phase(Enum):
    STARTING_ROLL = "starting_roll"
    TIE_BREAK = "tie_break"
    PLAYING = "playing"
    FINISHED = "finished"


class TurnState(Enum):
    AWAITING_ROLL = "awaiting_roll"
    AWAITING_SELECTION = "awaiting_selection"
    TURN_COMPLETE = "turn_complete"
    GAME_FINISHED = "game_finished"


@dataclass(frozen=True, slots=True)
class Tile:
    """A physical board position.

    Ring tiles are shared by every seat (``owner`` is None); goal tiles belong
    to exactly one seat and can never be reached by another owner's piece.
    """

    lane: Lane
    index: int
    owner: Optional[int] = None


@dataclass(slots=True)
class MoveOutcome:
    piece: "Piece"
    from_index: int
    to_index: int
    captured: Optional["Piece"] = None
    entered_goal: bool = False


@dataclass(frozen=True, slots=True)
class RollOutcome:
    player_index: int
    roll_value: int
    movable_piece_ids: Tuple[int, ...] = ()
    extra_roll: bool = False
    turn_passed: bool = False
    phase: Phase = Phase.PLAYING


@dataclass(frozen=True, slots=True)
class SelectionOutcome:
    player_index: int
    piece_id: int
    from_index: int
    new_index: int
    captured_player: Optional[int]
    captured_piece_id: Optional[int]
    entered_goal: bool
    won_game: bool
    extra_roll: bool
