from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .player import Player
from .types import Phase, TurnState


@dataclass(frozen=True, slots=True)
class PlayerView:
    index: int
    name: str
    positions: Tuple[int, ...]
    home_slots: Tuple[Optional[int], ...]
    pieces_in_goal: int


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only copy of the game handed to presentation collaborators."""

    players: Tuple[PlayerView, ...]
    phase: Phase
    turn_state: TurnState
    current_turn_index: int
    last_roll: Optional[int]
    movable_piece_ids: Tuple[int, ...]
    starting_rolls: Mapping[int, int]
    winner: Optional[int]
    turn_number: int
    roll_count: int

    @property
    def current_player(self) -> PlayerView:
        return self.players[self.current_turn_index]


@dataclass(slots=True)
class GameState:
    players: List[Player]
    phase: Phase = Phase.STARTING_ROLL
    turn_state: TurnState = TurnState.AWAITING_ROLL
    current_turn_index: int = 0
    last_roll: Optional[int] = None
    movable_piece_ids: List[int] = field(default_factory=list)
    starting_rolls: Dict[int, int] = field(default_factory=dict)
    winner: Optional[int] = None
    turn_number: int = 0
    roll_count: int = 0

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_turn_index]

    def snapshot(self, goal_start: int) -> GameSnapshot:
        views = tuple(
            PlayerView(
                index=pl.index,
                name=pl.name,
                positions=tuple(pl.positions()),
                home_slots=tuple(p.home_slot for p in pl.pieces),
                pieces_in_goal=sum(1 for p in pl.pieces if p.position >= goal_start),
            )
            for pl in self.players
        )
        return GameSnapshot(
            players=views,
            phase=self.phase,
            turn_state=self.turn_state,
            current_turn_index=self.current_turn_index,
            last_roll=self.last_roll,
            movable_piece_ids=tuple(self.movable_piece_ids),
            starting_rolls=MappingProxyType(dict(self.starting_rolls)),
            winner=self.winner,
            turn_number=self.turn_number,
            roll_count=self.roll_count,
        )
