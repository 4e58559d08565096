from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .config import config
from .errors import IllegalActionError, InvariantViolation
from .piece import Piece
from .types import Color


@dataclass(slots=True)
class Player:
    index: int
    name: Optional[str] = None
    pieces: list[Piece] = field(init=False)
    home_slots: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        if self.name is None:
            self.name = self.color.display_name
        count = config.PIECES_PER_PLAYER
        self.pieces = [Piece(owner=self.index, piece_id=i) for i in range(count)]
        prefix = self.color.name.lower()
        self.home_slots = tuple(f"{prefix}-home-{i}" for i in range(count))

    @property
    def color(self) -> Color:
        return Color(self.index)

    def piece(self, piece_id: int) -> Piece:
        if not 0 <= piece_id < len(self.pieces):
            raise IllegalActionError(
                f"{self.name} has no piece with id {piece_id}"
            )
        return self.pieces[piece_id]

    def positions(self) -> list[int]:
        return [p.position for p in self.pieces]

    def pieces_at_home(self) -> list[Piece]:
        return [p for p in self.pieces if p.in_home()]

    def free_home_slot(self) -> int:
        """First home slot not held by one of this player's waiting pieces."""
        taken = {p.home_slot for p in self.pieces if p.in_home()}
        for slot in range(len(self.home_slots)):
            if slot not in taken:
                return slot
        raise InvariantViolation(f"{self.name} has no free home slot")
