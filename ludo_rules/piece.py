from dataclasses import dataclass
from typing import Optional

from .types import HOME


@dataclass(slots=True)
class Piece:
    """Lightweight piece model. Holds state only.

    Legality, captures and goal detection live in the rules; the board maps a
    route index to a physical tile.
    """

    owner: int  # seat index 0..3
    piece_id: int  # 0..3 per player
    position: int = HOME  # HOME (-1) or route index 0..route_length-1
    home_slot: Optional[int] = None

    def __post_init__(self) -> None:
        if self.home_slot is None and self.position == HOME:
            self.home_slot = self.piece_id

    def in_home(self) -> bool:
        return self.position == HOME

    def move_to(self, new_position: int) -> None:
        self.position = new_position
        self.home_slot = None

    def send_home(self, slot: int) -> None:
        self.position = HOME
        self.home_slot = slot
