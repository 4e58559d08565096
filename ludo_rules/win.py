from dataclasses import dataclass
from typing import Optional

from .board import BoardModel
from .player import Player
from .state import GameState


@dataclass(slots=True)
class WinDetector:
    board: BoardModel

    def pieces_in_goal(self, player: Player) -> int:
        return sum(1 for pc in player.pieces if self.board.is_goal_index(pc.position))

    def check_win(self, player: Player, state: Optional[GameState] = None) -> bool:
        """True iff every piece of ``player`` sits in its goal lane."""
        return self.pieces_in_goal(player) == len(player.pieces)
