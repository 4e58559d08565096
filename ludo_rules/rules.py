from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from .board import BoardModel
from .config import config
from .errors import IllegalActionError, InvariantViolation
from .piece import Piece
from .player import Player
from .state import GameState
from .types import MoveOutcome, Tile


@dataclass(slots=True)
class MovementRules:
    board: BoardModel
    exit_roll: int = config.EXIT_ROLL

    # --- Destinations and legality ---
    def target_index(self, piece: Piece, distance: int) -> Optional[int]:
        """Route index the piece would land on, or None if it cannot move."""
        if distance < 1:
            return None
        if piece.in_home():
            return 0 if distance == self.exit_roll else None
        target = piece.position + distance
        # No overshoot and no bounce-back past the last goal tile
        if target >= self.board.route_length:
            return None
        return target

    def occupants(
        self, state: GameState, tile: Tile, *, exclude: Optional[Piece] = None
    ) -> List[Piece]:
        out: List[Piece] = []
        for player in state.players:
            for pc in player.pieces:
                if pc is exclude:
                    continue
                if self.board.tile_at(player.index, pc.position) == tile:
                    out.append(pc)
        return out

    def can_move(self, piece: Piece, state: GameState, distance: int) -> bool:
        target = self.target_index(piece, distance)
        if target is None:
            return False
        tile = self.board.tile_at(piece.owner, target)
        return not any(
            pc.owner == piece.owner
            for pc in self.occupants(state, tile, exclude=piece)
        )

    def movable_pieces(
        self, player: Player, state: GameState, distance: int
    ) -> List[Piece]:
        return [pc for pc in player.pieces if self.can_move(pc, state, distance)]

    # --- Applying a move ---
    def apply_move(self, piece: Piece, state: GameState, distance: int) -> MoveOutcome:
        if not self.can_move(piece, state, distance):
            raise IllegalActionError(
                f"piece {piece.piece_id} of player {piece.owner} cannot move {distance}"
            )
        target = self.target_index(piece, distance)
        tile = self.board.tile_at(piece.owner, target)
        enemies = [
            pc for pc in self.occupants(state, tile, exclude=piece)
            if pc.owner != piece.owner
        ]
        if len(enemies) > 1:
            raise InvariantViolation(f"{len(enemies)} pieces share tile {tile}")

        old = piece.position
        old_slot = piece.home_slot
        captured: Optional[Piece] = None
        if enemies:
            captured = enemies[0]
            victim_position = captured.position
            victim = state.players[captured.owner]
            captured.send_home(victim.free_home_slot())
            logger.debug(
                f"player {piece.owner} captured piece {captured.piece_id} of player {captured.owner} on {tile}"
            )
        piece.move_to(target)
        try:
            self.check_invariants(state)
        except InvariantViolation:
            # Put the board back as it was before the move
            piece.position, piece.home_slot = old, old_slot
            if captured is not None:
                captured.move_to(victim_position)
            raise

        return MoveOutcome(
            piece=piece,
            from_index=old,
            to_index=target,
            captured=captured,
            entered_goal=self.board.is_goal_index(target),
        )

    def check_invariants(self, state: GameState) -> None:
        grid = self.board.occupancy(state.players)
        if grid.size and int(grid.max()) > 1:
            raise InvariantViolation("two pieces of one player share a tile")
        ring = grid[:, : self.board.track_size].sum(axis=0)
        if ring.size and int(ring.max()) > 1:
            raise InvariantViolation("two pieces share a ring tile")
