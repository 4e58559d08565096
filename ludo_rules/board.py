from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import config
from .errors import ConfigurationError, InvariantViolation
from .player import Player
from .types import HOME, Lane, Tile


@dataclass(slots=True)
class BoardModel:
    """Per-seat route topology. Read-only once built (no rule logic).

    Each seat walks ``shared_length`` tiles of a common ring starting at its
    own entry tile, then ``goal_count`` tiles of a private goal lane. The ring
    defaults to ``shared_length + 1`` tiles so a route stops one tile short of
    its own start, like the classic 52-square board, and never has fewer tiles
    than there are seats. ``goal_count`` must be at least 1, since a board
    without goal tiles could never be won.
    """

    player_count: int = config.NUM_PLAYERS
    route_length: int = config.ROUTE_LENGTH
    goal_count: int = config.GOAL_COUNT
    track_size: Optional[int] = None
    _routes: Tuple[Tuple[Tile, ...], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 2 <= self.player_count <= config.MAX_SEATS:
            raise ConfigurationError(
                f"player_count must be between 2 and {config.MAX_SEATS}, got {self.player_count}"
            )
        if self.goal_count >= self.route_length:
            raise ConfigurationError(
                f"goal_count ({self.goal_count}) must be smaller than route_length ({self.route_length})"
            )
        if self.goal_count < 1:
            raise ConfigurationError("goal_count must be at least 1")
        if self.track_size is None:
            self.track_size = max(self.shared_length + 1, config.MAX_SEATS)
        else:
            self._check_track_size()
        self._routes = tuple(self._build_route(seat) for seat in range(self.player_count))

    def _check_track_size(self) -> None:
        if self.track_size < self.shared_length:
            raise ConfigurationError(
                f"track_size ({self.track_size}) cannot hold a {self.shared_length}-tile shared route"
            )
        starts = [self.start_offset(seat) for seat in range(self.player_count)]
        if len(set(starts)) != len(starts):
            raise ConfigurationError(
                f"track_size {self.track_size} is too small to give every seat its own start tile"
            )

    def _build_route(self, seat: int) -> Tuple[Tile, ...]:
        start = self.start_offset(seat)
        ring = [
            Tile(Lane.TRACK, (start + step) % self.track_size)
            for step in range(self.shared_length)
        ]
        goal = [Tile(Lane.GOAL, k, owner=seat) for k in range(self.goal_count)]
        return tuple(ring + goal)

    @property
    def shared_length(self) -> int:
        return self.route_length - self.goal_count

    def start_offset(self, player_index: int) -> int:
        return player_index * self.track_size // config.MAX_SEATS

    def route_of(self, player_index: int) -> Tuple[Tile, ...]:
        return self._routes[player_index]

    def start_position(self, player_index: int) -> Tile:
        return self._routes[player_index][0]

    def is_goal_index(self, index: int) -> bool:
        return self.shared_length <= index < self.route_length

    def tile_at(self, player_index: int, index: int) -> Optional[Tile]:
        """Physical tile for a route index; None for HOME."""
        if index == HOME:
            return None
        if not 0 <= index < self.route_length:
            raise InvariantViolation(
                f"route index {index} outside 0..{self.route_length - 1}"
            )
        return self._routes[player_index][index]

    def column_of(self, tile: Tile) -> int:
        """Column of a tile in the occupancy grid."""
        if tile.lane is Lane.TRACK:
            return tile.index
        return self.track_size + tile.index

    def occupancy(self, players: Sequence[Player]) -> np.ndarray:
        """Build a (player_count, track_size + goal_count) piece-count grid.

        Columns 0..track_size-1 are the shared ring; the remaining columns are
        each row's own goal lane, so goal columns never collide across rows.
        """
        grid = np.zeros(
            (self.player_count, self.track_size + self.goal_count), dtype=np.int8
        )
        for player in players:
            for pc in player.pieces:
                tile = self.tile_at(player.index, pc.position)
                if tile is not None:
                    grid[player.index, self.column_of(tile)] += 1
        return grid
