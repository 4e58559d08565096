from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .board import BoardModel
from .config import config
from .dice import Dice
from .errors import ConfigurationError, IllegalActionError
from .events import (
    DiceRolled,
    EventBus,
    GameEvent,
    Listener,
    StartingPlayerResolved,
    StartingRollRecorded,
    TieBreakStarted,
)
from .player import Player
from .rules import MovementRules
from .starting import ResolverState, Roller, StartingPlayerResolver
from .state import GameSnapshot, GameState
from .turn import TurnController
from .types import Phase, RollOutcome, SelectionOutcome
from .win import WinDetector


@dataclass(slots=True)
class Game:
    """Command/query surface of the engine.

    Owns one ``GameState`` and the collaborators that act on it. Every command
    runs to completion synchronously; events raised along the way are delivered
    to subscribers after the state is settled.
    """

    state: GameState
    board: BoardModel
    rules: MovementRules
    win_detector: WinDetector
    dice: Roller
    resolver: StartingPlayerResolver
    bus: EventBus = field(default_factory=EventBus)
    controller: TurnController = field(init=False)

    def __post_init__(self) -> None:
        self.controller = TurnController(
            state=self.state,
            rules=self.rules,
            win_detector=self.win_detector,
            dice=self.dice,
            bus=self.bus,
        )

    @classmethod
    def create(
        cls,
        player_count: int = config.NUM_PLAYERS,
        route_length: int = config.ROUTE_LENGTH,
        goal_count: int = config.GOAL_COUNT,
        rng_seed: Optional[int] = config.RNG_SEED,
        *,
        names: Optional[Sequence[str]] = None,
        starting_player: Optional[int] = None,
        dice: Optional[Roller] = None,
        track_size: Optional[int] = None,
    ) -> "Game":
        board = BoardModel(
            player_count=player_count,
            route_length=route_length,
            goal_count=goal_count,
            track_size=track_size,
        )
        if names is not None and len(names) != player_count:
            raise ConfigurationError(
                f"expected {player_count} player names, got {len(names)}"
            )
        players = [
            Player(index=i, name=names[i] if names is not None else None)
            for i in range(player_count)
        ]
        game = cls(
            state=GameState(players=players),
            board=board,
            rules=MovementRules(board),
            win_detector=WinDetector(board),
            dice=dice if dice is not None else Dice.seeded(rng_seed),
            resolver=StartingPlayerResolver(player_count),
        )
        logger.debug(
            f"New game: {player_count} players, route {route_length}, goal lane {goal_count}"
        )
        if starting_player is not None:
            if not 0 <= starting_player < player_count:
                raise ConfigurationError(f"no player with index {starting_player}")
            game.controller.start(starting_player)
            game.bus.flush()
        return game

    # --- Queries ---
    def get_state(self) -> GameSnapshot:
        return self.state.snapshot(self.board.shared_length)

    @property
    def players(self) -> List[Player]:
        return self.state.players

    @property
    def events(self) -> List[GameEvent]:
        return self.bus.history

    @property
    def finished(self) -> bool:
        return self.state.phase is Phase.FINISHED

    def movable_pieces(self) -> List[int]:
        return list(self.state.movable_piece_ids)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.bus.subscribe(listener)

    # --- Commands ---
    def request_roll(self, player_index: int) -> RollOutcome:
        try:
            if self.state.phase in (Phase.STARTING_ROLL, Phase.TIE_BREAK):
                outcome = self._starting_roll(player_index)
            else:
                outcome = self.controller.request_roll(player_index)
        except IllegalActionError as e:
            logger.warning(f"Rejected roll from player {player_index}: {e}")
            raise
        self.bus.flush()
        return outcome

    def select_piece(self, piece_id: int) -> SelectionOutcome:
        if self.state.phase in (Phase.STARTING_ROLL, Phase.TIE_BREAK):
            logger.warning(f"Rejected selection of piece {piece_id}: starting player not decided")
            raise IllegalActionError("cannot select a piece before the starting player is decided")
        try:
            outcome = self.controller.select_piece(piece_id)
        except IllegalActionError as e:
            logger.warning(f"Rejected selection of piece {piece_id}: {e}")
            raise
        self.bus.flush()
        return outcome

    def resolve_starting_player(self) -> int:
        """Roll the starting rounds for every remaining contender."""
        while self.state.phase in (Phase.STARTING_ROLL, Phase.TIE_BREAK):
            self.request_roll(self.resolver.expected_roller())
        return self.state.current_turn_index

    def _starting_roll(self, player_index: int) -> RollOutcome:
        expected = self.resolver.expected_roller()
        if player_index != expected:
            raise IllegalActionError(
                f"player {player_index} cannot roll; waiting for player {expected}'s starting roll"
            )
        s = self.state
        round_number = self.resolver.round_number
        value = self.dice.roll()
        s.last_roll = value
        s.roll_count += 1
        phase = s.phase
        result = self.resolver.record(player_index, value)
        s.starting_rolls = dict(self.resolver.rolls)
        self.bus.publish(DiceRolled(player_index, value, phase))
        self.bus.publish(StartingRollRecorded(player_index, value, round_number))

        if result is ResolverState.RESOLVED:
            s.starting_rolls = dict(self.resolver.history[-1])
            self.bus.publish(StartingPlayerResolved(self.resolver.winner))
            self.controller.start(self.resolver.winner)
        else:
            s.phase = (
                Phase.TIE_BREAK if result is ResolverState.TIE_BREAK else Phase.STARTING_ROLL
            )
            if round_number != self.resolver.round_number:
                self.bus.publish(
                    TieBreakStarted(tuple(self.resolver.contenders), self.resolver.round_number)
                )
            s.current_turn_index = self.resolver.expected_roller()
        return RollOutcome(player_index, value, phase=phase)


def init_game(
    player_count: int = config.NUM_PLAYERS,
    route_length: int = config.ROUTE_LENGTH,
    goal_count: int = config.GOAL_COUNT,
    rng_seed: Optional[int] = config.RNG_SEED,
    **kwargs,
) -> Game:
    return Game.create(player_count, route_length, goal_count, rng_seed, **kwargs)
