from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .config import config
from .errors import IllegalActionError
from .events import (
    DiceRolled,
    EventBus,
    ExtraRollGranted,
    GameWon,
    NoMovablePieces,
    PieceCaptured,
    PieceEnteredGoal,
    PieceMoved,
    TurnStarted,
)
from .rules import MovementRules
from .starting import Roller
from .state import GameState
from .types import Phase, RollOutcome, SelectionOutcome, TurnState
from .win import WinDetector


@dataclass(slots=True)
class TurnController:
    """Roll/select state machine for the playing phase.

    AWAITING_ROLL -> (roll) -> AWAITING_SELECTION -> (select) -> AWAITING_ROLL
    for the same player on a six, for the next player otherwise, or
    GAME_FINISHED when the mover has all pieces in goal. A roll that leaves
    nothing to move passes the turn through TURN_COMPLETE, unless it was a six.
    """

    state: GameState
    rules: MovementRules
    win_detector: WinDetector
    dice: Roller
    bus: EventBus
    extra_roll_value: int = config.EXTRA_ROLL

    def start(self, player_index: int) -> None:
        self.state.phase = Phase.PLAYING
        self.state.current_turn_index = player_index
        self._begin_turn()

    def _begin_turn(self) -> None:
        s = self.state
        s.turn_state = TurnState.AWAITING_ROLL
        s.movable_piece_ids = []
        s.turn_number += 1
        self.bus.publish(TurnStarted(s.current_turn_index, s.turn_number))

    def _advance(self) -> None:
        s = self.state
        s.turn_state = TurnState.TURN_COMPLETE
        s.current_turn_index = (s.current_turn_index + 1) % s.player_count
        self._begin_turn()

    def _require(self, expected: TurnState, action: str) -> None:
        current = self.state.turn_state
        if current is TurnState.GAME_FINISHED:
            raise IllegalActionError(f"cannot {action}: the game is over")
        if current is not expected:
            raise IllegalActionError(
                f"cannot {action} while {current.value}, expected {expected.value}"
            )

    # --- Commands ---
    def request_roll(self, player_index: int) -> RollOutcome:
        self._require(TurnState.AWAITING_ROLL, "roll")
        s = self.state
        if player_index != s.current_turn_index:
            raise IllegalActionError(
                f"player {player_index} cannot roll; it is player {s.current_turn_index}'s turn"
            )
        value = self.dice.roll()
        s.last_roll = value
        s.roll_count += 1
        self.bus.publish(DiceRolled(player_index, value, s.phase))

        movable = self.rules.movable_pieces(s.current_player, s, value)
        s.movable_piece_ids = [pc.piece_id for pc in movable]
        if movable:
            s.turn_state = TurnState.AWAITING_SELECTION
            return RollOutcome(player_index, value, tuple(s.movable_piece_ids))

        if value == self.extra_roll_value:
            logger.debug(f"player {player_index} rolled {value} with nothing to move; rolls again")
            self.bus.publish(ExtraRollGranted(player_index))
            return RollOutcome(player_index, value, extra_roll=True)

        self.bus.publish(NoMovablePieces(player_index, value))
        self._advance()
        return RollOutcome(player_index, value, turn_passed=True)

    def select_piece(self, piece_id: int) -> SelectionOutcome:
        self._require(TurnState.AWAITING_SELECTION, "select a piece")
        s = self.state
        if piece_id not in s.movable_piece_ids:
            raise IllegalActionError(
                f"piece {piece_id} is not movable; movable pieces are {s.movable_piece_ids}"
            )
        player = s.current_player
        piece = player.piece(piece_id)
        roll = s.last_roll

        outcome = self.rules.apply_move(piece, s, roll)
        s.movable_piece_ids = []
        self.bus.publish(
            PieceMoved(player.index, piece_id, outcome.from_index, outcome.to_index)
        )
        captured = outcome.captured
        if captured is not None:
            self.bus.publish(
                PieceCaptured(captured.owner, captured.piece_id, player.index, captured.home_slot)
            )
        if outcome.entered_goal:
            self.bus.publish(PieceEnteredGoal(player.index, piece_id, outcome.to_index))

        won = self.win_detector.check_win(player, s)
        extra = False
        if won:
            s.turn_state = TurnState.GAME_FINISHED
            s.phase = Phase.FINISHED
            s.winner = player.index
            logger.info(f"{player.name} won the game after {s.roll_count} rolls")
            self.bus.publish(GameWon(player.index))
        elif roll == self.extra_roll_value:
            extra = True
            s.turn_state = TurnState.AWAITING_ROLL
            self.bus.publish(ExtraRollGranted(player.index))
        else:
            self._advance()

        return SelectionOutcome(
            player_index=player.index,
            piece_id=piece_id,
            from_index=outcome.from_index,
            new_index=outcome.to_index,
            captured_player=captured.owner if captured is not None else None,
            captured_piece_id=captured.piece_id if captured is not None else None,
            entered_goal=outcome.entered_goal,
            won_game=won,
            extra_roll=extra,
        )
