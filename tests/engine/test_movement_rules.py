import random
import unittest
from unittest import mock

from ludo_rules.dice import LoadedDice
from ludo_rules.errors import IllegalActionError, InvariantViolation
from ludo_rules.game import Game
from ludo_rules.rules import MovementRules
from ludo_rules.types import HOME


class MovementRulesTestCase(unittest.TestCase):
    def setUp(self):
        # Red enters the ring at tile 0, green at tile 13
        self.game = Game.create(2, 57, 6, starting_player=0, dice=LoadedDice([]))
        self.rules = self.game.rules
        self.state = self.game.state
        self.red = self.state.players[0]
        self.green = self.state.players[1]

    def force_position(self, player, piece_id, index):
        piece = player.pieces[piece_id]
        piece.move_to(index)
        return piece


class TestLeavingHome(MovementRulesTestCase):
    def test_home_piece_needs_a_six(self):
        piece = self.red.pieces[0]
        for distance in range(1, 6):
            self.assertFalse(self.rules.can_move(piece, self.state, distance))
        self.assertTrue(self.rules.can_move(piece, self.state, 6))

    def test_own_piece_on_start_blocks_exit(self):
        self.force_position(self.red, 1, 0)
        self.assertFalse(self.rules.can_move(self.red.pieces[0], self.state, 6))

    def test_exit_lands_on_index_zero(self):
        outcome = self.rules.apply_move(self.red.pieces[0], self.state, 6)
        self.assertEqual(outcome.from_index, HOME)
        self.assertEqual(outcome.to_index, 0)
        self.assertIsNone(outcome.captured)
        self.assertFalse(outcome.entered_goal)
        self.assertIsNone(self.red.pieces[0].home_slot)

    def test_exit_captures_enemy_on_start_tile(self):
        # Green route index 39 is ring tile (13 + 39) % 52 == 0, red's start
        enemy = self.force_position(self.green, 0, 39)
        outcome = self.rules.apply_move(self.red.pieces[0], self.state, 6)
        self.assertIs(outcome.captured, enemy)
        self.assertEqual(enemy.position, HOME)
        self.assertEqual(enemy.owner, 1)
        self.assertEqual(enemy.home_slot, 0)
        self.assertEqual(self.red.pieces[0].position, 0)


class TestRouteMovement(MovementRulesTestCase):
    def test_reaching_goal_lane(self):
        piece = self.force_position(self.red, 0, 53)
        outcome = self.rules.apply_move(piece, self.state, 3)
        self.assertEqual(outcome.to_index, 56)
        self.assertTrue(outcome.entered_goal)

    def test_overshoot_is_illegal(self):
        piece = self.force_position(self.red, 0, 54)
        self.assertFalse(self.rules.can_move(piece, self.state, 5))
        self.assertNotIn(piece, self.rules.movable_pieces(self.red, self.state, 5))
        with self.assertRaises(IllegalActionError):
            self.rules.apply_move(piece, self.state, 5)
        self.assertEqual(piece.position, 54)

    def test_cannot_land_on_own_piece_but_may_pass_it(self):
        mover = self.force_position(self.red, 0, 10)
        self.force_position(self.red, 1, 12)
        self.assertFalse(self.rules.can_move(mover, self.state, 2))
        self.assertTrue(self.rules.can_move(mover, self.state, 3))

    def test_cannot_land_on_own_piece_in_goal_lane(self):
        mover = self.force_position(self.red, 0, 50)
        self.force_position(self.red, 1, 53)
        self.assertFalse(self.rules.can_move(mover, self.state, 3))

    def test_passing_enemy_does_not_capture(self):
        mover = self.force_position(self.red, 0, 18)
        enemy = self.force_position(self.green, 0, 7)  # ring tile 20
        outcome = self.rules.apply_move(mover, self.state, 3)
        self.assertIsNone(outcome.captured)
        self.assertEqual(enemy.position, 7)

    def test_landing_on_enemy_captures(self):
        mover = self.force_position(self.red, 0, 18)
        enemy = self.force_position(self.green, 0, 7)  # ring tile 20
        outcome = self.rules.apply_move(mover, self.state, 2)
        self.assertIs(outcome.captured, enemy)
        self.assertEqual(enemy.position, HOME)
        self.assertEqual(mover.position, 20)

    def test_goal_lanes_are_private(self):
        self.force_position(self.green, 0, 51)
        mover = self.force_position(self.red, 0, 49)
        outcome = self.rules.apply_move(mover, self.state, 2)
        self.assertIsNone(outcome.captured)
        self.assertEqual(self.green.pieces[0].position, 51)

    def test_non_positive_distance_never_moves(self):
        piece = self.force_position(self.red, 0, 5)
        self.assertFalse(self.rules.can_move(piece, self.state, 0))
        self.assertFalse(self.rules.can_move(piece, self.state, -2))


class TestHomeSlots(MovementRulesTestCase):
    def test_captured_pieces_take_first_free_slot(self):
        first = self.force_position(self.green, 0, 7)  # ring tile 20
        second = self.force_position(self.green, 1, 17)  # ring tile 30
        mover = self.force_position(self.red, 0, 18)
        self.rules.apply_move(mover, self.state, 2)
        self.assertEqual(first.home_slot, 0)
        mover.move_to(26)
        self.rules.apply_move(mover, self.state, 4)
        self.assertEqual(second.home_slot, 1)
        self.assertEqual(
            sorted(p.home_slot for p in self.green.pieces), [0, 1, 2, 3]
        )

    def test_slot_freed_by_leaving_home_is_reused(self):
        self.force_position(self.green, 2, 7)  # leaves slot 2 empty
        mover = self.force_position(self.red, 0, 18)
        self.rules.apply_move(mover, self.state, 2)
        self.assertEqual(self.green.pieces[2].home_slot, 2)


class TestInvariants(MovementRulesTestCase):
    def test_shared_tile_is_reported(self):
        self.force_position(self.red, 0, 5)
        self.force_position(self.red, 1, 5)
        with self.assertRaises(InvariantViolation):
            self.rules.check_invariants(self.state)

    def test_failed_invariant_check_restores_board(self):
        mover = self.force_position(self.red, 0, 18)
        enemy = self.force_position(self.green, 0, 7)  # ring tile 20
        with mock.patch.object(
            MovementRules, "check_invariants", side_effect=InvariantViolation("corrupt")
        ):
            with self.assertRaises(InvariantViolation):
                self.rules.apply_move(mover, self.state, 2)
        self.assertEqual(mover.position, 18)
        self.assertEqual(enemy.position, 7)
        self.assertIsNone(enemy.home_slot)
        self.assertEqual(sorted(p.home_slot for p in self.green.pieces[1:]), [1, 2, 3])

    def test_failed_exit_keeps_piece_in_its_home_slot(self):
        piece = self.red.pieces[2]
        with mock.patch.object(
            MovementRules, "check_invariants", side_effect=InvariantViolation("corrupt")
        ):
            with self.assertRaises(InvariantViolation):
                self.rules.apply_move(piece, self.state, 6)
        self.assertEqual(piece.position, HOME)
        self.assertEqual(piece.home_slot, 2)

    def test_random_legal_moves_keep_single_occupancy(self):
        rng = random.Random(2024)
        for _ in range(2000):
            player = self.state.players[rng.randrange(2)]
            piece = player.pieces[rng.randrange(4)]
            distance = rng.randint(1, 6)
            if not self.rules.can_move(piece, self.state, distance):
                continue
            before = {id(p): p.position for pl in self.state.players for p in pl.pieces}
            outcome = self.rules.apply_move(piece, self.state, distance)
            self.assertGreater(piece.position, before[id(piece)])
            for pl in self.state.players:
                for p in pl.pieces:
                    if p is piece:
                        continue
                    if p is outcome.captured:
                        self.assertEqual(p.position, HOME)
                    else:
                        self.assertEqual(p.position, before[id(p)])
            grid = self.game.board.occupancy(self.state.players)
            self.assertLessEqual(int(grid.max()), 1)
            ring = grid[:, : self.game.board.track_size].sum(axis=0)
            self.assertLessEqual(int(ring.max()), 1)


if __name__ == "__main__":
    unittest.main()
