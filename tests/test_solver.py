"""Tests for the functional solver front-end and the utility helpers."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from minconflicts import (
    InvalidBoardSizeError,
    conflicts,
    conflicts_on2,
    ensure_solvable_size,
    has_solution,
    is_valid_solution,
    mc_nqueens,
    render_board,
)


class McNqueensTests(unittest.TestCase):
    def test_solves_eight_queens(self):
        solution, steps, restarts, elapsed, timeout = mc_nqueens(8, seed=1)
        self.assertIsNotNone(solution)
        self.assertTrue(is_valid_solution(solution))
        self.assertFalse(timeout)
        self.assertGreaterEqual(steps, 0)
        self.assertGreaterEqual(restarts, 0)
        self.assertGreaterEqual(elapsed, 0.0)

    def test_single_queen(self):
        solution, steps, restarts, _, timeout = mc_nqueens(1, seed=0)
        self.assertEqual(solution, [0])
        self.assertEqual((steps, restarts, timeout), (0, 0, False))

    def test_guard_rejects_sizes_before_searching(self):
        for size in (0, -4, 2, 3, 4.0, "6"):
            with self.subTest(size=size):
                with self.assertRaises(InvalidBoardSizeError):
                    mc_nqueens(size)

    def test_invalid_size_is_a_value_error(self):
        with self.assertRaises(ValueError):
            mc_nqueens(3)

    def test_seed_reproducibility(self):
        first = mc_nqueens(40, seed=2024)
        second = mc_nqueens(40, seed=2024)
        self.assertEqual(first[:3], second[:3])

    def test_explicit_rng(self):
        first = mc_nqueens(20, rng=random.Random(5))
        second = mc_nqueens(20, seed=5)
        self.assertEqual(first[:3], second[:3])

    def test_time_limit_returns_none_with_timeout_flag(self):
        # Identity start is never solved, and the clock check precedes the first move
        solution, steps, restarts, _, timeout = mc_nqueens(200, init_policy="identity", seed=0, time_limit=0.0)
        self.assertIsNone(solution)
        self.assertTrue(timeout)
        self.assertEqual((steps, restarts), (0, 0))

    def test_all_init_policies(self):
        for policy in ("greedy", "random", "identity"):
            with self.subTest(policy=policy):
                solution, _, _, _, _ = mc_nqueens(12, init_policy=policy, seed=3, restart_factor=4)
                self.assertTrue(is_valid_solution(solution))


class UtilsTests(unittest.TestCase):
    def test_conflict_counts_agree(self):
        rng = random.Random(0)
        for _ in range(50):
            n = rng.randrange(1, 15)
            board = [rng.randrange(n) for _ in range(n)]
            self.assertEqual(conflicts(board), conflicts_on2(board))

    def test_conflicts_of_simple_boards(self):
        self.assertEqual(conflicts([0, 0, 0]), 3)
        self.assertEqual(conflicts([0, 1, 2, 3]), 6)
        self.assertEqual(conflicts([1, 3, 0, 2]), 0)

    def test_is_valid_solution(self):
        self.assertTrue(is_valid_solution([0]))
        self.assertTrue(is_valid_solution([1, 3, 0, 2]))
        self.assertTrue(is_valid_solution([2, 0, 3, 1]))
        self.assertFalse(is_valid_solution([]))
        self.assertFalse(is_valid_solution([0, 2, 1, 3]))
        self.assertFalse(is_valid_solution([1, 3, 0, 4]))
        self.assertFalse(is_valid_solution([1, 3, 0, -1]))
        self.assertFalse(is_valid_solution([1.0, 3, 0, 2]))

    def test_has_solution(self):
        self.assertTrue(has_solution(1))
        self.assertFalse(has_solution(0))
        self.assertFalse(has_solution(2))
        self.assertFalse(has_solution(3))
        for n in range(4, 30):
            self.assertTrue(has_solution(n))

    def test_ensure_solvable_size(self):
        self.assertEqual(ensure_solvable_size(8), 8)
        self.assertEqual(ensure_solvable_size(1), 1)
        for size in (0, 2, 3, -1, None, 8.0, False):
            with self.subTest(size=size):
                with self.assertRaises(InvalidBoardSizeError) as ctx:
                    ensure_solvable_size(size)
                self.assertEqual(ctx.exception.size, size)

    def test_render_board(self):
        self.assertEqual(
            render_board([1, 3, 0, 2]),
            "_ _ * _\n"
            "* _ _ _\n"
            "_ _ _ *\n"
            "_ * _ _",
        )
        self.assertEqual(render_board([0]), "*")

    def test_render_board_has_one_queen_per_column(self):
        text = render_board([4, 2, 0, 5, 3, 1])
        lines = text.splitlines()
        self.assertEqual(len(lines), 6)
        for column in range(6):
            cells = [line.split(" ")[column] for line in lines]
            self.assertEqual(cells.count("*"), 1)


if __name__ == "__main__":
    unittest.main()
