"""Tests for the incremental conflict-tracking board and its search loop."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from minconflicts.board import ConflictBoard, INIT_POLICIES, SELF_CONFLICTS
from minconflicts.errors import BoardSolvedError, InvalidBoardSizeError, SearchLimitExceeded
from minconflicts.utils import conflicts, is_valid_solution

N4_SOLUTIONS = ([1, 3, 0, 2], [2, 0, 3, 1])


def attackers(placement, column, row):
    """Brute-force count of queens in other columns attacking (column, row)."""
    count = 0
    for other_column, other_row in enumerate(placement):
        if other_column == column:
            continue
        if other_row == row or abs(other_row - row) == abs(other_column - column):
            count += 1
    return count


def recount(board):
    """Rebuild the three counter arrays from the placement."""
    n = board.n
    rows = [0] * n
    main = [0] * (2 * n - 1)
    anti = [0] * (2 * n - 1)
    for column, row in enumerate(board.placement):
        rows[row] += 1
        main[column - row + n - 1] += 1
        anti[column + row] += 1
    return rows, main, anti


class CounterInvariantTests(unittest.TestCase):
    """Counters always describe the placement and sum to N."""

    def assertCountersConsistent(self, board):
        n = board.n
        self.assertEqual(len(board.row_counts), n)
        self.assertEqual(len(board.main_diag_counts), 2 * n - 1)
        self.assertEqual(len(board.anti_diag_counts), 2 * n - 1)
        self.assertEqual(sum(board.row_counts), n)
        self.assertEqual(sum(board.main_diag_counts), n)
        self.assertEqual(sum(board.anti_diag_counts), n)
        self.assertEqual(recount(board), (board.row_counts, board.main_diag_counts, board.anti_diag_counts))

    def test_counters_after_init(self):
        for policy in INIT_POLICIES:
            for n in range(1, 13):
                with self.subTest(policy=policy, n=n):
                    board = ConflictBoard(n, rng=n, init_policy=policy)
                    self.assertEqual(len(board.placement), n)
                    self.assertTrue(all(0 <= row < n for row in board.placement))
                    self.assertCountersConsistent(board)

    def test_counters_after_every_move(self):
        rng = random.Random(2024)
        board = ConflictBoard(10, rng=0, init_policy="random")
        for _ in range(300):
            board.move_queen(rng.randrange(10), rng.randrange(10))
            self.assertCountersConsistent(board)

    def test_counters_after_reset(self):
        board = ConflictBoard(9, rng=5, init_policy="random")
        board.move_queen(0, 8)
        board.reset()
        self.assertCountersConsistent(board)

    def test_moving_queen_to_its_own_row_changes_nothing(self):
        board = ConflictBoard(7, rng=1)
        before = (board.placement, list(board.row_counts), list(board.main_diag_counts), list(board.anti_diag_counts))
        board.move_queen(3, board.placement[3])
        after = (board.placement, board.row_counts, board.main_diag_counts, board.anti_diag_counts)
        self.assertEqual(before, after)

    def test_identity_policy(self):
        board = ConflictBoard(5, init_policy="identity")
        self.assertEqual(board.placement, [0, 1, 2, 3, 4])
        self.assertEqual(board.main_diag_counts[4], 5)


class ConflictQueryTests(unittest.TestCase):
    """O(1) conflict queries agree with brute force."""

    def test_conflicts_at_empty_square_counts_attackers(self):
        for seed in range(5):
            board = ConflictBoard(8, rng=seed, init_policy="random")
            placement = board.placement
            for column in range(8):
                for row in range(8):
                    if row == placement[column]:
                        continue
                    with self.subTest(seed=seed, column=column, row=row):
                        self.assertEqual(board.conflicts_at(column, row), attackers(placement, column, row))

    def test_conflicts_of_queen_includes_itself_once_per_line(self):
        board = ConflictBoard(9, rng=11, init_policy="random")
        placement = board.placement
        for column in range(9):
            expected = attackers(placement, column, placement[column]) + SELF_CONFLICTS
            self.assertEqual(board.conflicts_of_queen(column), expected)

    def test_conflicts_of_queen_is_idempotent(self):
        board = ConflictBoard(12, rng=3, init_policy="random")
        first = [board.conflicts_of_queen(c) for c in range(12)]
        second = [board.conflicts_of_queen(c) for c in range(12)]
        self.assertEqual(first, second)

    def test_total_conflicts_matches_pair_count(self):
        for seed in range(5):
            board = ConflictBoard(15, rng=seed, init_policy="random")
            self.assertEqual(board.total_conflicts(), conflicts(board.placement))

    def test_known_solution_is_solved(self):
        board = ConflictBoard(4, init_policy="identity")
        self.assertFalse(board.is_solved())
        for column, row in enumerate(N4_SOLUTIONS[0]):
            board.move_queen(column, row)
        self.assertTrue(board.is_solved())
        self.assertEqual(board.total_conflicts(), 0)


class SelectionTests(unittest.TestCase):
    """Worst-queen and best-row picks break ties at random."""

    def test_pick_most_conflicted_spreads_over_ties(self):
        # All queens on one diagonal: every queen has the same conflict count
        board = ConflictBoard(5, rng=7, init_policy="identity")
        picks = {board.pick_most_conflicted() for _ in range(60)}
        self.assertTrue(picks.issubset(set(range(5))))
        self.assertGreater(len(picks), 1)

    def test_pick_most_conflicted_returns_maximum(self):
        board = ConflictBoard(6, rng=0, init_policy="random")
        for _ in range(20):
            column = board.pick_most_conflicted()
            worst = max(board.conflicts_of_queen(c) for c in range(6))
            self.assertEqual(board.conflicts_of_queen(column), worst)

    def test_pick_best_row_returns_a_minimum(self):
        board = ConflictBoard(4, rng=1, init_policy="identity")
        # Column 0: rows 1 and 3 score 1, row 2 scores 2, own row 0 scores 6
        picks = {board.pick_best_row(0) for _ in range(60)}
        self.assertEqual(picks, {1, 3})

    def test_pick_best_row_scores_own_row_with_self_count(self):
        board = ConflictBoard(4, rng=4, init_policy="identity")
        for column, row in enumerate(N4_SOLUTIONS[1]):
            board.move_queen(column, row)
        # Column 0 sits on row 2 (score 3); rows 0 and 3 score 1, row 1 scores 3
        self.assertEqual(board.conflicts_at(0, 2), SELF_CONFLICTS)
        picks = {board.pick_best_row(0) for _ in range(60)}
        self.assertEqual(picks, {0, 3})


class SolveTests(unittest.TestCase):
    """Search loop behaviour, termination and state transitions."""

    def test_single_queen_is_solved_without_moves(self):
        board = ConflictBoard(1, rng=0)
        self.assertEqual(board.placement, [0])
        self.assertTrue(board.is_solved())
        self.assertEqual(board.solve(), [0])
        self.assertEqual(board.steps, 0)
        self.assertEqual(board.restarts, 0)
        self.assertTrue(board.solved)

    def test_four_queens_reaches_a_known_solution(self):
        for seed in range(10):
            with self.subTest(seed=seed):
                board = ConflictBoard(4, rng=seed)
                solution = board.solve(max_restarts=500)
                self.assertIn(solution, N4_SOLUTIONS)
                self.assertTrue(board.is_solved())

    def test_eight_queens_within_fifty_restarts(self):
        for seed in range(5):
            with self.subTest(seed=seed):
                board = ConflictBoard(8, rng=seed, restart_factor=2)
                solution = board.solve(max_restarts=50)
                self.assertTrue(is_valid_solution(solution))
                self.assertLessEqual(board.restarts, 50)

    def test_solutions_have_distinct_rows_and_diagonals(self):
        for n in (4, 5, 6, 8, 10, 16, 25):
            for policy in INIT_POLICIES:
                with self.subTest(n=n, policy=policy):
                    board = ConflictBoard(n, rng=n, init_policy=policy, restart_factor=4)
                    placement = board.solve(max_restarts=2000)
                    for c1 in range(n):
                        for c2 in range(c1 + 1, n):
                            self.assertNotEqual(placement[c1], placement[c2])
                            self.assertNotEqual(placement[c1] - c1, placement[c2] - c2)
                            self.assertNotEqual(placement[c1] + c1, placement[c2] + c2)

    def test_same_seed_reproduces_the_run(self):
        first = ConflictBoard(30, rng=99)
        second = ConflictBoard(30, rng=random.Random(99))
        self.assertEqual(first.placement, second.placement)
        self.assertEqual(first.solve(), second.solve())
        self.assertEqual((first.steps, first.restarts), (second.steps, second.restarts))

    def test_unsolvable_sizes_never_report_solved(self):
        for n in (2, 3):
            with self.subTest(n=n):
                board = ConflictBoard(n, rng=0)
                self.assertFalse(board.is_solved())
                with self.assertRaises(SearchLimitExceeded):
                    board.solve(max_restarts=5)
                self.assertFalse(board.is_solved())
                self.assertFalse(board.solved)

    def test_restart_limit_counts_steps_and_restarts(self):
        board = ConflictBoard(3, rng=0, restart_factor=1)
        with self.assertRaises(SearchLimitExceeded) as ctx:
            board.solve(max_restarts=2)
        self.assertEqual(ctx.exception.restarts, 2)
        self.assertEqual(ctx.exception.steps, 9)
        self.assertFalse(ctx.exception.timeout)

    def test_step_limit(self):
        board = ConflictBoard(3, rng=0)
        with self.assertRaises(SearchLimitExceeded) as ctx:
            board.solve(max_steps=7)
        self.assertEqual(ctx.exception.steps, 7)

    def test_time_limit_flags_timeout(self):
        board = ConflictBoard(3, rng=0)
        with self.assertRaises(SearchLimitExceeded) as ctx:
            board.solve(time_limit=0.01)
        self.assertTrue(ctx.exception.timeout)
        self.assertGreater(ctx.exception.restarts, 0)

    def test_solved_board_is_read_only(self):
        board = ConflictBoard(6, rng=2)
        solution = board.solve()
        with self.assertRaises(BoardSolvedError):
            board.move_queen(0, 0)
        with self.assertRaises(BoardSolvedError):
            board.reset()
        self.assertEqual(board.solve(), solution)

    def test_placement_is_a_copy(self):
        board = ConflictBoard(5, rng=0)
        placement = board.placement
        placement[0] = 99
        self.assertNotEqual(board.placement[0], 99)


class ValidationTests(unittest.TestCase):
    def test_invalid_sizes(self):
        for size in (0, -1, 2.5, "8", True):
            with self.subTest(size=size):
                with self.assertRaises(InvalidBoardSizeError):
                    ConflictBoard(size)

    def test_invalid_options(self):
        with self.assertRaises(ValueError):
            ConflictBoard(8, init_policy="diagonal")
        with self.assertRaises(ValueError):
            ConflictBoard(8, restart_factor=0)

    def test_move_outside_board(self):
        board = ConflictBoard(4, rng=0)
        with self.assertRaises(IndexError):
            board.move_queen(4, 0)
        with self.assertRaises(IndexError):
            board.move_queen(0, -1)


if __name__ == "__main__":
    unittest.main()
