"""Incremental conflict-tracking board and min-conflicts search.

The board keeps one queen per column (``placement[col] = row``) together with
three counter arrays recording how many queens sit on every row, every main
diagonal and every anti-diagonal:

- ``row_counts[row]``, length N;
- ``main_diag_counts[col - row + (N - 1)]``, length 2N-1;
- ``anti_diag_counts[col + row]``, length 2N-1.

With these counters the number of queens sharing a line with any square is
read in O(1), and moving a single queen updates them in O(1). Each counter
array always sums to N, and a placement is a solution exactly when no counter
exceeds 1.

Search
------
``ConflictBoard.solve`` runs the classic min-conflicts repair loop: take the
most conflicted queen, move it to the least conflicted row of its column, and
restart from a fresh initial placement once ``restart_factor * N`` moves have
been spent without success. Ties in both selections are broken uniformly at
random through the injected ``random.Random`` instance, so a fixed seed
reproduces a run exactly.

Sizes 2 and 3 have no solution. The board does not reject them; callers must
guard with :func:`minconflicts.utils.ensure_solvable_size` or pass an external
cap to ``solve``.
"""

from __future__ import annotations

import random
from time import perf_counter
from typing import List, Optional, Union

from .errors import BoardSolvedError, SearchLimitExceeded
from .utils import validate_board_size

INIT_POLICIES = ("greedy", "random", "identity")

# Restart after restart_factor * N moves; 2N..10N are sensible values
DEFAULT_RESTART_FACTOR = 2

# conflicts_at() on a queen's own square counts the queen once per line
SELF_CONFLICTS = 3

RandomSource = Union[random.Random, int, None]


def _make_rng(rng: RandomSource) -> random.Random:
    if isinstance(rng, random.Random):
        return rng
    return random.Random(rng)


class ConflictBoard:
    """N-Queens board with O(1) conflict queries and a min-conflicts solver.

    Parameters
    ----------
    n : int
        Board dimension N (N >= 1).
    rng : random.Random | int | None
        Source of tie-break randomness. An ``int`` is used as a seed for a
        private ``random.Random``; ``None`` creates an unseeded one.
    init_policy : str, default "greedy"
        Initial placement policy, one of ``INIT_POLICIES``. ``"greedy"`` puts
        each queen, column by column, on a least-conflicted row; ``"random"``
        uses a random permutation; ``"identity"`` puts queen c on row c.
    restart_factor : int, default 2
        The search restarts after ``restart_factor * n`` moves in one basin.

    Raises
    ------
    InvalidBoardSizeError
        If ``n`` is not a positive integer.
    ValueError
        If ``init_policy`` or ``restart_factor`` is invalid.
    """

    def __init__(
        self,
        n: int,
        rng: RandomSource = None,
        init_policy: str = "greedy",
        restart_factor: int = DEFAULT_RESTART_FACTOR,
    ):
        self.n = validate_board_size(n)
        if init_policy not in INIT_POLICIES:
            raise ValueError(f"Unknown init policy: {init_policy!r}. Allowed: {', '.join(INIT_POLICIES)}")
        if restart_factor < 1:
            raise ValueError(f"restart_factor must be >= 1, got {restart_factor}")
        self.rng = _make_rng(rng)
        self.init_policy = init_policy
        self.restart_factor = restart_factor

        self.queens: List[int] = []
        self.row_counts: List[int] = []
        self.main_diag_counts: List[int] = []
        self.anti_diag_counts: List[int] = []

        self.steps = 0
        self.restarts = 0
        self._steps_since_restart = 0
        self._solved = False

        self._initialize()

    # ------------------------------------------------------------------
    # Initialization

    def reset(self) -> None:
        """Discard the placement and counters and build a fresh placement.

        Raises
        ------
        BoardSolvedError
            If the board already reached the SOLVED state.
        """
        if self._solved:
            raise BoardSolvedError("Cannot reset a solved board")
        self._initialize()

    def _initialize(self) -> None:
        n = self.n
        self.row_counts = [0] * n
        self.main_diag_counts = [0] * (2 * n - 1)
        self.anti_diag_counts = [0] * (2 * n - 1)
        self.queens = [0] * n
        self._steps_since_restart = 0

        if self.init_policy == "greedy":
            # Counters grow as each queen lands, so every column sees the ones before it
            for column in range(n):
                row = self._least_conflicted_row(column, range(n))
                self.queens[column] = row
                self._add_queen(column, row)
            return

        if self.init_policy == "random":
            rows = list(range(n))
            self.rng.shuffle(rows)
        else:
            rows = list(range(n))

        self.queens = rows
        for column, row in enumerate(rows):
            self._add_queen(column, row)

    # ------------------------------------------------------------------
    # Counter arithmetic

    def _main_diag_index(self, column: int, row: int) -> int:
        return column - row + self.n - 1

    def _anti_diag_index(self, column: int, row: int) -> int:
        return column + row

    def _add_queen(self, column: int, row: int) -> None:
        self.row_counts[row] += 1
        self.main_diag_counts[self._main_diag_index(column, row)] += 1
        self.anti_diag_counts[self._anti_diag_index(column, row)] += 1

    def _remove_queen(self, column: int, row: int) -> None:
        main_index = self._main_diag_index(column, row)
        anti_index = self._anti_diag_index(column, row)
        assert self.row_counts[row] > 0, f"row counter {row} would go negative"
        assert self.main_diag_counts[main_index] > 0, f"main diagonal counter {main_index} would go negative"
        assert self.anti_diag_counts[anti_index] > 0, f"anti-diagonal counter {anti_index} would go negative"
        self.row_counts[row] -= 1
        self.main_diag_counts[main_index] -= 1
        self.anti_diag_counts[anti_index] -= 1

    # ------------------------------------------------------------------
    # Queries

    @property
    def placement(self) -> List[int]:
        """Copy of the current placement, ``placement[col] = row``."""
        return list(self.queens)

    @property
    def solved(self) -> bool:
        """True once ``solve`` has returned a solution; the board is then read-only."""
        return self._solved

    @property
    def restart_threshold(self) -> int:
        return self.restart_factor * self.n

    def conflicts_at(self, column: int, row: int) -> int:
        """Return how many queens share a row or diagonal with square (column, row).

        On an empty square this is the number of queens attacking it. On the
        square of ``column``'s own queen the value also counts that queen once
        per line, i.e. it is ``SELF_CONFLICTS`` higher than the number of
        attackers.
        """
        return (
            self.main_diag_counts[self._main_diag_index(column, row)]
            + self.anti_diag_counts[self._anti_diag_index(column, row)]
            + self.row_counts[row]
        )

    def conflicts_of_queen(self, column: int) -> int:
        """Return ``conflicts_at`` for the queen currently placed in ``column``."""
        return self.conflicts_at(column, self.queens[column])

    def total_conflicts(self) -> int:
        """Return the number of attacking queen pairs, derived from the counters."""
        total = 0
        for counters in (self.row_counts, self.main_diag_counts, self.anti_diag_counts):
            for count in counters:
                if count > 1:
                    total += count * (count - 1) // 2
        return total

    def is_solved(self) -> bool:
        """Return True when no row or diagonal holds more than one queen. O(N)."""
        for counters in (self.row_counts, self.main_diag_counts, self.anti_diag_counts):
            for count in counters:
                if count > 1:
                    return False
        return True

    # ------------------------------------------------------------------
    # Selection

    def pick_most_conflicted(self) -> int:
        """Return a column whose queen has the most conflicts.

        Ties are broken uniformly at random; always taking the first maximum
        lets the search cycle between the same two queens.
        """
        best_value: Optional[int] = None
        best_columns: List[int] = []
        for column in range(self.n):
            value = self.conflicts_of_queen(column)
            if best_value is None or value > best_value:
                best_value = value
                best_columns = [column]
            elif value == best_value:
                best_columns.append(column)
        return self.rng.choice(best_columns)

    def pick_best_row(self, column: int) -> int:
        """Return a row of ``column`` minimizing ``conflicts_at``, ties at random.

        The current row is scored with the queen's own contribution, so a
        conflicted queen leaves its row unless every other row is at least as
        crowded; this keeps the search moving across plateaus.
        """
        return self._least_conflicted_row(column, range(self.n))

    def _least_conflicted_row(self, column: int, rows) -> int:
        best_value: Optional[int] = None
        best_rows: List[int] = []
        for row in rows:
            value = self.conflicts_at(column, row)
            if best_value is None or value < best_value:
                best_value = value
                best_rows = [row]
            elif value == best_value:
                best_rows.append(row)
        return self.rng.choice(best_rows)

    # ------------------------------------------------------------------
    # Mutation

    def move_queen(self, column: int, row: int) -> None:
        """Move the queen of ``column`` to ``row``, updating the counters in O(1).

        Raises
        ------
        BoardSolvedError
            If the board already reached the SOLVED state.
        IndexError
            If ``column`` or ``row`` is outside ``[0, n)``.
        """
        if self._solved:
            raise BoardSolvedError("Cannot move a queen on a solved board")
        if not 0 <= column < self.n or not 0 <= row < self.n:
            raise IndexError(f"Square ({column}, {row}) is outside a {self.n}x{self.n} board")
        self._remove_queen(column, self.queens[column])
        self.queens[column] = row
        self._add_queen(column, row)

    # ------------------------------------------------------------------
    # Search

    def solve(
        self,
        max_steps: Optional[int] = None,
        max_restarts: Optional[int] = None,
        time_limit: Optional[float] = None,
    ) -> List[int]:
        """Run min-conflicts repair with restarts until the board is solved.

        Parameters
        ----------
        max_steps : int | None
            Optional cap on the total number of moves across all restarts.
        max_restarts : int | None
            Optional cap on the number of restarts.
        time_limit : float | None
            Optional wall-clock limit in seconds.

        Returns
        -------
        list[int]
            The solved placement. ``self.steps`` and ``self.restarts`` report
            the effort spent.

        Raises
        ------
        SearchLimitExceeded
            When one of the optional caps is reached before a solution. Without
            caps the loop blocks until solved, forever for N = 2 or 3.

        Notes
        -----
        - The board is checked before the first move, so an already solved
          initial placement (always the case for N=1) returns with zero moves.
        - Success is tested right after every move and before any restart, so
          a solution reached on the last move of a basin is kept.
        """
        if self._solved:
            return self.placement

        start = perf_counter()
        if self.is_solved():
            self._solved = True
            return self.placement

        while True:
            if time_limit is not None and (perf_counter() - start) > time_limit:
                raise self._limit_exceeded("time limit reached", start, timeout=True)

            column = self.pick_most_conflicted()
            row = self.pick_best_row(column)
            self.move_queen(column, row)
            self.steps += 1
            self._steps_since_restart += 1

            if self.is_solved():
                self._solved = True
                return self.placement

            if max_steps is not None and self.steps >= max_steps:
                raise self._limit_exceeded("step limit reached", start)

            if self._steps_since_restart >= self.restart_threshold:
                if max_restarts is not None and self.restarts >= max_restarts:
                    raise self._limit_exceeded("restart limit reached", start)
                self.restarts += 1
                self._initialize()
                if self.is_solved():
                    self._solved = True
                    return self.placement

    def _limit_exceeded(self, reason: str, start: float, timeout: bool = False) -> SearchLimitExceeded:
        elapsed = perf_counter() - start
        return SearchLimitExceeded(
            f"N={self.n}: {reason} after {self.steps} steps and {self.restarts} restarts",
            steps=self.steps,
            restarts=self.restarts,
            elapsed=elapsed,
            timeout=timeout,
            placement=self.placement,
        )

    def __repr__(self) -> str:
        state = "SOLVED" if self._solved else "SEARCHING"
        return f"ConflictBoard(n={self.n}, state={state}, steps={self.steps}, restarts={self.restarts})"
