"""Utility helpers for the min-conflicts N-Queens project.

This module provides reusable, low-level primitives shared by the solver, the
experiment pipeline and the tests: two implementations counting conflicting
queen pairs, solution validation, the size guard used before any search, and
the text rendering of a placement.

Representation
--------------
Boards are encoded as a 1D array/list where ``board[col] = row``.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from .errors import InvalidBoardSizeError

QUEEN_CELL = "*"
EMPTY_CELL = "_"

# Sizes for which no placement of N non-attacking queens exists
UNSOLVABLE_SIZES = frozenset({2, 3})


def conflicts(board: Sequence[int]) -> int:
    """Compute the number of conflicting queen pairs in O(N).

    Uses hash maps to count occurrences per row and diagonals, then sums the
    pairs inside every line holding more than one queen.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    return _pairs(row_count.values()) + _pairs(diag1.values()) + _pairs(diag2.values())


def _pairs(counts) -> int:
    total = 0
    for count in counts:
        if count > 1:
            total += count * (count - 1) // 2
    return total


def conflicts_on2(board: Sequence[int]) -> int:
    """Compute the number of conflicting queen pairs in O(N^2).

    Reference implementation for validation in tests. Prefer ``conflicts``
    in performance-sensitive contexts.
    """
    n = len(board)
    conflicts_count = 0
    for i in range(n):
        for j in range(i + 1, n):
            if board[i] == board[j] or abs(board[i] - board[j]) == abs(i - j):
                conflicts_count += 1
    return conflicts_count


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if the board represents a valid N-Queens solution.

    Contract
    - Input: sequence of length N where board[col] = row (0-based indices)
    - Valid if: all 0 <= row < N and no pairs of queens attack each other
    - Implementation: range check + conflicts(board) == 0
    """
    n = len(board)
    if n == 0:
        return False
    for row in board:
        if not isinstance(row, int) or isinstance(row, bool):
            return False
        if row < 0 or row >= n:
            return False
    # Columns are unique by representation
    return conflicts(board) == 0


def has_solution(n: int) -> bool:
    """Return True when an N-Queens solution exists for a positive ``n``."""
    return n >= 1 and n not in UNSOLVABLE_SIZES


def validate_board_size(size: object) -> int:
    """Return ``size`` as an int, or raise if it is not a positive integer."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidBoardSizeError(size, "board size must be an integer")
    if size < 1:
        raise InvalidBoardSizeError(size, "board size must be positive")
    return size


def ensure_solvable_size(size: object) -> int:
    """Reject sizes the min-conflicts search cannot terminate on.

    Must be called before a solve without an external cap: for N=2 and N=3
    no solution exists and the restart loop would never stop.

    Raises
    ------
    InvalidBoardSizeError
        For non-integer, non-positive, or unsolvable sizes.
    """
    n = validate_board_size(size)
    if not has_solution(n):
        raise InvalidBoardSizeError(n, "no N-Queens solution exists for this size")
    return n


def render_board(board: Sequence[int]) -> str:
    """Render a placement as text, one board row per line.

    A queen is drawn as ``*`` and an empty square as ``_``; cells are
    separated by a single space.

    >>> print(render_board([1, 3, 0, 2]))
    _ _ * _
    * _ _ _
    _ _ _ *
    _ * _ _
    """
    n = len(board)
    lines = []
    for row in range(n):
        lines.append(" ".join(QUEEN_CELL if board[column] == row else EMPTY_CELL for column in range(n)))
    return "\n".join(lines)
