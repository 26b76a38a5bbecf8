"""Exception types raised by the min-conflicts solver."""

from __future__ import annotations

from typing import Optional


class MinConflictsError(Exception):
    """Base class for all solver errors."""


class InvalidBoardSizeError(MinConflictsError, ValueError):
    """Raised for a board size that cannot be searched.

    Covers non-integer and non-positive sizes, and sizes with no solution
    (2 and 3) when rejected by :func:`minconflicts.utils.ensure_solvable_size`.
    """

    def __init__(self, size: object, reason: str):
        self.size = size
        self.reason = reason
        super().__init__(f"Invalid board size {size!r}: {reason}")


class SearchLimitExceeded(MinConflictsError, RuntimeError):
    """Raised when an external step, restart or time cap ends a search.

    The condition is recoverable: the caller can retry with a different seed
    or a larger budget.

    Attributes
    ----------
    steps : int
        Total moves performed before giving up.
    restarts : int
        Number of restarts performed before giving up.
    elapsed : float
        Wall time in seconds spent inside ``solve``.
    timeout : bool
        True when the wall-clock ``time_limit`` was the cap that fired.
    """

    def __init__(
        self,
        message: str,
        steps: int,
        restarts: int,
        elapsed: float,
        timeout: bool = False,
        placement: Optional[list] = None,
    ):
        self.steps = steps
        self.restarts = restarts
        self.elapsed = elapsed
        self.timeout = timeout
        self.placement = placement
        super().__init__(message)


class BoardSolvedError(MinConflictsError, RuntimeError):
    """Raised when a solved board is asked to mutate."""
