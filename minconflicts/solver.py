"""Functional front-end for the min-conflicts N-Queens solver.

Wraps :class:`minconflicts.board.ConflictBoard` in the single-call shape used
by the experiment pipeline.

Contract (public API)
---------------------
- Input: board size ``size`` with an existing solution (1 or >= 4) plus the
  search knobs ``restart_factor``, ``init_policy``, ``seed``, and optional
  liveness caps ``max_restarts`` and ``time_limit``.
- Output: a 5-tuple ``MCResult``:
    (solution, steps, restarts, elapsed_seconds, timeout)

Where:
- solution: the placement ``solution[col] = row``, or None when a cap ended
  the search first.
- steps: total moves performed across all restarts.
- restarts: number of restarts performed.
- elapsed_seconds: wall time measured via ``perf_counter()``.
- timeout: True when the run ended due to ``time_limit``.

A capped run that ends without a solution is not an error: retry it with a
different seed.

Determinism
-----------
Runs with the same ``seed`` (or an equally seeded ``rng``) are identical.
"""

from __future__ import annotations

import random
from time import perf_counter
from typing import List, Optional, Tuple

from .board import DEFAULT_RESTART_FACTOR, ConflictBoard
from .errors import SearchLimitExceeded
from .utils import ensure_solvable_size

MCResult = Tuple[Optional[List[int]], int, int, float, bool]


def mc_nqueens(
    size: int,
    restart_factor: int = DEFAULT_RESTART_FACTOR,
    init_policy: str = "greedy",
    seed: Optional[int] = None,
    max_restarts: Optional[int] = None,
    time_limit: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> MCResult:
    """Solve N-Queens with min-conflicts and report the search effort.

    Parameters
    ----------
    size : int
        Board dimension N.
    restart_factor : int, default 2
        Restart after ``restart_factor * size`` moves in one basin.
    init_policy : str, default "greedy"
        Initial placement policy (see ``ConflictBoard``).
    seed : int | None
        Seed for a private ``random.Random``; ignored when ``rng`` is given.
    max_restarts : int | None
        Optional cap on the number of restarts.
    time_limit : float | None
        Optional wall-clock time limit in seconds.
    rng : random.Random | None
        Explicit random generator to use for tie-breaks.

    Returns
    -------
    MCResult
        Tuple (solution, steps, restarts, elapsed, timeout).

    Raises
    ------
    InvalidBoardSizeError
        For sizes that are not positive integers or have no solution (2, 3).
        The check runs before any search starts.
    """
    n = ensure_solvable_size(size)
    start = perf_counter()
    board = ConflictBoard(
        n,
        rng=rng if rng is not None else seed,
        init_policy=init_policy,
        restart_factor=restart_factor,
    )
    try:
        solution = board.solve(max_restarts=max_restarts, time_limit=time_limit)
    except SearchLimitExceeded as exc:
        return None, exc.steps, exc.restarts, perf_counter() - start, exc.timeout
    return solution, board.steps, board.restarts, perf_counter() - start, False
