"""Restart-threshold tuning for the min-conflicts solver.

The restart threshold is ``restart_factor * N`` moves. This module runs an
exhaustive grid search over candidate factors for each board size and keeps
the most reliable one, with the average successful step count as tiebreaker.
"""
from __future__ import annotations

import statistics
from typing import Dict, List, Optional

from . import settings
from .stats import ProgressPrinter, TuningEntry
from minconflicts.solver import mc_nqueens
from minconflicts.utils import has_solution


def evaluate_restart_factor(
    N: int,
    restart_factor: int,
    runs_tuning: int,
    base_seed: int,
    init_policy: str,
) -> TuningEntry:
    """Evaluate one restart factor over ``runs_tuning`` seeded runs.

    Returns the success rate and the average steps and restarts of the
    successful runs (None when no run succeeded).
    """
    steps_success: List[int] = []
    restarts_success: List[int] = []
    for run_index in range(runs_tuning):
        solution, steps, restarts, _, _ = mc_nqueens(
            N,
            restart_factor=restart_factor,
            init_policy=init_policy,
            seed=base_seed + run_index,
            max_restarts=settings.MAX_RESTARTS,
            time_limit=settings.MC_TIME_LIMIT,
        )
        if solution is not None:
            steps_success.append(steps)
            restarts_success.append(restarts)

    return {
        "N": N,
        "restart_factor": restart_factor,
        "success_rate": len(steps_success) / runs_tuning if runs_tuning else 0.0,
        "avg_steps_success": statistics.mean(steps_success) if steps_success else None,
        "avg_restarts_success": statistics.mean(restarts_success) if restarts_success else None,
    }


def _is_better(candidate: TuningEntry, best: Optional[TuningEntry]) -> bool:
    if best is None:
        return True
    if candidate["success_rate"] != best["success_rate"]:
        return candidate["success_rate"] > best["success_rate"]
    if candidate["avg_steps_success"] is None:
        return False
    if best["avg_steps_success"] is None:
        return True
    return candidate["avg_steps_success"] < best["avg_steps_success"]


def tune_restart_factor_for_N(
    N: int,
    restart_factors: List[int],
    runs_tuning: int = 10,
    base_seed: Optional[int] = None,
    init_policy: Optional[str] = None,
) -> Dict[str, object]:
    """Grid search over ``restart_factors`` for board size ``N``.

    Returns
    -------
    dict
        ``{"best": TuningEntry, "candidates": [TuningEntry, ...]}``; the best
        entry has the highest success rate, ties broken by the lowest average
        successful steps, then by grid order.
    """
    if not restart_factors:
        raise ValueError("restart_factors must not be empty")
    base_seed = settings.BASE_SEED if base_seed is None else base_seed
    init_policy = init_policy or settings.INIT_POLICY

    best: Optional[TuningEntry] = None
    candidates: List[TuningEntry] = []
    for factor in restart_factors:
        entry = evaluate_restart_factor(N, factor, runs_tuning, base_seed, init_policy)
        candidates.append(entry)
        if _is_better(entry, best):
            best = entry

    return {"best": best, "candidates": candidates}


def tune_all(
    N_values: List[int],
    restart_factors: Optional[List[int]] = None,
    runs_tuning: Optional[int] = None,
    progress_label: Optional[str] = "Tuning restart factor",
) -> Dict[int, Dict[str, object]]:
    """Tune every N in ``N_values``; returns ``{N: tune_restart_factor_for_N(...)}``."""
    restart_factors = restart_factors or settings.RESTART_FACTORS
    runs_tuning = settings.RUNS_TUNING if runs_tuning is None else runs_tuning
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    tuned: Dict[int, Dict[str, object]] = {}
    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        if not has_solution(N):
            print(f"  Skipping N={N}: no solution exists for this size")
            continue
        tuned[N] = tune_restart_factor_for_N(N, restart_factors, runs_tuning=runs_tuning)
        best = tuned[N]["best"]
        print(f"  Best restart factor for N={N}: {best['restart_factor']} (success rate {best['success_rate']:.2f})")  # type: ignore[index]
    return tuned
