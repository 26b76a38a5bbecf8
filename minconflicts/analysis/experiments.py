"""Final experiment runner for the min-conflicts solver.

Executes repeatable batches of seeded runs for a set of board sizes, using a
restart factor per N (tuned, or the configured default). Outputs are
structured dictionaries suitable for CSV export and plotting. Validation hooks
optionally check solution correctness and consistency of reported metrics.
"""
from __future__ import annotations

from time import perf_counter
from typing import Dict, List, Optional

from . import settings
from .stats import (
    ExperimentResults,
    MCRecord,
    MCResultEntry,
    ProgressPrinter,
    compute_grouped_statistics,
    empty_result_entry,
)
from minconflicts.solver import mc_nqueens
from minconflicts.utils import has_solution, is_valid_solution


def run_single_experiment(
    N: int,
    seed: int,
    restart_factor: int,
    init_policy: str,
    max_restarts: Optional[int],
    time_limit: Optional[float],
    validate: bool = False,
) -> MCRecord:
    """Run one seeded solve and shape it as an ``MCRecord``."""
    solution, steps, restarts, elapsed, timeout = mc_nqueens(
        N,
        restart_factor=restart_factor,
        init_policy=init_policy,
        seed=seed,
        max_restarts=max_restarts,
        time_limit=time_limit,
    )
    if validate and solution is not None:
        if len(solution) != N or not is_valid_solution(solution):
            raise AssertionError(f"Invalid solution produced for N={N}, seed {seed}: {solution}")
        if timeout:
            raise AssertionError(f"Run for N={N}, seed {seed} reported both a solution and a timeout")
    return {
        "seed": seed,
        "success": solution is not None,
        "steps": steps,
        "restarts": restarts,
        "time": elapsed,
        "timeout": timeout,
    }


def run_experiments(
    N_values: List[int],
    runs: int,
    restart_factors_for_N: Optional[Dict[int, int]] = None,
    init_policy: Optional[str] = None,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> ExperimentResults:
    """Run ``runs`` seeded solves for every N and aggregate them.

    Run ``i`` of every size uses seed ``base_seed + i`` so a batch can be
    reproduced exactly. Sizes without a solution (2, 3) are skipped with a
    message and recorded as empty entries. The experiment-wide timeout
    ``settings.EXPERIMENT_TIMEOUT`` stops scheduling new sizes once reached,
    and a ``KeyboardInterrupt`` returns the partial results collected so far.
    """
    restart_factors_for_N = restart_factors_for_N or {}
    init_policy = init_policy or settings.INIT_POLICY
    base_seed = settings.BASE_SEED if base_seed is None else base_seed

    results: ExperimentResults = {}
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None
    start = perf_counter()

    for index, N in enumerate(N_values, start=1):
        try:
            if progress:
                progress.update(index, f"N={N}")

            if not has_solution(N):
                print(f"  Skipping N={N}: no solution exists for this size")
                results[N] = empty_result_entry()
                continue

            if settings.EXPERIMENT_TIMEOUT is not None and (perf_counter() - start) > settings.EXPERIMENT_TIMEOUT:
                print(f"  Experiment timeout reached; skipping N={N}")
                results[N] = empty_result_entry()
                continue

            restart_factor = int(restart_factors_for_N.get(N, settings.RESTART_FACTOR))
            print(f"=== (Final) N = {N}, restart factor {restart_factor}, init {init_policy} ===")

            mc_runs: List[MCRecord] = []
            for run_index in range(runs):
                mc_runs.append(
                    run_single_experiment(
                        N,
                        seed=base_seed + run_index,
                        restart_factor=restart_factor,
                        init_policy=init_policy,
                        max_restarts=settings.MAX_RESTARTS,
                        time_limit=settings.MC_TIME_LIMIT,
                        validate=validate,
                    )
                )

            mc_stats = compute_grouped_statistics(list(mc_runs), "success")
            entry: MCResultEntry = {
                "success_rate": mc_stats["success_rate"],
                "timeout_rate": mc_stats["timeout_rate"],
                "failure_rate": mc_stats["failure_rate"],
                "total_runs": mc_stats["total_runs"],
                "successes": mc_stats["successes"],
                "failures": mc_stats["failures"],
                "timeouts": mc_stats["timeouts"],
                "restart_factor": restart_factor,
                "raw_runs": mc_runs,
            }
            for key, value in mc_stats.items():
                if key.endswith(("_steps", "_restarts", "_time")):
                    entry[key] = value  # type: ignore[literal-required]
            results[N] = entry
        except KeyboardInterrupt:
            print("\nInterrupted by user. Returning partial results...")
            break

    return results
