"""Command-line interface and high-level pipelines for the min-conflicts solver.

This module wires together configuration loading, optional restart-factor
tuning, single solves and experiment batches. It isolates I/O, argument
parsing, and progress reporting from the core algorithmic modules so that the
rest of the codebase remains easy to test programmatically.

Commands
--------
- ``solve [N]``: solve one board (N from the argument or stdin) and print it.
- ``experiment``: run seeded batches for the configured sizes, export CSV and charts.
- ``tune``: grid-search the restart factor per N and persist the winners.
- ``--quick-test``: lightweight regression checks (N=8) and exit.
"""
from __future__ import annotations

import argparse
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .experiments import run_experiments
from .reporting import save_raw_data_to_csv, save_results_to_csv, save_tuning_to_csv
from .tuning import tune_all
from config_manager import ConfigManager
from minconflicts.board import INIT_POLICIES
from minconflicts.errors import InvalidBoardSizeError
from minconflicts.solver import mc_nqueens
from minconflicts.utils import is_valid_solution, render_board


# ------------- Configuration ------------------------------------------------

def normalize_optimal_parameters(raw_params: Optional[Dict[Any, Any]]) -> Dict[int, int]:
    """Turn persisted tuning results into ``{N: restart_factor}``.

    Config files store N as strings; entries whose key is not an integer or
    whose value carries no ``restart_factor`` are ignored.
    """
    normalized: Dict[int, int] = {}
    if not raw_params:
        return normalized
    for key, value in raw_params.items():
        try:
            n = int(key)
        except (TypeError, ValueError):
            continue
        if isinstance(value, dict) and "restart_factor" in value:
            normalized[n] = int(value["restart_factor"])
    return normalized


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and apply it to the global ``settings`` module.

    Raises
    ------
    FileNotFoundError
        When ``config_path`` does not exist.
    ValueError
        When a setting has an invalid value.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS_FINAL = int(experiment_settings.get("runs_final", settings.RUNS_FINAL))
        settings.RUNS_TUNING = int(experiment_settings.get("runs_tuning", settings.RUNS_TUNING))
        settings.BASE_SEED = int(experiment_settings.get("base_seed", settings.BASE_SEED))
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)

    timeout_settings = config_mgr.get_timeout_settings()
    if timeout_settings:
        settings.set_timeouts(
            mc_timeout=timeout_settings.get("mc_time_limit", settings.MC_TIME_LIMIT),
            experiment_timeout=timeout_settings.get("experiment_timeout", settings.EXPERIMENT_TIMEOUT),
            max_restarts=timeout_settings.get("max_restarts", settings.MAX_RESTARTS),
        )

    tuning_grid = config_mgr.get_tuning_grid()
    if tuning_grid:
        settings.RESTART_FACTORS = [int(v) for v in tuning_grid.get("restart_factors", settings.RESTART_FACTORS)]

    solver_settings = config_mgr.get_solver_settings()
    if solver_settings:
        settings.RESTART_FACTOR = int(solver_settings.get("restart_factor", settings.RESTART_FACTOR))
        settings.INIT_POLICY = solver_settings.get("init_policy", settings.INIT_POLICY)

    if settings.INIT_POLICY not in INIT_POLICIES:
        raise ValueError(f"Unknown init policy '{settings.INIT_POLICY}'. Allowed: {', '.join(INIT_POLICIES)}")
    if settings.RESTART_FACTOR < 1 or any(k < 1 for k in settings.RESTART_FACTORS):
        raise ValueError("Restart factors must be >= 1")
    if not settings.N_VALUES:
        raise ValueError("No board sizes configured (experiment_settings.N_values is empty)")

    settings.OPTIMAL_RESTART_FACTORS = normalize_optimal_parameters(config_mgr.get_optimal_parameters())
    return config_mgr


# ------------- Pipelines ----------------------------------------------------

def solve_command(
    n_text: str,
    seed: Optional[int] = None,
    restart_factor: int = settings.RESTART_FACTOR,
    init_policy: str = settings.INIT_POLICY,
    max_restarts: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> int:
    """Solve a single board and print it; return the process exit code.

    Exit codes: 0 solved, 1 invalid input, 2 caps reached without a solution.
    """
    try:
        n = int(n_text.strip())
    except ValueError:
        print(f"Couldn't parse input to number: {n_text.strip()!r}")
        return 1

    try:
        solution, steps, restarts, elapsed, timeout = mc_nqueens(
            n,
            restart_factor=restart_factor,
            init_policy=init_policy,
            seed=seed,
            max_restarts=max_restarts,
            time_limit=time_limit,
        )
    except InvalidBoardSizeError as exc:
        print(f"Error: {exc}")
        return 1

    if solution is None:
        reason = "time limit" if timeout else "restart limit"
        print(f"No solution for N={n} within the {reason} ({steps} steps, {restarts} restarts). Retry with a different seed.")
        return 2

    print(render_board(solution))
    print(f"\nSolved N={n} in {steps} steps, {restarts} restarts, {elapsed:.4f}s")
    return 0


def main_experiment(config_mgr: Optional[ConfigManager] = None, validate: bool = False, plots: bool = True) -> None:
    """Run the final experiments for ``settings.N_VALUES`` and export results."""
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    print("\n============================================")
    print("MIN-CONFLICTS EXPERIMENT PIPELINE")
    print("============================================")

    restart_factors = dict(settings.OPTIMAL_RESTART_FACTORS)
    if restart_factors:
        print(f"Using tuned restart factors: {restart_factors}")
    else:
        print(f"No tuned restart factors; using default factor {settings.RESTART_FACTOR}")

    results = run_experiments(
        settings.N_VALUES,
        runs=settings.RUNS_FINAL,
        restart_factors_for_N=restart_factors,
        progress_label="Experiments MC",
        validate=validate,
    )

    save_results_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    save_raw_data_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    if plots:
        from .plots import plot_comprehensive_analysis

        plot_comprehensive_analysis(results, settings.N_VALUES, settings.OUT_DIR)

    print("\nExperiment pipeline completed.")


def main_tuning(config_mgr: Optional[ConfigManager] = None, plots: bool = True) -> Dict[int, Dict[str, Any]]:
    """Tune the restart factor for every configured N and persist the winners."""
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    print("Starting restart-factor tuning (sequential grid search).")
    tuned = tune_all(settings.N_VALUES, settings.RESTART_FACTORS, settings.RUNS_TUNING)

    save_tuning_to_csv(tuned, settings.OUT_DIR)
    if plots:
        from .plots import plot_tuning

        plot_tuning(tuned, settings.OUT_DIR)

    best_params = {N: dict(entry["best"]) for N, entry in tuned.items()}
    settings.OPTIMAL_RESTART_FACTORS = {N: int(p["restart_factor"]) for N, p in best_params.items()}
    if config_mgr:
        config_mgr.save_optimal_parameters(best_params)
    return tuned


def run_quick_regression_tests() -> None:
    """Run lightweight deterministic checks for the solver and CSV generation."""
    print("Running quick regression tests (N=8)...")

    solution, steps, restarts, elapsed, timeout = mc_nqueens(8, seed=42, max_restarts=200, time_limit=5.0)
    if solution is None or timeout:
        raise AssertionError("Min-conflicts did not succeed for N=8 with a fixed seed.")
    if not is_valid_solution(solution):
        raise AssertionError(f"Min-conflicts returned an invalid placement for N=8: {solution}")
    print(f"  Min-conflicts: solution {solution} in {steps} steps, {restarts} restarts, {elapsed:.4f}s")

    results = run_experiments([8], runs=3, base_seed=42, progress_label="Quick regression experiments", validate=True)
    if results[8]["successes"] != 3:
        raise AssertionError("Not every quick experiment run solved N=8.")

    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_results_to_csv(results, [8], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve N-Queens with min-conflicts and run experiment pipelines.")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests (N=8) and exit.")
    subparsers = parser.add_subparsers(dest="command")

    solve = subparsers.add_parser("solve", help="Solve a single board and print it.")
    solve.add_argument("n", nargs="?", help="Board size N (read from stdin when omitted).")
    solve.add_argument("--seed", type=int, default=None, help="Seed for reproducible tie-breaks.")
    solve.add_argument("--restart-factor", type=int, default=settings.RESTART_FACTOR, help="Restart after factor*N moves (default: %(default)s).")
    solve.add_argument("--init", choices=list(INIT_POLICIES), default=settings.INIT_POLICY, help="Initial placement policy (default: %(default)s).")
    solve.add_argument("--max-restarts", type=int, default=None, help="Give up after this many restarts.")
    solve.add_argument("--time-limit", type=float, default=None, help="Give up after this many seconds.")

    experiment = subparsers.add_parser("experiment", help="Run seeded experiment batches and export CSV/charts.")
    experiment.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    experiment.add_argument("--validate", action="store_true", help="Validate every solution (extra assertions).")
    experiment.add_argument("--no-plots", action="store_true", help="Skip chart generation.")

    tune = subparsers.add_parser("tune", help="Tune the restart factor per N and store it in the configuration.")
    tune.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    tune.add_argument("--no-plots", action="store_true", help="Skip chart generation.")
    return parser


def _load_config_or_exit(config_path: str) -> ConfigManager:
    try:
        return apply_configuration(config_path)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    if args.command is None:
        parser.print_help()
        raise SystemExit(1)

    try:
        if args.command == "solve":
            n_text = args.n if args.n is not None else sys.stdin.readline()
            code = solve_command(
                n_text,
                seed=args.seed,
                restart_factor=args.restart_factor,
                init_policy=args.init,
                max_restarts=args.max_restarts,
                time_limit=args.time_limit,
            )
            if code:
                raise SystemExit(code)
        elif args.command == "experiment":
            config_mgr = _load_config_or_exit(args.config)
            main_experiment(config_mgr, validate=args.validate, plots=not args.no_plots)
        else:
            config_mgr = _load_config_or_exit(args.config)
            main_tuning(config_mgr, plots=not args.no_plots)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc
