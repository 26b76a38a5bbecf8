"""CSV export utilities for experiment outputs (aggregates, raw runs, tuning).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection.
"""
from __future__ import annotations

import csv
import os
from typing import Any, Dict, List, Optional

from . import settings
from .stats import ExperimentResults


def _build_suffix() -> str:
    """Build an optional filename suffix from ``RUN_TAG`` and ``RUN_ID``.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        parts.append(settings.RUN_ID)
    return ("_" + "_".join(parts)) if parts else ""


def _summary_value(entry: Dict[str, Any], key: str, field: str) -> Any:
    value = entry.get(key, {}).get(field)
    return "" if value is None else value


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-N aggregate metrics to CSV and return the file path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_MC{_build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "restart_factor",
            "total_runs",
            "success_rate",
            "timeout_rate",
            "failure_rate",
            "steps_mean",
            "steps_median",
            "steps_std",
            "steps_min",
            "steps_max",
            "restarts_mean",
            "restarts_median",
            "restarts_max",
            "time_mean_seconds",
            "time_median_seconds",
            "time_max_seconds",
        ])
        for N in N_values:
            entry = results.get(N)
            if not entry or not entry.get("total_runs"):
                continue
            writer.writerow([
                N,
                entry.get("restart_factor", ""),
                entry["total_runs"],
                entry["success_rate"],
                entry["timeout_rate"],
                entry["failure_rate"],
                _summary_value(entry, "success_steps", "mean"),
                _summary_value(entry, "success_steps", "median"),
                _summary_value(entry, "success_steps", "std"),
                _summary_value(entry, "success_steps", "min"),
                _summary_value(entry, "success_steps", "max"),
                _summary_value(entry, "success_restarts", "mean"),
                _summary_value(entry, "success_restarts", "median"),
                _summary_value(entry, "success_restarts", "max"),
                _summary_value(entry, "success_time", "mean"),
                _summary_value(entry, "success_time", "median"),
                _summary_value(entry, "success_time", "max"),
            ])

    print(f"Saved aggregate results: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write full per-run raw data to CSV and return the file path.

    Column names are standardized to lowercase snake_case.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_data_MC{_build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "run_id",
            "seed",
            "restart_factor",
            "success",
            "timeout",
            "steps",
            "restarts",
            "time_seconds",
        ])
        for N in N_values:
            entry = results.get(N)
            if not entry:
                continue
            for i, run in enumerate(entry.get("raw_runs", [])):
                writer.writerow([
                    N,
                    i + 1,
                    run["seed"],
                    entry.get("restart_factor", ""),
                    run["success"],
                    run["timeout"],
                    run["steps"],
                    run["restarts"],
                    run["time"],
                ])

    print(f"Saved raw run data: {filename}")
    return filename


def save_tuning_to_csv(tuned: Dict[int, Dict[str, Any]], out_dir: str, filename: Optional[str] = None) -> str:
    """Write every evaluated restart factor per N, flagging the selected one."""
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, filename or f"tuning_restart_factor{_build_suffix()}.csv")

    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "restart_factor",
            "success_rate_tuning",
            "avg_steps_success_tuning",
            "avg_restarts_success_tuning",
            "selected",
        ])
        for N in sorted(tuned):
            best = tuned[N]["best"]
            for candidate in tuned[N]["candidates"]:
                writer.writerow([
                    N,
                    candidate["restart_factor"],
                    candidate["success_rate"],
                    "" if candidate["avg_steps_success"] is None else candidate["avg_steps_success"],
                    "" if candidate["avg_restarts_success"] is None else candidate["avg_restarts_success"],
                    candidate["restart_factor"] == best["restart_factor"],
                ])

    print(f"Saved tuning table: {path}")
    return path
