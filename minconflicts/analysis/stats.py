"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute robust aggregate statistics across result records.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, List, Optional, TypedDict


METRICS: List[str] = ["time", "steps", "restarts"]


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class MCRecord(TypedDict):
    seed: int
    success: bool
    steps: int
    restarts: int
    time: float
    timeout: bool


class MCResultEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    restart_factor: int
    success_steps: StatsSummary
    success_restarts: StatsSummary
    success_time: StatsSummary
    timeout_steps: StatsSummary
    timeout_restarts: StatsSummary
    timeout_time: StatsSummary
    failure_steps: StatsSummary
    failure_restarts: StatsSummary
    failure_time: StatsSummary
    all_steps: StatsSummary
    all_restarts: StatsSummary
    all_time: StatsSummary
    raw_runs: List[MCRecord]


class TuningEntry(TypedDict):
    N: int
    restart_factor: int
    success_rate: float
    avg_steps_success: Optional[float]
    avg_restarts_success: Optional[float]


ExperimentResults = Dict[int, MCResultEntry]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps/items expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        """Print a single-line progress update to stdout."""
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Parameters
    ----------
    values : List[float]
        Numeric values to summarize.
    label : str, optional
        Carried for debugging contexts; not used in calculations.

    Returns
    -------
    StatsSummary
        count, mean, median, std (population), min, max, q25, q75 and range.
        When ``values`` is empty every numeric field is ``None`` and ``count``
        is 0 to keep CSV/plot generation consistent.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)

    mean_val = statistics.mean(values)
    median_val = statistics.median(values)
    min_val = min(values)
    max_val = max(values)
    std_val = statistics.pstdev(values) if n > 1 else 0

    q25 = sorted_vals[n // 4] if n >= 4 else min_val
    q75 = sorted_vals[3 * n // 4] if n >= 4 else max_val

    return {
        "count": n,
        "mean": mean_val,
        "median": median_val,
        "std": std_val,
        "min": min_val,
        "max": max_val,
        "q25": q25,
        "q75": q75,
        "range": max_val - min_val,
    }


def compute_grouped_statistics(
    results_list: List[Dict[str, Any]], success_key: str = "success"
) -> Dict[str, Any]:
    """Aggregate metrics by outcome groups (success, failure, timeout).

    A run is a success when ``success_key`` is truthy, a timeout when its
    ``timeout`` flag is set, and a failure otherwise (restart cap reached).
    Statistics are produced for every metric in ``METRICS`` present in the
    records, under ``all_<metric>`` and ``<group>_<metric>``.
    """
    successes = [r for r in results_list if r.get(success_key, False)]
    timeouts = [r for r in results_list if r.get("timeout", False)]
    failures = [r for r in results_list if not r.get(success_key, False) and not r.get("timeout", False)]
    total = len(results_list)

    stats: Dict[str, Any] = {
        "total_runs": total,
        "successes": len(successes),
        "failures": len(failures),
        "timeouts": len(timeouts),
        "success_rate": len(successes) / total if total else 0,
        "timeout_rate": len(timeouts) / total if total else 0,
        "failure_rate": len(failures) / total if total else 0,
    }

    for group, records in (("all", results_list), ("success", successes), ("timeout", timeouts), ("failure", failures)):
        for metric in METRICS:
            if any(metric in r for r in records):
                values = [r[metric] for r in records if metric in r]
                stats[f"{group}_{metric}"] = compute_detailed_statistics(values, f"{group}_{metric}")

    return stats


def empty_result_entry() -> MCResultEntry:
    """Return the entry stored for a size that was skipped."""
    return {
        "success_rate": 0.0,
        "timeout_rate": 0.0,
        "failure_rate": 0.0,
        "total_runs": 0,
        "successes": 0,
        "failures": 0,
        "timeouts": 0,
        "raw_runs": [],
    }
