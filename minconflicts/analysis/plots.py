"""Visualization utilities for min-conflicts experiment outputs.

Overview
--------
Plotting helpers that generate PNG charts from the aggregated experiment
results produced by ``minconflicts.analysis.experiments.run_experiments``.

Inputs and data contract
------------------------
- The primary input is an ``ExperimentResults`` mapping ``N -> MCResultEntry``.
- Functions also accept an ordered list of ``N_values`` that determines the
    x-axis for most charts. Sizes without runs are left out.

Chart map
---------
- 01_success_rate_vs_N.png: fraction of seeded runs solved within the caps.
- 02_steps_vs_N_log_scale.png: mean and median moves of successful runs (log scale).
- 03_restarts_vs_N.png: mean restarts of successful runs.
- 04_time_vs_steps.png: per-run time against moves with a numpy linear
    trend; near-linearity shows the O(N) cost of a single move.
- 05_steps_distribution.png: seaborn box plot of steps per N built from a
    pandas DataFrame of the raw runs.
- 06_tuning_success_vs_factor.png: tuning grid: success rate per restart factor.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402

from . import settings  # noqa: E402
from .stats import ExperimentResults  # noqa: E402


def _date_suffix() -> str:
    """Return a ``_``-prefixed suffix from ``RUN_TAG`` and ``RUN_ID`` (or empty)."""
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _sizes_with_runs(results: ExperimentResults, N_values: List[int]) -> List[int]:
    return [N for N in N_values if results.get(N, {}).get("total_runs", 0) > 0]


def _summary_mean(entry: Dict[str, Any], key: str) -> float:
    return float(entry.get(key, {}).get("mean") or 0.0)


def raw_runs_dataframe(results: ExperimentResults, N_values: List[int]) -> pd.DataFrame:
    """Flatten the raw runs of every N into one DataFrame (one row per run)."""
    rows: List[Dict[str, Any]] = []
    for N in N_values:
        entry = results.get(N)
        if not entry:
            continue
        for run in entry.get("raw_runs", []):
            rows.append({"n": N, **run})
    return pd.DataFrame(rows, columns=["n", "seed", "success", "steps", "restarts", "time", "timeout"])


def _save(fname: str, what: str) -> None:
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved {what}: {fname}")


def plot_comprehensive_analysis(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Generate the standard set of charts and return the written paths.

    Parameters
    ----------
    results : ExperimentResults
        Aggregated per-N summaries.
    N_values : List[int]
        Ordered list of N values to display on the x-axis.
    out_dir : str
        Destination directory; created if missing.
    """
    os.makedirs(out_dir, exist_ok=True)
    sizes = _sizes_with_runs(results, N_values)
    if not sizes:
        print("Plotting skipped: no runs to plot.")
        return []

    suffix = _date_suffix()
    written: List[str] = []

    success_rate = [results[N]["success_rate"] for N in sizes]
    plt.figure(figsize=(10, 6))
    plt.plot(sizes, success_rate, marker="o", linewidth=2, markersize=8, label="Min-conflicts")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.title("Success Rate vs Problem Size", fontsize=14)
    plt.ylim(-0.05, 1.05)
    plt.xscale("log", base=2)
    plt.xticks(sizes, [str(N) for N in sizes])
    plt.grid(True, alpha=0.7)
    plt.legend(fontsize=11)
    for n, rate in zip(sizes, success_rate):
        plt.annotate(f"{rate:.2f}", (n, rate), textcoords="offset points", xytext=(0, 5), ha="center", fontsize=9)
    fname = os.path.join(out_dir, f"01_success_rate_vs_N{suffix}.png")
    _save(fname, "success-rate chart")
    written.append(fname)

    steps_mean = [max(_summary_mean(results[N], "success_steps"), 1e-1) for N in sizes]
    steps_median = [max(float(results[N].get("success_steps", {}).get("median") or 0.0), 1e-1) for N in sizes]
    plt.figure(figsize=(10, 6))
    plt.semilogy(sizes, steps_mean, marker="s", linewidth=2, markersize=8, label="Mean steps")
    plt.semilogy(sizes, steps_median, marker="^", linewidth=2, markersize=8, linestyle="--", label="Median steps")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Moves to solution (log scale)", fontsize=12)
    plt.title("Search Effort vs Problem Size\n(successful runs only)", fontsize=14)
    plt.xscale("log", base=2)
    plt.xticks(sizes, [str(N) for N in sizes])
    plt.grid(True, alpha=0.7)
    plt.legend(fontsize=11)
    fname = os.path.join(out_dir, f"02_steps_vs_N_log_scale{suffix}.png")
    _save(fname, "steps chart (log scale)")
    written.append(fname)

    restarts_mean = [_summary_mean(results[N], "success_restarts") for N in sizes]
    plt.figure(figsize=(10, 6))
    plt.bar([str(N) for N in sizes], restarts_mean, color="tab:orange", alpha=0.8)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Average restarts", fontsize=12)
    plt.title("Restarts vs Problem Size\n(successful runs only)", fontsize=14)
    plt.grid(True, axis="y", alpha=0.7)
    fname = os.path.join(out_dir, f"03_restarts_vs_N{suffix}.png")
    _save(fname, "restarts chart")
    written.append(fname)

    df = raw_runs_dataframe(results, sizes)
    solved = df[df["success"].astype(bool)]

    if len(solved) >= 2 and solved["steps"].nunique() > 1:
        plt.figure(figsize=(10, 6))
        sns.scatterplot(data=solved, x="steps", y="time", hue="n", palette="viridis", alpha=0.7)
        z = np.polyfit(solved["steps"].to_numpy(dtype=float), solved["time"].to_numpy(dtype=float), 1)
        p = np.poly1d(z)
        x_trend = np.linspace(solved["steps"].min(), solved["steps"].max(), 100)
        plt.plot(x_trend, p(x_trend), "r--", alpha=0.8, label=f"Trend: {z[0]:.2e}s/step")
        plt.xlabel("Moves (steps)", fontsize=12)
        plt.ylabel("Time [s]", fontsize=12)
        plt.title("Logical vs Practical Cost", fontsize=14)
        plt.legend(fontsize=10)
        plt.grid(True, alpha=0.7)
        fname = os.path.join(out_dir, f"04_time_vs_steps{suffix}.png")
        _save(fname, "time-vs-steps chart")
        written.append(fname)

    if not solved.empty:
        plt.figure(figsize=(10, 6))
        sns.boxplot(data=solved, x="n", y="steps", color="tab:blue")
        plt.yscale("symlog")
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel("Moves to solution (log scale)", fontsize=12)
        plt.title("Distribution of Moves per Board Size", fontsize=14)
        fname = os.path.join(out_dir, f"05_steps_distribution{suffix}.png")
        _save(fname, "steps distribution chart")
        written.append(fname)

    return written


def plot_tuning(tuned: Dict[int, Dict[str, Any]], out_dir: str) -> Optional[str]:
    """Plot success rate against restart factor, one line per N."""
    if not tuned:
        return None
    os.makedirs(out_dir, exist_ok=True)
    rows = [
        {"n": N, "restart_factor": c["restart_factor"], "success_rate": c["success_rate"]}
        for N in sorted(tuned)
        for c in tuned[N]["candidates"]
    ]
    df = pd.DataFrame(rows)
    plt.figure(figsize=(10, 6))
    sns.lineplot(data=df, x="restart_factor", y="success_rate", hue="n", marker="o", palette="viridis")
    plt.xlabel("Restart factor (threshold = factor * N)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.ylim(-0.05, 1.05)
    plt.title("Restart Threshold Tuning", fontsize=14)
    plt.grid(True, alpha=0.7)
    fname = os.path.join(out_dir, f"06_tuning_success_vs_factor{_date_suffix()}.png")
    _save(fname, "tuning chart")
    return fname
