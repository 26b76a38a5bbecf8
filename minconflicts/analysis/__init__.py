"""
Analysis and orchestration package for min-conflicts experiments.

This package contains:
- settings: global knobs and timeouts
- stats: typed summaries and aggregation helpers
- experiments: seeded batch runner with result shaping
- tuning: restart-factor grid search
- reporting: CSV exports and raw-data writers
- plots: visualization utilities
- cli: top-level pipeline entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    MCRecord,
    MCResultEntry,
    TuningEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "MCRecord",
    "MCResultEntry",
    "TuningEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
