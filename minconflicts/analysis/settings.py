"""Global settings and timeouts for the min-conflicts analysis pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`minconflicts.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

from typing import Dict, List, Optional
from datetime import datetime

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [8, 16, 32, 64, 128, 256]

# Number of independent seeded runs per N in final experiments
RUNS_FINAL: int = 40

# Number of runs per restart factor during tuning (kept lower to accelerate the grid search)
RUNS_TUNING: int = 10

# First seed of a batch; run i uses BASE_SEED + i so batches are reproducible
BASE_SEED: int = 12345

# Restart threshold = RESTART_FACTOR * N moves
RESTART_FACTOR: int = 2

# Tuning grid for the restart factor (threshold between 2N and 10N)
RESTART_FACTORS: List[int] = [2, 4, 6, 8, 10]

# Initial placement policy: 'greedy' | 'random' | 'identity'
INIT_POLICY: str = "greedy"

# Liveness caps for a single solve (None = no limit)
MAX_RESTARTS: Optional[int] = 1000
MC_TIME_LIMIT: Optional[float] = 30.0

# Global timeout per experiment bundle (None = no limit)
EXPERIMENT_TIMEOUT: Optional[float] = 300.0

# Tuned restart factors per N, filled from config.json or by tuning
OPTIMAL_RESTART_FACTORS: Dict[int, int] = {}

# Output directory for CSV and charts
OUT_DIR: str = "results_minconflicts"

# Output naming policy --------------------------------------------------------

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
# applied consistently across all artifacts produced within the same run.
DATE_IN_FILENAMES: bool = False

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run labeling to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def set_timeouts(
        mc_timeout: Optional[float] = 30.0,
        experiment_timeout: Optional[float] = 300.0,
        max_restarts: Optional[int] = 1000,
) -> None:
        """Configure liveness caps for single solves and whole experiments.

        Parameters
        - mc_timeout: wall-clock limit of one solve in seconds (None disables).
        - experiment_timeout: hard cap for a whole experiment bundle in seconds
            (None disables). When reached, the runner stops scheduling new
            board sizes and returns what it has.
        - max_restarts: restart cap of one solve (None disables).

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active limits explicit at run start.
        """
        global MC_TIME_LIMIT, EXPERIMENT_TIMEOUT, MAX_RESTARTS
        MC_TIME_LIMIT = mc_timeout
        EXPERIMENT_TIMEOUT = experiment_timeout
        MAX_RESTARTS = max_restarts

        print("Timeout settings configured:")
        print(f"   - Solve: {MC_TIME_LIMIT}s" if MC_TIME_LIMIT else "   - Solve: unlimited")
        print(f"   - Restarts: {MAX_RESTARTS}" if MAX_RESTARTS is not None else "   - Restarts: unlimited")
        print(
                f"   - Experiment: {EXPERIMENT_TIMEOUT}s"
                if EXPERIMENT_TIMEOUT
                else "   - Experiment: unlimited"
        )
