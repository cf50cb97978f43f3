"""Global settings for the min-conflicts CLI and experiment pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`minconflicts.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from typing import List, Optional
from datetime import datetime

# Board size used by the single-solve CLI when --size is not given
DEFAULT_SIZE: int = 8

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [8, 16, 32, 64]

# Number of independent seeded runs per N and strategy
RUNS: int = 20

# Seeds for run r at size N are derived as BASE_SEED + 1000 * N + r
BASE_SEED: int = 12345

# Default strategy for single solves: variable selection / value selection
VARIABLE_SELECTION: str = "most"
VALUE_SELECTION: str = "row"

# Repair budget per attempt is STEP_MULTIPLIER * N * N
STEP_MULTIPLIER: int = 1

# Optional cap on attempts per solve (None = restart until solved)
MAX_ATTEMPTS: Optional[int] = None

# Per-solve time limit in seconds for experiment runs (None = no limit)
TIME_LIMIT: Optional[float] = 60.0

# Strategies compared by the experiment pipeline
STRATEGIES: List[str] = ["most/row", "random/row", "most/diagonal"]

# Output directory for CSV and charts
OUT_DIR: str = "results_minconflicts"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# When True, results and plots include a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = False

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run label appended to filenames to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def set_limits(
        time_limit: Optional[float] = 60.0,
        max_attempts: Optional[int] = None,
        step_multiplier: int = 1,
        verbose: bool = True,
) -> None:
        """Configure the per-solve caps used by experiment runs.

        Parameters
        - time_limit: wall-clock limit per solve in seconds (None disables).
        - max_attempts: attempt cap per solve (None restarts until solved).
        - step_multiplier: repair budget per attempt in units of N*N.
        - verbose: print the active limits (off for single solves).

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active limits explicit at run start.
        """
        global TIME_LIMIT, MAX_ATTEMPTS, STEP_MULTIPLIER
        if step_multiplier < 1:
                raise ValueError(f"step_multiplier must be >= 1, got {step_multiplier}")
        if max_attempts is not None and max_attempts < 1:
                raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        TIME_LIMIT = time_limit
        MAX_ATTEMPTS = max_attempts
        STEP_MULTIPLIER = step_multiplier

        if not verbose:
                return
        print("Solver limits configured:")
        print(f"   - Time limit: {TIME_LIMIT}s" if TIME_LIMIT else "   - Time limit: unlimited")
        print(f"   - Max attempts: {MAX_ATTEMPTS}" if MAX_ATTEMPTS else "   - Max attempts: unlimited")
        print(f"   - Steps per attempt: {STEP_MULTIPLIER} * N^2")
