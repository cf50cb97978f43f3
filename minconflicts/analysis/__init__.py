"""
Analysis and orchestration package for min-conflicts experiments.

This package contains:
- settings: global knobs, limits and output naming
- stats: typed summaries and aggregation helpers
- experiments: seeded batch runners (sequential and parallel)
- reporting: CSV exports of aggregates and raw runs
- plots: all visualization utilities
- cli: top-level entry point and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    MCRecord,
    MCResultEntry,
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
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
