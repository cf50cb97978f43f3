"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute aggregate statistics across per-run records.
"""
from __future__ import annotations

import statistics
from typing import Any, Dict, List, Optional, TypedDict

METRICS = ["time", "steps", "total_steps", "attempts"]


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
    total_steps: int
    attempts: int
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
    success_steps: StatsSummary
    success_total_steps: StatsSummary
    success_attempts: StatsSummary
    success_time: StatsSummary
    all_steps: StatsSummary
    all_total_steps: StatsSummary
    all_attempts: StatsSummary
    all_time: StatsSummary
    raw_runs: List[MCRecord]


# strategy label -> N -> aggregated entry
ExperimentResults = Dict[str, Dict[int, MCResultEntry]]


class ProgressPrinter:
    """Stdout progress for one strategy's batch, one block per board size."""

    def __init__(self, total: int, label: str, strategy: str = ""):
        self.total = max(1, total)
        self.label = label
        self.strategy = strategy

    def start(self, index: int, N: int, detail: str = "") -> None:
        percent = index * 100 // self.total
        line = f"[{self.label}] {index}/{self.total} ({percent}%) - N={N}"
        if self.strategy:
            line += f", strategy {self.strategy}"
        print(line + (f" ({detail})" if detail else ""))

    def finish(self, N: int, entry: MCResultEntry) -> None:
        mean_steps = (entry.get("success_steps") or {}).get("mean")
        steps = "n/a" if mean_steps is None else f"{mean_steps:.1f}"
        print(
            f"  N={N}: {entry.get('successes', 0)}/{entry.get('total_runs', 0)} solved, "
            f"{entry.get('timeouts', 0)} timed out, mean steps {steps}"
        )


STAT_FIELDS = ("count", "mean", "median", "std", "min", "max", "q25", "q75", "range")


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Summarize one metric column of a run group (steps, attempts or seconds).

    ``label`` only names the column at call sites. Quartiles are taken by
    index into the sorted values and ``std`` is the population deviation.
    An empty column yields ``count == 0`` with every other field ``None``.
    """
    if not values:
        empty: Dict[str, Any] = dict.fromkeys(STAT_FIELDS)
        empty["count"] = 0
        return empty  # type: ignore[return-value]

    ordered = sorted(values)
    n = len(ordered)
    low, high = ordered[0], ordered[-1]
    return {
        "count": n,
        "mean": statistics.mean(ordered),
        "median": statistics.median(ordered),
        "std": statistics.pstdev(ordered) if n > 1 else 0,
        "min": low,
        "max": high,
        "q25": ordered[n // 4] if n >= 4 else low,
        "q75": ordered[3 * n // 4] if n >= 4 else high,
        "range": high - low,
    }


def compute_grouped_statistics(
    results_list: List[Dict[str, Any]], success_key: str = "success"
) -> Dict[str, Any]:
    """Aggregate metrics by outcome groups (success, failure, timeout).

    A run is a timeout when its ``timeout`` flag is set, a failure when it
    neither succeeded nor timed out (attempt cap reached). Metric summaries
    are emitted as ``all_<metric>``, ``success_<metric>``,
    ``timeout_<metric>`` and ``failure_<metric>`` for the metrics in
    ``METRICS`` that appear in the records; empty groups are omitted.
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

    for prefix, group in (("all", results_list), ("success", successes), ("timeout", timeouts), ("failure", failures)):
        for metric in METRICS:
            if any(metric in r for r in group):
                values = [r[metric] for r in group if metric in r]
                stats[f"{prefix}_{metric}"] = compute_detailed_statistics(values, f"{prefix}_{metric}")

    return stats
