"""CSV export utilities for experiment outputs (aggregates and raw runs).

These helpers materialize concise per-N summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection. Filenames include the
strategy label to disambiguate multi-strategy experiments.
"""
from __future__ import annotations

import csv
import os
from typing import Dict, List

from . import settings
from .stats import MCResultEntry


def strategy_slug(strategy: str) -> str:
    """Make a strategy label filename-safe (``most/row`` -> ``most-row``)."""
    return strategy.replace("/", "-")


def build_suffix() -> str:
    """Return ``_<RUN_TAG>_<RUN_ID>`` parts enabled in settings, or empty."""
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _stat(entry: MCResultEntry, key: str, field: str):
    summary = entry.get(key) or {}
    value = summary.get(field)  # type: ignore[union-attr]
    return "" if value is None else value


def save_results_to_csv(
    results: Dict[int, MCResultEntry], N_values: List[int], strategy: str, out_dir: str
) -> str:
    """Write per-N aggregate metrics for one strategy and return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_{strategy_slug(strategy)}{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "strategy",
            "success_rate",
            "timeout_rate",
            "failure_rate",
            "total_runs",
            "successes",
            "failures",
            "timeouts",
            "success_steps_mean",
            "success_steps_median",
            "success_steps_max",
            "success_total_steps_mean",
            "success_attempts_mean",
            "success_attempts_max",
            "success_time_mean",
            "success_time_median",
            "all_time_mean",
        ])
        for N in N_values:
            entry = results.get(N)
            if not entry:
                continue
            writer.writerow([
                N,
                strategy,
                entry.get("success_rate", 0.0),
                entry.get("timeout_rate", 0.0),
                entry.get("failure_rate", 0.0),
                entry.get("total_runs", 0),
                entry.get("successes", 0),
                entry.get("failures", 0),
                entry.get("timeouts", 0),
                _stat(entry, "success_steps", "mean"),
                _stat(entry, "success_steps", "median"),
                _stat(entry, "success_steps", "max"),
                _stat(entry, "success_total_steps", "mean"),
                _stat(entry, "success_attempts", "mean"),
                _stat(entry, "success_attempts", "max"),
                _stat(entry, "success_time", "mean"),
                _stat(entry, "success_time", "median"),
                _stat(entry, "all_time", "mean"),
            ])

    print(f"Saved aggregate results: {filename}")
    return filename


def save_raw_data_to_csv(
    results: Dict[int, MCResultEntry], N_values: List[int], strategy: str, out_dir: str
) -> str:
    """Write one row per run for one strategy and return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_runs_{strategy_slug(strategy)}{build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "n",
            "strategy",
            "run",
            "seed",
            "success",
            "timeout",
            "steps",
            "total_steps",
            "attempts",
            "time_seconds",
        ])
        for N in N_values:
            entry = results.get(N)
            if not entry:
                continue
            for run_index, run in enumerate(entry.get("raw_runs", [])):
                writer.writerow([
                    N,
                    strategy,
                    run_index,
                    run["seed"],
                    run["success"],
                    run["timeout"],
                    run["steps"],
                    run["total_steps"],
                    run["attempts"],
                    run["time"],
                ])

    print(f"Saved raw run data: {filename}")
    return filename
