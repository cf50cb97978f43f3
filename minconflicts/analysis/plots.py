"""Visualization utilities for experiment outputs.

Overview
--------
Plotting helpers that write PNG charts from the aggregated results produced by
``minconflicts.analysis.experiments``. All functions only have side effects
(file creation, stdout prints) and return ``None``.

Chart map
---------
Per strategy (suffix ``_<strategy>``):
- 01_success_rate_vs_N.png: fraction of runs that found a solution.
- 02_steps_vs_N.png: mean repair steps of the successful attempt and mean
  steps summed over all attempts (log scale).
- 03_attempts_vs_N.png: mean attempts (restarts + 1) per successful solve.
- 04_time_vs_N_log_scale.png: mean wall-clock time of successful solves.

Strategy comparison:
- compare_success_rate_vs_N.png, compare_steps_vs_N.png,
  compare_time_vs_N.png: one line per strategy.

Distribution:
- boxplot_steps_N{N}.png: steps of successful runs per strategy, mean and
  ±1σ annotated.
"""
from __future__ import annotations

import os
from typing import Dict, List, cast

import matplotlib.pyplot as plt
import numpy as np

from .reporting import build_suffix, strategy_slug
from .stats import ExperimentResults, MCResultEntry

MARKERS = ["o", "s", "^", "D", "v", "P"]


def _mean(entry: MCResultEntry, key: str) -> float:
    summary = cast(Dict[str, float], entry.get(key) or {})
    return float(summary.get("mean") or 0.0)


def _save(fname: str, what: str) -> None:
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved {what}: {fname}")


def plot_strategy_analysis(
    results: Dict[int, MCResultEntry],
    N_values: List[int],
    strategy: str,
    out_dir: str,
) -> None:
    """Generate the per-strategy chart set for one batch of results."""
    os.makedirs(out_dir, exist_ok=True)
    suffix = f"_{strategy_slug(strategy)}" + build_suffix()

    success_rate = [float(results[N].get("success_rate", 0.0)) for N in N_values]
    plt.figure(figsize=(12, 8))
    plt.plot(N_values, success_rate, marker="o", linewidth=2, markersize=8, label=strategy)
    for n, rate in zip(N_values, success_rate):
        plt.annotate(f"{rate:.2f}", (n, rate), textcoords="offset points", xytext=(0, 5), ha="center", fontsize=9)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.title(f"Success Rate vs Problem Size\n(strategy {strategy})", fontsize=14)
    plt.ylim(-0.05, 1.05)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    _save(os.path.join(out_dir, f"01_success_rate_vs_N{suffix}.png"), "success-rate chart")

    steps = [max(_mean(results[N], "success_steps"), 1) for N in N_values]
    total_steps = [max(_mean(results[N], "success_total_steps"), 1) for N in N_values]
    plt.figure(figsize=(12, 8))
    plt.semilogy(N_values, steps, marker="o", linewidth=2, markersize=8, label="Steps (successful attempt)")
    plt.semilogy(N_values, total_steps, marker="s", linewidth=2, markersize=8, label="Steps (all attempts)")
    plt.semilogy(N_values, [n * n for n in N_values], linestyle="--", color="gray", label="Budget per attempt (N^2)")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Repair steps (log scale)", fontsize=12)
    plt.title(f"Repair Steps vs Problem Size\n(strategy {strategy})", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    _save(os.path.join(out_dir, f"02_steps_vs_N{suffix}.png"), "steps chart")

    attempts = [_mean(results[N], "success_attempts") for N in N_values]
    plt.figure(figsize=(12, 8))
    plt.bar([str(n) for n in N_values], attempts, color="steelblue", alpha=0.8)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Mean attempts", fontsize=12)
    plt.title(f"Attempts per Solve vs Problem Size\n(strategy {strategy})", fontsize=14)
    plt.grid(True, axis="y", alpha=0.7)
    _save(os.path.join(out_dir, f"03_attempts_vs_N{suffix}.png"), "attempts chart")

    times = [max(_mean(results[N], "success_time"), 1e-6) for N in N_values]
    plt.figure(figsize=(12, 8))
    plt.semilogy(N_values, times, marker="o", linewidth=2, markersize=8, label=strategy)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Average time [s] (log scale)", fontsize=12)
    plt.title(f"Execution Time vs Problem Size\n(successful runs, strategy {strategy})", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    _save(os.path.join(out_dir, f"04_time_vs_N_log_scale{suffix}.png"), "execution-time chart")


def plot_strategy_comparison(all_results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Overlay success rate, steps and time of every strategy."""
    os.makedirs(out_dir, exist_ok=True)
    suffix = build_suffix()

    charts = [
        ("success_rate", "Success rate", False, "compare_success_rate_vs_N"),
        ("success_steps", "Mean steps, successful attempt (log scale)", True, "compare_steps_vs_N"),
        ("success_time", "Mean time [s] (log scale)", True, "compare_time_vs_N"),
    ]
    for key, ylabel, log_scale, name in charts:
        plt.figure(figsize=(12, 8))
        for idx, (strategy, results) in enumerate(all_results.items()):
            if key == "success_rate":
                ys = [float(results[N].get("success_rate", 0.0)) for N in N_values]
            else:
                ys = [max(_mean(results[N], key), 1e-6) for N in N_values]
            plot = plt.semilogy if log_scale else plt.plot
            plot(N_values, ys, marker=MARKERS[idx % len(MARKERS)], linewidth=2, markersize=8, label=strategy)
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel(ylabel, fontsize=12)
        plt.title(f"{ylabel.split(' (')[0]} by Strategy", fontsize=14)
        if key == "success_rate":
            plt.ylim(-0.05, 1.05)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        plt.xticks(N_values)
        _save(os.path.join(out_dir, f"{name}{suffix}.png"), "comparison chart")


def plot_steps_boxplot(all_results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Box plot of successful-run steps per strategy, one figure per N."""
    os.makedirs(out_dir, exist_ok=True)
    suffix = build_suffix()

    for N in N_values:
        labels: List[str] = []
        samples: List[List[int]] = []
        for strategy, results in all_results.items():
            runs = results.get(N, {}).get("raw_runs", [])
            steps = [run["steps"] for run in runs if run["success"]]
            if steps:
                labels.append(strategy)
                samples.append(steps)
        if not samples:
            print(f"  Box plot skipped for N={N}: no successful runs")
            continue

        plt.figure(figsize=(12, 8))
        plt.boxplot(samples)
        plt.xticks(range(1, len(labels) + 1), labels)
        for pos, steps in enumerate(samples, start=1):
            mean_steps = float(np.mean(steps))
            std_steps = float(np.std(steps))
            plt.annotate(
                f"μ={mean_steps:.1f}\nσ={std_steps:.1f}",
                (pos, mean_steps),
                textcoords="offset points",
                xytext=(25, 0),
                fontsize=9,
            )
        plt.xlabel("Strategy", fontsize=12)
        plt.ylabel("Repair steps (successful attempt)", fontsize=12)
        plt.title(f"Step Distribution, N={N}", fontsize=14)
        plt.grid(True, axis="y", alpha=0.7)
        _save(os.path.join(out_dir, f"boxplot_steps_N{N}{suffix}.png"), "box plot")


def plot_and_save(all_results: ExperimentResults, N_values: List[int], out_dir: str) -> None:
    """Generate every chart for a multi-strategy experiment."""
    for strategy, results in all_results.items():
        plot_strategy_analysis(results, N_values, strategy, os.path.join(out_dir, f"analysis_{strategy_slug(strategy)}"))
    if len(all_results) > 1:
        plot_strategy_comparison(all_results, N_values, os.path.join(out_dir, "strategy_comparison"))
    plot_steps_boxplot(all_results, N_values, os.path.join(out_dir, "distributions"))
