"""Batch experiment runners for the min-conflicts solver (sequential and parallel).

For each board size N and strategy label, these routines execute a number of
independently seeded solves and fold the per-run records into aggregated
statistics suitable for CSV export and plotting.

Seeds are derived from ``base_seed``, N and the run index, so a sequential
and a parallel batch with the same inputs produce the same records (apart
from wall-clock time).
"""
from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    MCRecord,
    MCResultEntry,
    ProgressPrinter,
    compute_grouped_statistics,
)
from minconflicts.constraint import is_valid_solution
from minconflicts.model import CspModel
from minconflicts.solver import MinConflictSolver, parse_strategy

RunParams = Tuple[int, int, str, int, Optional[int], Optional[float]]


def run_seed(base_seed: int, N: int, run_index: int) -> int:
    return base_seed + 1000 * N + run_index


# Reusable worker (top-level so ProcessPoolExecutor can pickle it) -----------

def run_single_mc_experiment(params: RunParams) -> Tuple[MCRecord, List[int]]:
    """Run one seeded solve and return its record and final board."""
    N, seed, strategy, step_multiplier, max_attempts, time_limit = params
    variable_selection, value_selection = parse_strategy(strategy)
    solver = MinConflictSolver(
        CspModel.for_size(N),
        seed=seed,
        variable_selection=variable_selection,
        value_selection=value_selection,
        max_steps=step_multiplier * N * N,
        max_attempts=max_attempts,
        time_limit=time_limit,
    )
    result = solver.solve()
    record: MCRecord = {
        "seed": seed,
        "success": result.solved,
        "steps": result.steps,
        "total_steps": result.total_steps,
        "attempts": result.attempts,
        "time": result.elapsed,
        "timeout": result.timeout,
    }
    return record, result.board


def _build_params(N: int, runs: int, strategy: str, base_seed: int) -> List[RunParams]:
    return [
        (
            N,
            run_seed(base_seed, N, r),
            strategy,
            settings.STEP_MULTIPLIER,
            settings.MAX_ATTEMPTS,
            settings.TIME_LIMIT,
        )
        for r in range(runs)
    ]


def _validate_runs(N: int, strategy: str, outcomes: List[Tuple[MCRecord, List[int]]]) -> None:
    for idx, (record, board) in enumerate(outcomes):
        if record["success"] and not is_valid_solution(board):
            raise AssertionError(
                f"Invalid board reported as solved for N={N}, strategy {strategy}, run {idx}: {board}"
            )
        if record["success"] and record["timeout"]:
            raise AssertionError(f"Run {idx} for N={N} is both successful and timed out")
        if record["steps"] > settings.STEP_MULTIPLIER * N * N:
            raise AssertionError(
                f"Run {idx} for N={N} reports {record['steps']} steps, above the per-attempt budget"
            )


def summarize_runs(runs: List[MCRecord]) -> MCResultEntry:
    """Fold per-run records into a per-N aggregate entry."""
    stats = compute_grouped_statistics(list(runs), "success")
    entry: Dict[str, Any] = {
        "success_rate": stats["success_rate"],
        "timeout_rate": stats["timeout_rate"],
        "failure_rate": stats["failure_rate"],
        "total_runs": stats["total_runs"],
        "successes": stats["successes"],
        "failures": stats["failures"],
        "timeouts": stats["timeouts"],
    }
    for prefix in ("success", "all"):
        for metric in ("steps", "total_steps", "attempts", "time"):
            entry[f"{prefix}_{metric}"] = stats.get(f"{prefix}_{metric}", {})
    entry["raw_runs"] = list(runs)
    return entry  # type: ignore[return-value]


def run_experiments(
    N_values: List[int],
    runs: int,
    strategy: str,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> Dict[int, MCResultEntry]:
    """Run ``runs`` seeded solves per N for one strategy, sequentially."""
    parse_strategy(strategy)
    seed0 = settings.BASE_SEED if base_seed is None else base_seed
    progress = ProgressPrinter(len(N_values), progress_label or "Experiments", strategy)

    results: Dict[int, MCResultEntry] = {}
    for index, N in enumerate(N_values, start=1):
        progress.start(index, N)

        outcomes = [run_single_mc_experiment(params) for params in _build_params(N, runs, strategy, seed0)]
        if validate:
            _validate_runs(N, strategy, outcomes)
        results[N] = summarize_runs([record for record, _ in outcomes])
        progress.finish(N, results[N])
    return results


def run_experiments_parallel(
    N_values: List[int],
    runs: int,
    strategy: str,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
) -> Dict[int, MCResultEntry]:
    """Parallel counterpart of ``run_experiments`` using a process pool per N."""
    parse_strategy(strategy)
    seed0 = settings.BASE_SEED if base_seed is None else base_seed
    progress = ProgressPrinter(len(N_values), progress_label or "Experiments", strategy)

    results: Dict[int, MCResultEntry] = {}
    for index, N in enumerate(N_values, start=1):
        progress.start(index, N, f"parallel, {settings.NUM_PROCESSES} workers")

        params = _build_params(N, runs, strategy, seed0)
        with ProcessPoolExecutor(max_workers=min(settings.NUM_PROCESSES, max(1, runs))) as executor:
            outcomes = list(executor.map(run_single_mc_experiment, params))
        if validate:
            _validate_runs(N, strategy, outcomes)
        results[N] = summarize_runs([record for record, _ in outcomes])
        progress.finish(N, results[N])
    return results


def run_all_strategies(
    N_values: List[int],
    runs: int,
    strategies: List[str],
    parallel: bool = False,
    validate: bool = False,
) -> ExperimentResults:
    """Run the experiment batch for every strategy label."""
    runner = run_experiments_parallel if parallel else run_experiments
    all_results: ExperimentResults = {}
    for strategy in strategies:
        all_results[strategy] = runner(
            N_values,
            runs,
            strategy,
            progress_label="Experiments",
            validate=validate,
        )
    return all_results
