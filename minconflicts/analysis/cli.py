"""Command-line interface and high-level pipelines for the min-conflicts solver.

This module wires together configuration loading, single solves with a board
printout, and the multi-strategy experiment pipeline (sequential or parallel).
It isolates I/O, argument parsing, and progress reporting from the core
algorithmic modules so that the rest of the codebase remains easy to test
programmatically.
"""
from __future__ import annotations

import argparse
import logging
import os
import tempfile
from pathlib import Path
from time import perf_counter
from typing import List, Optional, Tuple

from . import settings
from .experiments import run_all_strategies, run_experiments
from .plots import plot_and_save
from .reporting import save_raw_data_to_csv, save_results_to_csv
from config_manager import ConfigManager
from minconflicts.board import BoardPrinter, print_summary
from minconflicts.constraint import is_valid_solution
from minconflicts.model import CspModel
from minconflicts.solver import (
    VALUE_SELECTIONS,
    VARIABLE_SELECTIONS,
    MinConflictSolver,
    SolveResult,
    parse_strategy,
)

DEFAULT_CONFIG = "config.json"


# ------------- Utils --------------------------------------------------------

def parse_strategy_filters(strategy_args: Optional[List[str]]) -> Optional[List[str]]:
    """Normalize strategy filter CLI inputs into a flat, de-duplicated list.

    Accepts repeated flags (e.g., ``-s most/row -s random/row``) and
    comma-separated lists (e.g., ``-s most/row,most/diagonal``). Returns
    ``None`` when no filter is provided so that callers can fall back to the
    configured default set.
    """
    if not strategy_args:
        return None
    selected: List[str] = []
    for entry in strategy_args:
        for token in entry.split(","):
            token = token.strip().lower()
            if token:
                parse_strategy(token)
                selected.append(token)
    unique = list(dict.fromkeys(selected))
    return unique or None


def _optional_int(value) -> Optional[int]:
    return None if value is None else int(value)


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def apply_configuration(
    config_path: str,
    strategy_filter: Optional[List[str]] = None,
    announce_limits: bool = True,
) -> Tuple[ConfigManager, List[str]]:
    """Load configuration and apply optional strategy filtering.

    Updates the global ``settings`` module in-place to reflect values from the
    configuration file and returns the ``ConfigManager`` used together with
    the list of selected strategy labels.

    Experiment limits are printed only when ``announce_limits`` is true; solve
    mode keeps stdout to the board and the summary lines.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS = int(experiment_settings.get("runs", settings.RUNS))
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)
        settings.BASE_SEED = int(experiment_settings.get("base_seed", settings.BASE_SEED))
    if any(n < 1 for n in settings.N_VALUES):
        raise ValueError(f"N_values must all be >= 1, got {settings.N_VALUES}")

    solver_settings = config_mgr.get_solver_settings()
    if solver_settings:
        settings.DEFAULT_SIZE = int(solver_settings.get("default_size", settings.DEFAULT_SIZE))
        variable_selection = solver_settings.get("variable_selection", settings.VARIABLE_SELECTION)
        value_selection = solver_settings.get("value_selection", settings.VALUE_SELECTION)
        settings.VARIABLE_SELECTION, settings.VALUE_SELECTION = parse_strategy(
            f"{variable_selection}/{value_selection}"
        )
        settings.set_limits(
            time_limit=_optional_float(solver_settings.get("time_limit", settings.TIME_LIMIT)),
            max_attempts=_optional_int(solver_settings.get("max_attempts", settings.MAX_ATTEMPTS)),
            step_multiplier=int(solver_settings.get("step_multiplier", settings.STEP_MULTIPLIER)),
            verbose=announce_limits,
        )

    strategies_cfg = [label.strip().lower() for label in config_mgr.get_strategies()]
    for label in strategies_cfg:
        parse_strategy(label)

    if strategy_filter:
        requested = {label.lower() for label in strategy_filter}
        unknown = requested.difference(set(strategies_cfg))
        if unknown:
            raise ValueError("Strategies not listed in the configuration: " + ", ".join(sorted(unknown)))
        selected = [label for label in strategies_cfg if label in requested]
    else:
        selected = strategies_cfg

    if not selected:
        raise ValueError("No strategies selected after applying filters.")

    settings.STRATEGIES = selected
    return config_mgr, selected


# ------------- Single solve -------------------------------------------------

def solve_once(
    size: int,
    seed: Optional[int] = None,
    variable_selection: Optional[str] = None,
    value_selection: Optional[str] = None,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
    highlight: int = -1,
    show_board: bool = True,
) -> SolveResult:
    """Solve one board, print it with the summary lines, and return the result."""
    model = CspModel.for_size(size)
    solver = MinConflictSolver(
        model,
        seed=seed,
        variable_selection=variable_selection or settings.VARIABLE_SELECTION,
        value_selection=value_selection or settings.VALUE_SELECTION,
        max_steps=settings.STEP_MULTIPLIER * size * size,
        max_attempts=max_attempts,
        time_limit=time_limit,
    )
    result = solver.solve()

    if show_board:
        BoardPrinter.print(model, highlight)
    if not result.solved:
        reason = "time limit" if result.timeout else "attempt limit"
        print(f"No solution found before the {reason} was reached.")
    print_summary(result)
    return result


# ------------- Pipeline: experiments ---------------------------------------

def main_experiments(
    strategies: Optional[List[str]] = None,
    parallel: bool = False,
    validate: bool = False,
) -> None:
    """Run the experiment batch for each strategy, then export CSV and charts."""
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    selected = strategies or settings.STRATEGIES

    print("\n============================================")
    print(f"MIN-CONFLICTS EXPERIMENTS ({'parallel' if parallel else 'sequential'})")
    print("============================================")
    print(f"N values: {settings.N_VALUES}, runs per N: {settings.RUNS}, strategies: {selected}")

    start_total = perf_counter()
    all_results = run_all_strategies(
        settings.N_VALUES,
        settings.RUNS,
        selected,
        parallel=parallel,
        validate=validate,
    )

    for strategy, results in all_results.items():
        save_results_to_csv(results, settings.N_VALUES, strategy, settings.OUT_DIR)
        save_raw_data_to_csv(results, settings.N_VALUES, strategy, settings.OUT_DIR)

    plot_and_save(all_results, settings.N_VALUES, settings.OUT_DIR)

    total_time = perf_counter() - start_total
    print("\nExperiment pipeline completed.")
    print(f"Total time: {total_time:.1f}s ({total_time/60:.1f} minutes)")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, seeded smoke test for every strategy on an 8x8 board.

    Verifies that:
    - Each variable/value selection pair returns a valid solution.
    - Seeded solves are reproducible.
    - The experiment pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests across all strategies...")

    for variable_selection in VARIABLE_SELECTIONS:
        for value_selection in VALUE_SELECTIONS:
            label = f"{variable_selection}/{value_selection}"
            size = 8
            runs = []
            for _ in range(2):
                solver = MinConflictSolver(
                    CspModel.for_size(size),
                    seed=42,
                    variable_selection=variable_selection,
                    value_selection=value_selection,
                    time_limit=30.0,
                )
                runs.append(solver.solve())
            first, second = runs
            if not first.solved:
                raise AssertionError(f"{label} did not solve N={size} with a fixed seed.")
            if not is_valid_solution(first.board):
                raise AssertionError(f"{label} returned an invalid board for N={size}: {first.board}.")
            if (first.steps, first.attempts, first.board) != (second.steps, second.attempts, second.board):
                raise AssertionError(f"{label} is not reproducible under a fixed seed.")
            print(f"  {label}: steps={first.steps}, attempts={first.attempts}, time={first.elapsed:.4f}s")

    results = run_experiments([8], runs=3, strategy="most/row", base_seed=7, progress_label="Quick regression")

    with tempfile.TemporaryDirectory() as tmpdir:
        save_results_to_csv(results, [8], "most/row", tmpdir)
        csv_path = Path(tmpdir) / "results_most-row.csv"
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Results CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve N-Queens with min-conflicts or run experiment batches.")
    parser.add_argument(
        "--mode",
        choices=["solve", "experiments"],
        default="solve",
        help="Solve a single board (default) or run the experiment pipeline.",
    )
    parser.add_argument("--size", "-n", type=int, default=None, help="Board size N for solve mode.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for solve mode (default: unseeded).")
    parser.add_argument("--variable-selection", choices=VARIABLE_SELECTIONS, default=None, help="Queen selection rule.")
    parser.add_argument("--value-selection", choices=VALUE_SELECTIONS, default=None, help="Column scoring rule.")
    parser.add_argument("--max-attempts", type=int, default=None, help="Stop after this many attempts (default: unlimited).")
    parser.add_argument("--time-limit", type=float, default=None, help="Stop after this many seconds (default: unlimited).")
    parser.add_argument("--highlight", type=int, default=-1, help="Row whose queen is printed as X.")
    parser.add_argument("--no-board", action="store_true", help="Print only the summary lines.")
    parser.add_argument(
        "--strategy",
        "-s",
        action="append",
        help="Filter strategies for experiments (comma-separated or multiple flags), e.g. most/row.",
    )
    parser.add_argument("--parallel", action="store_true", help="Run experiment batches in worker processes.")
    parser.add_argument("--config", default=None, help=f"Path to configuration file (default: {DEFAULT_CONFIG}).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick seeded regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate reported solutions during experiments.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log solver restarts and summaries.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen mode."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")

    if args.quick_test:
        run_quick_regression_tests()
        return

    config_path = args.config or DEFAULT_CONFIG
    needs_config = args.mode == "experiments" or args.config is not None
    try:
        strategy_filter = parse_strategy_filters(args.strategy)
        if needs_config or Path(config_path).exists():
            _, selected = apply_configuration(
                config_path, strategy_filter, announce_limits=args.mode == "experiments"
            )
        else:
            selected = strategy_filter or settings.STRATEGIES
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    try:
        if args.mode == "experiments":
            main_experiments(selected, parallel=args.parallel, validate=args.validate)
            return

        size = args.size if args.size is not None else settings.DEFAULT_SIZE
        result = solve_once(
            size,
            seed=args.seed,
            variable_selection=args.variable_selection,
            value_selection=args.value_selection,
            max_attempts=args.max_attempts,
            time_limit=args.time_limit,
            highlight=args.highlight,
            show_board=not args.no_board,
        )
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc

    if not result.solved:
        raise SystemExit(1)
