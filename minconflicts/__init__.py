"""Min-conflicts N-Queens solver."""

from .board import BoardPrinter, format_summary, print_summary
from .constraint import conflicts, conflicts_on2, is_valid_solution, satisfied
from .model import CspModel, Variable
from .solver import (
    VALUE_SELECTIONS,
    VARIABLE_SELECTIONS,
    MinConflictSolver,
    SolveResult,
    SolverState,
    mc_nqueens,
    parse_strategy,
)

__all__ = [
    "BoardPrinter",
    "format_summary",
    "print_summary",
    "conflicts",
    "conflicts_on2",
    "is_valid_solution",
    "satisfied",
    "CspModel",
    "Variable",
    "MinConflictSolver",
    "SolveResult",
    "SolverState",
    "mc_nqueens",
    "parse_strategy",
    "VARIABLE_SELECTIONS",
    "VALUE_SELECTIONS",
]
