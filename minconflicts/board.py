"""Text rendering of a finished board and of the solve summary."""

from __future__ import annotations

from typing import List

from .model import CspModel
from .solver import MinConflictSolver, SolveResult


class BoardPrinter:
    """Render a model as one text line per row.

    Each line holds N cells (``Q`` on the queen's column, ``X`` instead of
    ``Q`` for the highlighted row, ``.`` elsewhere), each followed by a space,
    and ends with the queen's current conflict count.
    """

    @staticmethod
    def render(model: CspModel, highlight: int = -1) -> str:
        counter = MinConflictSolver(model)
        n = len(model)
        lines: List[str] = []
        for variable in model.variables:
            cells = []
            for column in range(n):
                if variable.value == column:
                    marker = "X" if highlight >= 0 and variable.index == highlight else "Q"
                else:
                    marker = "."
                cells.append(marker + " ")
            lines.append("".join(cells) + f"  ({counter.count_conflicts(variable)} conflicts)")
        return "\n".join(lines)

    @staticmethod
    def print(model: CspModel, highlight: int = -1) -> None:
        print(BoardPrinter.render(model, highlight))
        print()


def format_summary(result: SolveResult) -> str:
    return "\n".join(
        [
            f"Total steps: {result.steps}",
            f"Total attempts: {result.attempts}",
            f"Total runtime is {result.elapsed_ms} milliseconds.",
        ]
    )


def print_summary(result: SolveResult) -> None:
    print(format_summary(result))
