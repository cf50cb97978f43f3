"""Queen attack rule and board-level validation helpers.

The solver works on one rule only: two queens on distinct rows attack each
other when they share a column or a diagonal. ``satisfied`` is that rule; the
other helpers in this module apply it to whole boards for reporting and
validation.

Representation
--------------
Boards are encoded as a 1D sequence where ``board[row] = column``. Rows are
unique by construction, so only columns and diagonals can clash.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence


def satisfied(i: int, j: int, qi: int, qj: int) -> bool:
    """Return True when queens at (i, qi) and (j, qj) do not attack each other.

    Both checks must hold: the columns differ and the row distance differs
    from the column distance.
    """
    return qi != qj and abs(i - j) != abs(qi - qj)


def conflicts(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N).

    Counts queens per column and per diagonal and sums ``k*(k-1)/2`` over
    every group holding ``k > 1`` queens.
    """
    column_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for row, column in enumerate(board):
        column_count[column] += 1
        diag1[column - row] += 1
        diag2[column + row] += 1

    def _pairs(counter: Counter[int]) -> int:
        total = 0
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
        return total

    return _pairs(column_count) + _pairs(diag1) + _pairs(diag2)


def conflicts_on2(board: Sequence[int]) -> int:
    """Compute the number of attacking queen pairs in O(N^2) with ``satisfied``.

    Reference implementation for validation; prefer ``conflicts`` elsewhere.
    """
    n = len(board)
    conflicts_count = 0
    for i in range(n):
        for j in range(i + 1, n):
            if not satisfied(i, j, board[i], board[j]):
                conflicts_count += 1
    return conflicts_count


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if the board represents a valid N-Queens solution.

    Contract
    - Input: sequence of length N where board[row] = column (0-based indices)
    - Valid if: all 0 <= column < N and no pairs of queens attack each other
    """
    n = len(board)
    if n == 0:
        return False
    for column in board:
        if not isinstance(column, int):
            return False
        if column < 0 or column >= n:
            return False
    return conflicts(board) == 0
