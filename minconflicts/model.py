"""Assignment model: one variable per queen, indexed by row.

A ``Variable`` has a fixed row (``index``) and a mutable column (``value``).
``CspModel`` owns the ordered list of variables; position and index are the
same for every variable, which lets the solver address rows directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass
class Variable:
    """A queen: fixed row ``index`` and current column ``value``."""

    name: str
    index: int
    value: int = 0
    is_set: bool = False

    def assign(self, value: int) -> None:
        self.value = value
        self.is_set = True

    def unassign(self) -> None:
        self.value = 0
        self.is_set = False

    def __str__(self) -> str:
        return f"{self.name} = {self.value} (is_set: {self.is_set})"


@dataclass
class CspModel:
    """Ordered collection of variables where ``variables[i].index == i``."""

    variables: List[Variable] = field(default_factory=list)

    @classmethod
    def for_size(cls, size: int) -> "CspModel":
        """Build a model with ``size`` unset variables named ``Q0..Q{size-1}``."""
        if size < 1:
            raise ValueError(f"Board size must be >= 1, got {size}")
        model = cls()
        for index in range(size):
            model.create_variable(f"Q{index}", index)
        return model

    def create_variable(self, name: str, index: int) -> Variable:
        """Append a variable for the next row and return it.

        Raises
        ------
        ValueError
            If ``index`` is not the next free row.
        """
        if index != len(self.variables):
            raise ValueError(
                f"Variable index {index} does not match its position {len(self.variables)}"
            )
        variable = Variable(name, index)
        self.variables.append(variable)
        return variable

    def values(self) -> List[int]:
        """Return a snapshot of the current columns, ``board[row] = column``."""
        return [variable.value for variable in self.variables]

    def is_complete(self) -> bool:
        return all(variable.is_set for variable in self.variables)

    def reset(self) -> None:
        for variable in self.variables:
            variable.unassign()

    def __len__(self) -> int:
        return len(self.variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables)

    def __getitem__(self, index: int) -> Variable:
        return self.variables[index]
