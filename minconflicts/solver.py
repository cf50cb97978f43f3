"""Min-conflicts local search for the N-Queens problem.

The solver repairs a complete random assignment one queen at a time: it picks
a conflicted queen, moves it to the column with the fewest conflicts, and
repeats until no queen is attacked. When the repair loop runs out of steps the
board is re-randomized and a new attempt starts.

State machine
-------------
``INITIALIZING -> REPAIRING -> SOLVED`` on success, or
``REPAIRING -> STALLED -> INITIALIZING`` when the step budget (``N*N`` by
default) is exhausted. ``EXHAUSTED`` is reached only when an optional
``max_attempts`` or ``time_limit`` cap is configured and hit; without caps the
solver keeps restarting until it finds a solution.

Strategies
----------
- Variable selection ``"most"``: the queen with the highest conflict count,
  ties broken uniformly at random. ``"random"``: any conflicted queen,
  uniformly at random.
- Value selection ``"row"``: score every column by the conflicts the queen
  would have there on its own row. ``"diagonal"``: score column ``j`` by the
  attacks on square ``(j, j)`` and skip the column equal to the queen's row.

Contract (functional API)
-------------------------
``mc_nqueens`` returns a 6-tuple ``MCResult``:
    (success, steps, attempts, elapsed_seconds, total_steps, timeout)

Where:
- success: True when a conflict-free board was found.
- steps: repair steps of the last (successful) attempt.
- attempts: number of attempts, the successful one included.
- elapsed_seconds: wall time measured via ``perf_counter()``.
- total_steps: repair steps summed over all attempts.
- timeout: True when ended due to ``time_limit``.

Determinism
-----------
All random decisions come from injected ``random.Random`` instances. Passing
the same ``seed`` (or equally seeded generators) reproduces steps, attempts
and the final board.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from time import perf_counter
from typing import Dict, List, Optional, Tuple

from .constraint import satisfied
from .model import CspModel, Variable

logger = logging.getLogger(__name__)

MCResult = Tuple[bool, int, int, float, int, bool]

VARIABLE_SELECTIONS = ("most", "random")
VALUE_SELECTIONS = ("row", "diagonal")


class SolverState(enum.Enum):
    INITIALIZING = "initializing"
    REPAIRING = "repairing"
    STALLED = "stalled"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


@dataclass
class SolveResult:
    """Outcome of ``MinConflictSolver.solve``."""

    solved: bool
    steps: int
    total_steps: int
    attempts: int
    elapsed: float
    board: List[int]
    timeout: bool = False
    state: SolverState = SolverState.SOLVED

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed * 1000)

    def as_tuple(self) -> MCResult:
        return self.solved, self.steps, self.attempts, self.elapsed, self.total_steps, self.timeout


def parse_strategy(label: str) -> Tuple[str, str]:
    """Split a ``"<variable>/<value>"`` label such as ``"most/row"``.

    Raises
    ------
    ValueError
        If the label is malformed or names an unknown selection rule.
    """
    parts = [part.strip().lower() for part in label.split("/")]
    if len(parts) != 2:
        raise ValueError(f"Strategy must look like 'most/row', got '{label}'")
    variable_selection, value_selection = parts
    if variable_selection not in VARIABLE_SELECTIONS:
        raise ValueError(
            f"Unknown variable selection '{variable_selection}'. Allowed: {', '.join(VARIABLE_SELECTIONS)}"
        )
    if value_selection not in VALUE_SELECTIONS:
        raise ValueError(
            f"Unknown value selection '{value_selection}'. Allowed: {', '.join(VALUE_SELECTIONS)}"
        )
    return variable_selection, value_selection


class MinConflictSolver:
    """Min-conflicts repair search over a ``CspModel``.

    Parameters
    ----------
    model : CspModel
        Pre-populated model, one variable per row. Mutated in place.
    rng : random.Random | None
        Source for variable and value tie-breaking. Built from ``seed`` when
        omitted.
    restart_rng : random.Random | None
        Source for random re-initialization; defaults to ``rng``.
    seed : int | None
        Seed used only when ``rng`` is not given.
    variable_selection : str, default "most"
        ``"most"`` or ``"random"``.
    value_selection : str, default "row"
        ``"row"`` or ``"diagonal"``.
    max_steps : int | None
        Repair budget per attempt; ``N*N`` when None.
    max_attempts : int | None
        Optional cap on attempts. None keeps restarting until solved.
    time_limit : float | None
        Optional wall-clock limit in seconds for the whole solve.
    """

    def __init__(
        self,
        model: CspModel,
        rng: Optional[random.Random] = None,
        restart_rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        variable_selection: str = "most",
        value_selection: str = "row",
        max_steps: Optional[int] = None,
        max_attempts: Optional[int] = None,
        time_limit: Optional[float] = None,
    ):
        if variable_selection not in VARIABLE_SELECTIONS:
            raise ValueError(f"Unknown variable selection: {variable_selection}")
        if value_selection not in VALUE_SELECTIONS:
            raise ValueError(f"Unknown value selection: {value_selection}")
        if max_steps is not None and max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {max_steps}")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self.model = model
        self.rng = rng if rng is not None else random.Random(seed)
        self.restart_rng = restart_rng if restart_rng is not None else self.rng
        self.variable_selection = variable_selection
        self.value_selection = value_selection
        self.max_steps = max_steps
        self.max_attempts = max_attempts
        self.time_limit = time_limit

        self.state = SolverState.INITIALIZING
        self.steps = 0
        self.total_steps = 0
        self.attempts = 0
        self._timed_out = False

    # ------------- Conflict counting ---------------------------------------

    def count_conflicts(self, variable: Variable) -> int:
        """Return how many other queens attack ``variable`` right now."""
        i = variable.index
        qi = variable.value
        count = 0
        for other in self.model.variables:
            j = other.index
            if i != j and not satisfied(i, j, qi, other.value):
                count += 1
        return count

    def total_conflicts(self) -> int:
        """Sum of per-queen conflict counts (twice the attacking pairs)."""
        return sum(self.count_conflicts(variable) for variable in self.model.variables)

    # ------------- Variable selection --------------------------------------

    def get_most_conflicted_variable(self) -> Optional[Variable]:
        """Return a random queen among those tied at the highest count.

        Returns None when no queen is attacked.
        """
        most_conflicted: List[Variable] = []
        count_most_conflicted = 0

        for variable in self.model.variables:
            num_conflicts = self.count_conflicts(variable)
            if num_conflicts >= count_most_conflicted:
                if num_conflicts > count_most_conflicted:
                    most_conflicted.clear()
                    count_most_conflicted = num_conflicts
                most_conflicted.append(variable)

        if count_most_conflicted == 0:
            return None
        return self.rng.choice(most_conflicted)

    def get_randomly_conflicted_variable(self) -> Optional[Variable]:
        """Return a uniformly random queen among all attacked queens, or None."""
        conflicted = [variable for variable in self.model.variables if self.count_conflicts(variable) > 0]
        if not conflicted:
            return None
        return self.rng.choice(conflicted)

    def select_variable(self) -> Optional[Variable]:
        if self.variable_selection == "random":
            return self.get_randomly_conflicted_variable()
        return self.get_most_conflicted_variable()

    # ------------- Value selection -----------------------------------------

    def position_conflicts(self, variable: Variable, column: int) -> int:
        """Score placing ``variable`` at ``column`` under the value-selection rule.

        Nothing is mutated. With ``"diagonal"`` the candidate column is also
        used as the row coordinate, so the score is the number of queens
        attacking square ``(column, column)``.
        """
        if self.value_selection == "diagonal":
            count = 0
            for k, other in enumerate(self.model.variables):
                if k != column and not satisfied(column, k, column, other.value):
                    count += 1
            return count

        i = variable.index
        count = 0
        for other in self.model.variables:
            k = other.index
            if k != i and not satisfied(i, k, column, other.value):
                count += 1
        return count

    def get_least_conflicted_position(self, variable: Variable) -> int:
        """Return a random column among those with the lowest score."""
        n = len(self.model)
        scores: Dict[int, int] = {}
        for column in range(n):
            if self.value_selection == "diagonal" and column == variable.index:
                continue
            scores[column] = self.position_conflicts(variable, column)

        # Only reachable with N == 1, where nothing can be attacked anyway.
        if not scores:
            return variable.value

        min_value = min(scores.values())
        positions = [column for column, score in scores.items() if score == min_value]
        return self.rng.choice(positions)

    # ------------- Search ---------------------------------------------------

    def generate_random_solution(self) -> None:
        """Assign every queen an independent uniform column."""
        n = len(self.model)
        for variable in self.model.variables:
            variable.assign(self.restart_rng.randrange(n))

    def min_conflict(self, start: float) -> bool:
        """Run one repair attempt on the current assignment.

        Returns True when the board is conflict-free, False on stall or when
        the time limit expired (``_timed_out`` is set in that case).
        """
        n = len(self.model)
        max_steps = self.max_steps if self.max_steps is not None else n * n
        self.steps = 0

        for _ in range(max_steps):
            if self.time_limit is not None and (perf_counter() - start) > self.time_limit:
                self._timed_out = True
                return False

            variable = self.select_variable()
            if variable is None:
                return True

            variable.assign(self.get_least_conflicted_position(variable))
            self.steps += 1
            self.total_steps += 1

        # The last repair step may have cleared the board.
        return self.total_conflicts() == 0

    def solve(self) -> SolveResult:
        """Restart and repair until solved or until a configured cap is hit."""
        if len(self.model) == 0:
            raise ValueError("Cannot solve an empty model")

        self.steps = 0
        self.total_steps = 0
        self.attempts = 0
        self._timed_out = False
        start = perf_counter()

        solved = False
        while not solved:
            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                self.state = SolverState.EXHAUSTED
                break

            self.state = SolverState.INITIALIZING
            self.generate_random_solution()
            self.state = SolverState.REPAIRING
            solved = self.min_conflict(start)
            self.attempts += 1

            if solved:
                self.state = SolverState.SOLVED
            elif self._timed_out:
                self.state = SolverState.EXHAUSTED
                break
            else:
                self.state = SolverState.STALLED
                logger.debug(
                    "Attempt %d stalled after %d steps (N=%d), restarting",
                    self.attempts,
                    self.steps,
                    len(self.model),
                )

        elapsed = perf_counter() - start
        logger.info(
            "N=%d %s: solved=%s steps=%d attempts=%d elapsed=%.4fs",
            len(self.model),
            f"{self.variable_selection}/{self.value_selection}",
            solved,
            self.steps,
            self.attempts,
            elapsed,
        )
        return SolveResult(
            solved=solved,
            steps=self.steps,
            total_steps=self.total_steps,
            attempts=self.attempts,
            elapsed=elapsed,
            board=self.model.values(),
            timeout=self._timed_out,
            state=self.state,
        )


def mc_nqueens(
    size: int,
    seed: Optional[int] = None,
    variable_selection: str = "most",
    value_selection: str = "row",
    max_steps: Optional[int] = None,
    max_attempts: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> MCResult:
    """Build a fresh model of ``size`` queens and solve it with min-conflicts.

    Parameters
    ----------
    size : int
        Board dimension N (N >= 1).
    seed : int | None
        Seed for the solver's random source.
    variable_selection, value_selection : str
        Strategy pair, see module docstring.
    max_steps : int | None
        Repair budget per attempt; ``N*N`` when None.
    max_attempts : int | None
        Optional cap on attempts.
    time_limit : float | None
        Optional wall-clock time limit in seconds.

    Returns
    -------
    MCResult
        Tuple (success, steps, attempts, elapsed, total_steps, timeout).
    """
    model = CspModel.for_size(size)
    solver = MinConflictSolver(
        model,
        seed=seed,
        variable_selection=variable_selection,
        value_selection=value_selection,
        max_steps=max_steps,
        max_attempts=max_attempts,
        time_limit=time_limit,
    )
    return solver.solve().as_tuple()
