"""Tests for conflict counting, selection rules and the restart loop."""

from pathlib import Path
import random
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from minconflicts.constraint import conflicts, is_valid_solution, satisfied
from minconflicts.model import CspModel
from minconflicts.solver import MinConflictSolver, SolverState, mc_nqueens, parse_strategy


def _model_with(board):
    model = CspModel.for_size(len(board))
    for variable, column in zip(model.variables, board):
        variable.assign(column)
    return model


class ConflictCountTests(unittest.TestCase):

    def test_counts_on_fixed_board(self):
        # rows 1 and 2 only clash through column 0; row 3 clashes with row 0 on the diagonal
        solver = MinConflictSolver(_model_with([0, 0, 0, 3]), seed=1)
        counts = [solver.count_conflicts(v) for v in solver.model.variables]
        self.assertEqual(counts, [3, 2, 2, 1])
        self.assertEqual(solver.total_conflicts(), 2 * conflicts([0, 0, 0, 3]))

    def test_counts_are_symmetric(self):
        rng = random.Random(5)
        for _ in range(50):
            n = rng.randrange(2, 10)
            board = [rng.randrange(n) for _ in range(n)]
            solver = MinConflictSolver(_model_with(board), seed=0)
            for i in range(n):
                for j in range(n):
                    if i != j:
                        self.assertEqual(
                            satisfied(i, j, board[i], board[j]),
                            satisfied(j, i, board[j], board[i]),
                        )
            counts = [solver.count_conflicts(v) for v in solver.model.variables]
            self.assertEqual(sum(counts), 2 * conflicts(board))
            self.assertTrue(all(0 <= c <= n - 1 for c in counts))


class VariableSelectionTests(unittest.TestCase):

    def test_unique_maximum_is_selected(self):
        for seed in range(10):
            solver = MinConflictSolver(_model_with([0, 0, 0, 3]), seed=seed)
            self.assertEqual(solver.get_most_conflicted_variable().index, 0)

    def test_ties_are_broken_among_tied_variables_only(self):
        # every queen has exactly one conflict
        seen = set()
        for seed in range(200):
            solver = MinConflictSolver(_model_with([0, 1, 3, 2]), seed=seed)
            seen.add(solver.get_most_conflicted_variable().index)
        self.assertEqual(seen, {0, 1, 2, 3})

    def test_none_only_when_conflict_free(self):
        solver = MinConflictSolver(_model_with([1, 3, 0, 2]), seed=2)
        self.assertIsNone(solver.get_most_conflicted_variable())
        self.assertIsNone(solver.get_randomly_conflicted_variable())

        rng = random.Random(9)
        for _ in range(100):
            n = rng.randrange(1, 8)
            board = [rng.randrange(n) for _ in range(n)]
            solver = MinConflictSolver(_model_with(board), seed=rng.randrange(1000))
            selected = solver.get_most_conflicted_variable()
            self.assertEqual(selected is None, conflicts(board) == 0)
            if selected is not None:
                self.assertGreater(solver.count_conflicts(selected), 0)

    def test_random_selection_picks_a_conflicted_variable(self):
        for seed in range(20):
            solver = MinConflictSolver(_model_with([0, 2, 4, 1, 1]), seed=seed, variable_selection="random")
            variable = solver.select_variable()
            self.assertGreater(solver.count_conflicts(variable), 0)


class ValueSelectionTests(unittest.TestCase):

    def test_row_rule_scores_true_row(self):
        model = _model_with([0, 0, 0, 3])
        solver = MinConflictSolver(model, seed=0)
        scores = [solver.position_conflicts(model[0], column) for column in range(4)]
        self.assertEqual(scores, [3, 1, 1, 1])
        for seed in range(20):
            solver = MinConflictSolver(model, seed=seed)
            self.assertIn(solver.get_least_conflicted_position(model[0]), {1, 2, 3})

    def test_diagonal_rule_uses_candidate_as_row(self):
        model = _model_with([0, 0, 0, 3])
        solver = MinConflictSolver(model, seed=0, value_selection="diagonal")
        scores = {column: solver.position_conflicts(model[0], column) for column in (1, 2, 3)}
        self.assertEqual(scores, {1: 3, 2: 2, 3: 1})
        self.assertEqual(solver.get_least_conflicted_position(model[0]), 3)
        # the score ignores which queen is moving
        self.assertEqual(solver.position_conflicts(model[0], 3), solver.position_conflicts(model[2], 3))

    def test_diagonal_rule_never_returns_the_queen_row(self):
        rng = random.Random(4)
        for _ in range(100):
            n = rng.randrange(2, 9)
            board = [rng.randrange(n) for _ in range(n)]
            model = _model_with(board)
            solver = MinConflictSolver(model, seed=rng.randrange(1000), value_selection="diagonal")
            variable = model[rng.randrange(n)]
            self.assertNotEqual(solver.get_least_conflicted_position(variable), variable.index)

    def test_returned_column_is_in_range_and_minimal(self):
        rng = random.Random(21)
        for value_selection in ("row", "diagonal"):
            for _ in range(100):
                n = rng.randrange(2, 9)
                board = [rng.randrange(n) for _ in range(n)]
                model = _model_with(board)
                solver = MinConflictSolver(model, seed=rng.randrange(1000), value_selection=value_selection)
                variable = model[rng.randrange(n)]
                chosen = solver.get_least_conflicted_position(variable)
                self.assertTrue(0 <= chosen < n)
                candidates = [c for c in range(n) if value_selection == "row" or c != variable.index]
                best = min(solver.position_conflicts(variable, c) for c in candidates)
                self.assertEqual(solver.position_conflicts(variable, chosen), best)
                self.assertEqual(model.values(), board)


class SolveTests(unittest.TestCase):

    def test_four_queens(self):
        model = CspModel.for_size(4)
        result = MinConflictSolver(model, seed=4).solve()
        self.assertTrue(result.solved)
        self.assertIs(result.state, SolverState.SOLVED)
        self.assertTrue(is_valid_solution(result.board))
        self.assertEqual(result.board, model.values())
        self.assertGreaterEqual(result.attempts, 1)
        self.assertTrue(0 <= result.steps <= 16)
        self.assertLessEqual(result.total_steps, result.attempts * 16)

    def test_single_queen_needs_no_steps(self):
        result = MinConflictSolver(CspModel.for_size(1), seed=0).solve()
        self.assertTrue(result.solved)
        self.assertEqual(result.steps, 0)
        self.assertEqual(result.attempts, 1)
        self.assertEqual(result.board, [0])

    def test_every_strategy_solves_small_boards(self):
        for variable_selection in ("most", "random"):
            for value_selection in ("row", "diagonal"):
                for n in (4, 5):
                    result = MinConflictSolver(
                        CspModel.for_size(n),
                        seed=n,
                        variable_selection=variable_selection,
                        value_selection=value_selection,
                        time_limit=60.0,
                    ).solve()
                    self.assertTrue(result.solved, f"{variable_selection}/{value_selection} N={n}")
                    self.assertTrue(is_valid_solution(result.board))

    def test_seeded_solves_are_reproducible(self):
        first = MinConflictSolver(CspModel.for_size(10), seed=123).solve()
        second = MinConflictSolver(CspModel.for_size(10), seed=123).solve()
        self.assertEqual(
            (first.steps, first.total_steps, first.attempts, first.board),
            (second.steps, second.total_steps, second.attempts, second.board),
        )

    def test_separate_restart_source_is_reproducible(self):
        def run():
            return MinConflictSolver(
                CspModel.for_size(8), rng=random.Random(1), restart_rng=random.Random(2)
            ).solve()

        first, second = run(), run()
        self.assertTrue(first.solved)
        self.assertEqual((first.steps, first.attempts, first.board), (second.steps, second.attempts, second.board))

    def test_attempt_cap_stops_unsolvable_board(self):
        result = MinConflictSolver(CspModel.for_size(3), seed=0, max_attempts=5).solve()
        self.assertFalse(result.solved)
        self.assertFalse(result.timeout)
        self.assertEqual(result.attempts, 5)
        self.assertIs(result.state, SolverState.EXHAUSTED)
        self.assertLessEqual(result.total_steps, 5 * 9)

    def test_time_limit_stops_unsolvable_board(self):
        result = MinConflictSolver(CspModel.for_size(3), seed=0, time_limit=0.05).solve()
        self.assertFalse(result.solved)
        self.assertTrue(result.timeout)
        self.assertIs(result.state, SolverState.EXHAUSTED)

    def test_model_is_reused_between_attempts(self):
        model = CspModel.for_size(6)
        variables = list(model.variables)
        result = MinConflictSolver(model, seed=8).solve()
        self.assertTrue(result.solved)
        self.assertEqual([id(v) for v in model.variables], [id(v) for v in variables])
        self.assertTrue(model.is_complete())

    def test_large_board_terminates(self):
        model = CspModel.for_size(128)
        result = MinConflictSolver(model, seed=1, time_limit=600.0).solve()
        self.assertEqual((result.solved, result.timeout), (True, False))
        self.assertIs(result.state, SolverState.SOLVED)
        self.assertTrue(is_valid_solution(result.board))

    def test_large_board_terminates_with_random_selection(self):
        model = CspModel.for_size(128)
        result = MinConflictSolver(model, seed=1, variable_selection="random", time_limit=600.0).solve()
        self.assertTrue(result.solved)
        self.assertTrue(is_valid_solution(result.board))


class ApiTests(unittest.TestCase):

    def test_mc_nqueens_tuple(self):
        success, steps, attempts, elapsed, total_steps, timeout = mc_nqueens(6, seed=3)
        self.assertTrue(success)
        self.assertFalse(timeout)
        self.assertGreaterEqual(attempts, 1)
        self.assertGreaterEqual(total_steps, steps)
        self.assertGreaterEqual(elapsed, 0.0)

    def test_invalid_arguments(self):
        model = CspModel.for_size(4)
        with self.assertRaises(ValueError):
            MinConflictSolver(model, variable_selection="least")
        with self.assertRaises(ValueError):
            MinConflictSolver(model, value_selection="column")
        with self.assertRaises(ValueError):
            MinConflictSolver(model, max_steps=0)
        with self.assertRaises(ValueError):
            MinConflictSolver(model, max_attempts=0)
        with self.assertRaises(ValueError):
            MinConflictSolver(CspModel()).solve()

    def test_parse_strategy(self):
        self.assertEqual(parse_strategy("most/row"), ("most", "row"))
        self.assertEqual(parse_strategy(" Random / Diagonal "), ("random", "diagonal"))
        for bad in ("most", "most/row/extra", "least/row", "most/column"):
            with self.assertRaises(ValueError):
                parse_strategy(bad)


if __name__ == "__main__":
    unittest.main()
