import pytest
from ortools.linear_solver import pywraplp

import dessert_optimizer.solvers.lp.backend as backend_mod
from dessert_optimizer.domain.schema import SolveStatus
from dessert_optimizer.solvers.lp.backend import OrToolsSolver
from dessert_optimizer.solvers.lp.build import build_program
from dessert_optimizer.solvers.lp.program import (
    ConstraintRow,
    LPProgram,
    Objective,
    VariableSpec,
)
from tests.dessert_scenario_factory import DessertScenarioFactory


def single_var_program(*rows: ConstraintRow, weight: float = 1.0) -> LPProgram:
    return LPProgram(
        variables=[VariableSpec(name="x")],
        objective=Objective([1.0], weight=weight),
        rows=list(rows),
    )


class TestOrToolsSolver:
    def test_solves_in_maximize_mode(self):
        program = single_var_program(ConstraintRow("cap", [1.0], upper=4.0))
        outcome = OrToolsSolver().solve(program)

        assert outcome.status == SolveStatus.OPTIMAL
        assert outcome.values == [pytest.approx(4.0)]
        assert outcome.objective_value == pytest.approx(4.0)

    def test_negative_weight_minimizes(self):
        program = single_var_program(
            ConstraintRow("floor", [1.0], lower=1.5), weight=-1.0
        )
        outcome = OrToolsSolver().solve(program)

        assert outcome.status == SolveStatus.OPTIMAL
        assert outcome.values == [pytest.approx(1.5)]

    def test_strict_upper_bound_stays_below_boundary(self):
        program = single_var_program(ConstraintRow("lt", [1.0], upper=2.0 - 1e-6))
        outcome = OrToolsSolver().solve(program)

        assert outcome.status == SolveStatus.OPTIMAL
        assert outcome.values[0] < 2.0
        assert outcome.values[0] == pytest.approx(2.0, abs=1e-5)

    def test_values_follow_variable_order(self):
        req = DessertScenarioFactory.chocolate_strawberry()
        outcome = OrToolsSolver().solve(build_program(req))

        assert outcome.status == SolveStatus.OPTIMAL
        assert outcome.values == [pytest.approx(0.0, abs=1e-6), pytest.approx(3.0)]

    def test_infeasible_returns_zero_vector(self):
        req = DessertScenarioFactory.sugar_cream_infeasible()
        outcome = OrToolsSolver().solve(build_program(req))

        assert outcome.status == SolveStatus.INFEASIBLE
        assert outcome.values == [0.0, 0.0]
        assert outcome.objective_value is None

    @pytest.mark.parametrize(
        "code, expected",
        [
            (pywraplp.Solver.INFEASIBLE, SolveStatus.INFEASIBLE),
            (pywraplp.Solver.UNBOUNDED, SolveStatus.UNBOUNDED),
            (pywraplp.Solver.MODEL_INVALID, SolveStatus.MODEL_INVALID),
            (pywraplp.Solver.NOT_SOLVED, SolveStatus.NOT_SOLVED),
            (pywraplp.Solver.ABNORMAL, SolveStatus.ABNORMAL),
            (999999, SolveStatus.ERROR),
        ],
    )
    def test_status_mapping(self, monkeypatch, code, expected):
        monkeypatch.setattr(backend_mod.pywraplp.Solver, "Solve", lambda self: code)

        program = single_var_program(ConstraintRow("cap", [1.0], upper=4.0))
        outcome = OrToolsSolver().solve(program)

        assert outcome.status == expected
        assert outcome.values == [0.0]

    def test_inconclusive_after_time_limit_is_timeout(self, monkeypatch):
        monkeypatch.setattr(
            backend_mod.pywraplp.Solver, "Solve", lambda self: pywraplp.Solver.NOT_SOLVED
        )
        monkeypatch.setattr(backend_mod.pywraplp.Solver, "wall_time", lambda self: 5000)

        program = single_var_program(ConstraintRow("cap", [1.0], upper=4.0))
        outcome = OrToolsSolver(time_limit_ms=1000).solve(program)

        assert outcome.status == SolveStatus.TIMEOUT
        assert outcome.values == [0.0]

    @pytest.mark.parametrize("limit, expected_calls", [(250, [250]), (0, []), (None, [])])
    def test_time_limit_is_passed_to_backend(self, monkeypatch, limit, expected_calls):
        calls = []
        original = backend_mod.pywraplp.Solver.SetTimeLimit

        def _recording_set_time_limit(self, ms):
            calls.append(ms)
            return original(self, ms)

        monkeypatch.setattr(
            backend_mod.pywraplp.Solver, "SetTimeLimit", _recording_set_time_limit
        )

        program = single_var_program(ConstraintRow("cap", [1.0], upper=4.0))
        outcome = OrToolsSolver(time_limit_ms=limit).solve(program)

        assert calls == expected_calls
        assert outcome.status == SolveStatus.OPTIMAL

    def test_inconclusive_without_time_limit_is_not_timeout(self, monkeypatch):
        monkeypatch.setattr(
            backend_mod.pywraplp.Solver, "Solve", lambda self: pywraplp.Solver.NOT_SOLVED
        )

        program = single_var_program(ConstraintRow("cap", [1.0], upper=4.0))
        outcome = OrToolsSolver(time_limit_ms=0).solve(program)

        assert outcome.status == SolveStatus.NOT_SOLVED

    def test_create_solver_none_raises(self, monkeypatch):
        def _fake_create_solver(*args, **kwargs):
            return None

        monkeypatch.setattr(
            backend_mod.pywraplp.Solver,
            "CreateSolver",
            staticmethod(_fake_create_solver),
        )

        program = single_var_program()
        with pytest.raises(RuntimeError, match="Failed to create OR-Tools GLOP solver"):
            OrToolsSolver().solve(program)
