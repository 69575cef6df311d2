from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from ortools.linear_solver import pywraplp

from dessert_optimizer.domain.schema import SolveStatus
from dessert_optimizer.solvers.lp.program import LPProgram

logger = logging.getLogger(__name__)

# OR-Tools returns an int status code; this alias makes typing intent explicit.
_LpStatus = int

_STATUS_MAP: Dict[_LpStatus, SolveStatus] = {
    pywraplp.Solver.OPTIMAL: SolveStatus.OPTIMAL,
    pywraplp.Solver.FEASIBLE: SolveStatus.FEASIBLE,
    pywraplp.Solver.INFEASIBLE: SolveStatus.INFEASIBLE,
    pywraplp.Solver.UNBOUNDED: SolveStatus.UNBOUNDED,
    pywraplp.Solver.ABNORMAL: SolveStatus.ABNORMAL,
    pywraplp.Solver.MODEL_INVALID: SolveStatus.MODEL_INVALID,
    pywraplp.Solver.NOT_SOLVED: SolveStatus.NOT_SOLVED,
}

HAS_SOLUTION = frozenset({SolveStatus.OPTIMAL, SolveStatus.FEASIBLE})
_INCONCLUSIVE = frozenset({SolveStatus.NOT_SOLVED, SolveStatus.ABNORMAL})


@dataclass
class SolverOutcome:
    status: SolveStatus
    values: List[float]  # one per variable, in variable order
    objective_value: Optional[float] = None


class LPSolver(Protocol):
    def solve(self, program: LPProgram) -> SolverOutcome: ...


class OrToolsSolver:
    """Solves an LPProgram with an OR-Tools linear backend (GLOP by default), always maximizing."""

    def __init__(self, solver_id: str = "GLOP", time_limit_ms: Optional[int] = None):
        self.solver_id = solver_id
        self.time_limit_ms = time_limit_ms

    def solve(self, program: LPProgram) -> SolverOutcome:
        s = pywraplp.Solver.CreateSolver(self.solver_id)
        if s is None:
            raise RuntimeError(f"Failed to create OR-Tools {self.solver_id} solver.")
        if self.time_limit_ms:
            s.SetTimeLimit(int(self.time_limit_ms))

        inf = s.infinity()
        x = [
            s.NumVar(
                v.lower,
                inf if v.upper is None else v.upper,
                f"x[{i}]",
            )
            for i, v in enumerate(program.variables)
        ]

        for r in program.rows:
            lb = -inf if r.lower is None else r.lower
            ub = inf if r.upper is None else r.upper
            ct = s.Constraint(lb, ub, r.name)
            for var, coeff in zip(x, r.coefficients):
                ct.SetCoefficient(var, coeff)

        objective = s.Objective()
        for var, coeff in zip(x, program.objective.weighted()):
            objective.SetCoefficient(var, coeff)
        objective.SetMaximization()

        status_code = s.Solve()
        status = _STATUS_MAP.get(status_code, SolveStatus.ERROR)

        # MPSolver has no "limit reached" result status. A GLOP run stopped by
        # SetTimeLimit ends without a primal/dual verdict and comes back as
        # NOT_SOLVED or ABNORMAL, so elapsed wall time tells it apart.
        if (
            status in _INCONCLUSIVE
            and self.time_limit_ms
            and s.wall_time() >= self.time_limit_ms
        ):
            status = SolveStatus.TIMEOUT

        if status not in HAS_SOLUTION:
            logger.info("Solver %s finished with status %s", self.solver_id, status.value)
            return SolverOutcome(status=status, values=[0.0] * len(x))

        return SolverOutcome(
            status=status,
            values=[var.solution_value() for var in x],
            objective_value=objective.Value(),
        )
