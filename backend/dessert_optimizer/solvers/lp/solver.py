from __future__ import annotations

from typing import Optional

from dessert_optimizer.core.config import Settings, get_settings
from dessert_optimizer.domain.schema import DessertRequest, DessertResult
from dessert_optimizer.solvers.lp.backend import LPSolver, OrToolsSolver
from dessert_optimizer.solvers.lp.build import build_program
from dessert_optimizer.solvers.lp.extract import aggregate


def solve_lp(
    spec: DessertRequest,
    settings: Optional[Settings] = None,
    lp_solver: Optional[LPSolver] = None,
) -> DessertResult:
    settings = settings or get_settings()
    if lp_solver is None:
        lp_solver = OrToolsSolver(settings.solver_id, settings.solver_time_limit_ms)

    program = build_program(spec, policy=settings.unresolved_policy)
    outcome = lp_solver.solve(program)
    return aggregate(outcome, spec.ingredients, program)
