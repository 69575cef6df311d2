from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from dessert_optimizer.domain.schema import (
    DessertResult,
    Ingredient,
    SolveStatus,
    TightConstraint,
)
from dessert_optimizer.solvers.lp.backend import HAS_SOLUTION, SolverOutcome
from dessert_optimizer.solvers.lp.program import LPProgram

_STATUS_MESSAGES: Dict[SolveStatus, str] = {
    SolveStatus.FEASIBLE: "Solver returned a feasible but not proven optimal solution.",
    SolveStatus.INFEASIBLE: "Model is infeasible.",
    SolveStatus.UNBOUNDED: "Model is unbounded.",
    SolveStatus.ABNORMAL: "Solver ended abnormally.",
    SolveStatus.MODEL_INVALID: "Model is invalid (NaN/Inf coefficients or malformed constraints).",
    SolveStatus.NOT_SOLVED: "Model not solved (solver did not run or stopped early).",
    SolveStatus.TIMEOUT: "Solver time limit reached before a solution was proven.",
    SolveStatus.ERROR: "Unknown solver status.",
}


def aggregate(
    outcome: SolverOutcome,
    ingredients: Sequence[Ingredient],
    program: Optional[LPProgram] = None,
    eps: float = 1e-6,
) -> DessertResult:
    quantities: Dict[str, float] = {}
    total_weight = 0.0
    total_price = 0.0
    total_calories = 0.0

    # Raw values: no rounding, no clamping of -0.0/noise
    for ing, qty in zip(ingredients, outcome.values):
        quantities[ing.name] = qty
        total_weight += qty
        total_price += qty * ing.price
        total_calories += qty * ing.calories

    tight: List[TightConstraint] = []
    if program is not None and outcome.status in HAS_SOLUTION:
        tight = _compute_tight_constraints(program, outcome.values, eps=eps)

    return DessertResult(
        status=outcome.status,
        ingredient_quantities=quantities,
        total_weight=total_weight,
        price=total_price,
        total_calories=total_calories,
        tight_constraints=tight,
        message=_STATUS_MESSAGES.get(outcome.status),
    )


def _compute_tight_constraints(
    program: LPProgram, values: List[float], eps: float = 1e-6
) -> List[TightConstraint]:
    tight: List[TightConstraint] = []

    for row in program.rows:
        # Equality rows always bind; only inequality limits are reported
        if row.is_equality:
            continue
        activity = row.activity(values)
        if row.upper is not None:
            slack = row.upper - activity
            if slack <= eps:
                tight.append(TightConstraint(name=row.name, slack=slack))
        if row.lower is not None:
            slack = activity - row.lower
            if slack <= eps:
                tight.append(TightConstraint(name=row.name, slack=slack))

    tight.sort(key=lambda x: x.slack)
    return tight
