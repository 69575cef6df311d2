from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from dessert_optimizer.core.config import UnresolvedPolicy
from dessert_optimizer.core.errors import DomainError
from dessert_optimizer.domain.schema import (
    AestheticConstraint,
    ConstraintsBlock,
    CustomConstraint,
    DessertRequest,
    Direction,
    Goal,
    Ingredient,
    TargetType,
)
from dessert_optimizer.solvers.lp.dispatch import (
    DEFAULT_WEIGHT_COEFFICIENT,
    Resolution,
    Unmatched,
    apply_bound,
    coefficients_for,
    deviation_tolerance,
    resolve_keyword,
    resolve_target,
)
from dessert_optimizer.solvers.lp.program import (
    ConstraintRow,
    LPProgram,
    Objective,
    VariableSpec,
)

logger = logging.getLogger(__name__)


def build_program(
    spec: DessertRequest, policy: UnresolvedPolicy = UnresolvedPolicy.VACUOUS
) -> LPProgram:
    ingredients = spec.ingredients
    if not ingredients:
        # Normally caught by validate_request
        raise DomainError("Invalid input: at least one ingredient is required.")

    # Variables: x_i >= 0, one per ingredient, in request order
    variables = [VariableSpec(name=ing.name) for ing in ingredients]
    rows: List[ConstraintRow] = []

    block = spec.constraints_block
    if block is not None:
        rows.extend(_cap_rows(block, ingredients))

    if spec.aesthetic_constraint is not None:
        row = _aesthetic_row(spec.aesthetic_constraint, ingredients)
        if row is not None:
            rows.append(row)

    if block is not None:
        for c in block.constraints:
            rows.append(_custom_row(c, ingredients, policy))

    objective = _objective(spec.goal, ingredients, policy)

    logger.debug(
        "Compiled program: %d variables, %d rows, objective weight %+.0f",
        len(variables),
        len(rows),
        objective.weight,
    )
    return LPProgram(variables=variables, objective=objective, rows=rows)


def _cap_rows(block: ConstraintsBlock, ingredients: Sequence[Ingredient]) -> List[ConstraintRow]:
    rows: List[ConstraintRow] = []

    if block.max_price > 0:
        coeffs = coefficients_for(resolve_keyword("price"), ingredients)
        rows.append(ConstraintRow("MaxPrice", coeffs, upper=float(block.max_price)))

    if block.max_calories > 0:
        coeffs = coefficients_for(resolve_keyword("calories"), ingredients)
        rows.append(ConstraintRow("MaxCalories", coeffs, upper=float(block.max_calories)))

    if block.total_weight > 0:
        coeffs = coefficients_for(resolve_keyword("weight"), ingredients)
        rows.append(ConstraintRow("TotalWeight", coeffs).level(float(block.total_weight)))

    return rows


def _aesthetic_row(
    rule: AestheticConstraint, ingredients: Sequence[Ingredient]
) -> Optional[ConstraintRow]:
    if not rule.ingredient_name:
        return None

    # target share vs. total weight:  x_t - p * sum(x)  =  (1 - p) x_t - p * sum_{i != t} x_i
    resolution = resolve_target(ingredients, rule.ingredient_name, allow_keywords=False)
    if isinstance(resolution, Unmatched) or rule.percent <= 0:
        logger.warning(
            "Skipping aesthetic rule for %r (percent=%s): unknown ingredient or non-positive percent.",
            rule.ingredient_name,
            rule.percent,
        )
        return None

    p = float(rule.percent)
    coeffs = [
        DEFAULT_WEIGHT_COEFFICIENT - p if i == resolution.index else -p
        for i in range(len(ingredients))
    ]
    row = ConstraintRow("AestheticConstraint", coeffs)
    if rule.rule_type == "min":
        row.lower = 0.0
    else:
        row.upper = 0.0
    return row


def _custom_row(
    c: CustomConstraint, ingredients: Sequence[Ingredient], policy: UnresolvedPolicy
) -> ConstraintRow:
    name = f"Custom_{c.left}_{c.op.value}_{c.right}"

    resolution = resolve_target(ingredients, c.left)
    _check_resolved(resolution, f"constraint '{name}'", policy)

    lower, upper = apply_bound(
        c.op, float(c.right), deviation_tolerance(float(c.right), c.allow_deviation)
    )
    return ConstraintRow(name, coefficients_for(resolution, ingredients), lower, upper)


def _objective(
    goal: Optional[Goal], ingredients: Sequence[Ingredient], policy: UnresolvedPolicy
) -> Objective:
    # No goal or unrecognized target type: maximize total price (the solver always maximizes)
    if goal is None or goal.target_type is None:
        coeffs = coefficients_for(resolve_keyword("price"), ingredients)
        return Objective(coeffs, weight=DEFAULT_WEIGHT_COEFFICIENT)

    if goal.target_type == TargetType.INGREDIENT:
        resolution = resolve_target(ingredients, goal.target_name, allow_keywords=False)
        _check_resolved(resolution, "goal target", policy)
    else:
        resolution = resolve_keyword(goal.target_type.value)

    weight = (
        DEFAULT_WEIGHT_COEFFICIENT
        if goal.direction == Direction.MAXIMIZE
        else -DEFAULT_WEIGHT_COEFFICIENT
    )
    return Objective(coefficients_for(resolution, ingredients), weight=weight)


def _check_resolved(resolution: Resolution, where: str, policy: UnresolvedPolicy) -> None:
    if not isinstance(resolution, Unmatched):
        return

    msg = f"Name '{resolution.name}' in {where} could not be resolved."
    if policy == UnresolvedPolicy.REJECT:
        raise DomainError(msg)
    logger.warning("%s Using all-zero coefficients.", msg)
