"""
Name resolution and operator bounds shared by every row the compiler emits.

A constraint's left-hand side (or a goal target) is either an ingredient name,
a keyword aggregate ("price", "calories", "weight"), or nothing we know.
`resolve_target` turns it into one of three tagged results and
`coefficients_for` turns that result into a coefficient vector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from dessert_optimizer.domain.schema import ConstraintOp, Ingredient

EPSILON = 1e-6
DEFAULT_WEIGHT_COEFFICIENT = 1.0
DEVIATION_RATIO = 0.10

Extractor = Callable[[Ingredient], float]

KEYWORD_EXTRACTORS: Dict[str, Extractor] = {
    "price": lambda i: i.price,
    "calories": lambda i: i.calories,
    "weight": lambda i: DEFAULT_WEIGHT_COEFFICIENT,
}


@dataclass(frozen=True)
class MatchedIngredient:
    index: int


@dataclass(frozen=True)
class MatchedKeyword:
    keyword: str
    extractor: Extractor


@dataclass(frozen=True)
class Unmatched:
    name: str


Resolution = Union[MatchedIngredient, MatchedKeyword, Unmatched]


def find_ingredient_index(ingredients: Sequence[Ingredient], name: str) -> Optional[int]:
    target = name.lower()
    for idx, ing in enumerate(ingredients):
        if ing.name.lower() == target:
            return idx
    return None


def resolve_keyword(keyword: str) -> Resolution:
    key = keyword.lower()
    extractor = KEYWORD_EXTRACTORS.get(key)
    if extractor is None:
        return Unmatched(keyword)
    return MatchedKeyword(key, extractor)


def resolve_target(
    ingredients: Sequence[Ingredient],
    name: Optional[str],
    allow_keywords: bool = True,
) -> Resolution:
    """Ingredient names win over keywords, so an ingredient called "price" shadows the aggregate."""
    if not name:
        return Unmatched(name or "")

    idx = find_ingredient_index(ingredients, name)
    if idx is not None:
        return MatchedIngredient(idx)

    if allow_keywords:
        return resolve_keyword(name)
    return Unmatched(name)


def coefficients_for(resolution: Resolution, ingredients: Sequence[Ingredient]) -> List[float]:
    n = len(ingredients)
    if isinstance(resolution, MatchedIngredient):
        coeffs = [0.0] * n
        coeffs[resolution.index] = DEFAULT_WEIGHT_COEFFICIENT
        return coeffs
    if isinstance(resolution, MatchedKeyword):
        return [float(resolution.extractor(ing)) for ing in ingredients]
    return [0.0] * n


def deviation_tolerance(right: float, allow_deviation: bool) -> float:
    return abs(right) * DEVIATION_RATIO if allow_deviation else 0.0


def apply_bound(
    op: ConstraintOp, right: float, tolerance: float = 0.0
) -> Tuple[Optional[float], Optional[float]]:
    """Return the (lower, upper) pair for `expr op right`, widened by `tolerance`."""
    if op == ConstraintOp.EQ:
        return right - tolerance, right + tolerance
    if op == ConstraintOp.LT:
        return None, right - EPSILON + tolerance
    if op == ConstraintOp.LTE:
        return None, right + tolerance
    if op == ConstraintOp.GT:
        return right + EPSILON - tolerance, None
    if op == ConstraintOp.GTE:
        return right - tolerance, None
    raise ValueError(f"Unsupported constraint operator: {op!r}")
