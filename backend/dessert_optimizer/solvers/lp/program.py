from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class VariableSpec:
    name: str
    lower: float = 0.0
    upper: Optional[float] = None  # None = unbounded


@dataclass
class ConstraintRow:
    """A linear row `lower <= coefficients . x <= upper`; a missing bound is open."""

    name: str
    coefficients: List[float]
    lower: Optional[float] = None
    upper: Optional[float] = None

    def level(self, value: float) -> "ConstraintRow":
        self.lower = value
        self.upper = value
        return self

    @property
    def is_equality(self) -> bool:
        return self.lower is not None and self.lower == self.upper

    def activity(self, values: List[float]) -> float:
        return sum(c * v for c, v in zip(self.coefficients, values))


@dataclass
class Objective:
    coefficients: List[float]
    weight: float = 1.0  # +1 maximize, -1 minimize

    def weighted(self) -> List[float]:
        return [self.weight * c for c in self.coefficients]


@dataclass
class LPProgram:
    """Solver-ready program. Always solved as a maximization of `objective.weighted()`."""

    variables: List[VariableSpec]
    objective: Objective
    rows: List[ConstraintRow] = field(default_factory=list)

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    def row(self, name: str) -> ConstraintRow:
        for r in self.rows:
            if r.name == name:
                return r
        raise KeyError(name)
