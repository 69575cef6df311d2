from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class SolveStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"
    UNBOUNDED = "UNBOUNDED"
    ABNORMAL = "ABNORMAL"
    MODEL_INVALID = "MODEL_INVALID"
    NOT_SOLVED = "NOT_SOLVED"
    TIMEOUT = "TIMEOUT"
    ERROR = "ERROR"


class ConstraintOp(str, Enum):
    EQ = "EQ"
    LT = "LT"
    LTE = "LTE"
    GT = "GT"
    GTE = "GTE"


class TargetType(str, Enum):
    INGREDIENT = "INGREDIENT"
    PRICE = "PRICE"
    CALORIES = "CALORIES"


class Direction(str, Enum):
    MAXIMIZE = "MAXIMIZE"
    MINIMIZE = "MINIMIZE"


# Spellings accepted from older clients of the solve endpoint.
_OP_ALIASES: Dict[str, ConstraintOp] = {
    "==": ConstraintOp.EQ,
    "=": ConstraintOp.EQ,
    "EQUALS": ConstraintOp.EQ,
    "<": ConstraintOp.LT,
    "LESS_THAN": ConstraintOp.LT,
    "<=": ConstraintOp.LTE,
    "LESS_THAN_OR_EQUAL": ConstraintOp.LTE,
    ">": ConstraintOp.GT,
    "GREATER_THAN": ConstraintOp.GT,
    ">=": ConstraintOp.GTE,
    "GREATER_THAN_OR_EQUAL": ConstraintOp.GTE,
}


def _upper(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class Ingredient(StrictBaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    calories: float = Field(ge=0)


class CustomConstraint(StrictBaseModel):
    left: str  # ingredient name or "price" / "calories" / "weight"
    op: ConstraintOp
    right: float
    allow_deviation: bool = False

    @field_validator("op", mode="before")
    @classmethod
    def _accept_operator_aliases(cls, v: Any) -> Any:
        v = _upper(v)
        if isinstance(v, str):
            return _OP_ALIASES.get(v, v)
        return v


class ConstraintsBlock(StrictBaseModel):
    # 0 means "not set" for the three caps
    max_price: float = Field(default=0.0, ge=0)
    max_calories: float = Field(default=0.0, ge=0)
    total_weight: float = Field(default=0.0, ge=0)
    constraints: List[CustomConstraint] = Field(default_factory=list)


class AestheticConstraint(StrictBaseModel):
    ingredient_name: Optional[str] = None
    rule_type: Literal["min", "max"] = "min"
    percent: float = Field(default=0.0, le=1)

    @field_validator("rule_type", mode="before")
    @classmethod
    def _lower_rule_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class Goal(StrictBaseModel):
    target_type: Optional[TargetType] = None
    target_name: Optional[str] = None
    direction: Optional[Direction] = None

    @field_validator("target_type", mode="before")
    @classmethod
    def _unknown_target_type_is_default(cls, v: Any) -> Any:
        v = _upper(v)
        if isinstance(v, str) and v not in TargetType.__members__:
            # Falls back to the default objective (maximize total price)
            logger.warning("Unrecognized goal targetType %r; using the default objective.", v)
            return None
        return v

    @field_validator("direction", mode="before")
    @classmethod
    def _case_insensitive(cls, v: Any) -> Any:
        return _upper(v)


class DessertRequest(StrictBaseModel):
    ingredients: List[Ingredient]
    constraints_block: Optional[ConstraintsBlock] = None
    aesthetic_constraint: Optional[AestheticConstraint] = None
    goal: Optional[Goal] = None


class TightConstraint(StrictBaseModel):
    name: str
    slack: float


class DessertResult(StrictBaseModel):
    status: SolveStatus
    ingredient_quantities: Dict[str, float] = Field(default_factory=dict)
    total_weight: float = 0.0
    price: float = 0.0
    total_calories: float = 0.0

    tight_constraints: List[TightConstraint] = Field(default_factory=list)
    message: Optional[str] = None
