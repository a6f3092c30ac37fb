"""Type aliases and small enumerations for robustdea."""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# Sparse linear expression: variable index -> coefficient
LinearExpression: TypeAlias = dict[int, float]

FloatMatrix: TypeAlias = NDArray[np.float64]


class ConstraintOperator(str, Enum):
    """Direction of a linear constraint row."""

    LEQ = "<="
    GEQ = ">="
    EQ = "="

    @classmethod
    def parse(cls, value: "ConstraintOperator | str") -> "ConstraintOperator":
        if isinstance(value, cls):
            return value
        aliases = {"<=": cls.LEQ, "≤": cls.LEQ, ">=": cls.GEQ, "≥": cls.GEQ,
                   "=": cls.EQ, "==": cls.EQ}
        try:
            return aliases[str(value).strip()]
        except KeyError:
            raise ValueError(f"Unknown constraint operator {value!r}") from None


class OptimizationSense(str, Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"


class ResolutionMode(str, Enum):
    """How imprecise performances are resolved for the subject DMU."""

    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"

    @property
    def opposite(self) -> "ResolutionMode":
        if self is ResolutionMode.OPTIMISTIC:
            return ResolutionMode.PESSIMISTIC
        return ResolutionMode.OPTIMISTIC
