"""Admissible weight polytope construction.

The polytope is described by a frozen ConstraintSystem: one row per
non-negativity bound, the rows the model variant needs (normalisation of
the weights) and one row per user weight constraint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

from robustdea.core.exceptions import ConfigurationError
from robustdea.core.problem import Constraint
from robustdea.core.types import ConstraintOperator

if TYPE_CHECKING:
    from robustdea.algorithms.models import ModelVariant
    from robustdea.core.problem import ProblemData


@dataclass(frozen=True)
class ConstraintSystem:
    """
    Canonical linear constraint system ``lhs @ w (<=|>=|=) rhs``.

    Attributes:
        lhs: R x D coefficient matrix
        directions: One ConstraintOperator per row
        rhs: R right-hand sides
        names: Name of each of the D variables
    """

    lhs: NDArray[np.float64]
    directions: tuple[ConstraintOperator, ...]
    rhs: NDArray[np.float64]
    names: tuple[str, ...]

    def __post_init__(self) -> None:
        lhs = np.array(self.lhs, dtype=np.float64, copy=True).reshape(-1, len(self.names))
        rhs = np.array(self.rhs, dtype=np.float64, copy=True).reshape(-1)
        lhs.setflags(write=False)
        rhs.setflags(write=False)
        object.__setattr__(self, "lhs", lhs)
        object.__setattr__(self, "rhs", rhs)
        object.__setattr__(
            self, "directions", tuple(ConstraintOperator.parse(d) for d in self.directions)
        )
        object.__setattr__(self, "names", tuple(self.names))

    @property
    def num_rows(self) -> int:
        return self.lhs.shape[0]

    @property
    def dimension(self) -> int:
        return len(self.names)

    def inequalities(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """All inequality rows in ``A @ w <= b`` form."""
        rows, bounds = [], []
        for row, direction, rhs in zip(self.lhs, self.directions, self.rhs):
            if direction is ConstraintOperator.LEQ:
                rows.append(row)
                bounds.append(rhs)
            elif direction is ConstraintOperator.GEQ:
                rows.append(-row)
                bounds.append(-rhs)
        return (
            np.array(rows, dtype=np.float64).reshape(-1, self.dimension),
            np.array(bounds, dtype=np.float64),
        )

    def equalities(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Equality rows as ``(A_eq, b_eq)``."""
        mask = np.array([d is ConstraintOperator.EQ for d in self.directions], dtype=bool)
        return self.lhs[mask], self.rhs[mask]

    def non_negative_columns(self) -> NDArray[np.bool_]:
        """Mask of the variables carrying a ``w >= 0`` row."""
        mask = np.zeros(self.dimension, dtype=bool)
        for row, direction, rhs in zip(self.lhs, self.directions, self.rhs):
            support = np.flatnonzero(row)
            if direction is ConstraintOperator.GEQ and rhs == 0.0 and support.size == 1:
                mask[support[0]] |= row[support[0]] > 0
        return mask

    def is_satisfied(self, point: NDArray[np.float64], tolerance: float = 1e-9) -> bool:
        point = np.asarray(point, dtype=np.float64)
        A, b = self.inequalities()
        A_eq, b_eq = self.equalities()
        return bool(np.all(A @ point <= b + tolerance) and np.all(np.abs(A_eq @ point - b_eq) <= tolerance))


class ConstraintSystemBuilder:
    """
    Accumulates constraint rows over named variables.

    ``freeze()`` returns an immutable ConstraintSystem; the builder can keep
    accumulating afterwards without affecting systems already frozen.

    Example:
        >>> builder = ConstraintSystemBuilder(["w1", "w2"])
        >>> builder.add_non_negativity()
        >>> builder.add_row({0: 1.0, 1: 1.0}, "=", 1.0)
        >>> system = builder.freeze()
    """

    def __init__(self, names: Sequence[str]) -> None:
        self.names = tuple(names)
        self._index = {name: i for i, name in enumerate(self.names)}
        if len(self._index) != len(self.names):
            raise ConfigurationError(f"Variable names must be unique, got {list(self.names)}")
        self._rows: list[NDArray[np.float64]] = []
        self._directions: list[ConstraintOperator] = []
        self._rhs: list[float] = []

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown weight name '{name}'. Known names: {list(self.names)}"
            ) from None

    def add_row(
        self,
        coefficients: Mapping[int, float],
        operator: ConstraintOperator | str,
        rhs: float,
    ) -> "ConstraintSystemBuilder":
        row = np.zeros(len(self.names))
        for idx, value in coefficients.items():
            row[idx] += value
        self._rows.append(row)
        self._directions.append(ConstraintOperator.parse(operator))
        self._rhs.append(float(rhs))
        return self

    def add_non_negativity(self) -> "ConstraintSystemBuilder":
        for i in range(len(self.names)):
            self.add_row({i: 1.0}, ConstraintOperator.GEQ, 0.0)
        return self

    def add_sum_to_one(self, names: Sequence[str]) -> "ConstraintSystemBuilder":
        return self.add_row({self.index_of(n): 1.0 for n in names}, ConstraintOperator.EQ, 1.0)

    def add_constraint(self, constraint: Constraint) -> "ConstraintSystemBuilder":
        """Add a user constraint, resolving names to variable indices."""
        coefficients: dict[int, float] = {}
        for name, value in constraint.coefficients.items():
            idx = self.index_of(name)
            coefficients[idx] = coefficients.get(idx, 0.0) + value
        return self.add_row(coefficients, constraint.operator, constraint.rhs)

    def freeze(self) -> ConstraintSystem:
        return ConstraintSystem(
            lhs=np.array(self._rows, dtype=np.float64).reshape(-1, len(self.names)),
            directions=tuple(self._directions),
            rhs=np.array(self._rhs, dtype=np.float64),
            names=self.names,
        )


def build_weight_polytope(data: "ProblemData", variant: "ModelVariant") -> ConstraintSystem:
    """
    Build the admissible weight polytope of ``data`` for a model variant.

    Rows, in order: one ``w >= 0`` row per variable, the variant's model
    rows, then one row per user weight constraint. Constraints pass the
    same ``variant.check_constraints`` as the optimization models, so both
    paths accept the same problems.

    Args:
        data: Problem description
        variant: Model variant (see ``robustdea.algorithms.models``)

    Returns:
        Frozen ConstraintSystem over ``variant.variable_names(data)``

    Raises:
        ConfigurationError: If a constraint references an unknown name or
            cannot be expressed under the variant's normalisation
    """
    variant.check_constraints(data)
    builder = ConstraintSystemBuilder(variant.variable_names(data))
    builder.add_non_negativity()
    variant.model_rows(data, builder)
    for constraint in data.weight_constraints:
        builder.add_constraint(constraint)
    return builder.freeze()
