"""Thin LP/MIP model wrapper around ``scipy.optimize.milp`` (HiGHS).

A LinearModel is built for one query and discarded after ``solve()``.
Variables are referenced by the integer index returned when they are
created; rows are sparse ``{index: coefficient}`` mappings with lower and
upper bounds.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import Bounds, LinearConstraint, milp

from robustdea.core.exceptions import (
    NumericalInstabilityWarning,
    SolverError,
    SolverInfeasibleError,
    SolverUnboundedError,
)
from robustdea.core.types import ConstraintOperator, LinearExpression, OptimizationSense

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearModelSolution:
    """
    Optimal solution of a LinearModel.

    Attributes:
        objective_value: Optimal objective in the model's own sense
        values: Value of every variable, by creation index
        status: Solver status message
    """

    objective_value: float
    values: NDArray[np.float64]
    status: str

    def __getitem__(self, index: int) -> float:
        return float(self.values[index])


class LinearModel:
    """
    Linear or mixed-integer optimization model.

    Example:
        >>> model = LinearModel(OptimizationSense.MAXIMIZE)
        >>> x = model.add_variable("x", upper=4.0)
        >>> y = model.add_binary("y")
        >>> model.add_constraint({x: 1.0, y: 2.0}, upper=5.0)
        >>> model.set_objective({x: 1.0, y: 1.0})
        >>> model.solve().objective_value
        4.0
    """

    def __init__(self, sense: OptimizationSense | str = OptimizationSense.MAXIMIZE) -> None:
        self.sense = OptimizationSense(sense)
        self.variable_names: list[str] = []
        self._lower: list[float] = []
        self._upper: list[float] = []
        self._integrality: list[int] = []
        self._rows: list[tuple[LinearExpression, float, float]] = []
        self._objective: LinearExpression = {}

    @property
    def num_variables(self) -> int:
        return len(self.variable_names)

    @property
    def num_constraints(self) -> int:
        return len(self._rows)

    def add_variable(
        self,
        name: str | None = None,
        lower: float = 0.0,
        upper: float = np.inf,
    ) -> int:
        """Add a continuous variable with bounds (default [0, inf))."""
        self.variable_names.append(name or f"v{self.num_variables}")
        self._lower.append(lower)
        self._upper.append(upper)
        self._integrality.append(0)
        return self.num_variables - 1

    def add_binary(self, name: str | None = None) -> int:
        index = self.add_variable(name, 0.0, 1.0)
        self._integrality[index] = 1
        return index

    def add_constraint(
        self,
        coefficients: LinearExpression,
        lower: float = -np.inf,
        upper: float = np.inf,
    ) -> int:
        """Add ``lower <= sum(coefficients[i] * x_i) <= upper``."""
        self._rows.append((dict(coefficients), lower, upper))
        return self.num_constraints - 1

    def add_row(
        self,
        coefficients: LinearExpression,
        operator: ConstraintOperator | str,
        rhs: float,
    ) -> int:
        operator = ConstraintOperator.parse(operator)
        if operator is ConstraintOperator.LEQ:
            return self.add_constraint(coefficients, upper=rhs)
        if operator is ConstraintOperator.GEQ:
            return self.add_constraint(coefficients, lower=rhs)
        return self.add_constraint(coefficients, lower=rhs, upper=rhs)

    def set_objective(self, coefficients: LinearExpression) -> None:
        self._objective = dict(coefficients)

    def _matrix(self) -> NDArray[np.float64]:
        A = np.zeros((self.num_constraints, self.num_variables))
        for r, (coefficients, _, _) in enumerate(self._rows):
            for idx, value in coefficients.items():
                A[r, idx] += value
        return A

    def _run(self, c: NDArray[np.float64]):
        constraints = None
        if self._rows:
            constraints = LinearConstraint(
                self._matrix(),
                np.array([row[1] for row in self._rows]),
                np.array([row[2] for row in self._rows]),
            )
        return milp(
            c,
            constraints=constraints,
            integrality=np.array(self._integrality),
            bounds=Bounds(np.array(self._lower), np.array(self._upper)),
        )

    def solve(self) -> LinearModelSolution:
        """
        Solve the model.

        Returns:
            LinearModelSolution with the optimum in the model's sense

        Raises:
            SolverInfeasibleError: The model has no feasible solution
            SolverUnboundedError: The objective is unbounded
            SolverError: Any other failure without a usable solution
        """
        c = np.zeros(self.num_variables)
        for idx, value in self._objective.items():
            c[idx] += value
        sign = -1.0 if self.sense is OptimizationSense.MAXIMIZE else 1.0

        result = self._run(sign * c)
        logger.debug(
            "milp: %d variables, %d rows, status=%d (%s)",
            self.num_variables, self.num_constraints, result.status, result.message,
        )

        if result.status == 2:
            # HiGHS may report "infeasible or unbounded"; a feasible zero objective
            # tells the two apart.
            if self._run(np.zeros(self.num_variables)).status == 0:
                raise SolverUnboundedError(f"Objective is unbounded: {result.message}")
            raise SolverInfeasibleError(f"Model is infeasible: {result.message}")
        if result.status == 3:
            raise SolverUnboundedError(f"Objective is unbounded: {result.message}")
        if result.status != 0:
            if result.x is None:
                raise SolverError(f"Solver failed (status {result.status}): {result.message}")
            warnings.warn(
                f"Solver stopped early ({result.message}); using the best solution found.",
                NumericalInstabilityWarning,
                stacklevel=2,
            )

        values = np.asarray(result.x, dtype=np.float64)
        return LinearModelSolution(
            objective_value=float(c @ values),
            values=values,
            status=str(result.message),
        )
