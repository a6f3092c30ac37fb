"""Problem descriptions for DEA robustness analysis.

This module provides the immutable data containers consumed by every
analysis in robustdea.

Containers:
    - ProblemData: precise inputs/outputs for CCR models
    - VDEAProblemData: precise data with marginal value functions
    - ImpreciseProblemData: interval and ordinal performances for CCR models
    - ImpreciseVDEAProblemData: imprecise data with marginal value functions
    - HierarchicalVDEAProblemData: VDEA data with a criteria hierarchy

Building blocks:
    - Constraint: linear weight constraint referencing criteria by name
    - FunctionShape: piecewise-linear monotonic marginal value function
    - HierarchyNode: node of a criteria hierarchy

Containers are frozen. Weight constraints are added with
``with_weight_constraints`` which returns a new instance.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

from robustdea.core.exceptions import (
    ConfigurationError,
    DataQualityWarning,
    DimensionError,
    IllegalOrdinalConfigurationError,
    NaNInfError,
    ValueRangeError,
)
from robustdea.core.types import ConstraintOperator

if TYPE_CHECKING:
    from robustdea.graph.criteria_tree import CriteriaTree


def _frozen_array(values: NDArray[np.float64]) -> NDArray[np.float64]:
    array = np.array(values, dtype=np.float64, copy=True)
    array.setflags(write=False)
    return array


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


@dataclass(frozen=True)
class Constraint:
    """
    Linear constraint on criterion (or hierarchy node) weights.

    Represents ``sum(coefficients[name] * w[name]) <operator> rhs``.

    Attributes:
        operator: One of ConstraintOperator.LEQ, GEQ, EQ (or "<=", ">=", "=")
        rhs: Right-hand side scalar
        coefficients: Mapping from criterion name to coefficient

    Example:
        >>> # weight of "staff" at least twice the weight of "beds"
        >>> Constraint(">=", 0.0, {"staff": 1.0, "beds": -2.0})
        >>> Constraint.at_least("staff", 0.1)
    """

    operator: ConstraintOperator
    rhs: float
    coefficients: Mapping[str, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", ConstraintOperator.parse(self.operator))
        object.__setattr__(self, "rhs", float(self.rhs))
        coefficients = {str(k): float(v) for k, v in dict(self.coefficients).items()}
        if not coefficients:
            raise ConfigurationError("Constraint must reference at least one criterion")
        object.__setattr__(self, "coefficients", MappingProxyType(coefficients))

    @classmethod
    def at_least(cls, name: str, value: float) -> "Constraint":
        return cls(ConstraintOperator.GEQ, value, {name: 1.0})

    @classmethod
    def at_most(cls, name: str, value: float) -> "Constraint":
        return cls(ConstraintOperator.LEQ, value, {name: 1.0})

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.coefficients)

    def __repr__(self) -> str:
        terms = " + ".join(f"{v:g}*{k}" for k, v in self.coefficients.items())
        return f"Constraint({terms} {self.operator.value} {self.rhs:g})"


@dataclass(frozen=True)
class FunctionShape:
    """
    Piecewise-linear monotonic marginal value function.

    Defined by control points (performance, value). Performances must be
    strictly increasing and values must lie in [0, 1] and be monotonic
    (non-decreasing for gain criteria, non-increasing for cost criteria).
    Performances outside the first/last control point are clamped.

    Example:
        >>> shape = FunctionShape([(32.0, 0.0), (38.0, 0.3), (46.0, 0.9), (51.0, 1.0)])
        >>> shape(42.0)
        0.6
    """

    points: tuple[tuple[float, float], ...]

    def __post_init__(self) -> None:
        points = tuple((float(p), float(v)) for p, v in self.points)
        if len(points) < 2:
            raise ValueRangeError("FunctionShape needs at least two control points")
        performances = np.array([p for p, _ in points])
        values = np.array([v for _, v in points])
        if not np.all(np.isfinite(performances)) or not np.all(np.isfinite(values)):
            raise NaNInfError("FunctionShape control points must be finite")
        if np.any(np.diff(performances) <= 0):
            raise ValueRangeError(
                f"FunctionShape performances must be strictly increasing, got {performances.tolist()}"
            )
        if np.any(values < 0.0) or np.any(values > 1.0):
            raise ValueRangeError(
                f"FunctionShape values must lie in [0, 1], got {values.tolist()}"
            )
        steps = np.diff(values)
        if np.any(steps > 0) and np.any(steps < 0):
            raise ValueRangeError(
                f"FunctionShape values must be monotonic, got {values.tolist()}"
            )
        object.__setattr__(self, "points", points)

    @property
    def performances(self) -> NDArray[np.float64]:
        return np.array([p for p, _ in self.points])

    @property
    def values(self) -> NDArray[np.float64]:
        return np.array([v for _, v in self.points])

    @property
    def is_increasing(self) -> bool:
        """True for gain criteria (higher performance, higher value)."""
        return self.points[-1][1] >= self.points[0][1]

    @property
    def min_value(self) -> float:
        return float(min(v for _, v in self.points))

    @property
    def max_value(self) -> float:
        return float(max(v for _, v in self.points))

    def covers(self, performances: NDArray[np.float64]) -> NDArray[np.bool_]:
        """Mask of performances inside the control point range."""
        performances = np.asarray(performances, dtype=np.float64)
        return (performances >= self.points[0][0]) & (performances <= self.points[-1][0])

    def __call__(self, performance: float | NDArray[np.float64]) -> float | NDArray[np.float64]:
        result = np.interp(performance, self.performances, self.values)
        if np.ndim(result) == 0:
            return float(result)
        return result


@dataclass(frozen=True)
class HierarchyNode:
    """
    Node of a criteria hierarchy.

    Leaves stand for criteria (one value function each), internal nodes for
    the weighted aggregation of their children.

    Example:
        >>> tree = HierarchyNode("index", [
        ...     HierarchyNode("health", [HierarchyNode("h1"), HierarchyNode("h2")]),
        ...     HierarchyNode("finances", [HierarchyNode("f1"), HierarchyNode("f2")]),
        ... ])
    """

    name: str
    children: tuple["HierarchyNode", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "children", tuple(self.children))
        for child in self.children:
            if not isinstance(child, HierarchyNode):
                raise ConfigurationError(
                    f"Children of '{self.name}' must be HierarchyNode objects, got {type(child).__name__}"
                )

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["HierarchyNode"]:
        """Depth-first pre-order traversal."""
        yield self
        for child in self.children:
            yield from child.walk()


# =============================================================================
# PRECISE DATA
# =============================================================================


@dataclass(frozen=True)
class ProblemData:
    """
    Precise description of DMUs for DEA analysis.

    Attributes:
        inputs: N x I matrix of input performances
        outputs: N x O matrix of output performances
        input_names: Names of input criteria (default x1..xI)
        output_names: Names of output criteria (default y1..yO)
        dmu_names: Names of DMUs (default "0".."N-1")
        weight_constraints: User constraints on criterion weights

    Properties:
        num_dmus, num_inputs, num_outputs, criteria_names, column_indices

    Example:
        >>> data = ProblemData(
        ...     inputs=np.array([[2.0], [4.0], [3.0]]),
        ...     outputs=np.array([[1.0, 3.0], [3.0, 2.0], [2.0, 2.0]]),
        ...     input_names=["staff"],
        ...     output_names=["patients", "research"],
        ... )
        >>> data = data.with_weight_constraints(Constraint.at_least("patients", 0.2))
    """

    inputs: NDArray[np.float64]
    outputs: NDArray[np.float64]
    input_names: Sequence[str] | None = None
    output_names: Sequence[str] | None = None
    dmu_names: Sequence[str] | None = None
    weight_constraints: Sequence[Constraint] = ()

    def __post_init__(self) -> None:
        inputs = self._as_table(self.inputs, "inputs")
        outputs = self._as_table(self.outputs, "outputs")
        if inputs.shape[0] != outputs.shape[0]:
            raise DimensionError(
                f"inputs have {inputs.shape[0]} rows but outputs have {outputs.shape[0]} rows. "
                f"Both tables need one row per DMU."
            )
        n_dmus = inputs.shape[0]
        if n_dmus == 0:
            raise DimensionError("Problem needs at least one DMU")
        object.__setattr__(self, "inputs", _frozen_array(inputs))
        object.__setattr__(self, "outputs", _frozen_array(outputs))
        object.__setattr__(
            self, "input_names",
            self._resolve_names(self.input_names, inputs.shape[1], "x", "input_names"),
        )
        object.__setattr__(
            self, "output_names",
            self._resolve_names(self.output_names, outputs.shape[1], "y", "output_names"),
        )
        object.__setattr__(
            self, "dmu_names",
            self._resolve_names(self.dmu_names, n_dmus, "", "dmu_names", start=0),
        )
        object.__setattr__(self, "weight_constraints", tuple(self.weight_constraints))

        names = self.criteria_names
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Criterion names must be unique, got {list(names)}")
        self._validate()
        self._validate_constraints()

    @staticmethod
    def _as_table(values: NDArray[np.float64], label: str) -> NDArray[np.float64]:
        table = np.asarray(values, dtype=np.float64)
        if table.ndim == 1:
            table = table.reshape(-1, 1)
        if table.ndim != 2:
            raise DimensionError(f"{label} must be a 2D table, got {table.ndim}D")
        if not np.all(np.isfinite(table)):
            bad = int(np.sum(~np.isfinite(table)))
            raise NaNInfError(f"Found {bad} NaN/Inf values in {label}")
        return table

    @staticmethod
    def _resolve_names(
        names: Sequence[str] | None,
        count: int,
        prefix: str,
        label: str,
        start: int = 1,
    ) -> tuple[str, ...]:
        if names is None:
            return tuple(f"{prefix}{i}" for i in range(start, start + count))
        resolved = tuple(str(n) for n in names)
        if len(resolved) != count:
            raise DimensionError(f"{label} has {len(resolved)} entries, expected {count}")
        return resolved

    def _validate(self) -> None:
        """Hook for subclasses; precise data need no further checks."""

    def _validate_constraints(self) -> None:
        known = set(self.constraint_names)
        for constraint in self.weight_constraints:
            if not isinstance(constraint, Constraint):
                raise ConfigurationError(
                    f"weight_constraints must contain Constraint objects, got {type(constraint).__name__}"
                )
            unknown = [n for n in constraint.names if n not in known]
            if unknown:
                raise ConfigurationError(
                    f"{constraint!r} references unknown name(s) {unknown}. "
                    f"Known names: {sorted(known)}"
                )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def num_dmus(self) -> int:
        return self.inputs.shape[0]

    @property
    def num_inputs(self) -> int:
        return self.inputs.shape[1]

    @property
    def num_outputs(self) -> int:
        return self.outputs.shape[1]

    @property
    def criteria_names(self) -> tuple[str, ...]:
        """Input names followed by output names."""
        return tuple(self.input_names) + tuple(self.output_names)

    @property
    def column_indices(self) -> dict[str, int]:
        """Map from criterion name to its column over inputs then outputs."""
        return {name: idx for idx, name in enumerate(self.criteria_names)}

    @property
    def constraint_names(self) -> tuple[str, ...]:
        """Names that weight constraints may reference."""
        return self.criteria_names

    @property
    def performance_matrix(self) -> NDArray[np.float64]:
        """N x (I + O) matrix of inputs followed by outputs."""
        return np.hstack([self.inputs, self.outputs])

    def is_input(self, name: str) -> bool:
        return name in self.input_names

    def dmu_index(self, dmu: int | str) -> int:
        """Row index of a DMU given by index or name."""
        if isinstance(dmu, str):
            if dmu not in self.dmu_names:
                raise ConfigurationError(f"Unknown DMU '{dmu}'")
            return self.dmu_names.index(dmu)
        index = int(dmu)
        if not 0 <= index < self.num_dmus:
            raise ConfigurationError(f"DMU index {index} out of range for {self.num_dmus} DMUs")
        return index

    def column(self, name: str) -> NDArray[np.float64]:
        """Performances of all DMUs on one criterion."""
        indices = self.column_indices
        if name not in indices:
            raise ConfigurationError(f"Unknown criterion '{name}'")
        return self.performance_matrix[:, indices[name]]

    def with_weight_constraints(self, *constraints: Constraint) -> "ProblemData":
        """Return a copy with additional weight constraints."""
        return replace(self, weight_constraints=tuple(self.weight_constraints) + tuple(constraints))

    def with_performances(
        self,
        inputs: NDArray[np.float64],
        outputs: NDArray[np.float64],
    ) -> "ProblemData":
        """Return a precise copy with the given performance tables."""
        return ProblemData(
            inputs=inputs,
            outputs=outputs,
            input_names=self.input_names,
            output_names=self.output_names,
            dmu_names=self.dmu_names,
            weight_constraints=self.weight_constraints,
        )

    def require_non_negative(self) -> None:
        """Raise ValueRangeError if any performance is negative (ratio models)."""
        matrix = self.performance_matrix
        if np.any(matrix < 0):
            positions = [tuple(int(i) for i in p) for p in np.argwhere(matrix < 0)[:5]]
            raise ValueRangeError(
                f"Found {int(np.sum(matrix < 0))} negative performances at (dmu, column) "
                f"{positions}. Ratio efficiency models need non-negative data."
            )


class _ValueFunctionsMixin:
    """Shared handling of marginal value functions keyed by criterion name."""

    function_shapes: Mapping[str, FunctionShape]

    def _freeze_shapes(self) -> None:
        shapes = {}
        for name, shape in dict(self.function_shapes).items():
            if not isinstance(shape, FunctionShape):
                shape = FunctionShape(shape)
            shapes[str(name)] = shape
        object.__setattr__(self, "function_shapes", MappingProxyType(shapes))

    def _check_shapes(self, required: Sequence[str]) -> None:
        known = set(self.criteria_names)
        unknown = [n for n in self.function_shapes if n not in known]
        if unknown:
            raise ConfigurationError(f"Value functions given for unknown criteria {unknown}")
        missing = [n for n in required if n not in self.function_shapes]
        if missing:
            raise ConfigurationError(f"Missing value functions for criteria {missing}")

    def _warn_clamped(self, name: str, performances: NDArray[np.float64]) -> None:
        outside = ~self.function_shapes[name].covers(performances)
        if np.any(outside):
            warnings.warn(
                f"{int(np.sum(outside))} performance(s) on '{name}' lie outside the value "
                f"function control points and are clamped.",
                DataQualityWarning,
                stacklevel=4,
            )


@dataclass(frozen=True)
class VDEAProblemData(_ValueFunctionsMixin, ProblemData):
    """
    Precise problem with a marginal value function per criterion.

    VDEA treats inputs and outputs alike: each performance is mapped to
    [0, 1] by its FunctionShape (cost-type inputs use non-increasing shapes)
    and the DMU value is the weighted sum of marginal values, with weights
    summing to one.

    Attributes:
        function_shapes: Mapping from criterion name to FunctionShape
    """

    function_shapes: Mapping[str, FunctionShape] = field(default_factory=dict)

    def _validate(self) -> None:
        self._freeze_shapes()
        self._check_shapes(self.criteria_names)
        for name in self.criteria_names:
            self._warn_clamped(name, self.column(name))

    def marginal_values(self) -> NDArray[np.float64]:
        """N x (I + O) matrix of marginal values f_j(x_kj)."""
        matrix = self.performance_matrix
        values = np.zeros_like(matrix)
        for j, name in enumerate(self.criteria_names):
            values[:, j] = self.function_shapes[name](matrix[:, j])
        return values

    def with_performances(
        self,
        inputs: NDArray[np.float64],
        outputs: NDArray[np.float64],
    ) -> "VDEAProblemData":
        return replace(self, inputs=inputs, outputs=outputs)


# =============================================================================
# IMPRECISE DATA
# =============================================================================


@dataclass(frozen=True)
class ImpreciseProblemData(ProblemData):
    """
    Problem with interval and ordinal performances.

    ``inputs``/``outputs`` hold the lower bounds of interval cells (exact
    cells simply have equal bounds). For ordinal criteria the column holds
    ranks: 1 is the most preferred level, i.e. the largest output or the
    smallest input.

    Attributes:
        upper_inputs: N x I upper bounds (default: equal to inputs)
        upper_outputs: N x O upper bounds (default: equal to outputs)
        ordinal_criteria: Names of criteria described by ranks
        allow_ordinal_ties: Accept repeated ranks (tied DMUs share a level)

    Example:
        >>> data = ImpreciseProblemData(
        ...     inputs=np.array([[10.0], [12.0], [8.0]]),
        ...     outputs=np.array([[50.0, 1], [60.0, 3], [40.0, 2]]),
        ...     upper_outputs=np.array([[65.0, 1], [70.0, 3], [50.0, 2]]),
        ...     output_names=["capacity", "quality"],
        ...     ordinal_criteria={"quality"},
        ... )
    """

    upper_inputs: NDArray[np.float64] | None = None
    upper_outputs: NDArray[np.float64] | None = None
    ordinal_criteria: frozenset[str] = frozenset()
    allow_ordinal_ties: bool = False

    def _validate(self) -> None:
        upper_inputs = self.inputs if self.upper_inputs is None else self._as_table(
            self.upper_inputs, "upper_inputs")
        upper_outputs = self.outputs if self.upper_outputs is None else self._as_table(
            self.upper_outputs, "upper_outputs")
        for label, lower, upper in (
            ("inputs", self.inputs, upper_inputs),
            ("outputs", self.outputs, upper_outputs),
        ):
            if upper.shape != lower.shape:
                raise DimensionError(
                    f"upper_{label} shape {upper.shape} does not match {label} shape {lower.shape}"
                )
            if np.any(upper < lower):
                raise ValueRangeError(
                    f"Found {int(np.sum(upper < lower))} interval(s) in {label} with upper < lower bound"
                )
        object.__setattr__(self, "upper_inputs", _frozen_array(upper_inputs))
        object.__setattr__(self, "upper_outputs", _frozen_array(upper_outputs))

        ordinal = frozenset(str(n) for n in self.ordinal_criteria)
        unknown = sorted(ordinal - set(self.criteria_names))
        if unknown:
            raise ConfigurationError(f"Unknown ordinal criteria {unknown}")
        object.__setattr__(self, "ordinal_criteria", ordinal)
        for name in self.criteria_names:
            if name in ordinal:
                self._validate_ranks(name)

    def _validate_ranks(self, name: str) -> None:
        idx = self.column_indices[name]
        if not np.array_equal(self.performance_matrix[:, idx], self.upper_matrix[:, idx]):
            raise ConfigurationError(f"Ordinal criterion '{name}' cannot carry interval bounds")
        ranks = self.performance_matrix[:, idx]
        if np.any(ranks < 1) or np.any(ranks != np.round(ranks)):
            raise ValueRangeError(f"Ranks of '{name}' must be positive integers, got {ranks.tolist()}")
        levels = np.unique(ranks.astype(np.int64))
        if not np.array_equal(levels, np.arange(1, len(levels) + 1)):
            raise IllegalOrdinalConfigurationError(
                f"Ranks of '{name}' must form 1..L without gaps, got levels {levels.tolist()}"
            )
        if not self.allow_ordinal_ties and len(levels) != self.num_dmus:
            raise IllegalOrdinalConfigurationError(
                f"Ranks of '{name}' repeat a level ({len(levels)} distinct ranks for "
                f"{self.num_dmus} DMUs). Pass allow_ordinal_ties=True to model ties."
            )

    @property
    def upper_matrix(self) -> NDArray[np.float64]:
        """N x (I + O) matrix of upper bounds (inputs followed by outputs)."""
        return np.hstack([self.upper_inputs, self.upper_outputs])

    @property
    def is_precise(self) -> bool:
        return not self.ordinal_criteria and np.array_equal(
            self.performance_matrix, self.upper_matrix
        )

    def ordinal_ranks(self, name: str) -> NDArray[np.int64]:
        if name not in self.ordinal_criteria:
            raise ConfigurationError(f"'{name}' is not an ordinal criterion")
        return self.column(name).astype(np.int64)

    def num_levels(self, name: str) -> int:
        return int(self.ordinal_ranks(name).max())

    def with_performances(
        self,
        inputs: NDArray[np.float64],
        outputs: NDArray[np.float64],
    ) -> ProblemData:
        return ProblemData(
            inputs=inputs,
            outputs=outputs,
            input_names=self.input_names,
            output_names=self.output_names,
            dmu_names=self.dmu_names,
            weight_constraints=self.weight_constraints,
        )


@dataclass(frozen=True)
class ImpreciseVDEAProblemData(_ValueFunctionsMixin, ImpreciseProblemData):
    """
    Imprecise problem with marginal value functions.

    Every non-ordinal criterion needs a FunctionShape. An ordinal criterion
    with a shape is ranked by its marginal values (ordinal over function
    values); an ordinal criterion without a shape has an unknown monotonic
    value function.
    """

    function_shapes: Mapping[str, FunctionShape] = field(default_factory=dict)

    def _validate(self) -> None:
        super()._validate()
        self._freeze_shapes()
        self._check_shapes([n for n in self.criteria_names if n not in self.ordinal_criteria])
        for name in self.criteria_names:
            if name in self.function_shapes and name not in self.ordinal_criteria:
                idx = self.column_indices[name]
                self._warn_clamped(name, self.performance_matrix[:, idx])
                self._warn_clamped(name, self.upper_matrix[:, idx])

    def is_function_value_ordinal(self, name: str) -> bool:
        return name in self.ordinal_criteria and name in self.function_shapes

    def with_performances(
        self,
        inputs: NDArray[np.float64],
        outputs: NDArray[np.float64],
    ) -> VDEAProblemData:
        """Precise VDEA scenario; ordinal columns keep their converted scale."""
        shapes = {
            name: shape for name, shape in self.function_shapes.items()
            if name not in self.ordinal_criteria
        }
        # Converted ordinal columns already live on a value scale in [0, 1].
        for name in self.ordinal_criteria:
            shapes[name] = FunctionShape([(0.0, 0.0), (1.0, 1.0)])
        return VDEAProblemData(
            inputs=inputs,
            outputs=outputs,
            input_names=self.input_names,
            output_names=self.output_names,
            dmu_names=self.dmu_names,
            weight_constraints=self.weight_constraints,
            function_shapes=shapes,
        )


# =============================================================================
# HIERARCHICAL DATA
# =============================================================================


@dataclass(frozen=True)
class HierarchicalVDEAProblemData(VDEAProblemData):
    """
    VDEA problem whose criteria are organised in a hierarchy.

    Leaves of ``hierarchy`` are the criteria (input and output columns).
    Weights are local: the weights of the children of every internal node
    sum to one, and the contribution of a leaf at some level is the product
    of local weights on the path from that level down to the leaf. Weight
    constraints may reference any node except the root.

    Attributes:
        hierarchy: Root HierarchyNode

    Example:
        >>> data = HierarchicalVDEAProblemData(
        ...     inputs=inputs, outputs=outputs,
        ...     input_names=["h2", "f2"], output_names=["h1", "f1"],
        ...     function_shapes=shapes,
        ...     hierarchy=HierarchyNode("index", [
        ...         HierarchyNode("health", [HierarchyNode("h1"), HierarchyNode("h2")]),
        ...         HierarchyNode("finances", [HierarchyNode("f1"), HierarchyNode("f2")]),
        ...     ]),
        ... )
    """

    hierarchy: HierarchyNode | None = None
    _tree: "CriteriaTree | None" = field(default=None, init=False, repr=False, compare=False)

    def _validate(self) -> None:
        from robustdea.graph.criteria_tree import CriteriaTree

        if self.hierarchy is None:
            raise ConfigurationError("HierarchicalVDEAProblemData requires a hierarchy")
        tree = CriteriaTree(self.hierarchy)
        leaves = set(tree.leaves)
        columns = set(self.criteria_names)
        if leaves != columns:
            raise ConfigurationError(
                f"Hierarchy leaves must match criteria. Leaves without column: "
                f"{sorted(leaves - columns)}; columns without leaf: {sorted(columns - leaves)}"
            )
        object.__setattr__(self, "_tree", tree)
        super()._validate()

    @property
    def tree(self) -> "CriteriaTree":
        return self._tree

    @property
    def constraint_names(self) -> tuple[str, ...]:
        return self._tree.non_root_nodes
