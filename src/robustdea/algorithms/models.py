"""Model variant descriptors.

A ModelVariant bundles what differs between DEA model families on the
sampling path: the weight variables, the normalisation rows of the weight
polytope, the per-sample score of every DMU and the mapping from scores to
efficiencies. Variants are selected by name, not by subclassing.

Variants:
    - ``ccr``: ratio of weighted outputs to weighted inputs
    - ``vdea``: additive value of marginal value functions
    - ``hierarchical_variant(level)``: additive value over one subtree of a
      criteria hierarchy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from robustdea.core.exceptions import ConfigurationError, ValueRangeError
from robustdea.core.problem import ProblemData, VDEAProblemData
from robustdea.core.result import WeightSamplesCollection
from robustdea.graph.criteria_tree import CriteriaTree

if TYPE_CHECKING:
    from robustdea.algorithms.polytope import ConstraintSystemBuilder


@dataclass(frozen=True)
class ModelVariant:
    """
    Tagged description of a model family.

    Attributes:
        name: Variant tag ("ccr", "vdea" or "hierarchical")
        variable_names: data -> names of the weight variables
        model_rows: (data, builder) -> adds normalisation rows
        scores: (data, weights) -> K x N score matrix, higher is better
        efficiencies: K x N scores -> K x N efficiencies in [0, 1]
        n_inputs: data -> number of leading input-weight columns
        check: data -> raises if the variant cannot handle the data
        check_constraints: data -> raises if a weight constraint cannot be
            expressed under the variant's normalisation
        level: Active hierarchy level (value variants only)
    """

    name: str
    variable_names: Callable[[ProblemData], tuple[str, ...]]
    model_rows: Callable[[ProblemData, "ConstraintSystemBuilder"], None]
    scores: Callable[[ProblemData, WeightSamplesCollection], NDArray[np.float64]]
    efficiencies: Callable[[NDArray[np.float64]], NDArray[np.float64]]
    n_inputs: Callable[[ProblemData], int]
    check: Callable[[ProblemData], None]
    check_constraints: Callable[[ProblemData], None]
    level: str | None = None

    def __repr__(self) -> str:
        if self.level is None:
            return f"ModelVariant({self.name!r})"
        return f"ModelVariant({self.name!r}, level={self.level!r})"


# =============================================================================
# CCR
# =============================================================================

# Weighted inputs at or below this count as zero
_ZERO_INPUT = 1e-12


def check_ccr_data(data: ProblemData) -> None:
    """Raise if ``data`` cannot be analysed with ratio efficiency."""
    if data.num_inputs == 0 or data.num_outputs == 0:
        raise ConfigurationError(
            f"CCR needs at least one input and one output, got {data.num_inputs} "
            f"input(s) and {data.num_outputs} output(s)"
        )
    data.require_non_negative()
    zero_rows = np.flatnonzero(np.all(data.inputs == 0, axis=1))
    if zero_rows.size:
        names = [data.dmu_names[i] for i in zero_rows]
        raise ValueRangeError(f"DMU(s) {names} have all-zero inputs; their ratio is undefined")


def _ccr_rows(data: ProblemData, builder: "ConstraintSystemBuilder") -> None:
    builder.add_sum_to_one(data.input_names)
    builder.add_sum_to_one(data.output_names)


def check_ccr_constraints(data: ProblemData) -> None:
    """Raise if a weight constraint relates input weights to output weights."""
    inputs = set(data.input_names)
    for constraint in data.weight_constraints:
        on_inputs = [n in inputs for n in constraint.names]
        if any(on_inputs) and not all(on_inputs):
            raise ConfigurationError(
                f"{constraint!r} mixes input and output weights; CCR normalises input "
                f"and output weights separately, so such a row cannot be expressed"
            )


def ratio_scores(
    weighted_outputs: NDArray[np.float64],
    weighted_inputs: NDArray[np.float64],
    dmu_names: Sequence[str],
) -> NDArray[np.float64]:
    """
    Weighted outputs over weighted inputs, sample by sample.

    Raises:
        ValueRangeError: If an admissible weighting gives a DMU a zero
            weighted input
    """
    zero = weighted_inputs <= _ZERO_INPUT
    if np.any(zero):
        names = [dmu_names[i] for i in np.flatnonzero(zero.any(axis=0))]
        raise ValueRangeError(
            f"DMU(s) {names} have zero weighted input under admissible weights; "
            f"their ratio is undefined. Check weight constraints that pin input weights to zero"
        )
    return weighted_outputs / weighted_inputs


def _ccr_scores(data: ProblemData, weights: WeightSamplesCollection) -> NDArray[np.float64]:
    weighted_outputs = weights.output_samples @ data.outputs.T
    weighted_inputs = weights.input_samples @ data.inputs.T
    return ratio_scores(weighted_outputs, weighted_inputs, data.dmu_names)


def ratio_efficiencies(scores: NDArray[np.float64]) -> NDArray[np.float64]:
    """Each ratio divided by the best ratio of the same sample."""
    best = scores.max(axis=1, keepdims=True)
    safe = np.where(best > 0, best, 1.0)
    return np.where(best > 0, scores / safe, 1.0)


CCR = ModelVariant(
    name="ccr",
    variable_names=lambda data: data.criteria_names,
    model_rows=_ccr_rows,
    scores=_ccr_scores,
    efficiencies=ratio_efficiencies,
    n_inputs=lambda data: data.num_inputs,
    check=check_ccr_data,
    check_constraints=check_ccr_constraints,
)


# =============================================================================
# VALUE MODELS (VDEA, HIERARCHICAL VDEA)
# =============================================================================


def value_tree(data: ProblemData) -> CriteriaTree:
    """Criteria tree of ``data``; a flat one-level tree for plain VDEA data."""
    tree = getattr(data, "tree", None)
    if tree is not None:
        return tree
    return CriteriaTree.flat(data.criteria_names)


def resolve_level(tree: CriteriaTree, level: str | None) -> str:
    """Validate ``level`` as an internal node, defaulting to the root."""
    if level is None:
        return tree.root
    if level not in tree:
        raise ConfigurationError(
            f"Unknown hierarchy level '{level}'. Internal nodes: {list(tree.internal_nodes)}"
        )
    if tree.is_leaf(level):
        raise ConfigurationError(f"'{level}' is a leaf; levels must be internal nodes")
    return level


def check_value_data(data: ProblemData) -> None:
    if not isinstance(data, VDEAProblemData):
        raise ConfigurationError(
            f"Value models need marginal value functions, got {type(data).__name__}. "
            f"Use VDEAProblemData or HierarchicalVDEAProblemData."
        )


def check_sibling_constraints(data: ProblemData) -> None:
    """Raise unless every weight constraint relates children of one node."""
    tree = value_tree(data)
    for constraint in data.weight_constraints:
        parents = {tree.parent(n) for n in constraint.names}
        if len(parents) > 1:
            raise ConfigurationError(
                f"{constraint!r} relates weights of non-sibling nodes; constraints must "
                f"relate children of one node, whose local weights sum to one"
            )


def _value_rows(data: ProblemData, builder: "ConstraintSystemBuilder") -> None:
    tree = value_tree(data)
    for node in tree.internal_nodes:
        builder.add_sum_to_one(tree.children(node))


def leaf_coefficients(
    tree: CriteriaTree,
    level: str,
    weights: WeightSamplesCollection,
) -> dict[str, NDArray[np.float64]]:
    """
    Effective weight of each leaf under ``level``, per sample.

    The effective weight is the product of the local weights on the path
    from ``level`` down to the leaf.
    """
    position = {name: i for i, name in enumerate(weights.names)}
    coefficients = {}
    for leaf in tree.leaves_under(level):
        columns = [position[node] for node in tree.path_below(level, leaf)]
        coefficients[leaf] = np.prod(weights.samples[:, columns], axis=1)
    return coefficients


def value_efficiencies(scores: NDArray[np.float64]) -> NDArray[np.float64]:
    """One minus the distance to the best value of the same sample."""
    return 1.0 - (scores.max(axis=1, keepdims=True) - scores)


def _value_variant(name: str, level: str | None) -> ModelVariant:
    def check(data: ProblemData) -> None:
        check_value_data(data)
        resolve_level(value_tree(data), level)

    def scores(data: ProblemData, weights: WeightSamplesCollection) -> NDArray[np.float64]:
        tree = value_tree(data)
        active = resolve_level(tree, level)
        marginal = data.marginal_values()
        columns = data.column_indices
        result = np.zeros((weights.num_samples, data.num_dmus))
        for leaf, coefficient in leaf_coefficients(tree, active, weights).items():
            result += np.outer(coefficient, marginal[:, columns[leaf]])
        return result

    return ModelVariant(
        name=name,
        variable_names=lambda data: value_tree(data).non_root_nodes,
        model_rows=_value_rows,
        scores=scores,
        efficiencies=value_efficiencies,
        n_inputs=lambda data: 0,
        check=check,
        check_constraints=check_sibling_constraints,
        level=level,
    )


VDEA = _value_variant("vdea", None)


def hierarchical_variant(level: str | None = None) -> ModelVariant:
    """Value variant scoring the subtree below ``level`` (default: root)."""
    return _value_variant("hierarchical", level)


_VARIANTS = {"ccr": CCR, "vdea": VDEA}


def get_model_variant(
    model: str | ModelVariant | None,
    data: ProblemData | None = None,
) -> ModelVariant:
    """
    Look up a model variant by name.

    Args:
        model: "ccr", "vdea", a ModelVariant (returned unchanged) or None to
            pick from the type of ``data`` (value data -> vdea, else ccr)
        data: Problem used when ``model`` is None

    Raises:
        ConfigurationError: For unknown names
    """
    if isinstance(model, ModelVariant):
        return model
    if model is None:
        return VDEA if isinstance(data, VDEAProblemData) else CCR
    try:
        return _VARIANTS[str(model).lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown model '{model}'. Choose one of {sorted(_VARIANTS)}"
        ) from None
