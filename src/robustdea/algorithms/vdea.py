"""Extreme ranks, efficiencies and preference relations of value models.

All queries share one LP skeleton over *global* weights g relative to the
active hierarchy level L:

    g_L = 1,  sum(g_c for c in children(m)) = g_m  for internal m below L,
    V_k = sum(g_leaf * f_leaf(x_k) for leaves under L)

Plain VDEA data use a flat tree, so the rows reduce to ``sum(w) = 1``.
User constraints relate sibling (local) weights, the same rows the weight
polytope accepts; they are multiplied out by the parent's global weight.
Constraints on nodes whose parent lies outside the active subtree do not
restrict it and are skipped.

Ordinal criteria of imprecise data are not fixed to numbers: every level l
gets a variable standing for ``w_j * value(l)``, with
``V_l >= ratio * V_{l+1}`` between consecutive levels and
``epsilon * w_j <= V_worst``, ``V_best <= w_j`` (plain ordinal) or
``min f * w_j <= V_l <= max f * w_j`` (ordinal over marginal values).
Intervals are resolved for the subject with ImprecisePerformanceConverter.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import numpy as np

from robustdea.algorithms.imprecise import ImprecisePerformanceConverter
from robustdea.algorithms.models import (
    check_sibling_constraints,
    check_value_data,
    resolve_level,
    value_tree,
)
from robustdea.algorithms.solver import LinearModel
from robustdea.core.problem import ImpreciseVDEAProblemData, ProblemData
from robustdea.core.result import (
    ExtremeEfficienciesResult,
    ExtremeRanksResult,
    PreferenceRelationsResult,
)
from robustdea.core.types import LinearExpression, OptimizationSense, ResolutionMode

logger = logging.getLogger(__name__)

# Values lie in [0, 1], so differences of values lie in [-1, 1].
BIG_CONSTANT = 2.0
# Margin by which a competitor must beat the subject to count as better.
STRICT_MARGIN = 1e-5
# Optimum sign test tolerance for preference relations
_SIGN_TOLERANCE = 1e-9


class ValueModel:
    """
    LP skeleton of a value model for one subject and resolution mode.

    Attributes:
        model: The LinearModel being built
        weights: Node name -> global weight variable
        level: Active hierarchy level
    """

    def __init__(
        self,
        data: ProblemData,
        subject: int,
        mode: ResolutionMode,
        sense: OptimizationSense,
        level: str | None = None,
        converter: ImprecisePerformanceConverter | None = None,
    ) -> None:
        imprecise = isinstance(data, ImpreciseVDEAProblemData)
        if not imprecise:
            check_value_data(data)
        self.converter = converter or ImprecisePerformanceConverter()
        self.data = data
        self.tree = value_tree(data)
        self.level = resolve_level(self.tree, level)
        self.model = LinearModel(sense)

        precise = self.converter.convert(data, subject, mode) if imprecise else data
        self.marginal = precise.marginal_values()
        self.ordinal = data.ordinal_criteria if imprecise else frozenset()

        active = [n for n in self.tree.subtree_nodes(self.level) if n != self.level]
        self.weights = {name: self.model.add_variable(f"g_{name}") for name in active}
        self._add_structure_rows()
        self._add_user_constraints()
        self.levels = {name: self._add_ordinal_variables(name) for name in self.ordinal}

    def _global(self, name: str) -> tuple[LinearExpression, float]:
        """Global weight of a node as (expression, constant)."""
        if name == self.level:
            return {}, 1.0
        return {self.weights[name]: 1.0}, 0.0

    def _add_structure_rows(self) -> None:
        for node in self.tree.subtree_nodes(self.level):
            if self.tree.is_leaf(node):
                continue
            row = {self.weights[c]: 1.0 for c in self.tree.children(node)}
            parent, constant = self._global(node)
            for idx, value in parent.items():
                row[idx] = row.get(idx, 0.0) - value
            self.model.add_row(row, "=", constant)

    def _add_user_constraints(self) -> None:
        check_sibling_constraints(self.data)
        for constraint in self.data.weight_constraints:
            parent = self.tree.parent(constraint.names[0])
            if parent != self.level and parent not in self.weights:
                continue
            row: LinearExpression = {
                self.weights[n]: float(v) for n, v in constraint.coefficients.items()
            }
            expression, constant = self._global(parent)
            for idx, value in expression.items():
                row[idx] = row.get(idx, 0.0) - constraint.rhs * value
            self.model.add_row(row, constraint.operator, constraint.rhs * constant)

    def _add_ordinal_variables(self, name: str) -> list[int]:
        data = self.data
        n_levels = data.num_levels(name)
        weight = self.weights[name]
        variables = [self.model.add_variable(f"V_{name}_{l + 1}") for l in range(n_levels)]

        if data.is_function_value_ordinal(name):
            shape = data.function_shapes[name]
            ratio = self.converter.function_values_alpha
            for var in variables:
                self.model.add_row({var: 1.0, weight: -shape.min_value}, ">=", 0.0)
                self.model.add_row({var: 1.0, weight: -shape.max_value}, "<=", 0.0)
        else:
            ratio = self.converter.alpha
            self.model.add_row({variables[-1]: 1.0, weight: -self.converter.epsilon}, ">=", 0.0)
            self.model.add_row({variables[0]: 1.0, weight: -1.0}, "<=", 0.0)

        for better, worse in zip(variables, variables[1:]):
            self.model.add_row({better: 1.0, worse: -ratio}, ">=", 0.0)
        return variables

    def value(self, k: int) -> LinearExpression:
        """Linear expression of the value of DMU k at the active level."""
        columns = self.data.column_indices
        expression: LinearExpression = {}
        for leaf in self.tree.leaves_under(self.level):
            if leaf in self.ordinal:
                rank = int(self.data.ordinal_ranks(leaf)[k])
                var = self.levels[leaf][rank - 1]
                expression[var] = expression.get(var, 0.0) + 1.0
            else:
                var = self.weights[leaf]
                expression[var] = expression.get(var, 0.0) + float(self.marginal[k, columns[leaf]])
        return expression

    def difference(self, a: int, b: int) -> LinearExpression:
        """Expression of ``V_a - V_b``."""
        expression = dict(self.value(a))
        for var, value in self.value(b).items():
            expression[var] = expression.get(var, 0.0) - value
        return expression

    def solve(self) -> float:
        return self.model.solve().objective_value


def _with(expression: LinearExpression, var: int, coefficient: float) -> LinearExpression:
    row = dict(expression)
    row[var] = row.get(var, 0.0) + coefficient
    return row


# =============================================================================
# EXTREME RANKS
# =============================================================================


def min_rank(
    data: ProblemData,
    subject: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> int:
    """
    Best (smallest) rank ``subject`` can reach under admissible weights.

    Minimises the number of DMUs that must be strictly better than the
    subject, with imprecise data resolved OPTIMISTICALLY for the subject.

    Args:
        data: VDEA, hierarchical VDEA or imprecise VDEA data
        subject: DMU index or name
        level: Hierarchy level (default: root)
        converter: Converter settings for imprecise data

    Returns:
        Rank in 1..N
    """
    s = data.dmu_index(subject)
    vm = ValueModel(data, s, ResolutionMode.OPTIMISTIC, OptimizationSense.MINIMIZE, level, converter)
    binaries = []
    for k in range(data.num_dmus):
        if k == s:
            continue
        b = vm.model.add_binary(f"b_{k}")
        binaries.append(b)
        vm.model.add_row(_with(vm.difference(k, s), b, -BIG_CONSTANT), "<=", 0.0)
    vm.model.set_objective({b: 1.0 for b in binaries})
    return 1 + int(round(vm.solve()))


def max_rank(
    data: ProblemData,
    subject: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> int:
    """
    Worst (largest) rank ``subject`` can reach under admissible weights.

    Maximises the number of DMUs strictly better than the subject, with
    imprecise data resolved PESSIMISTICALLY for the subject. A competitor
    counts as better only if it beats the subject by ``STRICT_MARGIN``, so
    tied DMUs share the better rank.

    Returns:
        Rank in 1..N
    """
    s = data.dmu_index(subject)
    vm = ValueModel(data, s, ResolutionMode.PESSIMISTIC, OptimizationSense.MAXIMIZE, level, converter)
    binaries = []
    for k in range(data.num_dmus):
        if k == s:
            continue
        b = vm.model.add_binary(f"b_{k}")
        binaries.append(b)
        # V_k - V_s >= margin * b - C * (1 - b)
        row = _with(vm.difference(k, s), b, -(STRICT_MARGIN + BIG_CONSTANT))
        vm.model.add_row(row, ">=", -BIG_CONSTANT)
    vm.model.set_objective({b: 1.0 for b in binaries})
    return 1 + int(round(vm.solve()))


# =============================================================================
# PREFERENCE RELATIONS
# =============================================================================


def _preference(
    data: ProblemData,
    a: int | str,
    b: int | str,
    necessary: bool,
    level: str | None,
    converter: ImprecisePerformanceConverter | None,
) -> bool:
    ia, ib = data.dmu_index(a), data.dmu_index(b)
    if necessary:
        vm = ValueModel(data, ia, ResolutionMode.PESSIMISTIC, OptimizationSense.MINIMIZE, level, converter)
    else:
        vm = ValueModel(data, ia, ResolutionMode.OPTIMISTIC, OptimizationSense.MAXIMIZE, level, converter)
    d = vm.model.add_variable("d", lower=-1.0, upper=1.0)
    vm.model.set_objective({d: 1.0})
    # necessary: d >= V_a - V_b (min d); possible: d <= V_a - V_b (max d)
    row = _with(vm.difference(ia, ib), d, -1.0)
    vm.model.add_row(row, "<=" if necessary else ">=", 0.0)
    return vm.solve() >= -_SIGN_TOLERANCE


def is_necessarily_preferred(
    data: ProblemData,
    a: int | str,
    b: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> bool:
    """
    True if ``a`` is at least as good as ``b`` for every admissible weighting.

    Imprecise data are resolved PESSIMISTICALLY for ``a``.
    """
    return _preference(data, a, b, True, level, converter)


def is_possibly_preferred(
    data: ProblemData,
    a: int | str,
    b: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> bool:
    """
    True if ``a`` is at least as good as ``b`` for some admissible weighting.

    Imprecise data are resolved OPTIMISTICALLY for ``a``.
    """
    return _preference(data, a, b, False, level, converter)


# =============================================================================
# EXTREME EFFICIENCIES
# =============================================================================


def max_efficiency(
    data: ProblemData,
    subject: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> float:
    """
    Highest value efficiency ``1 - max_k (V_k - V_s)`` of ``subject``.

    Solved as ``min d`` with ``d >= V_k - V_s`` for every k and d >= 0.
    """
    s = data.dmu_index(subject)
    vm = ValueModel(data, s, ResolutionMode.OPTIMISTIC, OptimizationSense.MINIMIZE, level, converter)
    d = vm.model.add_variable("d", lower=0.0, upper=1.0)
    for k in range(data.num_dmus):
        if k != s:
            vm.model.add_row(_with(vm.difference(k, s), d, -1.0), "<=", 0.0)
    vm.model.set_objective({d: 1.0})
    return 1.0 - vm.solve()


def min_efficiency(
    data: ProblemData,
    subject: int | str,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> float:
    """
    Lowest value efficiency of ``subject``.

    Solved as ``max d`` where d may not exceed ``V_k - V_s`` for the one
    selected competitor k (b_k = 1), or 0 when the subject itself is
    selected.
    """
    s = data.dmu_index(subject)
    vm = ValueModel(data, s, ResolutionMode.PESSIMISTIC, OptimizationSense.MAXIMIZE, level, converter)
    d = vm.model.add_variable("d", lower=0.0, upper=1.0)
    binaries = []
    for k in range(data.num_dmus):
        b = vm.model.add_binary(f"b_{k}")
        binaries.append(b)
        # d <= V_k - V_s + C * (1 - b_k), and d <= 0 when the subject is selected
        gap = vm.difference(k, s) if k != s else {}
        row = _with(_with(gap, d, -1.0), b, -BIG_CONSTANT)
        vm.model.add_row(row, ">=", -BIG_CONSTANT)
    vm.model.add_row({b: 1.0 for b in binaries}, "=", 1.0)
    vm.model.set_objective({d: 1.0})
    return 1.0 - vm.solve()


# =============================================================================
# BATCH HELPERS
# =============================================================================


def compute_extreme_ranks(
    data: ProblemData,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> ExtremeRanksResult:
    """Best and worst attainable rank of every DMU."""
    start_time = time.perf_counter()
    n = data.num_dmus
    best = np.array([min_rank(data, k, level, converter) for k in range(n)], dtype=np.int64)
    worst = np.array([max_rank(data, k, level, converter) for k in range(n)], dtype=np.int64)
    return ExtremeRanksResult(
        dmu_names=data.dmu_names,
        best_rank=best,
        worst_rank=worst,
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
        level=level,
    )


def _relation_matrix(n: int, test: Callable[[int, int], bool]) -> np.ndarray:
    relation = np.eye(n, dtype=bool)
    for a in range(n):
        for b in range(n):
            if a != b:
                relation[a, b] = test(a, b)
    return relation


def compute_preference_relations(
    data: ProblemData,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> PreferenceRelationsResult:
    """Necessary and possible preference relations between all DMU pairs."""
    start_time = time.perf_counter()
    n = data.num_dmus
    necessary = _relation_matrix(
        n, lambda a, b: is_necessarily_preferred(data, a, b, level, converter)
    )
    possible = _relation_matrix(
        n, lambda a, b: necessary[a, b] or is_possibly_preferred(data, a, b, level, converter)
    )
    return PreferenceRelationsResult(
        dmu_names=data.dmu_names,
        necessary=necessary,
        possible=possible,
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
        level=level,
    )


def compute_extreme_value_efficiencies(
    data: ProblemData,
    level: str | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> ExtremeEfficienciesResult:
    """Min and max value efficiency of every DMU."""
    start_time = time.perf_counter()
    n = data.num_dmus
    lows = np.array([min_efficiency(data, k, level, converter) for k in range(n)])
    highs = np.array([max_efficiency(data, k, level, converter) for k in range(n)])
    return ExtremeEfficienciesResult(
        dmu_names=data.dmu_names,
        min_efficiency=lows,
        max_efficiency=highs,
        super_efficiency=None,
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
    )
