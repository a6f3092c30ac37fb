"""Extreme efficiencies of the CCR ratio model.

Multiplier-form LPs over input weights v and output weights u, with the
subject's weighted input fixed to one:

    max efficiency:    max u.y_s  s.t.  u.y_k - v.x_k <= 0  for all k
    super efficiency:  same, without the row of the subject
    min efficiency:    min u.y_s  s.t.  C b_k + v.x_k - u.y_k <= C,
                                        sum(b) >= 1, b binary

User weight constraints are applied in homogeneous form so that the LP
results agree with the sampling path, which normalises input and output
weights separately: a row on inputs ``sum(a_i v_i) op b`` becomes
``sum(a_i v_i) - b * sum(v) op 0`` (outputs likewise). A row mixing input
and output weights has no such form; it is rejected here and by the
weight polytope alike.

Imprecise data are resolved first: OPTIMISTIC for max and super
efficiency, PESSIMISTIC for min efficiency.
"""

from __future__ import annotations

import logging
import time

import numpy as np

from robustdea.algorithms.imprecise import ImprecisePerformanceConverter
from robustdea.algorithms.models import check_ccr_constraints, check_ccr_data
from robustdea.algorithms.solver import LinearModel
from robustdea.core.exceptions import SolverUnboundedError
from robustdea.core.problem import ImpreciseProblemData, ProblemData
from robustdea.core.result import ExtremeEfficienciesResult
from robustdea.core.types import OptimizationSense, ResolutionMode

logger = logging.getLogger(__name__)

# Relaxation constant when the subject has a zero input
_FALLBACK_BIG_CONSTANT = 1e6


def _resolve(
    data: ProblemData,
    subject: int | str,
    mode: ResolutionMode,
    converter: ImprecisePerformanceConverter | None,
) -> tuple[ProblemData, int]:
    index = data.dmu_index(subject)
    if isinstance(data, ImpreciseProblemData):
        converter = converter or ImprecisePerformanceConverter()
        data = converter.convert(data, index, mode)
    check_ccr_data(data)
    return data, index


class _CCRModel:
    """Weight variables and shared rows of one CCR query."""

    def __init__(self, data: ProblemData, subject: int, sense: OptimizationSense) -> None:
        self.data = data
        self.subject = subject
        self.model = LinearModel(sense)
        self.v = [self.model.add_variable(f"v_{n}") for n in data.input_names]
        self.u = [self.model.add_variable(f"u_{n}") for n in data.output_names]

        self.model.add_row(self.weighted_inputs(subject), "=", 1.0)
        self.model.set_objective(self.weighted_outputs(subject))
        self._add_user_constraints()

    def weighted_inputs(self, k: int) -> dict[int, float]:
        return {v: float(x) for v, x in zip(self.v, self.data.inputs[k])}

    def weighted_outputs(self, k: int) -> dict[int, float]:
        return {u: float(y) for u, y in zip(self.u, self.data.outputs[k])}

    def _add_user_constraints(self) -> None:
        check_ccr_constraints(self.data)
        inputs = dict(zip(self.data.input_names, self.v))
        outputs = dict(zip(self.data.output_names, self.u))
        for constraint in self.data.weight_constraints:
            group = inputs if constraint.names[0] in inputs else outputs
            row = {idx: -constraint.rhs for idx in group.values()}
            for name, value in constraint.coefficients.items():
                row[group[name]] += value
            self.model.add_row(row, constraint.operator, 0.0)

    def dominance_row(self, k: int) -> dict[int, float]:
        """Coefficients of ``u.y_k - v.x_k``."""
        row = self.weighted_outputs(k)
        for v, x in zip(self.v, self.data.inputs[k]):
            row[v] = -float(x)
        return row

    def solve(self) -> float:
        return self.model.solve().objective_value


def _max_or_super(data: ProblemData, subject: int, exclude_subject: bool) -> float:
    ccr = _CCRModel(data, subject, OptimizationSense.MAXIMIZE)
    for k in range(data.num_dmus):
        if exclude_subject and k == subject:
            continue
        ccr.model.add_row(ccr.dominance_row(k), "<=", 0.0)
    return ccr.solve()


def max_efficiency(
    data: ProblemData,
    subject: int | str,
    converter: ImprecisePerformanceConverter | None = None,
) -> float:
    """
    Highest efficiency of ``subject`` under admissible weights.

    Args:
        data: ProblemData or ImpreciseProblemData
        subject: DMU index or name
        converter: Converter for imprecise data (default settings if None)

    Returns:
        Efficiency in [0, 1]

    Example:
        >>> max_efficiency(data, "hospital_3")
        0.8571
    """
    precise, index = _resolve(data, subject, ResolutionMode.OPTIMISTIC, converter)
    return _max_or_super(precise, index, exclude_subject=False)


def super_efficiency(
    data: ProblemData,
    subject: int | str,
    converter: ImprecisePerformanceConverter | None = None,
) -> float:
    """
    Efficiency of ``subject`` measured against the other DMUs only.

    Returns:
        Super efficiency (at least ``max_efficiency``), ``inf`` when no
        other DMU bounds the subject
    """
    precise, index = _resolve(data, subject, ResolutionMode.OPTIMISTIC, converter)
    try:
        return _max_or_super(precise, index, exclude_subject=True)
    except SolverUnboundedError:
        logger.debug("Super efficiency of DMU %d is unbounded", index)
        return float("inf")


def big_constant(data: ProblemData, subject: int) -> float:
    """
    Relaxation constant for the min-efficiency MIP.

    With ``v.x_s = 1`` and v >= 0, ``v.x_k`` cannot exceed
    ``max_i x_ki / x_si``; the sum over inputs is used as a safe bound.
    """
    own = data.inputs[subject]
    if np.any(own <= 0):
        return _FALLBACK_BIG_CONSTANT
    return 1.0 + float(np.max(np.sum(data.inputs / own, axis=1)))


def min_efficiency(
    data: ProblemData,
    subject: int | str,
    converter: ImprecisePerformanceConverter | None = None,
    big_c: float | None = None,
) -> float:
    """
    Lowest efficiency of ``subject`` under admissible weights.

    Binary b_k = 1 forces DMU k to reach ratio one; at least one DMU must,
    so the subject's objective is its ratio relative to the best DMU.

    Args:
        data: ProblemData or ImpreciseProblemData
        subject: DMU index or name
        converter: Converter for imprecise data
        big_c: Relaxation constant (derived from the data when None)

    Returns:
        Efficiency in [0, 1]
    """
    precise, index = _resolve(data, subject, ResolutionMode.PESSIMISTIC, converter)
    big_c = big_constant(precise, index) if big_c is None else big_c

    ccr = _CCRModel(precise, index, OptimizationSense.MINIMIZE)
    binaries = [ccr.model.add_binary(f"b_{k}") for k in range(precise.num_dmus)]
    for k, b in enumerate(binaries):
        row = {idx: -value for idx, value in ccr.dominance_row(k).items()}
        row[b] = big_c
        ccr.model.add_row(row, "<=", big_c)
    ccr.model.add_row({b: 1.0 for b in binaries}, ">=", 1.0)
    return ccr.solve()


def compute_extreme_efficiencies(
    data: ProblemData,
    converter: ImprecisePerformanceConverter | None = None,
) -> ExtremeEfficienciesResult:
    """
    Min, max and super efficiency of every DMU.

    Returns:
        ExtremeEfficienciesResult
    """
    start_time = time.perf_counter()
    n = data.num_dmus
    lows, highs, supers = np.empty(n), np.empty(n), np.empty(n)
    for k in range(n):
        lows[k] = min_efficiency(data, k, converter)
        highs[k] = max_efficiency(data, k, converter)
        supers[k] = super_efficiency(data, k, converter)
    return ExtremeEfficienciesResult(
        dmu_names=data.dmu_names,
        min_efficiency=lows,
        max_efficiency=highs,
        super_efficiency=supers,
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
    )
