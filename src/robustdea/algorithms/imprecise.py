"""Imprecise performances: scenario conversion and sampling.

Interval cells and ordinal ranks are resolved into precise scenarios that
favour (OPTIMISTIC) or disfavour (PESSIMISTIC) one subject DMU, or are
sampled uniformly for SMAA.

Ordinal criteria are mapped onto a positive scale [low, high] (by default
[epsilon, 1]) with every level at least ``alpha`` times the next worse one.
Rank 1 is always the most preferred level.
"""

from __future__ import annotations

import logging
import time

import numpy as np
from numpy.typing import NDArray

from robustdea.algorithms.models import (
    CCR,
    VDEA,
    check_ccr_data,
    ratio_efficiencies,
    ratio_scores,
    value_efficiencies,
)
from robustdea.algorithms.polytope import build_weight_polytope
from robustdea.algorithms.sampling import DEFAULT_THINNING, as_generator, sample_weights
from robustdea.algorithms.smaa import (
    DEFAULT_NUM_INTERVALS,
    DEFAULT_NUM_SAMPLES,
    DEFAULT_TIE_TOLERANCE,
    build_efficiency_result,
    build_rank_result,
)
from robustdea.core.exceptions import ConfigurationError, IllegalOrdinalConfigurationError
from robustdea.core.problem import ImpreciseProblemData, ImpreciseVDEAProblemData, ProblemData
from robustdea.core.result import DistributionResult, PerformanceSamplesCollection
from robustdea.core.types import ResolutionMode

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 1.00001
DEFAULT_EPSILON = 1e-4
DEFAULT_FUNCTION_VALUES_ALPHA = 1.00001


def packed_scale(n_levels: int, low: float, high: float, alpha: float, split: int) -> NDArray[np.float64]:
    """
    Increasing scale of ``n_levels`` values in [low, high].

    The first ``split`` positions are packed against ``low``
    (``low * alpha**p``), the rest against ``high``
    (``high / alpha**(n_levels - 1 - p)``). Consecutive values differ by at
    least the ratio ``alpha``.
    """
    positions = np.arange(n_levels)
    lower = low * alpha ** positions
    upper = high / alpha ** (n_levels - 1 - positions)
    return np.where(positions < split, lower, upper)


class ImprecisePerformanceConverter:
    """
    Resolves imprecise performances into a precise scenario for one subject.

    Attributes:
        alpha: Minimal ratio between consecutive ordinal levels
        epsilon: Smallest value of the ordinal scale (the largest is 1)
        function_values_alpha: Minimal ratio between consecutive levels of
            ordinal criteria ranked by marginal values

    Example:
        >>> converter = ImprecisePerformanceConverter()
        >>> best_case = converter.convert(data, subject=0, mode="optimistic")
        >>> worst_case = converter.convert(data, subject=0, mode="pessimistic")
    """

    def __init__(
        self,
        alpha: float = DEFAULT_ALPHA,
        epsilon: float = DEFAULT_EPSILON,
        function_values_alpha: float = DEFAULT_FUNCTION_VALUES_ALPHA,
    ) -> None:
        if alpha < 1.0 or function_values_alpha < 1.0:
            raise IllegalOrdinalConfigurationError(
                f"alpha and function_values_alpha must be at least 1, got {alpha} and "
                f"{function_values_alpha}"
            )
        if not 0.0 < epsilon <= 1.0:
            raise IllegalOrdinalConfigurationError(f"epsilon must lie in (0, 1], got {epsilon}")
        self.alpha = alpha
        self.epsilon = epsilon
        self.function_values_alpha = function_values_alpha

    # -------------------------------------------------------------------------
    # Column properties
    # -------------------------------------------------------------------------

    @staticmethod
    def is_benefit(data: ImpreciseProblemData, name: str) -> bool:
        """True when larger numbers on ``name`` are better for a DMU."""
        if isinstance(data, ImpreciseVDEAProblemData):
            if name in data.ordinal_criteria:
                return True
            return data.function_shapes[name].is_increasing
        return not data.is_input(name)

    def ordinal_scale(self, data: ImpreciseProblemData, name: str) -> tuple[float, float, float]:
        """
        Scale ``(low, high, ratio)`` of an ordinal criterion.

        Raises:
            IllegalOrdinalConfigurationError: If the levels do not fit
        """
        low, high, ratio = self.epsilon, 1.0, self.alpha
        if isinstance(data, ImpreciseVDEAProblemData) and data.is_function_value_ordinal(name):
            shape = data.function_shapes[name]
            low, high, ratio = max(shape.min_value, self.epsilon), shape.max_value, self.function_values_alpha
        n_levels = data.num_levels(name)
        if high <= 0 or low > high or low * ratio ** (n_levels - 1) > high * (1 + 1e-12):
            raise IllegalOrdinalConfigurationError(
                f"{n_levels} levels of '{name}' separated by ratio {ratio} do not fit in "
                f"[{low:g}, {high:g}]. Decrease alpha or epsilon."
            )
        return low, high, ratio

    def _level_positions(self, data: ImpreciseProblemData, name: str) -> NDArray[np.int64]:
        """Position of each DMU's level on the increasing scale (0-based)."""
        ranks = data.ordinal_ranks(name)
        n_levels = int(ranks.max())
        if self.is_benefit(data, name):
            return n_levels - ranks
        return ranks - 1

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert(
        self,
        data: ImpreciseProblemData,
        subject: int,
        mode: ResolutionMode | str = ResolutionMode.OPTIMISTIC,
    ) -> ProblemData:
        """
        Precise scenario as favourable (or unfavourable) as possible to ``subject``.

        Exact cells are copied. An interval gives the subject its favourable
        bound and every other DMU its unfavourable bound under OPTIMISTIC,
        and the reverse under PESSIMISTIC. Ordinal levels keep their order;
        the subject's level and the levels between it and the favourable
        end of the scale are packed together, leaving the largest possible
        gap (OPTIMISTIC) or no gap (PESSIMISTIC) between the subject and
        the DMUs it beats.

        Args:
            data: Imprecise problem
            subject: Index of the subject DMU
            mode: ResolutionMode or "optimistic"/"pessimistic"

        Returns:
            ProblemData (VDEAProblemData for value-function data)

        Raises:
            IllegalOrdinalConfigurationError: If an ordinal scale is infeasible
        """
        mode = ResolutionMode(mode)
        subject = data.dmu_index(subject)
        optimistic = mode is ResolutionMode.OPTIMISTIC
        lower = data.performance_matrix
        upper = data.upper_matrix
        result = lower.copy()
        others = np.arange(data.num_dmus) != subject

        for j, name in enumerate(data.criteria_names):
            if name in data.ordinal_criteria:
                low, high, ratio = self.ordinal_scale(data, name)
                positions = self._level_positions(data, name)
                n_levels = int(data.ordinal_ranks(name).max())
                own = int(positions[subject])
                # Subject joins the upper group when that favours it.
                in_upper = self.is_benefit(data, name) == optimistic
                split = own if in_upper else own + 1
                result[:, j] = packed_scale(n_levels, low, high, ratio, split)[positions]
                continue

            favourable = upper[:, j] if self.is_benefit(data, name) else lower[:, j]
            unfavourable = lower[:, j] if self.is_benefit(data, name) else upper[:, j]
            if optimistic:
                result[:, j] = np.where(others, unfavourable, favourable)
            else:
                result[:, j] = np.where(others, favourable, unfavourable)

        n_inputs = data.num_inputs
        return data.with_performances(result[:, :n_inputs], result[:, n_inputs:])

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def sample_performances(
        self,
        data: ImpreciseProblemData,
        n_samples: int,
        rng: int | np.random.Generator | None = None,
    ) -> PerformanceSamplesCollection:
        """
        Draw precise realisations of imprecise performances.

        Intervals are sampled uniformly. An ordinal scale is sampled
        uniformly in log space among all scales inside [low, high] whose
        consecutive levels keep at least the minimal ratio.

        Returns:
            PerformanceSamplesCollection with ``n_samples`` scenarios
        """
        rng = as_generator(rng)
        lower = data.performance_matrix
        upper = data.upper_matrix
        samples = np.empty((n_samples,) + lower.shape)

        for j, name in enumerate(data.criteria_names):
            if name in data.ordinal_criteria:
                low, high, ratio = self.ordinal_scale(data, name)
                positions = self._level_positions(data, name)
                n_levels = int(data.ordinal_ranks(name).max())
                log_ratio = np.log(ratio)
                free = max(0.0, np.log(high) - np.log(low) - (n_levels - 1) * log_ratio)
                offsets = np.sort(rng.random((n_samples, n_levels)), axis=1) * free
                scales = np.exp(np.log(low) + offsets + np.arange(n_levels) * log_ratio)
                samples[:, :, j] = scales[:, positions]
            else:
                width = upper[:, j] - lower[:, j]
                samples[:, :, j] = lower[:, j] + rng.random((n_samples, data.num_dmus)) * width

        n_inputs = data.num_inputs
        return PerformanceSamplesCollection(
            inputs=samples[:, :, :n_inputs], outputs=samples[:, :, n_inputs:]
        )


def sample_performances(
    data: ImpreciseProblemData,
    n_samples: int,
    rng: int | np.random.Generator | None = None,
    converter: ImprecisePerformanceConverter | None = None,
) -> PerformanceSamplesCollection:
    """Module-level shortcut for ``ImprecisePerformanceConverter.sample_performances``."""
    converter = converter or ImprecisePerformanceConverter()
    return converter.sample_performances(data, n_samples, rng)


# =============================================================================
# IMPRECISE SMAA
# =============================================================================


def _imprecise_scores(
    data: ImpreciseProblemData,
    n_samples: int,
    random_seed: int | np.random.Generator | None,
    converter: ImprecisePerformanceConverter | None,
    thinning_factor: float,
) -> tuple[NDArray[np.float64], bool]:
    """K x N scores with one weight vector and one performance realisation per sample."""
    if not isinstance(data, ImpreciseProblemData):
        raise ConfigurationError(
            f"Expected ImpreciseProblemData or ImpreciseVDEAProblemData, got {type(data).__name__}"
        )
    converter = converter or ImprecisePerformanceConverter()
    rng = as_generator(random_seed)
    value_model = isinstance(data, ImpreciseVDEAProblemData)
    variant = VDEA if value_model else CCR
    if not value_model:
        check_ccr_data(data)

    template = converter.convert(data, 0, ResolutionMode.OPTIMISTIC)
    system = build_weight_polytope(template, variant)
    weights = sample_weights(
        system, n_samples, rng, n_inputs=variant.n_inputs(template), thinning_factor=thinning_factor
    )
    performances = converter.sample_performances(data, n_samples, rng)
    logger.debug("Imprecise SMAA: %d DMUs, %d samples, %r", data.num_dmus, n_samples, variant)

    if not value_model:
        weighted_outputs = np.einsum("ko,kno->kn", weights.output_samples, performances.outputs)
        weighted_inputs = np.einsum("ki,kni->kn", weights.input_samples, performances.inputs)
        return ratio_scores(weighted_outputs, weighted_inputs, data.dmu_names), value_model

    raw = np.concatenate([performances.inputs, performances.outputs], axis=2)
    marginal = np.empty_like(raw)
    for j, name in enumerate(data.criteria_names):
        if name in data.ordinal_criteria:
            marginal[:, :, j] = raw[:, :, j]
        else:
            marginal[:, :, j] = data.function_shapes[name](raw[:, :, j])
    return np.einsum("kc,knc->kn", weights.samples, marginal), value_model


def compute_imprecise_smaa_efficiency(
    data: ImpreciseProblemData,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    n_intervals: int = DEFAULT_NUM_INTERVALS,
    random_seed: int | np.random.Generator | None = None,
    converter: ImprecisePerformanceConverter | None = None,
    thinning_factor: float = DEFAULT_THINNING,
) -> DistributionResult:
    """
    SMAA efficiency acceptability with imprecise performances.

    Every sample pairs a weight vector with a fresh realisation of the
    intervals and ordinal scales. ImpreciseProblemData is scored with CCR,
    ImpreciseVDEAProblemData with VDEA.

    Example:
        >>> result = compute_imprecise_smaa_efficiency(data, n_samples=2000, random_seed=3)
        >>> result.distribution.sum(axis=1)
    """
    start_time = time.perf_counter()
    scores, value_model = _imprecise_scores(data, n_samples, random_seed, converter, thinning_factor)
    efficiencies = value_efficiencies(scores) if value_model else ratio_efficiencies(scores)
    return build_efficiency_result(efficiencies, data.dmu_names, start_time, n_intervals)


def compute_imprecise_smaa_ranks(
    data: ImpreciseProblemData,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    random_seed: int | np.random.Generator | None = None,
    converter: ImprecisePerformanceConverter | None = None,
    tolerance: float = DEFAULT_TIE_TOLERANCE,
    thinning_factor: float = DEFAULT_THINNING,
) -> DistributionResult:
    """SMAA rank acceptability with imprecise performances."""
    start_time = time.perf_counter()
    scores, _ = _imprecise_scores(data, n_samples, random_seed, converter, thinning_factor)
    return build_rank_result(scores, data.dmu_names, start_time, tolerance)
