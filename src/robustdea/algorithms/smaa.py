"""SMAA distribution engine.

Turns a (samples x DMUs) score matrix into rank acceptability, efficiency
acceptability and pairwise winning indices, and provides the SMAA entry
points that sample the weight polytope of a problem.

Ties: within one sample the rank of a DMU is 1 plus the number of DMUs
scoring more than ``tolerance`` above it, so DMUs within tolerance share
the better rank.
"""

from __future__ import annotations

import logging
import time

import numpy as np
from numpy.typing import NDArray

from robustdea._kernels import bucket_counts, competition_ranks, pairwise_win_counts
from robustdea.algorithms.models import ModelVariant, get_model_variant
from robustdea.algorithms.polytope import build_weight_polytope
from robustdea.algorithms.sampling import DEFAULT_THINNING, sample_weights
from robustdea.core.exceptions import ConfigurationError, ValueRangeError
from robustdea.core.problem import ImpreciseProblemData, ProblemData
from robustdea.core.result import (
    DistributionResult,
    PairwiseWinningResult,
    WeightSamplesCollection,
)

logger = logging.getLogger(__name__)

DEFAULT_NUM_SAMPLES = 10_000
DEFAULT_NUM_INTERVALS = 10
DEFAULT_TIE_TOLERANCE = 1e-9


# =============================================================================
# DISTRIBUTION ENGINE
# =============================================================================


def compute_rank_matrix(
    scores: NDArray[np.float64],
    tolerance: float = DEFAULT_TIE_TOLERANCE,
) -> NDArray[np.int64]:
    """
    Competition rank of every DMU in every sample.

    Args:
        scores: K x N scores, higher is better
        tolerance: Scores within this distance tie

    Returns:
        K x N ranks, 1 = best
    """
    scores = np.ascontiguousarray(scores, dtype=np.float64)
    return competition_ranks(scores, float(tolerance))


def rank_distribution(
    scores: NDArray[np.float64],
    tolerance: float = DEFAULT_TIE_TOLERANCE,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Rank acceptability indices.

    Returns:
        Tuple of (N x N matrix whose entry [i, r] is the share of samples in
        which DMU i has rank r + 1, mean rank per DMU)
    """
    ranks = compute_rank_matrix(scores, tolerance)
    n_samples, n_dmus = ranks.shape
    counts = bucket_counts(np.ascontiguousarray(ranks - 1), n_dmus)
    return counts / n_samples, ranks.mean(axis=0)


def efficiency_distribution(
    efficiencies: NDArray[np.float64],
    n_intervals: int = DEFAULT_NUM_INTERVALS,
    upper: float | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Efficiency acceptability over equal-width intervals.

    The range [0, upper] (``upper`` defaults to the largest observed
    efficiency) is split into ``n_intervals`` buckets; the upper end belongs
    to the last bucket.

    Returns:
        Tuple of (N x n_intervals distribution, mean efficiency per DMU,
        n_intervals + 1 bucket edges)
    """
    if n_intervals < 1:
        raise ValueRangeError(f"n_intervals must be at least 1, got {n_intervals}")
    efficiencies = np.asarray(efficiencies, dtype=np.float64)
    if upper is None:
        upper = float(efficiencies.max())
    if upper <= 0:
        upper = 1.0
    edges = np.linspace(0.0, upper, n_intervals + 1)
    buckets = np.floor(efficiencies / upper * n_intervals).astype(np.int64)
    buckets = np.clip(buckets, 0, n_intervals - 1)
    counts = bucket_counts(np.ascontiguousarray(buckets), n_intervals)
    return counts / efficiencies.shape[0], efficiencies.mean(axis=0), edges


def pairwise_winning_probabilities(
    scores: NDArray[np.float64],
    tolerance: float = DEFAULT_TIE_TOLERANCE,
) -> NDArray[np.float64]:
    """``P[i, j]``: share of samples in which i scores at least as well as j."""
    scores = np.ascontiguousarray(scores, dtype=np.float64)
    return pairwise_win_counts(scores, float(tolerance)) / scores.shape[0]


def build_rank_result(
    scores: NDArray[np.float64],
    dmu_names: tuple[str, ...],
    start_time: float,
    tolerance: float = DEFAULT_TIE_TOLERANCE,
    level: str | None = None,
) -> DistributionResult:
    distribution, expected = rank_distribution(scores, tolerance)
    n_dmus = len(dmu_names)
    return DistributionResult(
        distribution=distribution,
        expected_values=expected,
        kind="rank",
        bucket_edges=np.arange(n_dmus + 1) + 0.5,
        dmu_names=dmu_names,
        num_samples=scores.shape[0],
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
        level=level,
    )


def build_efficiency_result(
    efficiencies: NDArray[np.float64],
    dmu_names: tuple[str, ...],
    start_time: float,
    n_intervals: int = DEFAULT_NUM_INTERVALS,
    level: str | None = None,
) -> DistributionResult:
    distribution, expected, edges = efficiency_distribution(efficiencies, n_intervals)
    return DistributionResult(
        distribution=distribution,
        expected_values=expected,
        kind="efficiency",
        bucket_edges=edges,
        dmu_names=dmu_names,
        num_samples=efficiencies.shape[0],
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
        level=level,
    )


# =============================================================================
# SMAA ENTRY POINTS
# =============================================================================


def sample_scores(
    data: ProblemData,
    variant: ModelVariant,
    n_samples: int,
    random_seed: int | np.random.Generator | None,
    thinning_factor: float = DEFAULT_THINNING,
) -> NDArray[np.float64]:
    """
    Sample admissible weights and score every DMU under each of them.

    Returns:
        K x N scores
    """
    weights = sample_admissible_weights(data, variant, n_samples, random_seed, thinning_factor)
    logger.debug("Scoring %d DMUs with %r over %d samples", data.num_dmus, variant, n_samples)
    return variant.scores(data, weights)


def sample_admissible_weights(
    data: ProblemData,
    variant: ModelVariant,
    n_samples: int,
    random_seed: int | np.random.Generator | None,
    thinning_factor: float = DEFAULT_THINNING,
) -> WeightSamplesCollection:
    """Check ``data`` against ``variant`` and sample its weight polytope."""
    if isinstance(data, ImpreciseProblemData) and not data.is_precise:
        raise ConfigurationError(
            "Data hold intervals or ordinal ranks; use compute_imprecise_smaa_efficiency "
            "or compute_imprecise_smaa_ranks"
        )
    variant.check(data)
    system = build_weight_polytope(data, variant)
    return sample_weights(
        system,
        n_samples,
        random_seed,
        n_inputs=variant.n_inputs(data),
        thinning_factor=thinning_factor,
    )


def compute_smaa_efficiency(
    data: ProblemData,
    model: str | ModelVariant | None = None,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    n_intervals: int = DEFAULT_NUM_INTERVALS,
    random_seed: int | np.random.Generator | None = None,
    thinning_factor: float = DEFAULT_THINNING,
) -> DistributionResult:
    """
    SMAA efficiency acceptability intervals.

    Each sampled weight vector gives every DMU an efficiency relative to the
    best DMU of that sample; the result holds, per DMU, the share of samples
    in each of ``n_intervals`` equal efficiency intervals and the mean
    efficiency.

    Args:
        data: Problem description
        model: "ccr", "vdea", a ModelVariant, or None to infer from data
        n_samples: Number of weight samples
        n_intervals: Number of efficiency intervals
        random_seed: Seed or Generator; equal seeds give equal results
        thinning_factor: Hit-and-Run thinning constant

    Returns:
        DistributionResult with ``kind == "efficiency"``

    Example:
        >>> result = compute_smaa_efficiency(data, "ccr", n_samples=1000, random_seed=0)
        >>> result.expected_values
    """
    start_time = time.perf_counter()
    variant = get_model_variant(model, data)
    scores = sample_scores(data, variant, n_samples, random_seed, thinning_factor)
    return build_efficiency_result(
        variant.efficiencies(scores), data.dmu_names, start_time, n_intervals, variant.level
    )


def compute_smaa_ranks(
    data: ProblemData,
    model: str | ModelVariant | None = None,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    random_seed: int | np.random.Generator | None = None,
    tolerance: float = DEFAULT_TIE_TOLERANCE,
    thinning_factor: float = DEFAULT_THINNING,
) -> DistributionResult:
    """
    SMAA rank acceptability indices.

    Returns:
        DistributionResult with ``kind == "rank"``; column r holds the share
        of samples in which the DMU has rank r + 1
    """
    start_time = time.perf_counter()
    variant = get_model_variant(model, data)
    scores = sample_scores(data, variant, n_samples, random_seed, thinning_factor)
    return build_rank_result(scores, data.dmu_names, start_time, tolerance, variant.level)


def compute_smaa_preferences(
    data: ProblemData,
    model: str | ModelVariant | None = None,
    n_samples: int = DEFAULT_NUM_SAMPLES,
    random_seed: int | np.random.Generator | None = None,
    tolerance: float = DEFAULT_TIE_TOLERANCE,
    thinning_factor: float = DEFAULT_THINNING,
) -> PairwiseWinningResult:
    """SMAA pairwise winning indices between all DMUs."""
    start_time = time.perf_counter()
    variant = get_model_variant(model, data)
    scores = sample_scores(data, variant, n_samples, random_seed, thinning_factor)
    return PairwiseWinningResult(
        probabilities=pairwise_winning_probabilities(scores, tolerance),
        dmu_names=data.dmu_names,
        num_samples=n_samples,
        computation_time_ms=(time.perf_counter() - start_time) * 1000,
    )
