"""
EVAL: Minimal data edge cases (one DMU, one criterion).

These tests expose how sampling and optimization handle degenerate inputs.
"""

import numpy as np
import pytest

from robustdea import (
    compute_extreme_ranks,
    compute_smaa_efficiency,
    compute_smaa_ranks,
    max_efficiency,
    min_efficiency,
    super_efficiency,
)
from robustdea.algorithms.models import get_model_variant
from robustdea.algorithms.polytope import build_weight_polytope
from robustdea.algorithms.sampling import sample_weights


class TestSingleDMU:
    """EVAL: N=1, the DMU is the whole reference set."""

    def test_ccr_single_dmu_is_efficient(self, single_dmu_ccr):
        assert max_efficiency(single_dmu_ccr, "only") == pytest.approx(1.0)
        assert min_efficiency(single_dmu_ccr, "only") == pytest.approx(1.0)

    def test_ccr_super_efficiency_unbounded(self, single_dmu_ccr):
        """EVAL: Without other DMUs nothing bounds the subject."""
        assert super_efficiency(single_dmu_ccr, 0) == float("inf")

    def test_smaa_single_dmu(self, single_dmu_ccr):
        ranks = compute_smaa_ranks(single_dmu_ccr, "ccr", n_samples=50, random_seed=0)
        np.testing.assert_allclose(ranks.distribution, [[1.0]])
        efficiencies = compute_smaa_efficiency(single_dmu_ccr, "ccr", n_samples=50, random_seed=0)
        assert efficiencies.distribution[0, -1] == pytest.approx(1.0)

    def test_vdea_single_dmu_ranks(self, single_dmu_vdea):
        result = compute_extreme_ranks(single_dmu_vdea)
        np.testing.assert_array_equal(result.best_rank, [1])
        np.testing.assert_array_equal(result.worst_rank, [1])


class TestSingleCriterion:
    """EVAL: D=1 with sum-to-one leaves a zero-dimensional weight region."""

    def test_weights_are_the_single_point(self, single_criterion_vdea):
        system = build_weight_polytope(single_criterion_vdea, get_model_variant("vdea"))
        weights = sample_weights(system, 25, rng=3)
        assert weights.samples.shape == (25, 1)
        np.testing.assert_allclose(weights.samples, 1.0)

    def test_ranks_are_deterministic(self, single_criterion_vdea):
        result = compute_smaa_ranks(single_criterion_vdea, "vdea", n_samples=10, random_seed=0)
        np.testing.assert_allclose(
            result.distribution,
            [[0, 0, 1], [1, 0, 0], [0, 1, 0]],
        )
        np.testing.assert_allclose(result.expected_values, [3.0, 1.0, 2.0])

    def test_extreme_ranks_collapse(self, single_criterion_vdea):
        result = compute_extreme_ranks(single_criterion_vdea)
        np.testing.assert_array_equal(result.best_rank, result.worst_rank)
        np.testing.assert_array_equal(result.best_rank, [3, 1, 2])
