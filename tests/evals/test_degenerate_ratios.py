"""
EVAL: Ratios whose weighted input vanishes.

When equality constraints pin an input weight at zero, a DMU that only uses
that input has no weighted input under any admissible weighting. Sampling
must refuse the ratio instead of dividing by round-off, and the weights it
returns must sit exactly on their bounds.
"""

import numpy as np
import pytest

from robustdea import (
    ProblemData,
    compute_smaa_efficiency,
    compute_smaa_ranks,
    max_efficiency,
)
from robustdea.algorithms.models import get_model_variant
from robustdea.algorithms.polytope import build_weight_polytope
from robustdea.algorithms.sampling import sample_weights
from robustdea.core.exceptions import SolverInfeasibleError, ValueRangeError


class TestPinnedZeroInputWeight:
    def test_sampled_weight_is_exactly_zero(self, zero_input_ccr):
        system = build_weight_polytope(zero_input_ccr, get_model_variant("ccr"))
        weights = sample_weights(system, 50, rng=0, n_inputs=2)
        np.testing.assert_array_equal(weights.column("x2"), 0.0)
        assert np.all(weights.samples >= 0.0)

    def test_efficiency_refuses_zero_weighted_input(self, zero_input_ccr):
        with pytest.raises(ValueRangeError, match="zero weighted input"):
            compute_smaa_efficiency(zero_input_ccr, "ccr", n_samples=20, random_seed=0)

    def test_ranks_refuse_zero_weighted_input(self, zero_input_ccr):
        with pytest.raises(ValueRangeError, match=r"\['0'\]"):
            compute_smaa_ranks(zero_input_ccr, "ccr", n_samples=20, random_seed=0)

    def test_optimization_has_no_admissible_weights(self, zero_input_ccr):
        with pytest.raises(SolverInfeasibleError):
            max_efficiency(zero_input_ccr, 0)


class TestFreeInputWeights:
    def test_expected_efficiencies_in_unit_interval(self, zero_input_ccr):
        data = ProblemData(inputs=zero_input_ccr.inputs, outputs=zero_input_ccr.outputs)
        result = compute_smaa_efficiency(data, "ccr", n_samples=200, random_seed=0)
        assert np.all(result.expected_values >= 0.0)
        assert np.all(result.expected_values <= 1.0 + 1e-9)
