"""Tests for the SMAA distribution engine and SMAA entry points."""

import numpy as np
import pytest

from robustdea import (
    Constraint,
    ProblemData,
    compute_smaa_efficiency,
    compute_smaa_preferences,
    compute_smaa_ranks,
)
from robustdea.algorithms.models import get_model_variant, ratio_efficiencies, value_efficiencies
from robustdea.algorithms.smaa import (
    compute_rank_matrix,
    efficiency_distribution,
    pairwise_winning_probabilities,
    rank_distribution,
)
from robustdea.core.exceptions import ConfigurationError, ValueRangeError


class TestRankMatrix:
    def test_competition_ranks(self):
        ranks = compute_rank_matrix(np.array([[3.0, 1.0, 2.0], [1.0, 1.0, 0.0]]))
        np.testing.assert_array_equal(ranks, [[1, 3, 2], [1, 1, 3]])

    def test_ties_within_tolerance_share_rank(self):
        ranks = compute_rank_matrix(np.array([[0.5, 0.5 + 1e-12, 0.4]]))
        np.testing.assert_array_equal(ranks, [[1, 1, 3]])

    def test_custom_tolerance(self):
        ranks = compute_rank_matrix(np.array([[0.50, 0.52, 0.10]]), tolerance=0.05)
        np.testing.assert_array_equal(ranks, [[1, 1, 3]])


class TestRankDistribution:
    def test_distribution_and_mean(self):
        scores = np.array([
            [3.0, 2.0, 1.0],
            [1.0, 2.0, 3.0],
            [3.0, 1.0, 2.0],
            [2.0, 3.0, 1.0],
        ])
        distribution, expected = rank_distribution(scores)
        np.testing.assert_allclose(distribution[0], [0.5, 0.25, 0.25])
        np.testing.assert_allclose(distribution.sum(axis=1), 1.0)
        np.testing.assert_allclose(expected, [1.75, 2.0, 2.25])

    def test_ties_leave_gaps(self):
        distribution, _ = rank_distribution(np.array([[1.0, 1.0, 0.0]]))
        np.testing.assert_allclose(distribution, [[1, 0, 0], [1, 0, 0], [0, 0, 1]])


class TestEfficiencyDistribution:
    def test_buckets(self):
        distribution, mean, edges = efficiency_distribution(np.array([[1.0, 0.5, 0.05]]), 10)
        assert np.argmax(distribution[0]) == 9
        assert np.argmax(distribution[1]) == 5
        assert np.argmax(distribution[2]) == 0
        np.testing.assert_allclose(mean, [1.0, 0.5, 0.05])
        np.testing.assert_allclose(edges, np.linspace(0.0, 1.0, 11))

    def test_upper_defaults_to_largest_value(self):
        _, _, edges = efficiency_distribution(np.array([[0.4, 0.2]]), 4)
        assert edges[-1] == pytest.approx(0.4)

    def test_all_zero_efficiencies(self):
        distribution, _, edges = efficiency_distribution(np.zeros((3, 2)), 5)
        assert edges[-1] == 1.0
        np.testing.assert_allclose(distribution[:, 0], 1.0)

    def test_rejects_no_intervals(self):
        with pytest.raises(ValueRangeError):
            efficiency_distribution(np.ones((2, 2)), 0)


class TestEfficiencyMaps:
    def test_ratio(self):
        np.testing.assert_allclose(ratio_efficiencies(np.array([[2.0, 1.0, 0.5]])), [[1.0, 0.5, 0.25]])

    def test_ratio_all_zero(self):
        np.testing.assert_allclose(ratio_efficiencies(np.zeros((1, 2))), [[1.0, 1.0]])

    def test_value(self):
        np.testing.assert_allclose(value_efficiencies(np.array([[0.8, 0.5]])), [[1.0, 0.7]])


class TestPairwiseWinning:
    def test_probabilities(self):
        probabilities = pairwise_winning_probabilities(np.array([[1.0, 2.0], [3.0, 1.0]]))
        np.testing.assert_allclose(probabilities, [[1.0, 0.5], [0.5, 1.0]])


class TestModelVariants:
    def test_default_from_data(self, ccr_data, vdea_data):
        assert get_model_variant(None, ccr_data).name == "ccr"
        assert get_model_variant(None, vdea_data).name == "vdea"

    def test_case_insensitive(self):
        assert get_model_variant("CCR").name == "ccr"

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError, match="Unknown model"):
            get_model_variant("bcc")


class TestSMAAEntryPoints:
    def test_ccr_ranks(self, ccr_data):
        result = compute_smaa_ranks(ccr_data, "ccr", n_samples=2000, random_seed=1)
        assert result.kind == "rank"
        assert result.distribution.shape == (4, 4)
        np.testing.assert_allclose(result.distribution.sum(axis=1), 1.0)
        # D is always half of C
        assert result.acceptability("D")[3] == pytest.approx(1.0)
        # C is never first and never last
        assert result.acceptability("C")[0] == 0.0
        assert result.acceptability("C")[3] == 0.0
        # A leads whenever surgeries outweigh visits
        assert result.acceptability("A")[0] == pytest.approx(0.5, abs=0.04)

    def test_ccr_efficiency(self, ccr_data):
        result = compute_smaa_efficiency(ccr_data, n_samples=2000, n_intervals=10, random_seed=2)
        assert result.kind == "efficiency"
        np.testing.assert_allclose(result.distribution.sum(axis=1), 1.0)
        # D never exceeds 0.4, C never exceeds 0.8
        assert result.acceptability("D")[5:].sum() == 0.0
        assert result.acceptability("C")[9] == 0.0
        assert 0.25 - 1e-9 <= result.expected_values[3] <= 0.4 + 1e-9
        assert result.bucket_edges[-1] == pytest.approx(1.0)

    def test_vdea_ranks(self, vdea_data):
        result = compute_smaa_ranks(vdea_data, n_samples=4000, random_seed=7)
        first = result.distribution[:, 0]
        # D leads on w < 0.4, A on 0.4 < w < 2/3, B above 2/3
        assert first[3] == pytest.approx(0.4, abs=0.03)
        assert first[0] == pytest.approx(4 / 15, abs=0.03)
        assert first[1] == pytest.approx(1 / 3, abs=0.03)
        assert result.acceptability("C")[3] == pytest.approx(1.0)

    def test_vdea_constraints_change_ranks(self, vdea_data):
        data = vdea_data.with_weight_constraints(Constraint.at_least("cost", 0.5))
        result = compute_smaa_ranks(data, n_samples=1000, random_seed=7)
        assert result.acceptability("D")[0] == 0.0

    def test_vdea_efficiency(self, vdea_data):
        result = compute_smaa_efficiency(vdea_data, n_samples=1000, random_seed=3)
        assert np.all(result.expected_values <= 1.0 + 1e-12)
        # C is between 0.2 and 8/15 efficient
        assert 0.2 - 1e-9 <= result.expected_values[2] <= 8 / 15 + 1e-9

    def test_same_seed_same_result(self, vdea_data):
        first = compute_smaa_ranks(vdea_data, n_samples=300, random_seed=99)
        second = compute_smaa_ranks(vdea_data, n_samples=300, random_seed=99)
        np.testing.assert_array_equal(first.distribution, second.distribution)

    def test_preferences(self, vdea_data):
        result = compute_smaa_preferences(vdea_data, n_samples=2000, random_seed=4)
        np.testing.assert_allclose(np.diag(result.probabilities), 1.0)
        assert result.probability("A", "C") == 1.0
        assert result.probability("C", "A") == 0.0
        # A beats D when w > 0.4
        assert result.probability("A", "D") == pytest.approx(0.6, abs=0.04)

    def test_vdea_on_ratio_data_rejected(self, ccr_data):
        with pytest.raises(ConfigurationError):
            compute_smaa_ranks(ccr_data, "vdea", n_samples=10, random_seed=0)

    def test_ccr_needs_inputs_and_outputs(self):
        data = ProblemData(inputs=np.ones((2, 1)), outputs=np.ones((2, 0)))
        with pytest.raises(ConfigurationError):
            compute_smaa_ranks(data, "ccr", n_samples=10, random_seed=0)

    def test_imprecise_data_rejected(self, capacity_data):
        with pytest.raises(ConfigurationError, match="imprecise"):
            compute_smaa_ranks(capacity_data, "ccr", n_samples=10, random_seed=0)
