"""Tests for problem description containers."""

import warnings

import numpy as np
import pytest

from robustdea import (
    Constraint,
    FunctionShape,
    HierarchicalVDEAProblemData,
    HierarchyNode,
    ImpreciseProblemData,
    ImpreciseVDEAProblemData,
    ProblemData,
    VDEAProblemData,
)
from robustdea.core.exceptions import (
    ConfigurationError,
    DataQualityWarning,
    DimensionError,
    IllegalOrdinalConfigurationError,
    NaNInfError,
    ValueRangeError,
)
from robustdea.core.types import ConstraintOperator


class TestConstraint:
    def test_operator_aliases(self):
        assert Constraint("<=", 1, {"a": 1}).operator is ConstraintOperator.LEQ
        assert Constraint("≥", 1, {"a": 1}).operator is ConstraintOperator.GEQ
        assert Constraint("==", 1, {"a": 1}).operator is ConstraintOperator.EQ

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            Constraint("<>", 1, {"a": 1})

    def test_empty_coefficients(self):
        with pytest.raises(ConfigurationError):
            Constraint(">=", 0.0, {})

    def test_shortcuts(self):
        c = Constraint.at_least("staff", 0.2)
        assert c.operator is ConstraintOperator.GEQ
        assert c.rhs == 0.2
        assert c.names == ("staff",)
        assert Constraint.at_most("staff", 0.5).operator is ConstraintOperator.LEQ

    def test_coefficients_are_read_only(self):
        c = Constraint(">=", 0.0, {"a": 1.0, "b": -2.0})
        with pytest.raises(TypeError):
            c.coefficients["a"] = 3.0

    def test_repr(self):
        assert ">=" in repr(Constraint(">=", 0.0, {"a": 1.0, "b": -2.0}))


class TestFunctionShape:
    def test_interpolation(self):
        shape = FunctionShape([(32.0, 0.0), (38.0, 0.3), (46.0, 0.9), (51.0, 1.0)])
        assert shape(42.0) == pytest.approx(0.6)
        assert shape(32.0) == 0.0
        assert shape(51.0) == 1.0

    def test_clamps_outside_points(self):
        shape = FunctionShape([(0.0, 0.2), (10.0, 0.8)])
        assert shape(-5.0) == pytest.approx(0.2)
        assert shape(50.0) == pytest.approx(0.8)

    def test_vectorised(self):
        shape = FunctionShape([(0.0, 0.0), (10.0, 1.0)])
        np.testing.assert_allclose(shape(np.array([0.0, 5.0, 10.0])), [0.0, 0.5, 1.0])

    def test_decreasing_shape(self):
        shape = FunctionShape([(38.0, 1.0), (47.0, 0.3), (56.0, 0.0)])
        assert not shape.is_increasing
        assert shape.min_value == 0.0
        assert shape.max_value == 1.0

    def test_rejects_non_monotonic(self):
        with pytest.raises(ValueRangeError):
            FunctionShape([(0.0, 0.0), (1.0, 0.8), (2.0, 0.4)])

    def test_rejects_unsorted_performances(self):
        with pytest.raises(ValueRangeError):
            FunctionShape([(1.0, 0.0), (0.0, 1.0)])

    def test_rejects_values_outside_unit_interval(self):
        with pytest.raises(ValueRangeError):
            FunctionShape([(0.0, 0.0), (1.0, 1.5)])

    def test_rejects_single_point(self):
        with pytest.raises(ValueRangeError):
            FunctionShape([(0.0, 0.0)])

    def test_rejects_nan(self):
        with pytest.raises(NaNInfError):
            FunctionShape([(0.0, 0.0), (np.nan, 1.0)])


class TestProblemData:
    def test_default_names(self):
        data = ProblemData(inputs=np.ones((3, 2)), outputs=np.ones((3, 1)))
        assert data.input_names == ("x1", "x2")
        assert data.output_names == ("y1",)
        assert data.dmu_names == ("0", "1", "2")
        assert data.criteria_names == ("x1", "x2", "y1")

    def test_dimensions(self, ccr_data):
        assert ccr_data.num_dmus == 4
        assert ccr_data.num_inputs == 1
        assert ccr_data.num_outputs == 2
        assert ccr_data.performance_matrix.shape == (4, 3)
        np.testing.assert_array_equal(ccr_data.column("visits"), [1, 4, 2, 1])

    def test_one_dimensional_tables_become_columns(self):
        data = ProblemData(inputs=np.array([1.0, 2.0]), outputs=np.array([3.0, 4.0]))
        assert data.inputs.shape == (2, 1)

    def test_row_mismatch(self):
        with pytest.raises(DimensionError, match="rows"):
            ProblemData(inputs=np.ones((3, 2)), outputs=np.ones((4, 1)))

    def test_name_count_mismatch(self):
        with pytest.raises(DimensionError):
            ProblemData(inputs=np.ones((3, 2)), outputs=np.ones((3, 1)), input_names=["a"])

    def test_duplicate_names(self):
        with pytest.raises(ConfigurationError):
            ProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
                input_names=["a"], output_names=["a"],
            )

    def test_nan_rejected(self):
        with pytest.raises(NaNInfError):
            ProblemData(inputs=np.array([[1.0], [np.nan]]), outputs=np.ones((2, 1)))

    def test_arrays_are_read_only(self, ccr_data):
        with pytest.raises(ValueError):
            ccr_data.inputs[0, 0] = 5.0

    def test_unknown_constraint_name(self, ccr_data):
        with pytest.raises(ConfigurationError, match="unknown"):
            ccr_data.with_weight_constraints(Constraint.at_least("beds", 0.1))

    def test_with_weight_constraints_returns_copy(self, ccr_data):
        constrained = ccr_data.with_weight_constraints(Constraint.at_least("visits", 0.1))
        assert len(constrained.weight_constraints) == 1
        assert len(ccr_data.weight_constraints) == 0

    def test_dmu_index(self, ccr_data):
        assert ccr_data.dmu_index("C") == 2
        assert ccr_data.dmu_index(3) == 3
        with pytest.raises(ConfigurationError):
            ccr_data.dmu_index("Z")
        with pytest.raises(ConfigurationError):
            ccr_data.dmu_index(4)

    def test_negative_values_rejected_for_ratio_models(self):
        data = ProblemData(inputs=np.array([[1.0], [-1.0]]), outputs=np.ones((2, 1)))
        with pytest.raises(ValueRangeError):
            data.require_non_negative()


class TestVDEAProblemData:
    def test_marginal_values(self, vdea_data):
        np.testing.assert_allclose(
            vdea_data.marginal_values(),
            [[0.8, 0.8], [1.0, 0.4], [0.4, 0.2], [0.5, 1.0]],
        )

    def test_missing_shape(self):
        with pytest.raises(ConfigurationError, match="Missing"):
            VDEAProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
                function_shapes={"x1": FunctionShape([(0, 0), (2, 1)])},
            )

    def test_shape_for_unknown_criterion(self):
        shape = FunctionShape([(0, 0), (2, 1)])
        with pytest.raises(ConfigurationError, match="unknown"):
            VDEAProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
                function_shapes={"x1": shape, "y1": shape, "z": shape},
            )

    def test_shapes_from_point_lists(self):
        data = VDEAProblemData(
            inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
            function_shapes={"x1": [(0, 1), (2, 0)], "y1": [(0, 0), (2, 1)]},
        )
        assert isinstance(data.function_shapes["x1"], FunctionShape)

    def test_clamped_performances_warn(self):
        with pytest.warns(DataQualityWarning, match="clamped"):
            VDEAProblemData(
                inputs=np.array([[1.0], [5.0]]), outputs=np.ones((2, 1)),
                function_shapes={"x1": [(0, 1), (2, 0)], "y1": [(0, 0), (2, 1)]},
            )

    def test_no_warning_inside_range(self, recwarn):
        VDEAProblemData(
            inputs=np.array([[1.0], [2.0]]), outputs=np.ones((2, 1)),
            function_shapes={"x1": [(0, 1), (2, 0)], "y1": [(0, 0), (2, 1)]},
        )
        assert not [w for w in recwarn if issubclass(w.category, DataQualityWarning)]


class TestImpreciseProblemData:
    def test_upper_bounds_default_to_lower(self):
        data = ImpreciseProblemData(inputs=np.ones((2, 1)), outputs=np.ones((2, 1)))
        assert data.is_precise
        np.testing.assert_array_equal(data.upper_matrix, data.performance_matrix)

    def test_interval_data_is_not_precise(self, capacity_data):
        assert not capacity_data.is_precise

    def test_upper_below_lower(self):
        with pytest.raises(ValueRangeError):
            ImpreciseProblemData(
                inputs=np.ones((2, 1)), outputs=np.array([[2.0], [3.0]]),
                upper_outputs=np.array([[1.0], [3.0]]),
            )

    def test_upper_shape_mismatch(self):
        with pytest.raises(DimensionError):
            ImpreciseProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
                upper_outputs=np.ones((2, 2)),
            )

    def test_ordinal_ranks(self, ordinal_data):
        np.testing.assert_array_equal(ordinal_data.ordinal_ranks("quality"), [1, 3, 2])
        assert ordinal_data.num_levels("quality") == 3
        assert not ordinal_data.is_precise

    def test_unknown_ordinal_criterion(self):
        with pytest.raises(ConfigurationError):
            ImpreciseProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)), ordinal_criteria={"nope"},
            )

    def test_ranks_with_gap(self):
        with pytest.raises(IllegalOrdinalConfigurationError, match="gaps"):
            ImpreciseProblemData(
                inputs=np.ones((3, 1)), outputs=np.array([[1], [3], [4]]),
                ordinal_criteria={"y1"},
            )

    def test_repeated_ranks_need_ties(self):
        outputs = np.array([[1], [1], [2]])
        with pytest.raises(IllegalOrdinalConfigurationError, match="ties"):
            ImpreciseProblemData(inputs=np.ones((3, 1)), outputs=outputs, ordinal_criteria={"y1"})
        data = ImpreciseProblemData(
            inputs=np.ones((3, 1)), outputs=outputs, ordinal_criteria={"y1"},
            allow_ordinal_ties=True,
        )
        assert data.num_levels("y1") == 2

    def test_fractional_ranks(self):
        with pytest.raises(ValueRangeError):
            ImpreciseProblemData(
                inputs=np.ones((2, 1)), outputs=np.array([[1.5], [2.0]]), ordinal_criteria={"y1"},
            )

    def test_ordinal_with_interval(self):
        with pytest.raises(ConfigurationError):
            ImpreciseProblemData(
                inputs=np.ones((2, 1)), outputs=np.array([[1.0], [2.0]]),
                upper_outputs=np.array([[2.0], [2.0]]), ordinal_criteria={"y1"},
            )

    def test_with_performances_is_precise(self, capacity_data):
        precise = capacity_data.with_performances(capacity_data.inputs, capacity_data.outputs)
        assert type(precise) is ProblemData
        assert precise.output_names == ("capacity",)


class TestImpreciseVDEAProblemData:
    def test_ordinal_without_shape_allowed(self, imprecise_vdea_data):
        assert not imprecise_vdea_data.is_function_value_ordinal("quality")

    def test_missing_shape_for_interval_criterion(self):
        with pytest.raises(ConfigurationError):
            ImpreciseVDEAProblemData(
                inputs=np.ones((2, 1)), outputs=np.array([[1], [2]]),
                ordinal_criteria={"y1"},
            )

    def test_with_performances_builds_vdea_data(self, imprecise_vdea_data):
        precise = imprecise_vdea_data.with_performances(
            np.array([[1.5], [4.0], [6.0]]), np.array([[1.0], [0.5], [0.1]])
        )
        assert isinstance(precise, VDEAProblemData)
        np.testing.assert_allclose(precise.marginal_values()[:, 1], [1.0, 0.5, 0.1])


class TestHierarchicalVDEAProblemData:
    def test_tree(self, hierarchical_data):
        assert hierarchical_data.tree.root == "index"
        assert hierarchical_data.constraint_names == ("health", "h1", "h2", "finances", "f1", "f2")

    def test_constraints_on_internal_nodes(self, hierarchical_data):
        data = hierarchical_data.with_weight_constraints(Constraint.at_least("health", 0.6))
        assert len(data.weight_constraints) == 1
        assert data.tree is not None

    def test_constraint_on_root_rejected(self, hierarchical_data):
        with pytest.raises(ConfigurationError):
            hierarchical_data.with_weight_constraints(Constraint.at_least("index", 0.5))

    def test_leaves_must_match_criteria(self, small_hierarchy):
        identity = FunctionShape([(0.0, 0.0), (1.0, 1.0)])
        with pytest.raises(ConfigurationError, match="Leaves"):
            HierarchicalVDEAProblemData(
                inputs=np.ones((2, 1)) * 0.5, outputs=np.ones((2, 1)) * 0.5,
                input_names=["h1"], output_names=["h2"],
                function_shapes={"h1": identity, "h2": identity},
                hierarchy=small_hierarchy,
            )

    def test_hierarchy_required(self):
        with pytest.raises(ConfigurationError):
            HierarchicalVDEAProblemData(
                inputs=np.ones((2, 1)), outputs=np.ones((2, 1)),
                function_shapes={"x1": [(0, 0), (2, 1)], "y1": [(0, 0), (2, 1)]},
            )

    def test_hierarchy_children_type_checked(self):
        with pytest.raises(ConfigurationError):
            HierarchyNode("root", ["a", "b"])

    def test_walk_is_preorder(self, small_hierarchy):
        names = [node.name for node in small_hierarchy.walk()]
        assert names == ["index", "health", "h1", "h2", "finances", "f1", "f2"]
