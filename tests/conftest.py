"""Pytest fixtures for robustdea tests."""

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


@pytest.fixture
def ccr_data() -> ProblemData:
    """
    Four DMUs with one unit input and two outputs.

    A and B are each best on one output, C = (2, 2) is beaten by whichever
    of A and B the weights favour, and D = (1, 1) is exactly half of C.

    Known values (outputs weighted by u, input weight fixed):
        max efficiency: A 1, B 1, C 0.8, D 0.4
        min efficiency: A 0.25, B 0.25, C 0.5, D 0.25
        super efficiency: A 2, B 2, C 0.8, D 0.4
    """
    return ProblemData(
        inputs=np.array([[1.0], [1.0], [1.0], [1.0]]),
        outputs=np.array([
            [1.0, 4.0],  # A
            [4.0, 1.0],  # B
            [2.0, 2.0],  # C
            [1.0, 1.0],  # D
        ]),
        input_names=["staff"],
        output_names=["visits", "surgeries"],
        dmu_names=["A", "B", "C", "D"],
    )


@pytest.fixture
def vdea_data() -> VDEAProblemData:
    """
    Four DMUs on a cost input and a quality output with linear value functions.

    Marginal values (cost, quality): A (0.8, 0.8), B (1.0, 0.4),
    C (0.4, 0.2), D (0.5, 1.0). With w = weight of cost:

        V_A = 0.8, V_B = 0.4 + 0.6 w, V_C = 0.2 + 0.2 w, V_D = 1 - 0.5 w

    D leads for w < 0.4, A for 0.4 < w < 2/3, B above; C is always last.
    """
    return VDEAProblemData(
        inputs=np.array([[2.0], [0.0], [6.0], [5.0]]),
        outputs=np.array([[8.0], [4.0], [2.0], [10.0]]),
        input_names=["cost"],
        output_names=["quality"],
        dmu_names=["A", "B", "C", "D"],
        function_shapes={
            "cost": FunctionShape([(0.0, 1.0), (10.0, 0.0)]),
            "quality": FunctionShape([(0.0, 0.0), (10.0, 1.0)]),
        },
    )


@pytest.fixture
def small_hierarchy() -> HierarchyNode:
    return HierarchyNode("index", [
        HierarchyNode("health", [HierarchyNode("h1"), HierarchyNode("h2")]),
        HierarchyNode("finances", [HierarchyNode("f1"), HierarchyNode("f2")]),
    ])


@pytest.fixture
def hierarchical_data(small_hierarchy) -> HierarchicalVDEAProblemData:
    """
    Three DMUs over a two-branch hierarchy with identity value functions.

    X is best on both health leaves, Y on both finance leaves, Z is
    dominated by X on every leaf.
    """
    identity = FunctionShape([(0.0, 0.0), (1.0, 1.0)])
    return HierarchicalVDEAProblemData(
        inputs=np.array([[0.9, 0.1], [0.2, 0.9], [0.5, 0.05]]),
        outputs=np.array([[0.8, 0.2], [0.1, 0.8], [0.6, 0.1]]),
        input_names=["h2", "f2"],
        output_names=["h1", "f1"],
        dmu_names=["X", "Y", "Z"],
        function_shapes={name: identity for name in ("h1", "h2", "f1", "f2")},
        hierarchy=small_hierarchy,
    )


# Value functions of the hospital index, keyed by leaf
HOSPITAL_SHAPES = {
    "h1": [(32.0, 0.0), (38.0, 0.3), (46.0, 0.9), (51.0, 1.0)],
    "h2": [(4.0, 1.0), (4.6, 0.9), (6.0, 0.5), (7.15, 0.1), (7.7, 0.0)],
    "h3": [(1.8, 0.0), (6.0, 0.1), (18.0, 0.8), (25.8, 1.0)],
    "f1": [(-4.5, 0.0), (-2.0, 0.2), (2.0, 0.8), (4.0, 1.0)],
    "f2": [(38.0, 1.0), (47.0, 0.3), (56.0, 0.0)],
    "f3": [(39.0, 0.0), (45.0, 0.7), (51.5, 1.0)],
    "s1": [(12.4, 1.0), (15.0, 0.6), (20.0, 0.4), (27.1, 0.0)],
    "s2": [(1.0, 0.0), (3.55, 0.05), (3.84, 0.95), (5.0, 1.0)],
    "s3": [(9.0, 0.0), (16.0, 0.3), (21.0, 0.6), (36.0, 1.0)],
}


@pytest.fixture
def hospital_data() -> HierarchicalVDEAProblemData:
    """
    Sixteen hospitals over a three-branch hierarchy with nine leaves.

    Performances are drawn inside the value function ranges with a fixed
    seed. The constraints favour health over the other branches and keep
    every leaf between 0.2 and 0.5 of its branch.
    """
    rng = np.random.default_rng(2024)
    inputs_names = ["h2", "f2", "s1"]
    output_names = ["h1", "h3", "f1", "f3", "s2", "s3"]

    def column(name):
        points = HOSPITAL_SHAPES[name]
        return rng.uniform(points[0][0], points[-1][0], size=16)

    hierarchy = HierarchyNode("index", [
        HierarchyNode("health", [HierarchyNode(n) for n in ("h1", "h2", "h3")]),
        HierarchyNode("finances", [HierarchyNode(n) for n in ("f1", "f2", "f3")]),
        HierarchyNode("satisfaction", [HierarchyNode(n) for n in ("s1", "s2", "s3")]),
    ])
    leaf_bounds = []
    for leaf in HOSPITAL_SHAPES:
        leaf_bounds += [Constraint.at_least(leaf, 0.2), Constraint.at_most(leaf, 0.5)]

    return HierarchicalVDEAProblemData(
        inputs=np.column_stack([column(n) for n in inputs_names]),
        outputs=np.column_stack([column(n) for n in output_names]),
        input_names=inputs_names,
        output_names=output_names,
        dmu_names=[f"hospital_{i + 1}" for i in range(16)],
        function_shapes={n: FunctionShape(p) for n, p in HOSPITAL_SHAPES.items()},
        hierarchy=hierarchy,
        weight_constraints=[
            Constraint(">=", 0.0, {"health": 1.0, "finances": -1.0}),
            Constraint(">=", 0.0, {"health": 1.0, "satisfaction": -1.0}),
            Constraint.at_least("finances", 0.2),
            Constraint.at_least("satisfaction", 0.2),
            *leaf_bounds,
        ],
    )


# Capacity intervals of 27 facilities
CAPACITY_LOW = np.array([
    50, 60, 40, 1, 45, 1, 4, 10, 9, 5, 25, 10, 8, 20, 40, 75, 10, 9, 10, 1, 25, 0.8, 2, 1, 8, 65, 190,
], dtype=float)
CAPACITY_HIGH = np.array([
    65, 70, 50, 3, 55, 2, 5, 20, 12, 8, 35, 15, 12, 35, 55, 85, 18, 15, 13, 4, 30, 1.2, 4, 5, 12, 80, 220,
], dtype=float)


@pytest.fixture
def capacity_data() -> ImpreciseProblemData:
    """27 facilities with one exact input and an interval capacity output."""
    return ImpreciseProblemData(
        inputs=np.ones((27, 1)),
        outputs=CAPACITY_LOW.reshape(-1, 1),
        upper_outputs=CAPACITY_HIGH.reshape(-1, 1),
        input_names=["staff"],
        output_names=["capacity"],
    )


@pytest.fixture
def ordinal_data() -> ImpreciseProblemData:
    """Three DMUs with an exact input and an ordinal quality output (rank 1 best)."""
    return ImpreciseProblemData(
        inputs=np.array([[2.0], [2.0], [2.0]]),
        outputs=np.array([[10.0, 1], [12.0, 3], [8.0, 2]]),
        input_names=["staff"],
        output_names=["volume", "quality"],
        ordinal_criteria={"quality"},
    )


@pytest.fixture
def imprecise_vdea_data() -> ImpreciseVDEAProblemData:
    """
    Interval cost with a decreasing value function and an ordinal quality.

    A: cost [1, 2], rank 1
    B: cost [3, 5], rank 2
    C: cost [4, 8], rank 3

    A beats everyone under every scenario; B and C overlap on cost.
    """
    return ImpreciseVDEAProblemData(
        inputs=np.array([[1.0], [3.0], [4.0]]),
        upper_inputs=np.array([[2.0], [5.0], [8.0]]),
        outputs=np.array([[1], [2], [3]]),
        input_names=["cost"],
        output_names=["quality"],
        dmu_names=["A", "B", "C"],
        ordinal_criteria={"quality"},
        function_shapes={"cost": FunctionShape([(0.0, 1.0), (10.0, 0.0)])},
    )
