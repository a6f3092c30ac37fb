"""
Pathological fixtures for EVALs.

Each fixture builds a problem that targets a specific numerical or
algorithmic weakness.
"""

import numpy as np
import pytest

from robustdea import (
    Constraint,
    FunctionShape,
    ImpreciseProblemData,
    ProblemData,
    VDEAProblemData,
)


LINEAR_GAIN = FunctionShape([(0.0, 0.0), (10.0, 1.0)])


# =============================================================================
# MINIMAL DATA FIXTURES
# =============================================================================


@pytest.fixture
def single_dmu_ccr() -> ProblemData:
    """N=1: the DMU is its own reference set."""
    return ProblemData(
        inputs=np.array([[2.0]]),
        outputs=np.array([[3.0, 1.0]]),
        dmu_names=["only"],
    )


@pytest.fixture
def single_dmu_vdea() -> VDEAProblemData:
    return VDEAProblemData(
        inputs=np.empty((1, 0)),
        outputs=np.array([[4.0, 6.0]]),
        output_names=["a", "b"],
        dmu_names=["only"],
        function_shapes={"a": LINEAR_GAIN, "b": LINEAR_GAIN},
    )


@pytest.fixture
def single_criterion_vdea() -> VDEAProblemData:
    """One criterion: the weight region is the single point w = 1."""
    return VDEAProblemData(
        inputs=np.empty((3, 0)),
        outputs=np.array([[2.0], [8.0], [5.0]]),
        output_names=["a"],
        dmu_names=["low", "high", "mid"],
        function_shapes={"a": LINEAR_GAIN},
    )


# =============================================================================
# TIES
# =============================================================================


@pytest.fixture
def identical_dmus_vdea() -> VDEAProblemData:
    """Three identical DMUs and one strictly worse one."""
    return VDEAProblemData(
        inputs=np.empty((4, 0)),
        outputs=np.array([[5.0, 5.0], [5.0, 5.0], [5.0, 5.0], [1.0, 1.0]]),
        output_names=["a", "b"],
        dmu_names=["A", "B", "C", "W"],
        function_shapes={"a": LINEAR_GAIN, "b": LINEAR_GAIN},
    )


@pytest.fixture
def identical_dmus_ccr() -> ProblemData:
    return ProblemData(
        inputs=np.array([[1.0], [1.0]]),
        outputs=np.array([[2.0, 3.0], [2.0, 3.0]]),
        dmu_names=["A", "B"],
    )


# =============================================================================
# DEGENERATE WEIGHT REGIONS
# =============================================================================


def _two_criteria_vdea(*constraints: Constraint) -> VDEAProblemData:
    return VDEAProblemData(
        inputs=np.empty((3, 0)),
        outputs=np.array([[1.0, 9.0], [9.0, 1.0], [5.0, 5.0]]),
        output_names=["a", "b"],
        function_shapes={"a": LINEAR_GAIN, "b": LINEAR_GAIN},
        weight_constraints=constraints,
    )


@pytest.fixture
def contradictory_vdea() -> VDEAProblemData:
    """w_a >= 0.8 and w_a <= 0.1: empty weight region."""
    return _two_criteria_vdea(Constraint.at_least("a", 0.8), Constraint.at_most("a", 0.1))


@pytest.fixture
def pinned_vdea() -> VDEAProblemData:
    """w_a = 0.3 fixes the whole weight vector."""
    return _two_criteria_vdea(Constraint("=", 0.3, {"a": 1.0}))


@pytest.fixture
def sliver_vdea() -> VDEAProblemData:
    """w_a in [0.5, 0.5 + 1e-7]: non-empty but extremely thin."""
    return _two_criteria_vdea(Constraint.at_least("a", 0.5), Constraint.at_most("a", 0.5 + 1e-7))


# =============================================================================
# ORDINAL SCALES
# =============================================================================


@pytest.fixture
def many_ordinal_levels() -> ImpreciseProblemData:
    """Thirty ranked levels on one output."""
    n = 30
    return ImpreciseProblemData(
        inputs=np.ones((n, 1)),
        outputs=np.arange(1, n + 1, dtype=float).reshape(-1, 1),
        input_names=["staff"],
        output_names=["quality"],
        ordinal_criteria={"quality"},
    )


# =============================================================================
# DEGENERATE RATIOS
# =============================================================================


@pytest.fixture
def zero_input_ccr() -> ProblemData:
    """DMU 0 uses only x2, and w_x2 = 0 leaves it with no weighted input."""
    return ProblemData(
        inputs=np.array([[0.0, 5.0], [2.0, 3.0], [1.0, 1.0]]),
        outputs=np.array([[1.0, 2.0], [2.0, 1.0], [1.0, 1.0]]),
        weight_constraints=[Constraint("=", 0.0, {"x2": 1.0})],
    )
