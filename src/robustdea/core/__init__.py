"""Core data structures for robustdea."""

from robustdea.core.problem import (
    Constraint,
    FunctionShape,
    HierarchyNode,
    ProblemData,
    VDEAProblemData,
    ImpreciseProblemData,
    ImpreciseVDEAProblemData,
    HierarchicalVDEAProblemData,
)
from robustdea.core.result import (
    WeightSamplesCollection,
    PerformanceSamplesCollection,
    DistributionResult,
    PairwiseWinningResult,
    ExtremeEfficienciesResult,
    ExtremeRanksResult,
    PreferenceRelationsResult,
)
from robustdea.core.types import ConstraintOperator, OptimizationSense, ResolutionMode
from robustdea.core.exceptions import (
    RobustDEAError,
    DataValidationError,
    ConfigurationError,
    DimensionError,
    ValueRangeError,
    NaNInfError,
    PolytopeError,
    InfeasiblePolytopeError,
    UnboundedPolytopeError,
    SolverError,
    SolverInfeasibleError,
    SolverUnboundedError,
    IllegalOrdinalConfigurationError,
    DataQualityWarning,
    NumericalInstabilityWarning,
)

__all__ = [
    # Problem descriptions
    "Constraint",
    "FunctionShape",
    "HierarchyNode",
    "ProblemData",
    "VDEAProblemData",
    "ImpreciseProblemData",
    "ImpreciseVDEAProblemData",
    "HierarchicalVDEAProblemData",
    # Results
    "WeightSamplesCollection",
    "PerformanceSamplesCollection",
    "DistributionResult",
    "PairwiseWinningResult",
    "ExtremeEfficienciesResult",
    "ExtremeRanksResult",
    "PreferenceRelationsResult",
    # Enums
    "ConstraintOperator",
    "OptimizationSense",
    "ResolutionMode",
    # Exceptions
    "RobustDEAError",
    "DataValidationError",
    "ConfigurationError",
    "DimensionError",
    "ValueRangeError",
    "NaNInfError",
    "PolytopeError",
    "InfeasiblePolytopeError",
    "UnboundedPolytopeError",
    "SolverError",
    "SolverInfeasibleError",
    "SolverUnboundedError",
    "IllegalOrdinalConfigurationError",
    # Warnings
    "DataQualityWarning",
    "NumericalInstabilityWarning",
]
