"""
robustdea: Robustness Analysis for Data Envelopment Analysis.

Extreme efficiencies, extreme ranks, preference relations and SMAA
acceptability for CCR and value-based (VDEA) models with precise,
imprecise and hierarchical data.
"""

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
from robustdea.core.types import ConstraintOperator, ResolutionMode
from robustdea.core.exceptions import (
    RobustDEAError,
    ConfigurationError,
    InfeasiblePolytopeError,
    UnboundedPolytopeError,
    SolverError,
    IllegalOrdinalConfigurationError,
)
from robustdea.algorithms.smaa import (
    DEFAULT_NUM_SAMPLES,
    DEFAULT_NUM_INTERVALS,
    DEFAULT_TIE_TOLERANCE,
    compute_smaa_efficiency,
    compute_smaa_ranks,
    compute_smaa_preferences,
)
from robustdea.algorithms.ccr import (
    max_efficiency,
    super_efficiency,
    min_efficiency,
    compute_extreme_efficiencies,
)
from robustdea.algorithms.vdea import (
    min_rank,
    max_rank,
    is_necessarily_preferred,
    is_possibly_preferred,
    compute_extreme_ranks,
    compute_preference_relations,
    compute_extreme_value_efficiencies,
)
from robustdea.algorithms.imprecise import (
    ImprecisePerformanceConverter,
    compute_imprecise_smaa_efficiency,
    compute_imprecise_smaa_ranks,
)
from robustdea.algorithms import hierarchy

__version__ = "0.1.0"

__all__ = [
    # Data structures
    "Constraint",
    "FunctionShape",
    "HierarchyNode",
    "ProblemData",
    "VDEAProblemData",
    "ImpreciseProblemData",
    "ImpreciseVDEAProblemData",
    "HierarchicalVDEAProblemData",
    "ConstraintOperator",
    "ResolutionMode",
    # Result types
    "WeightSamplesCollection",
    "PerformanceSamplesCollection",
    "DistributionResult",
    "PairwiseWinningResult",
    "ExtremeEfficienciesResult",
    "ExtremeRanksResult",
    "PreferenceRelationsResult",
    # SMAA
    "DEFAULT_NUM_SAMPLES",
    "DEFAULT_NUM_INTERVALS",
    "DEFAULT_TIE_TOLERANCE",
    "compute_smaa_efficiency",
    "compute_smaa_ranks",
    "compute_smaa_preferences",
    "compute_imprecise_smaa_efficiency",
    "compute_imprecise_smaa_ranks",
    # CCR extreme efficiencies
    "max_efficiency",
    "super_efficiency",
    "min_efficiency",
    "compute_extreme_efficiencies",
    # VDEA extreme values
    "min_rank",
    "max_rank",
    "is_necessarily_preferred",
    "is_possibly_preferred",
    "compute_extreme_ranks",
    "compute_preference_relations",
    "compute_extreme_value_efficiencies",
    # Imprecise data
    "ImprecisePerformanceConverter",
    # Hierarchical VDEA
    "hierarchy",
    # Exceptions
    "RobustDEAError",
    "ConfigurationError",
    "InfeasiblePolytopeError",
    "UnboundedPolytopeError",
    "SolverError",
    "IllegalOrdinalConfigurationError",
]
