"""Sampling and optimization algorithms for DEA robustness analysis."""

from robustdea.algorithms.polytope import (
    ConstraintSystem,
    ConstraintSystemBuilder,
    build_weight_polytope,
)
from robustdea.algorithms.sampling import (
    HitAndRunSampler,
    find_interior_point,
    sample_weights,
)
from robustdea.algorithms.solver import LinearModel, LinearModelSolution
from robustdea.algorithms.models import (
    ModelVariant,
    get_model_variant,
    hierarchical_variant,
)
from robustdea.algorithms.smaa import (
    compute_rank_matrix,
    rank_distribution,
    efficiency_distribution,
    pairwise_winning_probabilities,
    compute_smaa_efficiency,
    compute_smaa_ranks,
    compute_smaa_preferences,
)
from robustdea.algorithms.imprecise import (
    ImprecisePerformanceConverter,
    sample_performances,
    compute_imprecise_smaa_efficiency,
    compute_imprecise_smaa_ranks,
)

__all__ = [
    "ConstraintSystem",
    "ConstraintSystemBuilder",
    "build_weight_polytope",
    "HitAndRunSampler",
    "find_interior_point",
    "sample_weights",
    "LinearModel",
    "LinearModelSolution",
    "ModelVariant",
    "get_model_variant",
    "hierarchical_variant",
    "compute_rank_matrix",
    "rank_distribution",
    "efficiency_distribution",
    "pairwise_winning_probabilities",
    "compute_smaa_efficiency",
    "compute_smaa_ranks",
    "compute_smaa_preferences",
    "ImprecisePerformanceConverter",
    "sample_performances",
    "compute_imprecise_smaa_efficiency",
    "compute_imprecise_smaa_ranks",
]
