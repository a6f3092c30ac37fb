"""Custom exceptions and warnings for robustdea.

All errors inherit from ValueError so that callers already catching
ValueError keep working.

Exception Hierarchy:
    RobustDEAError (ValueError)
    ├── DataValidationError
    │   ├── ConfigurationError
    │   │   └── DimensionError
    │   ├── ValueRangeError
    │   └── NaNInfError
    ├── PolytopeError
    │   ├── InfeasiblePolytopeError
    │   └── UnboundedPolytopeError
    ├── SolverError
    │   ├── SolverInfeasibleError
    │   └── SolverUnboundedError
    └── IllegalOrdinalConfigurationError

Warning Classes:
    DataQualityWarning (UserWarning)
    NumericalInstabilityWarning (UserWarning)
"""

from __future__ import annotations


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class RobustDEAError(ValueError):
    """Base exception for all robustdea errors.

    Example:
        >>> try:
        ...     result = compute_smaa_ranks(data, model="vdea")
        ... except RobustDEAError as e:
        ...     print(f"robustdea error: {e}")
    """

    pass


# =============================================================================
# DATA VALIDATION EXCEPTIONS
# =============================================================================


class DataValidationError(RobustDEAError):
    """Raised when problem data fails validation checks.

    Base class for every error caused by the shape or content of the
    user-supplied problem description.
    """

    pass


class ConfigurationError(DataValidationError):
    """Raised when a problem description is inconsistent.

    Common causes:
        - A weight constraint references an unknown criterion or node name
        - A hierarchy repeats a node name or a leaf has no value function
        - A constraint mixes criteria that the chosen model cannot relate
          (input and output weights in CCR, non-sibling nodes in a
          hierarchical model)
        - The requested hierarchy level does not exist
    """

    pass


class DimensionError(ConfigurationError):
    """Raised when table dimensions are incompatible.

    Common causes:
        - inputs and outputs have different numbers of rows (DMUs)
        - the number of names does not match the number of columns
        - tables are not 2D

    Example:
        >>> ProblemData(inputs=np.ones((3, 2)), outputs=np.ones((4, 1)))
        DimensionError: inputs have 3 rows but outputs have 4 rows...
    """

    pass


class ValueRangeError(DataValidationError):
    """Raised when values are outside their admissible range.

    Common causes:
        - Negative performances
        - Value function points outside [0, 1] or not monotonic
        - Interval upper bounds below lower bounds
        - Ordinal ranks that are not positive integers
    """

    pass


class NaNInfError(DataValidationError):
    """Raised when NaN or Inf values are found in performance tables."""

    pass


# =============================================================================
# SAMPLING EXCEPTIONS
# =============================================================================


class PolytopeError(RobustDEAError):
    """Raised when the admissible weight region cannot be sampled."""

    pass


class InfeasiblePolytopeError(PolytopeError):
    """Raised when the weight constraints admit no interior point.

    This is a property of the problem, not a transient failure: the user
    constraints (together with the model rows such as sum-to-one) describe an
    empty or flat region.

    Suggested fixes:
        1. Check bounds of individual weight constraints for contradictions
        2. Replace equality constraints on a single weight by narrow intervals
    """

    pass


class UnboundedPolytopeError(PolytopeError):
    """Raised when the weight constraints describe an unbounded region.

    Uniform sampling needs a bounded region; this usually means a model row
    normalising the weights is missing.
    """

    pass


# =============================================================================
# OPTIMIZATION EXCEPTIONS
# =============================================================================


class SolverError(RobustDEAError):
    """Raised when the LP/MIP solver does not return an optimal solution.

    Unlike ConfigurationError this describes the optimization model built
    for a single query. Subclasses distinguish infeasible and unbounded
    models so that callers can map them to domain-level answers.
    """

    pass


class SolverInfeasibleError(SolverError):
    """Raised when the constructed LP/MIP has no feasible solution."""

    pass


class SolverUnboundedError(SolverError):
    """Raised when the constructed LP/MIP objective is unbounded."""

    pass


class IllegalOrdinalConfigurationError(RobustDEAError):
    """Raised when ordinal information cannot be mapped onto a numeric scale.

    Common causes:
        - alpha ** (levels - 1) * epsilon exceeds the top of the scale
        - alpha below 1 or epsilon not positive
        - ranks with gaps, or repeated ranks when ties are not allowed
    """

    pass


# =============================================================================
# WARNINGS
# =============================================================================


class DataQualityWarning(UserWarning):
    """Warning for data issues that do not prevent computation.

    Emitted when:
        - A performance lies outside the control points of its value
          function and is clamped
    """

    pass


class NumericalInstabilityWarning(UserWarning):
    """Warning for potential numerical issues in computations.

    Emitted when:
        - Thinning makes a Hit-and-Run run very long
        - The solver stops with a non-optimal status that still carries a
          solution
        - The Chebyshev radius of the weight region is close to zero
    """

    pass
