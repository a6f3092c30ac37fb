"""Uniform sampling of the admissible weight polytope.

Equality rows are eliminated first (particular solution plus orthonormal
null space basis), a strictly interior start is found as the Chebyshev
centre of the remaining inequalities, and a Hit-and-Run walk with
``ceil(c * d**3)`` steps between kept samples produces the weights.
"""

from __future__ import annotations

import logging
import math
import warnings

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import null_space
from scipy.optimize import linprog

from robustdea._kernels import WALK_UNBOUNDED, hit_and_run_walk
from robustdea.algorithms.polytope import ConstraintSystem
from robustdea.core.exceptions import (
    InfeasiblePolytopeError,
    NumericalInstabilityWarning,
    UnboundedPolytopeError,
    ValueRangeError,
)
from robustdea.core.result import WeightSamplesCollection

logger = logging.getLogger(__name__)

DEFAULT_THINNING = 1.0

# Radius cap of the Chebyshev LP; reaching it means the region is unbounded
_MAX_RADIUS = 1e6
_MIN_RADIUS = 1e-9
# Coordinates closer to zero than this are round-off from the null space map
_SNAP_TOLERANCE = 1e-12
# Walk length (steps * dimension) per kernel call
_CHUNK_BUDGET = 2_000_000


def as_generator(random_seed: int | np.random.Generator | None) -> np.random.Generator:
    """Return ``random_seed`` if it is a Generator, else a new seeded one."""
    if isinstance(random_seed, np.random.Generator):
        return random_seed
    return np.random.default_rng(random_seed)


def find_interior_point(
    A: NDArray[np.float64],
    b: NDArray[np.float64],
) -> tuple[NDArray[np.float64], float]:
    """
    Chebyshev centre of {x : A x <= b}.

    Solves ``max r`` subject to ``A_i x + ||A_i|| r <= b_i`` with
    ``0 <= r <= 1e6`` using HiGHS.

    Args:
        A: m x d inequality matrix
        b: m right-hand sides

    Returns:
        Tuple of (centre, radius)

    Raises:
        InfeasiblePolytopeError: If the region is empty or has no interior
        UnboundedPolytopeError: If balls of any radius fit in the region
    """
    m, d = A.shape
    norms = np.linalg.norm(A, axis=1)
    c = np.zeros(d + 1)
    c[-1] = -1.0
    bounds = [(None, None)] * d + [(0.0, _MAX_RADIUS)]
    result = linprog(
        c,
        A_ub=np.hstack([A, norms.reshape(-1, 1)]) if m else None,
        b_ub=b if m else None,
        bounds=bounds,
        method="highs",
    )
    if result.status == 2:
        raise InfeasiblePolytopeError(
            "Weight constraints are contradictory: the admissible weight region is empty."
        )
    if result.status != 0:
        raise InfeasiblePolytopeError(f"Chebyshev centre LP failed: {result.message}")

    centre = result.x[:d]
    radius = float(result.x[-1])
    if radius >= _MAX_RADIUS * (1 - 1e-9):
        raise UnboundedPolytopeError(
            "Admissible weight region is unbounded. Add a normalisation row for the weights."
        )
    if radius <= _MIN_RADIUS:
        raise InfeasiblePolytopeError(
            f"Admissible weight region has no interior (Chebyshev radius {radius:.3e}). "
            f"Replace equality-like pairs of constraints with intervals."
        )
    if radius < 1e-6:
        warnings.warn(
            f"Admissible weight region is very thin (Chebyshev radius {radius:.3e}); "
            f"Hit-and-Run will mix slowly.",
            NumericalInstabilityWarning,
            stacklevel=3,
        )
    return centre, radius


class HitAndRunSampler:
    """
    Hit-and-Run sampler over a ConstraintSystem.

    Attributes:
        thinning_factor: c in ``ceil(c * d**3)`` steps per kept sample
    """

    def __init__(self, thinning_factor: float = DEFAULT_THINNING) -> None:
        if thinning_factor <= 0:
            raise ValueRangeError(f"thinning_factor must be positive, got {thinning_factor}")
        self.thinning_factor = thinning_factor

    def thinning(self, dimension: int) -> int:
        return max(1, math.ceil(self.thinning_factor * dimension ** 3))

    def sample(
        self,
        system: ConstraintSystem,
        n_samples: int,
        rng: np.random.Generator,
    ) -> NDArray[np.float64]:
        """
        Draw ``n_samples`` points approximately uniformly from ``system``.

        Returns:
            n_samples x D matrix of points

        Raises:
            InfeasiblePolytopeError: No interior point exists
            UnboundedPolytopeError: The region is unbounded
        """
        A_ub, b_ub = system.inequalities()
        A_eq, b_eq = system.equalities()

        if A_eq.shape[0]:
            particular = np.linalg.lstsq(A_eq, b_eq, rcond=None)[0]
            residual = np.abs(A_eq @ particular - b_eq)
            if np.any(residual > 1e-9 * max(1.0, float(np.abs(b_eq).max()))):
                raise InfeasiblePolytopeError("Equality constraints on the weights are inconsistent")
            basis = null_space(A_eq)
        else:
            particular = np.zeros(system.dimension)
            basis = np.eye(system.dimension)

        A = A_ub @ basis
        b = b_ub - A_ub @ particular
        d = basis.shape[1]

        # Rows constant on the affine hull either always hold or never do.
        flat = np.all(np.abs(A) <= 1e-12, axis=1)
        if np.any(b[flat] < -1e-9):
            raise InfeasiblePolytopeError(
                "Weight constraints contradict the normalisation of the weights"
            )
        A, b = A[~flat], b[~flat]

        if d == 0:
            logger.debug("Weight region is a single point; returning it %d times", n_samples)
            return snap_to_bounds(system, np.tile(particular, (n_samples, 1)))

        start, radius = find_interior_point(A, b)
        thinning = self.thinning(d)
        logger.debug(
            "Hit-and-Run: dimension=%d rows=%d radius=%.3e thinning=%d samples=%d",
            d, A.shape[0], radius, thinning, n_samples,
        )
        if thinning * n_samples > 100_000_000:
            warnings.warn(
                f"Hit-and-Run needs {thinning * n_samples:,} steps "
                f"(dimension {d}, thinning {thinning}); this may take a while.",
                NumericalInstabilityWarning,
                stacklevel=3,
            )

        A = np.ascontiguousarray(A)
        b = np.ascontiguousarray(b)
        per_chunk = max(1, _CHUNK_BUDGET // (thinning * d))
        reduced = np.empty((n_samples, d))
        current = start
        filled = 0
        while filled < n_samples:
            count = min(per_chunk, n_samples - filled)
            steps = count * thinning
            directions = rng.standard_normal((steps, d))
            directions /= np.linalg.norm(directions, axis=1, keepdims=True)
            uniforms = rng.random(steps)
            chunk, current, status = hit_and_run_walk(A, b, current, directions, uniforms, thinning)
            if status == WALK_UNBOUNDED:
                raise UnboundedPolytopeError(
                    "Admissible weight region is unbounded along a sampled direction"
                )
            reduced[filled:filled + count] = chunk
            filled += count

        return snap_to_bounds(system, particular + reduced @ basis.T)


def snap_to_bounds(system: ConstraintSystem, samples: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Remove round-off left by mapping reduced coordinates back to weights.

    Entries within 1e-12 of zero become exactly zero, and columns bounded by
    a ``w >= 0`` row are clipped at zero.
    """
    samples = np.where(np.abs(samples) < _SNAP_TOLERANCE, 0.0, samples)
    bounded = system.non_negative_columns()
    samples[:, bounded] = np.maximum(samples[:, bounded], 0.0)
    return samples


def sample_weights(
    system: ConstraintSystem,
    n_samples: int,
    rng: int | np.random.Generator | None = None,
    n_inputs: int = 0,
    thinning_factor: float = DEFAULT_THINNING,
) -> WeightSamplesCollection:
    """
    Sample admissible weight vectors.

    Args:
        system: Frozen constraint system (see ``build_weight_polytope``)
        n_samples: Number of samples K (>= 1)
        rng: Generator or seed
        n_inputs: Number of leading columns that weight inputs
        thinning_factor: c in ``ceil(c * d**3)``

    Returns:
        WeightSamplesCollection with exactly ``n_samples`` rows

    Example:
        >>> system = build_weight_polytope(data, get_model_variant("vdea"))
        >>> weights = sample_weights(system, 1000, rng=42)
    """
    if n_samples < 1:
        raise ValueRangeError(f"n_samples must be at least 1, got {n_samples}")
    sampler = HitAndRunSampler(thinning_factor)
    samples = sampler.sample(system, n_samples, as_generator(rng))
    return WeightSamplesCollection(samples=samples, names=system.names, n_inputs=n_inputs)
