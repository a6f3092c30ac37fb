"""Numba JIT-compiled kernels for robustdea.

This module contains the inner loops of the sampling and ranking code.
All functions use `@njit(cache=True)` to cache compiled code to disk,
avoiding recompilation overhead. Random numbers are drawn by the caller and
passed in, so the kernels are deterministic.
"""

from __future__ import annotations

import numpy as np
from numba import njit

# Status codes returned by hit_and_run_walk
WALK_OK = 0
WALK_UNBOUNDED = 1


# =============================================================================
# HIT-AND-RUN
# =============================================================================


@njit(cache=True)
def hit_and_run_walk(
    A: np.ndarray,
    b: np.ndarray,
    x0: np.ndarray,
    directions: np.ndarray,
    uniforms: np.ndarray,
    thinning: int,
) -> tuple:
    """
    Run Hit-and-Run steps inside the polytope {x : A x <= b}.

    Step s moves along ``directions[s]`` (unit vectors) to the point at
    fraction ``uniforms[s]`` of the chord through the current point. Every
    ``thinning``-th point is kept.

    Args:
        A: m x d inequality matrix
        b: m right-hand sides
        x0: Strictly interior starting point (d,)
        directions: S x d unit directions, S a multiple of ``thinning``
        uniforms: S uniforms in [0, 1)
        thinning: Steps per kept sample

    Returns:
        Tuple of (samples (S / thinning) x d, last point, status). Status is
        WALK_UNBOUNDED when a chord has an infinite end.
    """
    m, d = A.shape
    n_steps = directions.shape[0]
    n_keep = n_steps // thinning
    samples = np.empty((n_keep, d))
    x = x0.copy()
    slack = np.empty(m)
    for i in range(m):
        acc = 0.0
        for j in range(d):
            acc += A[i, j] * x[j]
        slack[i] = b[i] - acc

    for s in range(n_steps):
        u = directions[s]
        t_low = -np.inf
        t_high = np.inf
        for i in range(m):
            au = 0.0
            for j in range(d):
                au += A[i, j] * u[j]
            room = slack[i] if slack[i] > 0.0 else 0.0
            if au > 1e-12:
                t = room / au
                if t < t_high:
                    t_high = t
            elif au < -1e-12:
                t = room / au
                if t > t_low:
                    t_low = t
        if not (np.isfinite(t_low) and np.isfinite(t_high)):
            return samples, x, WALK_UNBOUNDED

        step = t_low + uniforms[s] * (t_high - t_low)
        for j in range(d):
            x[j] += step * u[j]
        for i in range(m):
            au = 0.0
            for j in range(d):
                au += A[i, j] * u[j]
            slack[i] -= step * au

        if (s + 1) % thinning == 0:
            samples[(s + 1) // thinning - 1] = x

    return samples, x, WALK_OK


# =============================================================================
# RANKING
# =============================================================================


@njit(cache=True)
def competition_ranks(scores: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Competition ranks per sample (row), 1 = best.

    The rank of DMU i is 1 plus the number of DMUs whose score exceeds
    score_i by more than ``tolerance``. DMUs within tolerance of each other
    share the better rank.

    Args:
        scores: K x N score matrix (higher is better)
        tolerance: Absolute tie tolerance

    Returns:
        K x N int64 rank matrix
    """
    K, N = scores.shape
    ranks = np.empty((K, N), dtype=np.int64)
    for k in range(K):
        for i in range(N):
            better = 0
            threshold = scores[k, i] + tolerance
            for j in range(N):
                if scores[k, j] > threshold:
                    better += 1
            ranks[k, i] = better + 1
    return ranks


@njit(cache=True)
def pairwise_win_counts(scores: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Count samples where DMU i scores at least as well as DMU j.

    Args:
        scores: K x N score matrix (higher is better)
        tolerance: Absolute tie tolerance

    Returns:
        N x N int64 matrix of counts
    """
    K, N = scores.shape
    counts = np.zeros((N, N), dtype=np.int64)
    for k in range(K):
        for i in range(N):
            for j in range(N):
                if scores[k, i] >= scores[k, j] - tolerance:
                    counts[i, j] += 1
    return counts


@njit(cache=True)
def bucket_counts(indices: np.ndarray, n_buckets: int) -> np.ndarray:
    """
    Histogram of bucket indices per column.

    Args:
        indices: K x N matrix of bucket indices in [0, n_buckets)
        n_buckets: Number of buckets

    Returns:
        N x n_buckets int64 count matrix
    """
    K, N = indices.shape
    counts = np.zeros((N, n_buckets), dtype=np.int64)
    for k in range(K):
        for i in range(N):
            counts[i, indices[k, i]] += 1
    return counts
