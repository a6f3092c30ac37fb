"""Plotting functions for DEA robustness results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from robustdea.core.result import (
        DistributionResult,
        ExtremeEfficienciesResult,
        ExtremeRanksResult,
    )


def plot_acceptability(
    result: DistributionResult,
    figsize: tuple[int, int] = (10, 6),
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    Stacked bar chart of rank or efficiency acceptability per DMU.

    Each bar is one DMU; segments show the share of samples falling into
    each rank (or efficiency interval), best bucket at the bottom.

    Args:
        result: DistributionResult from an SMAA entry point
        figsize: Figure size as (width, height)
        ax: Optional matplotlib axes to draw on

    Returns:
        Tuple of (figure, axes) matplotlib objects

    Example:
        >>> from robustdea.viz import plot_acceptability
        >>> result = compute_smaa_ranks(data, n_samples=1000, random_seed=1)
        >>> fig, ax = plot_acceptability(result)
        >>> fig.savefig("ranks.png")
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    n_dmus, n_buckets = result.distribution.shape
    positions = np.arange(n_dmus)
    colors = plt.cm.viridis(np.linspace(0, 1, n_buckets))
    # Efficiency buckets run low to high; draw the best one first.
    order = range(n_buckets) if result.kind == "rank" else range(n_buckets - 1, -1, -1)
    labels = result.bucket_labels

    bottom = np.zeros(n_dmus)
    for b in order:
        share = result.distribution[:, b]
        ax.bar(positions, share, bottom=bottom, color=colors[b], label=labels[b], width=0.8)
        bottom += share

    ax.set_xticks(positions)
    ax.set_xticklabels(result.dmu_names, rotation=45, ha="right")
    ax.set_ylim(0, 1)
    ax.set_ylabel("Acceptability")
    title = "Rank Acceptability" if result.kind == "rank" else "Efficiency Acceptability"
    if result.level is not None:
        title += f" ({result.level})"
    ax.set_title(title)
    ax.legend(
        title="Rank" if result.kind == "rank" else "Efficiency",
        loc="upper left",
        bbox_to_anchor=(1.01, 1.0),
        fontsize=8,
    )
    fig.tight_layout()

    return fig, ax


def plot_extreme_ranks(
    result: ExtremeRanksResult,
    expected: DistributionResult | None = None,
    figsize: tuple[int, int] = (10, 6),
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    Range between best and worst attainable rank per DMU.

    Args:
        result: ExtremeRanksResult
        expected: Optional rank DistributionResult whose expected ranks are
            drawn as markers
        figsize: Figure size as (width, height)
        ax: Optional matplotlib axes to draw on

    Returns:
        Tuple of (figure, axes) matplotlib objects
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    positions = np.arange(len(result.dmu_names))
    ax.vlines(positions, result.best_rank, result.worst_rank, color="steelblue", linewidth=6, alpha=0.6)
    ax.scatter(positions, result.best_rank, color="darkgreen", zorder=5, label="Best rank")
    ax.scatter(positions, result.worst_rank, color="darkred", zorder=5, label="Worst rank")
    if expected is not None:
        ax.scatter(
            positions, expected.expected_values, marker="x", color="black", zorder=6,
            label="Expected rank (SMAA)",
        )

    ax.set_xticks(positions)
    ax.set_xticklabels(result.dmu_names, rotation=45, ha="right")
    ax.invert_yaxis()
    ax.set_ylabel("Rank")
    ax.set_title("Attainable Ranks")
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, axis="y", alpha=0.3)

    return fig, ax


def plot_efficiency_ranges(
    result: ExtremeEfficienciesResult,
    figsize: tuple[int, int] = (10, 6),
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    Interval between min and max efficiency per DMU.

    Finite super efficiencies above 1 are marked separately.

    Returns:
        Tuple of (figure, axes) matplotlib objects
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    positions = np.arange(len(result.dmu_names))
    ax.vlines(positions, result.min_efficiency, result.max_efficiency, color="steelblue", linewidth=6, alpha=0.6)
    ax.scatter(positions, result.min_efficiency, color="darkred", zorder=5, label="Min efficiency")
    ax.scatter(positions, result.max_efficiency, color="darkgreen", zorder=5, label="Max efficiency")
    if result.super_efficiency is not None:
        finite = np.isfinite(result.super_efficiency) & (result.super_efficiency > 1.0)
        ax.scatter(
            positions[finite], result.super_efficiency[finite], marker="^", color="orange",
            zorder=5, label="Super efficiency",
        )

    ax.axhline(1.0, color="gray", linestyle="--", alpha=0.5)
    ax.set_xticks(positions)
    ax.set_xticklabels(result.dmu_names, rotation=45, ha="right")
    ax.set_ylabel("Efficiency")
    ax.set_title("Efficiency Ranges")
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, axis="y", alpha=0.3)

    return fig, ax
