"""Visualization utilities for DEA robustness results."""

from robustdea.graph.preference_graph import PreferenceGraph
from robustdea.viz.plots import (
    plot_acceptability,
    plot_efficiency_ranges,
    plot_extreme_ranks,
)

__all__ = [
    "PreferenceGraph",
    "plot_acceptability",
    "plot_extreme_ranks",
    "plot_efficiency_ranges",
]
