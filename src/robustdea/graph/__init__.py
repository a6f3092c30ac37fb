"""Graph utilities for criteria hierarchies and preference relations."""

from robustdea.graph.criteria_tree import CriteriaTree
from robustdea.graph.preference_graph import PreferenceGraph

__all__ = [
    "CriteriaTree",
    "PreferenceGraph",
]
