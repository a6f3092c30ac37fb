"""PreferenceGraph: NetworkX-based view of necessary preference relations."""

from __future__ import annotations

from typing import Any, Sequence

import networkx as nx
import numpy as np
from numpy.typing import NDArray


class PreferenceGraph:
    """
    Directed graph of a (weak) preference relation between DMUs.

    Nodes are DMU names. An edge a -> b means a is at least as good as b.
    Mutually preferred DMUs are indifferent; ``hasse_diagram`` collapses
    them into one node and keeps only the covering edges, which is the usual
    way to draw necessary relations.

    Example:
        >>> relations = compute_preference_relations(data)
        >>> graph = relations.to_graph()
        >>> graph.hasse_diagram().edges()
        >>> fig, ax = graph.plot()
    """

    def __init__(self, graph: nx.DiGraph) -> None:
        self.graph = graph

    @classmethod
    def from_relation(
        cls, relation: NDArray[np.bool_], dmu_names: Sequence[str]
    ) -> "PreferenceGraph":
        """Build from an N x N boolean matrix; the diagonal is ignored."""
        graph = nx.DiGraph()
        graph.add_nodes_from(dmu_names)
        for a, b in zip(*np.nonzero(np.asarray(relation, dtype=bool))):
            if a != b:
                graph.add_edge(dmu_names[a], dmu_names[b])
        return cls(graph)

    def indifference_classes(self) -> list[set[str]]:
        """Groups of DMUs that are mutually preferred."""
        return [set(c) for c in nx.strongly_connected_components(self.graph)]

    def hasse_diagram(self) -> nx.DiGraph:
        """
        Transitive reduction of the relation with indifferent DMUs merged.

        Node labels of the result join the names of a class with ", ".
        """
        condensed = nx.condensation(self.graph)
        reduced = nx.transitive_reduction(condensed)
        labels = {
            node: ", ".join(sorted(condensed.nodes[node]["members"]))
            for node in condensed.nodes
        }
        return nx.relabel_nodes(reduced, labels)

    def dominated_by(self, dmu: str) -> set[str]:
        """DMUs that ``dmu`` is at least as good as (excluding itself)."""
        return set(nx.descendants(self.graph, dmu))

    def to_adjacency_matrix(self) -> NDArray[np.bool_]:
        return nx.to_numpy_array(self.graph, dtype=bool)

    def plot(
        self,
        figsize: tuple[int, int] = (10, 8),
        layout: str = "spring",
        ax: Any = None,
    ) -> tuple[Any, Any]:
        """
        Plot the Hasse diagram using matplotlib.

        Args:
            figsize: Figure size as (width, height)
            layout: 'spring', 'circular' or 'kamada_kawai'
            ax: Optional matplotlib axes to draw on

        Returns:
            Tuple of (figure, axes) matplotlib objects
        """
        import matplotlib.pyplot as plt

        if ax is None:
            fig, ax = plt.subplots(figsize=figsize)
        else:
            fig = ax.get_figure()

        hasse = self.hasse_diagram()
        if layout == "circular":
            pos = nx.circular_layout(hasse)
        elif layout == "kamada_kawai":
            pos = nx.kamada_kawai_layout(hasse)
        else:
            pos = nx.spring_layout(hasse, seed=42)

        nx.draw_networkx_nodes(hasse, pos, node_color="lightblue", node_size=700, ax=ax)
        nx.draw_networkx_edges(
            hasse, pos, edge_color="gray", arrows=True, arrowsize=15, ax=ax
        )
        nx.draw_networkx_labels(hasse, pos, ax=ax, font_size=9)

        ax.set_title("Necessary Preference Relation")
        ax.axis("off")
        return fig, ax

    def __repr__(self) -> str:
        return (
            f"PreferenceGraph(nodes={self.graph.number_of_nodes()}, "
            f"edges={self.graph.number_of_edges()})"
        )
