"""CriteriaTree: NetworkX view of a criteria hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import networkx as nx

from robustdea.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from robustdea.core.problem import HierarchyNode

FLAT_ROOT = "__root__"


class CriteriaTree:
    """
    Validated directed tree of criteria with edges from parent to child.

    Nodes are listed in depth-first pre-order following the order in which
    children were declared, so leaf and node orderings are deterministic.

    Example:
        >>> tree = CriteriaTree(hierarchy)
        >>> tree.leaves_under("health")
        ('h1', 'h2', 'h3')
        >>> tree.path_below("index", "h2")
        ('health', 'h2')
    """

    def __init__(self, root: "HierarchyNode") -> None:
        graph = nx.DiGraph()
        graph.add_node(root.name)
        stack = [root]
        while stack:
            node = stack.pop()
            for child in node.children:
                if child.name in graph:
                    raise ConfigurationError(
                        f"Node name '{child.name}' appears more than once in the hierarchy"
                    )
                graph.add_edge(node.name, child.name)
            stack.extend(reversed(node.children))

        if not nx.is_arborescence(graph):
            raise ConfigurationError("Criteria hierarchy must be a tree with a single root")

        self.graph = graph
        self.root = root.name
        self.nodes: tuple[str, ...] = tuple(nx.dfs_preorder_nodes(graph, source=root.name))

    @classmethod
    def flat(cls, criteria: Sequence[str], root_name: str | None = None) -> "CriteriaTree":
        """
        One-level tree with every criterion directly under the root.

        Without ``root_name`` the root is FLAT_ROOT, wrapped in underscores
        until it differs from every criterion name.
        """
        from robustdea.core.problem import HierarchyNode

        if root_name is None:
            root_name = FLAT_ROOT
            while root_name in criteria:
                root_name = f"_{root_name}_"

        return cls(HierarchyNode(root_name, tuple(HierarchyNode(c) for c in criteria)))

    def __contains__(self, name: str) -> bool:
        return name in self.graph

    def _require(self, name: str) -> None:
        if name not in self.graph:
            raise ConfigurationError(
                f"Unknown hierarchy node '{name}'. Known nodes: {list(self.nodes)}"
            )

    @property
    def non_root_nodes(self) -> tuple[str, ...]:
        return self.nodes[1:]

    @property
    def leaves(self) -> tuple[str, ...]:
        return tuple(n for n in self.nodes if self.graph.out_degree(n) == 0)

    @property
    def internal_nodes(self) -> tuple[str, ...]:
        return tuple(n for n in self.nodes if self.graph.out_degree(n) > 0)

    def is_leaf(self, name: str) -> bool:
        self._require(name)
        return self.graph.out_degree(name) == 0

    def parent(self, name: str) -> str | None:
        self._require(name)
        predecessors = list(self.graph.predecessors(name))
        return predecessors[0] if predecessors else None

    def children(self, name: str) -> tuple[str, ...]:
        self._require(name)
        return tuple(self.graph.successors(name))

    def subtree_nodes(self, name: str) -> tuple[str, ...]:
        """Nodes of the subtree rooted at ``name`` (inclusive), in tree order."""
        self._require(name)
        below = nx.descendants(self.graph, name)
        return tuple(n for n in self.nodes if n == name or n in below)

    def leaves_under(self, name: str) -> tuple[str, ...]:
        self._require(name)
        if self.is_leaf(name):
            return (name,)
        below = nx.descendants(self.graph, name)
        return tuple(n for n in self.leaves if n in below)

    def path_below(self, level: str, leaf: str) -> tuple[str, ...]:
        """Nodes strictly below ``level`` on the way down to ``leaf``."""
        self._require(level)
        self._require(leaf)
        try:
            path = nx.shortest_path(self.graph, level, leaf)
        except nx.NetworkXNoPath:
            raise ConfigurationError(f"'{leaf}' is not below '{level}'") from None
        return tuple(path[1:])

    def __repr__(self) -> str:
        return f"CriteriaTree(root={self.root!r}, nodes={len(self.nodes)}, leaves={len(self.leaves)})"
