"""
Read-only subtree projections of a Graph.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional

from hierograph.graph.ir import GraphNode, NodeRef, _reachable
from hierograph.graph.topo import topological_order
from hierograph.utils.logging import logger

if TYPE_CHECKING:
    from hierograph.graph.ir import Graph


class ChildGraph:
    """
    A node plus everything reachable from it through child edges.

    The view shares node objects with the source graph, so payload changes
    show through both. Membership follows the source graph: nodes and edges
    added below ``root`` after the view was built show up on the next
    access. Members are listed in the source graph's creation order.
    """

    def __init__(self, graph: Graph, root: GraphNode) -> None:
        self._graph = graph
        self._root = root
        self._generation = -1
        self._nodes: Dict[str, GraphNode] = {}
        self._members()

    def _members(self) -> Dict[str, GraphNode]:
        """Current members, recollected whenever the source graph has changed."""
        graph = self._graph
        if self._generation != graph._generation:
            reachable = {node.id for node in _reachable(graph._nodes, self._root, "_children")}
            reachable.add(self._root.id)
            self._nodes = {key: node for key, node in graph._nodes.items() if key in reachable}
            self._generation = graph._generation
            logger.debug("Child graph of %s has %d nodes", self._root.id, len(self._nodes))
        return self._nodes

    @property
    def root(self) -> GraphNode:
        return self._root

    @property
    def graph(self) -> Graph:
        return self._graph

    def get(self, key: str) -> Optional[GraphNode]:
        return self._members().get(key)

    def items(self) -> Mapping[str, GraphNode]:
        return MappingProxyType(self._members())

    def roots(self) -> List[GraphNode]:
        """
        Nodes with no parent inside the view. That is ``[root]``, or an empty
        list when a cycle leads back to ``root``.
        """
        members = self._members()
        return [
            node
            for node in members.values()
            if not any(parent in members for parent in node._parents)
        ]

    def topological_order(self) -> List[GraphNode]:
        """Order the view's nodes without assigning ranks."""
        return topological_order(self)

    def render(self, indent: Optional[str] = None) -> str:
        from hierograph.graph.visualize import render_subtree

        return render_subtree(self._graph, self._root, indent=indent)

    def __contains__(self, key: NodeRef) -> bool:
        members = self._members()
        if isinstance(key, GraphNode):
            return members.get(key.id) is key
        return key in members

    def __len__(self) -> int:
        return len(self._members())

    def __iter__(self) -> Iterator[str]:
        return iter(self._members())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ChildGraph(root={self._root.id!r}, nodes={len(self._members())})"
