from __future__ import annotations

from functools import total_ordering
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from hierograph.graph.errors import DuplicateKeyError, GraphError, UnknownNodeError
from hierograph.utils.config import config
from hierograph.utils.logging import logger

if TYPE_CHECKING:
    from hierograph.graph.view import ChildGraph

NodeRef = Union[str, "GraphNode"]


def _reachable(
    nodes: Mapping[str, "GraphNode"], start: "GraphNode", attr: str
) -> List["GraphNode"]:
    """
    Nodes reachable from ``start`` along ``attr`` ("_children" or "_parents"),
    each once, in depth-first discovery order. ``start`` itself is only
    included when a cycle leads back to it.
    """
    seen: Dict[str, None] = {}
    found: List[GraphNode] = []
    stack: List[Iterator[str]] = [iter(getattr(start, attr))]
    while stack:
        for key in stack[-1]:
            if key in seen:
                continue
            seen[key] = None
            node = nodes[key]
            found.append(node)
            stack.append(iter(getattr(node, attr)))
            break
        else:
            stack.pop()
    return found


@total_ordering
class GraphNode:
    """
    A node of a :class:`Graph`: an id, an opaque payload and mirrored edges.

    Nodes are created by :meth:`Graph.add_node` and their edges are only
    changed through the owning graph, so parent and child lists always
    agree. Neighbours are exposed as ids.

    Sorting nodes orders them by rank when both ranks are current and by
    creation sequence otherwise.
    """

    __slots__ = (
        "_graph",
        "_id",
        "_seq",
        "_parents",
        "_children",
        "_rank",
        "_rank_generation",
        "payload",
    )

    def __init__(self, graph: "Graph", key: str, payload: Any, seq: int) -> None:
        self._graph = graph
        self._id = key
        self._seq = seq
        # dicts used as insertion-ordered sets of ids
        self._parents: Dict[str, None] = {}
        self._children: Dict[str, None] = {}
        self._rank: Optional[int] = None
        self._rank_generation = -1
        self.payload = payload

    @property
    def id(self) -> str:
        return self._id

    @property
    def seq(self) -> int:
        """Creation sequence number within the owning graph."""
        return self._seq

    @property
    def rank(self) -> Optional[int]:
        """Topological rank, or ``None`` if the graph changed since ranking."""
        if self._rank_generation != self._graph._generation:
            return None
        return self._rank

    @property
    def parents(self) -> Tuple[str, ...]:
        return tuple(self._parents)

    @property
    def children(self) -> Tuple[str, ...]:
        return tuple(self._children)

    def parent_nodes(self) -> List["GraphNode"]:
        nodes = self._graph._nodes
        return [nodes[key] for key in self._parents]

    def child_nodes(self) -> List["GraphNode"]:
        nodes = self._graph._nodes
        return [nodes[key] for key in self._children]

    def has_parent(self, key: str) -> bool:
        return key in self._parents

    def has_child(self, key: str) -> bool:
        return key in self._children

    @property
    def in_degree(self) -> int:
        return len(self._parents)

    @property
    def out_degree(self) -> int:
        return len(self._children)

    @property
    def is_root(self) -> bool:
        return not self._parents

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def descendants(self) -> List["GraphNode"]:
        """All nodes below this one, each once, in depth-first discovery order."""
        return _reachable(self._graph._nodes, self, "_children")

    def ancestors(self) -> List["GraphNode"]:
        """All nodes above this one, each once, in depth-first discovery order."""
        return _reachable(self._graph._nodes, self, "_parents")

    def descendant_count(self) -> int:
        return len(self.descendants())

    def ancestor_count(self) -> int:
        return len(self.ancestors())

    def child_graph(self) -> ChildGraph:
        return self._graph.get_child_graph(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GraphNode):
            return NotImplemented
        mine, theirs = self.rank, other.rank
        if mine is not None and theirs is not None:
            return mine < theirs
        return self._seq < other._seq

    # total_ordering needs __eq__; identity keeps nodes hashable.
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __str__(self) -> str:
        return str(self.payload)

    def __repr__(self) -> str:
        return f"GraphNode(id={self._id!r}, payload={self.payload!r}, rank={self.rank})"


class Graph:
    """
    Append-only directed graph of named nodes.

    Nodes are kept in creation order; that order drives enumeration and
    breaks ties during ranking. Edges are mirrored on both endpoints and
    adding an existing edge again is a no-op.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, GraphNode] = {}
        self._num_edges = 0
        # Bumped by every structural change; ranks from older generations are stale.
        self._generation = 0

    def add_node(self, key: str, payload: Any = None) -> GraphNode:
        if key in self._nodes:
            raise DuplicateKeyError(key)
        node = GraphNode(self, key, payload, len(self._nodes))
        self._nodes[key] = node
        self._generation += 1
        return node

    def get(self, key: str) -> Optional[GraphNode]:
        return self._nodes.get(key)

    def payload_of(self, key: str) -> Any:
        node = self._nodes.get(key)
        return None if node is None else node.payload

    def add_parent_to(self, key: str, parent_key: str) -> bool:
        """
        Make ``parent_key`` a parent of ``key``.

        Returns:
            ``True`` if the edge was created, ``False`` if it already existed.
        """
        self._require(key, parent_key)
        return self._link(parent_key, key)

    def add_child_to(self, key: str, child_key: str) -> bool:
        """Make ``child_key`` a child of ``key``; same as ``add_parent_to(child_key, key)``."""
        return self.add_parent_to(child_key, key)

    def add_new_child(self, key: str, child_key: str, payload: Any = None) -> bool:
        """
        Attach ``child_key`` below ``key``, creating it with ``payload`` first
        if it is not in the graph yet. ``key`` must already exist.
        """
        self._require(key)
        if child_key not in self._nodes:
            self.add_node(child_key, payload)
        return self._link(key, child_key)

    def add_new_parent(self, key: str, parent_key: str, payload: Any = None) -> bool:
        """
        Attach ``parent_key`` above ``key``, creating it with ``payload`` first
        if it is not in the graph yet. ``key`` must already exist.
        """
        self._require(key)
        if parent_key not in self._nodes:
            self.add_node(parent_key, payload)
        return self._link(parent_key, key)

    def _require(self, *keys: str) -> None:
        missing = [k for k in dict.fromkeys(keys) if k not in self._nodes]
        if missing:
            raise UnknownNodeError(missing)

    def _link(self, parent_key: str, child_key: str) -> bool:
        parent = self._nodes[parent_key]
        child = self._nodes[child_key]
        if child_key in parent._children:
            logger.debug("Edge %s -> %s already present", parent_key, child_key)
            return False
        parent._children[child_key] = None
        child._parents[parent_key] = None
        self._num_edges += 1
        self._generation += 1
        if config.debug:
            self._check_node(parent)
            self._check_node(child)
        return True

    def items(self) -> Mapping[str, GraphNode]:
        """Read-only id -> node mapping in creation order."""
        return MappingProxyType(self._nodes)

    def values(self) -> List[Any]:
        """Node payloads in creation order."""
        return [node.payload for node in self._nodes.values()]

    def roots(self) -> List[GraphNode]:
        return [node for node in self._nodes.values() if node.is_root]

    def leaves(self) -> List[GraphNode]:
        return [node for node in self._nodes.values() if node.is_leaf]

    def edges(self) -> Iterator[Tuple[str, str]]:
        """(parent, child) id pairs, by parent creation order then attachment order."""
        for node in self._nodes.values():
            for child in node._children:
                yield node.id, child

    @property
    def num_edges(self) -> int:
        return self._num_edges

    def topological_sort(self) -> List[GraphNode]:
        """
        Rank every node and return the nodes in rank order.

        Raises:
            CycleDetectedError: if the graph contains a directed cycle.
        """
        from hierograph.graph.topo import assign_ranks

        ranks = assign_ranks(self)
        ordered = sorted(ranks, key=ranks.__getitem__)
        return [self._nodes[key] for key in ordered]

    def root(self) -> GraphNode:
        """First node of the topological order."""
        order = self.topological_sort()
        if not order:
            raise ValueError("Graph has no nodes.")
        return order[0]

    def validate(self) -> None:
        """
        Validate structural soundness:
        - every edge points at a node of this graph
        - every edge is mirrored on both endpoints
        - graph is acyclic
        """
        for node in self._nodes.values():
            self._check_node(node)

        # Will raise if a cycle exists.
        self.topological_sort()

    def _check_node(self, node: GraphNode) -> None:
        problems: List[str] = []
        for key in node._children:
            child = self._nodes.get(key)
            if child is None:
                problems.append(f"{node.id} -> {key} (unknown child)")
            elif node.id not in child._parents:
                problems.append(f"{node.id} -> {key} (not mirrored in child)")
        for key in node._parents:
            parent = self._nodes.get(key)
            if parent is None:
                problems.append(f"{key} -> {node.id} (unknown parent)")
            elif node.id not in parent._children:
                problems.append(f"{key} -> {node.id} (not mirrored in parent)")
        if problems:
            raise GraphError("Inconsistent edges:\n" + "\n".join(problems))

    def resolve(self, node: NodeRef) -> GraphNode:
        """Accept an id or a node of this graph and return the node."""
        if isinstance(node, GraphNode):
            if self._nodes.get(node.id) is not node:
                raise UnknownNodeError([node.id])
            return node
        found = self._nodes.get(node)
        if found is None:
            raise UnknownNodeError([node])
        return found

    def get_child_graph(self, node: NodeRef) -> ChildGraph:
        """Read-only view of ``node`` and everything below it."""
        from hierograph.graph.view import ChildGraph

        return ChildGraph(self, self.resolve(node))

    def render(self, node: NodeRef, indent: Optional[str] = None) -> str:
        """Indented text rendering of the subtree below ``node``."""
        from hierograph.graph.visualize import render_subtree

        return render_subtree(self, node, indent=indent)

    def _commit_ranks(self, ranks: Mapping[str, int]) -> None:
        generation = self._generation
        for key, value in ranks.items():
            node = self._nodes[key]
            node._rank = value
            node._rank_generation = generation

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, edges={self._num_edges})"
