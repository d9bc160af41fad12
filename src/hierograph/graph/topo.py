"""
Deterministic topological ordering and ranking.
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, Dict, List, Mapping, Protocol, Tuple

from hierograph.graph.errors import CycleDetectedError
from hierograph.utils.logging import logger

if TYPE_CHECKING:
    from hierograph.graph.ir import Graph, GraphNode


class _NodeSet(Protocol):
    def items(self) -> Mapping[str, "GraphNode"]: ...


def topological_order(nodes: _NodeSet) -> List[GraphNode]:
    """
    Kahn topo-sort over a Graph or ChildGraph, without touching ranks.

    Among the nodes that are ready at any point, the earliest created one
    is emitted first, so the order only depends on the construction
    sequence. Edges leaving the node set are ignored.

    Raises:
        CycleDetectedError: naming every node that could not be ordered.
    """
    members = nodes.items()
    position: Dict[str, int] = {}
    indeg: Dict[str, int] = {}
    ready: List[Tuple[int, str]] = []

    for pos, (key, node) in enumerate(members.items()):
        position[key] = pos
        indeg[key] = sum(1 for parent in node._parents if parent in members)
        if indeg[key] == 0:
            ready.append((pos, key))
    heapq.heapify(ready)

    order: List[GraphNode] = []
    while ready:
        _, current = heapq.heappop(ready)
        node = members[current]
        order.append(node)
        for child in node._children:
            if child not in indeg:
                continue
            indeg[child] -= 1
            if indeg[child] == 0:
                heapq.heappush(ready, (position[child], child))

    if len(order) != len(members):
        unranked = [key for key, deg in indeg.items() if deg > 0]
        logger.warning(
            "Ranking stopped after %d of %d nodes; cycle through %s",
            len(order),
            len(members),
            unranked[0],
        )
        raise CycleDetectedError(unranked)

    return order


def assign_ranks(graph: Graph) -> Dict[str, int]:
    """
    Rank every node of ``graph`` (0 for the first node in topological order).

    Ranks are committed only once the whole pass has succeeded; on a cycle
    no node receives a rank.
    """
    order = topological_order(graph)
    ranks = {node.id: idx for idx, node in enumerate(order)}
    graph._commit_ranks(ranks)
    logger.debug("Ranked %d nodes", len(ranks))
    return ranks

