"""
Indented text rendering of subtrees.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Set, Tuple

from hierograph.graph.errors import CycleDetectedError
from hierograph.utils.config import config

if TYPE_CHECKING:
    from hierograph.graph.ir import Graph, GraphNode, NodeRef


def iter_subtree(graph: Graph, node: NodeRef) -> Iterator[Tuple[int, GraphNode]]:
    """
    Depth-first, pre-order walk below ``node`` yielding ``(depth, node)``.

    Children are visited in attachment order. A node with several parents
    inside the subtree is yielded once per path leading to it.

    Raises:
        CycleDetectedError: if a path below ``node`` leads back onto itself.
    """
    start = graph.resolve(node)
    nodes = graph._nodes
    path: List[str] = []
    on_path: Set[str] = set()
    # A ``None`` entry marks leaving the node entered last.
    stack: List[Tuple[int, Optional[GraphNode]]] = [(0, start)]
    while stack:
        depth, current = stack.pop()
        if current is None:
            on_path.discard(path.pop())
            continue
        if current.id in on_path:
            raise CycleDetectedError(
                tuple(path) + (current.id,),
                f"Cycle reached while rendering below {start.id!r}: "
                f"{current.id!r} is its own descendant",
            )
        yield depth, current
        path.append(current.id)
        on_path.add(current.id)
        stack.append((depth, None))
        for key in reversed(current._children):
            stack.append((depth + 1, nodes[key]))


def render_subtree(graph: Graph, node: NodeRef, indent: Optional[str] = None) -> str:
    """
    Shows the subtree below ``node`` as an indented list, one payload per
    line, one ``indent`` unit per depth level.
    """
    unit = config.indent if indent is None else indent
    return "".join(f"{unit * depth}{current}\n" for depth, current in iter_subtree(graph, node))
