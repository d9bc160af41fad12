"""
Exceptions raised by the graph container, ranker and serializer.
"""

from __future__ import annotations

from typing import Iterable, Tuple


class GraphError(Exception):
    """Base class for structural errors reported by a Graph."""


class DuplicateKeyError(GraphError, ValueError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Duplicate node id: {key!r}")


class UnknownNodeError(GraphError, KeyError):
    def __init__(self, keys: Iterable[str]) -> None:
        self.keys: Tuple[str, ...] = tuple(keys)
        super().__init__(
            "Graph has no node with id: " + ", ".join(repr(k) for k in self.keys)
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message.
        return str(self.args[0])


class CycleDetectedError(GraphError, ValueError):
    """
    No total order exists because the graph contains a directed cycle.

    ``nodes`` holds the ids involved: every node left unranked by a
    ranking pass, or the path that closed the cycle during a traversal.
    """

    def __init__(self, nodes: Iterable[str], message: str | None = None) -> None:
        self.nodes: Tuple[str, ...] = tuple(nodes)
        if message is None:
            shown = ", ".join(self.nodes[:10])
            more = "" if len(self.nodes) <= 10 else f" (+{len(self.nodes) - 10} more)"
            message = f"Graph contains a cycle; unranked nodes: {shown}{more}"
        super().__init__(message)
