"""
Graph engine.

This package defines an append-only DAG of named nodes:

- `Graph` and `GraphNode` (see `ir.py`)
- Deterministic topological ranking (`topo.py`)
- Subtree views and indented text rendering (`view.py`, `visualize.py`)
"""

from .errors import CycleDetectedError, DuplicateKeyError, GraphError, UnknownNodeError
from .ir import Graph, GraphNode
from .view import ChildGraph
from . import topo
from . import visualize

__all__ = [
    "Graph",
    "GraphNode",
    "ChildGraph",
    "GraphError",
    "DuplicateKeyError",
    "UnknownNodeError",
    "CycleDetectedError",
    "topo",
    "visualize",
]
