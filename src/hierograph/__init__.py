"""
hierograph

Named directed acyclic graphs with deterministic ranking and rendering.
"""

from .graph.errors import CycleDetectedError, DuplicateKeyError, GraphError, UnknownNodeError
from .graph.ir import Graph, GraphNode
from .graph.topo import assign_ranks, topological_order
from .graph.view import ChildGraph
from .graph.visualize import iter_subtree, render_subtree

__all__ = [
    "Graph",
    "GraphNode",
    "ChildGraph",
    "GraphError",
    "DuplicateKeyError",
    "UnknownNodeError",
    "CycleDetectedError",
    "assign_ranks",
    "topological_order",
    "iter_subtree",
    "render_subtree",
]
