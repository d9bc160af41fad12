from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pytest

from hierograph.graph.errors import CycleDetectedError
from hierograph.graph.ir import Graph


def _random_edges(rng: np.random.Generator, num_nodes: int, max_parents: int) -> List[Tuple[str, str]]:
    """(parent, child) pairs where parents always come earlier, so the result is acyclic."""
    edges: List[Tuple[str, str]] = []
    for idx in range(1, num_nodes):
        count = int(rng.integers(1, min(max_parents, idx) + 1))
        for parent in rng.choice(idx, size=count, replace=False):
            edges.append((f"n{int(parent)}", f"n{idx}"))
    return edges


def _build_random_dag(rng: np.random.Generator, num_nodes: int = 60, max_parents: int = 3) -> Graph:
    names = [f"n{idx}" for idx in range(num_nodes)]
    graph = Graph()
    # Creation order differs from the edge-safe order on purpose.
    for pos in rng.permutation(num_nodes):
        graph.add_node(names[int(pos)], names[int(pos)])
    for parent, child in _random_edges(rng, num_nodes, max_parents):
        if rng.random() < 0.5:
            graph.add_parent_to(child, parent)
        else:
            graph.add_child_to(parent, child)
    return graph


def _reachable_by_brute_force(graph: Graph, start: str) -> set[str]:
    reached = {start}
    changed = True
    while changed:
        changed = False
        for parent, child in graph.edges():
            if parent in reached and child not in reached:
                reached.add(child)
                changed = True
    return reached


@pytest.mark.parametrize("seed", range(5))
def test_acyclic_ranking_law(seed: int) -> None:
    graph = _build_random_dag(np.random.default_rng(seed))
    graph.validate()

    for parent, child in graph.edges():
        assert graph.get(parent).rank < graph.get(child).rank
    ranks = sorted(node.rank for node in graph.items().values())
    assert ranks == list(range(len(graph)))


def test_ranking_depends_only_on_construction_sequence() -> None:
    first = _build_random_dag(np.random.default_rng(7))
    second = _build_random_dag(np.random.default_rng(7))

    assert [n.id for n in first.topological_sort()] == [n.id for n in second.topological_sort()]


def test_direction_equivalence_and_idempotence(rng: np.random.Generator) -> None:
    edges = _random_edges(rng, 40, 4)
    names = [f"n{idx}" for idx in range(40)]

    via_parent = Graph()
    via_child = Graph()
    twice = Graph()
    for graph in (via_parent, via_child, twice):
        for name in names:
            graph.add_node(name)

    for parent, child in edges:
        via_parent.add_parent_to(child, parent)
        via_child.add_child_to(parent, child)
        twice.add_child_to(parent, child)
        twice.add_parent_to(child, parent)

    for name in names:
        expected = (via_parent.get(name).parents, via_parent.get(name).children)
        assert (via_child.get(name).parents, via_child.get(name).children) == expected
        assert (twice.get(name).parents, twice.get(name).children) == expected
    assert via_parent.num_edges == via_child.num_edges == twice.num_edges == len(edges)


def test_enumeration_follows_creation(rng: np.random.Generator) -> None:
    names = [f"term_{int(v)}" for v in rng.permutation(200)]
    graph = Graph()
    for name in names:
        graph.add_node(name)
    assert list(graph.items()) == names


def test_child_graph_matches_brute_force_reachability(rng: np.random.Generator) -> None:
    graph = _build_random_dag(rng, num_nodes=40)
    for start in list(graph)[:10]:
        view = graph.get_child_graph(start)
        assert set(view) == _reachable_by_brute_force(graph, start)
        position = {node.id: idx for idx, node in enumerate(view.topological_order())}
        for parent, child in graph.edges():
            if parent in view:
                assert position[parent] < position[child]


def test_render_is_repeatable_on_random_dag(rng: np.random.Generator) -> None:
    graph = _build_random_dag(rng, num_nodes=25, max_parents=2)
    root = graph.root()
    assert graph.render(root) == graph.render(root)


def test_back_edge_is_always_a_cycle(rng: np.random.Generator) -> None:
    graph = _build_random_dag(rng, num_nodes=30)
    order = [n.id for n in graph.topological_sort()]
    # Closing the loop from a descendant back up to its ancestor.
    source = next(key for key in order if graph.get(key).descendants())
    target = graph.get(source).descendants()[-1].id
    graph.add_parent_to(source, target)

    with pytest.raises(CycleDetectedError) as excinfo:
        graph.topological_sort()
    assert source in excinfo.value.nodes
