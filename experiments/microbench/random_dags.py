"""
Generate synthetic concept hierarchies and time ranking and subtree queries.
"""

from __future__ import annotations

import argparse
import random
from statistics import mean
from time import perf_counter
from typing import Dict, List

from hierograph.graph.ir import Graph


PROFILES = {
    "small": {
        "nodes": 1_000,
        "max_parents": 2,
    },
    "medium": {
        "nodes": 10_000,
        "max_parents": 3,
    },
    "large": {
        "nodes": 40_000,
        "max_parents": 4,
    },
}


def build_random_dag(num_nodes: int, max_parents: int, *, seed: int) -> Graph:
    """
    Random multi-parent hierarchy. Node ``n0`` is the single root and each
    other node hangs below 1..max_parents earlier nodes; creation order is
    shuffled so ranking cannot rely on it.
    """
    rng = random.Random(seed)
    graph = Graph()

    names = [f"n{idx}" for idx in range(num_nodes)]
    shuffled = list(names)
    rng.shuffle(shuffled)
    for name in shuffled:
        graph.add_node(name, name)

    for idx in range(1, num_nodes):
        # Prefer recent parents so the hierarchy gets some depth.
        window = max(1, idx // 4)
        candidates = list(range(max(0, idx - window), idx))
        num_parents = rng.randint(1, min(max_parents, len(candidates)))
        for parent in rng.sample(candidates, num_parents):
            graph.add_child_to(names[parent], names[idx])

    return graph


def time_ranking(graph: Graph, repeats: int) -> List[float]:
    timings: List[float] = []
    for _ in range(repeats):
        start = perf_counter()
        graph.topological_sort()
        timings.append(perf_counter() - start)
    return timings


def longest_path_depth(graph: Graph) -> int:
    """Length of the longest root-to-leaf chain, walking nodes in rank order."""
    depth: Dict[str, int] = {}
    for node in graph.topological_sort():
        depth[node.id] = max((depth[p] + 1 for p in node.parents), default=0)
    return max(depth.values(), default=0)


def analyze_graph(graph: Graph, repeats: int) -> None:
    timings = time_ranking(graph, repeats)
    root = graph.root()

    start = perf_counter()
    descendants = root.descendant_count()
    closure_s = perf_counter() - start

    leaves = graph.leaves()

    print("=== Graph Diagnostics ===")
    print(f"Nodes: {len(graph)}  Edges: {graph.num_edges}")
    print(f"Roots: {len(graph.roots())}  Leaves: {len(leaves)}")
    print(f"Multi-parent nodes: {sum(1 for n in graph.items().values() if n.in_degree > 1)}")
    print(f"Ranking: mean {mean(timings) * 1e3:.2f} ms over {repeats} runs")
    print(f"Descendants of root: {descendants} ({closure_s * 1e3:.2f} ms)")
    print(f"Longest chain: {longest_path_depth(graph)} edges")


def _apply_profile(args: argparse.Namespace) -> argparse.Namespace:
    profile_cfg = PROFILES.get(args.profile)
    if not profile_cfg:
        return args
    for key, value in profile_cfg.items():
        if getattr(args, key) is None:
            setattr(args, key, value)
    return args


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--profile", choices=PROFILES.keys(), default="medium")
    parser.add_argument("--nodes", type=int, default=None)
    parser.add_argument("--max-parents", type=int, default=None)
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()
    args = _apply_profile(args)
    if args.nodes is None:
        args.nodes = 1_000
    if args.max_parents is None:
        args.max_parents = 2
    return args


def main() -> None:
    args = parse_args()
    graph = build_random_dag(
        num_nodes=args.nodes,
        max_parents=args.max_parents,
        seed=args.seed,
    )
    analyze_graph(graph, args.repeats)


if __name__ == "__main__":
    main()
