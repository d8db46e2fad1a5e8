"""
Profiling script for flow-layout performance analysis.

This script profiles the flowchart pipeline to identify bottlenecks and
compare performance across graph sizes, routing modes and subgraph
composition.
"""

import cProfile
import io
import pstats
import random
import time
from pstats import SortKey

import numpy as np

from flow_layout import Graph, LayoutStyle, RoutingMode, Subgraph, layout_flowchart


def create_graph(n_nodes, n_edges, n_groups=0, back_edge_ratio=0.05, seed=42):
    """
    Create a random flowchart with n nodes and approximately n_edges edges.

    Most edges point forward in node order; a small share point backward
    to exercise cycle breaking. With ``n_groups`` the nodes are split into
    that many top-level subgraphs.
    """
    random.seed(seed)
    rng = np.random.default_rng(seed)

    graph = Graph()
    for i in range(n_nodes):
        graph.add_node(f"n{i}", f"Step {i}")

    for _ in range(n_edges):
        source, target = sorted(int(v) for v in rng.integers(0, n_nodes, size=2))
        if source == target:
            continue
        if random.random() < back_edge_ratio:
            source, target = target, source
        graph.add_edge(f"n{source}", f"n{target}")

    if n_groups:
        for chunk, ids in enumerate(np.array_split(np.arange(n_nodes), n_groups)):
            graph.add_subgraph(
                Subgraph(f"g{chunk}", f"Group {chunk}", [f"n{i}" for i in ids])
            )

    return graph


# =============================================================================
# Orthogonal Routing Profiles
# =============================================================================

def profile_orthogonal_small():
    """Profile orthogonal routing: small graph (20 nodes, 30 edges)."""
    layout_flowchart(create_graph(20, 30))


def profile_orthogonal_medium():
    """Profile orthogonal routing: medium graph (100 nodes, 200 edges)."""
    layout_flowchart(create_graph(100, 200))


def profile_orthogonal_large():
    """Profile orthogonal routing: large graph (500 nodes, 1000 edges)."""
    layout_flowchart(create_graph(500, 1000))


# =============================================================================
# Geometry Routing Profiles
# =============================================================================

def profile_geometry_small():
    """Profile obstacle-avoiding routing: small graph (20 nodes, 30 edges)."""
    layout_flowchart(create_graph(20, 30), LayoutStyle(routing=RoutingMode.GEOMETRY))


def profile_geometry_medium():
    """Profile obstacle-avoiding routing: medium graph (100 nodes, 200 edges)."""
    layout_flowchart(create_graph(100, 200), LayoutStyle(routing=RoutingMode.GEOMETRY))


# =============================================================================
# Subgraph Profiles
# =============================================================================

def profile_composed_medium():
    """Profile subgraph composition: medium graph in 5 groups."""
    layout_flowchart(create_graph(100, 200, n_groups=5))


def profile_clustered_medium():
    """Profile flat layout with contiguous groups: medium graph in 5 groups."""
    layout_flowchart(
        create_graph(100, 200, n_groups=5), LayoutStyle(compose_subgraphs=False)
    )


def profile_composed_large():
    """Profile subgraph composition: large graph in 20 groups."""
    layout_flowchart(create_graph(500, 1000, n_groups=20))


# =============================================================================
# Benchmarking Infrastructure
# =============================================================================

def benchmark_scenario(name, func, profile=True):
    """Benchmark a scenario and print timing."""
    print(f"\n{'-'*60}")
    print(f"  {name}")
    print('-'*60)

    if profile:
        profiler = cProfile.Profile()
        start_time = time.time()
        profiler.enable()
        func()
        profiler.disable()
        elapsed = time.time() - start_time

        # Print brief stats
        s = io.StringIO()
        ps = pstats.Stats(profiler, stream=s).sort_stats(SortKey.CUMULATIVE)
        ps.print_stats(10)

        print(f"Time: {elapsed:.3f}s")
        print("\nTop 10 functions:")
        for line in s.getvalue().split('\n')[5:16]:
            if line.strip():
                print(line)

        return elapsed, profiler
    else:
        start_time = time.time()
        func()
        elapsed = time.time() - start_time
        print(f"Time: {elapsed:.3f}s")
        return elapsed, None


def main():
    """Run all profiling scenarios."""
    print("=" * 60)
    print("  flow-layout Performance Profiling")
    print("=" * 60)

    scenarios = [
        # Orthogonal routing
        ("Orthogonal: Small (20 nodes)", profile_orthogonal_small),
        ("Orthogonal: Medium (100 nodes)", profile_orthogonal_medium),
        ("Orthogonal: Large (500 nodes)", profile_orthogonal_large),

        # Obstacle-avoiding routing
        ("Geometry: Small (20 nodes)", profile_geometry_small),
        ("Geometry: Medium (100 nodes)", profile_geometry_medium),

        # Subgraphs
        ("Composed: Medium (5 groups)", profile_composed_medium),
        ("Clustered: Medium (5 groups)", profile_clustered_medium),
        ("Composed: Large (20 groups)", profile_composed_large),
    ]

    results = {}
    for name, func in scenarios:
        try:
            elapsed, _ = benchmark_scenario(name, func, profile=False)
            results[name] = elapsed
        except Exception as e:
            print(f"  ERROR: {e}")
            results[name] = None

    # Print summary table
    print("\n" + "=" * 60)
    print("  Summary")
    print("=" * 60)
    print(f"\n{'Scenario':<35} {'Time':>10}")
    print("-" * 47)
    for name, elapsed in results.items():
        if elapsed is not None:
            print(f"{name:<35} {elapsed:>10.3f}s")
        else:
            print(f"{name:<35} {'ERROR':>10}")


if __name__ == "__main__":
    main()
