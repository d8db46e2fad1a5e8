"""
Graph preprocessing for layered layout.

This module prepares the working graph before ordering and placement:
- Cycle breaking (DFS back-edge reversal)
- Layer assignment (longest path over a Kahn topological order)
- Dummy node insertion for edges spanning several layers
- Crossing counting between adjacent layers

All functions work on the index-based records of ``flow_layout._work``.
"""

from __future__ import annotations

import warnings
from collections import deque
from typing import Collection, Iterator, Sequence

from ._work import EdgeChain, GroupKey, UnitEdge, WorkEdge, WorkNode
from .types import Subgraph
from .validation import GraphStructureWarning

DUMMY_SIZE = 1.0
DUMMY_PREFIX = "__dummy"


# =============================================================================
# Subgraph Membership
# =============================================================================


def assign_group_keys(
    subgraphs: Sequence[Subgraph], known_ids: Collection[str]
) -> dict[str, GroupKey]:
    """
    Map node ids to the path of the subgraph that owns them.

    A group key is the tuple of child indices from the top-level
    subgraph list down to the owning subgraph. A node listed by a
    subgraph and by one of its descendants belongs to the innermost one.
    A node listed by two unrelated subgraphs belongs to the first in
    document order and a GraphStructureWarning is issued.

    Args:
        subgraphs: Top-level subgraphs
        known_ids: Ids of the graph's nodes; other members are ignored

    Returns:
        Mapping node id -> group key for every claimed node.
    """
    keys: dict[str, GroupKey] = {}
    conflicts: list[str] = []

    def visit(sub: Subgraph, path: GroupKey) -> None:
        for member in sub.nodes:
            if member not in known_ids:
                continue
            existing = keys.get(member)
            if existing is None or path[: len(existing)] == existing:
                keys[member] = path
            elif existing[: len(path)] != path:
                conflicts.append(f"node {member!r} listed by {sub.id!r} already belongs elsewhere")
        for j, child in enumerate(sub.subgraphs):
            visit(child, path + (j,))

    for i, sub in enumerate(subgraphs):
        visit(sub, (i,))

    if conflicts:
        warnings.warn(
            "Overlapping subgraphs, first claim kept:\n" + "\n".join(conflicts),
            GraphStructureWarning,
            stacklevel=2,
        )
    return keys


def resolve_subgraphs(
    subgraphs: Sequence[Subgraph], keys: dict[str, GroupKey]
) -> list[Subgraph]:
    """
    Copy a subgraph tree keeping only the members each subgraph owns.

    A member is kept when its group key (from ``assign_group_keys``)
    points at the subgraph or one of its descendants. Unknown ids and
    nodes claimed by another branch are dropped.
    """

    def resolve(sub: Subgraph, path: GroupKey) -> Subgraph:
        members = [m for m in sub.nodes if keys.get(m, ())[: len(path)] == path]
        children = [resolve(child, path + (j,)) for j, child in enumerate(sub.subgraphs)]
        return Subgraph(sub.id, sub.title, members, children)

    return [resolve(sub, (i,)) for i, sub in enumerate(subgraphs)]


# =============================================================================
# Cycle Breaking
# =============================================================================


def break_cycles(n: int, edges: Sequence[WorkEdge]) -> set[int]:
    """
    Reverse back edges so that the effective graph is acyclic.

    Runs a depth-first search from every unvisited node in index order,
    following out-edges in edge order. An edge reaching a node that is
    still on the DFS stack is reversed in place (its effective endpoints
    are swapped and its ``reversed`` flag is set). Self-loops are never
    reversed.

    Args:
        n: Number of nodes
        edges: Working edges; modified in place

    Returns:
        Indices of the reversed edges.

    Example:
        >>> edges = [WorkEdge(0, 1), WorkEdge(1, 0)]
        >>> break_cycles(2, edges)
        {1}
    """
    adj: list[list[int]] = [[] for _ in range(n)]
    for idx, edge in enumerate(edges):
        if edge.is_self_loop:
            continue
        adj[edge.source].append(idx)

    state = [0] * n  # 0=unvisited, 1=visiting, 2=visited
    reversed_indices: set[int] = set()

    for start in range(n):
        if state[start] != 0:
            continue
        state[start] = 1
        # (node, position in its adjacency list)
        stack: list[tuple[int, int]] = [(start, 0)]
        while stack:
            node, pos = stack[-1]
            if pos >= len(adj[node]):
                state[node] = 2
                stack.pop()
                continue
            stack[-1] = (node, pos + 1)
            edge_idx = adj[node][pos]
            neighbor = edges[edge_idx].target
            if state[neighbor] == 1:
                # Back edge
                edges[edge_idx].reverse()
                reversed_indices.add(edge_idx)
            elif state[neighbor] == 0:
                state[neighbor] = 1
                stack.append((neighbor, 0))

    return reversed_indices


# =============================================================================
# Layer Assignment
# =============================================================================


def assign_layers(n: int, edges: Sequence[WorkEdge]) -> list[int]:
    """
    Assign every node a layer by longest path from the sources.

    Nodes are visited in Kahn topological order (FIFO queue seeded with
    the zero in-degree nodes in index order) over the effective edges,
    ignoring self-loops. Each edge pushes its target at least one layer
    below its source.

    Args:
        n: Number of nodes
        edges: Working edges; the effective graph must be acyclic

    Returns:
        Layer index per node.

    Example:
        >>> assign_layers(3, [WorkEdge(0, 1), WorkEdge(1, 2), WorkEdge(0, 2)])
        [0, 1, 2]
    """
    outgoing: list[list[int]] = [[] for _ in range(n)]
    in_degree = [0] * n

    for edge in edges:
        if edge.is_self_loop:
            continue
        outgoing[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    queue: deque[int] = deque(i for i in range(n) if in_degree[i] == 0)
    layer = [0] * n

    while queue:
        node = queue.popleft()
        for child in outgoing[node]:
            if layer[node] + 1 > layer[child]:
                layer[child] = layer[node] + 1
            in_degree[child] -= 1
            if in_degree[child] == 0:
                queue.append(child)

    return layer


def build_layers(nodes: Sequence[WorkNode]) -> list[list[int]]:
    """
    Group node indices by layer, each layer sorted by current order.

    Returns:
        List of layers, where each layer is a list of node indices.
    """
    if not nodes:
        return []
    layer_count = max(node.layer for node in nodes) + 1
    layers: list[list[int]] = [[] for _ in range(layer_count)]
    for idx, node in enumerate(nodes):
        layers[node.layer].append(idx)
    for layer in layers:
        layer.sort(key=lambda idx: nodes[idx].order)
    return layers


# =============================================================================
# Dummy Nodes
# =============================================================================


def dummy_ids(taken: Collection[str]) -> Iterator[str]:
    """Yield ``__dummy0``, ``__dummy1``, ... skipping ids in ``taken``."""
    k = 0
    while True:
        candidate = f"{DUMMY_PREFIX}{k}"
        if candidate not in taken:
            yield candidate
        k += 1


def insert_dummy_nodes(
    nodes: list[WorkNode],
    edges: Sequence[WorkEdge],
) -> tuple[list[EdgeChain], list[UnitEdge]]:
    """
    Split every edge into hops between adjacent layers.

    One dummy node is appended to ``nodes`` per intermediate layer an
    edge crosses. Dummies are 1x1, unlabeled, and belong to the same
    group as the edge's effective source. Their ids never collide with
    the ids of the nodes passed in.

    Args:
        nodes: Working nodes with layers assigned; dummies are appended
        edges: Working edges

    Returns:
        Tuple of (chains, unit_edges) where:
        - chains: One chain per edge, from effective source to target.
          A self-loop yields the degenerate chain [u, u].
        - unit_edges: Every hop of every non-loop chain
    """
    chains: list[EdgeChain] = []
    unit_edges: list[UnitEdge] = []
    next_id = dummy_ids({node.id for node in nodes})

    for idx, edge in enumerate(edges):
        if edge.is_self_loop:
            chains.append(EdgeChain(idx, [edge.source, edge.source]))
            continue

        source = nodes[edge.source]
        target_layer = nodes[edge.target].layer
        chain = [edge.source]
        for layer in range(source.layer + 1, target_layer):
            nodes.append(
                WorkNode(
                    id=next(next_id),
                    width=DUMMY_SIZE,
                    height=DUMMY_SIZE,
                    layer=layer,
                    is_dummy=True,
                    group_key=source.group_key,
                )
            )
            chain.append(len(nodes) - 1)
        chain.append(edge.target)

        for u, v in zip(chain, chain[1:]):
            unit_edges.append(UnitEdge(u, v))
        chains.append(EdgeChain(idx, chain))

    return chains, unit_edges


# =============================================================================
# Crossing Counting
# =============================================================================


def count_pair_crossings(pairs: Sequence[tuple[int, int]]) -> int:
    """
    Count crossings among edges between two adjacent layers.

    Args:
        pairs: (upper position, lower position) per edge

    Returns:
        Number of edge pairs whose endpoints are inverted.
    """
    total = 0
    for i, (s1, t1) in enumerate(pairs):
        for s2, t2 in pairs[i + 1 :]:
            # Two edges cross if one is "above" on left and "below" on right
            if (s1 < s2 and t1 > t2) or (s1 > s2 and t1 < t2):
                total += 1
    return total


def count_crossings(layers: Sequence[Sequence[int]], unit_edges: Sequence[UnitEdge]) -> int:
    """
    Count the edge crossings of a layered ordering.

    Args:
        layers: List of layers, each containing node indices in order
        unit_edges: Hops between adjacent layers

    Returns:
        Number of edge crossings.
    """
    node_layer: dict[int, int] = {}
    node_pos: dict[int, int] = {}
    for layer_idx, layer in enumerate(layers):
        for pos, node in enumerate(layer):
            node_layer[node] = layer_idx
            node_pos[node] = pos

    layer_edges: dict[int, list[tuple[int, int]]] = {}
    for unit in unit_edges:
        src, tgt = unit.source, unit.target
        if src not in node_layer or tgt not in node_layer:
            continue
        if node_layer[src] > node_layer[tgt]:
            src, tgt = tgt, src
        layer_edges.setdefault(node_layer[src], []).append((node_pos[src], node_pos[tgt]))

    return sum(count_pair_crossings(pairs) for pairs in layer_edges.values())


__all__ = [
    "DUMMY_PREFIX",
    "DUMMY_SIZE",
    "assign_group_keys",
    "assign_layers",
    "break_cycles",
    "build_layers",
    "count_crossings",
    "count_pair_crossings",
    "dummy_ids",
    "insert_dummy_nodes",
    "resolve_subgraphs",
]
