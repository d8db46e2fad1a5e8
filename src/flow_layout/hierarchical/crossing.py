"""
Crossing reduction for layered flowcharts.

Orders the nodes of every layer with alternating barycenter sweeps,
then optionally polishes the result with adjacent swaps:

1. Initial order: group key first (ungrouped nodes last), then index
2. Barycenter sweeps: even passes sweep down, odd passes sweep up
3. Refinement: swap neighbours while crossings strictly decrease

Nodes of the same subgraph stay contiguous within a layer because the
group key is always the primary sort key, and refinement never swaps
nodes of different groups.
"""

from __future__ import annotations

from typing import Sequence

from .._work import GroupKey, UnitEdge, WorkNode
from ..preprocessing import count_pair_crossings


def group_sort_key(key: GroupKey) -> tuple[int, GroupKey]:
    """Sort key placing grouped nodes before ungrouped ones."""
    return (1, ()) if not key else (0, key)


def _assign_orders(nodes: list[WorkNode], layers: list[list[int]]) -> None:
    for layer in layers:
        for pos, idx in enumerate(layer):
            nodes[idx].order = pos


def initial_order(nodes: list[WorkNode], layers: list[list[int]]) -> list[list[int]]:
    """
    Order each layer by group key, then by node index.

    Args:
        nodes: Working nodes; ``order`` is updated
        layers: Node indices per layer

    Returns:
        Reordered layers.
    """
    result = [
        sorted(layer, key=lambda idx: (group_sort_key(nodes[idx].group_key), idx))
        for layer in layers
    ]
    _assign_orders(nodes, result)
    return result


def build_neighbors(
    n: int, unit_edges: Sequence[UnitEdge]
) -> tuple[list[list[int]], list[list[int]]]:
    """
    Build per-node neighbour lists from unit edges.

    Returns:
        Tuple of (up, down) where up[v] lists neighbours in the layer
        above v and down[v] neighbours in the layer below.
    """
    up: list[list[int]] = [[] for _ in range(n)]
    down: list[list[int]] = [[] for _ in range(n)]
    for unit in unit_edges:
        down[unit.source].append(unit.target)
        up[unit.target].append(unit.source)
    return up, down


def _order_layer_by_barycenter(
    nodes: list[WorkNode], layer: list[int], adj: list[list[int]]
) -> list[int]:
    """Reorder one layer by the mean order of its neighbours in the adjacent layer."""
    keyed: list[tuple[tuple[int, GroupKey], float, int, int]] = []
    for idx in layer:
        node = nodes[idx]
        neighbors = adj[idx]
        if neighbors:
            score = sum(nodes[nb].order for nb in neighbors) / len(neighbors)
        else:
            score = float(node.order)
        keyed.append((group_sort_key(node.group_key), score, node.order, idx))

    keyed.sort(key=lambda item: item[:3])
    ordered = [item[3] for item in keyed]
    for pos, idx in enumerate(ordered):
        nodes[idx].order = pos
    return ordered


def sweep(
    nodes: list[WorkNode],
    layers: list[list[int]],
    up: list[list[int]],
    down: list[list[int]],
    downward: bool,
) -> None:
    """
    Run one barycenter sweep over all layers in place.

    A downward sweep reorders layers 1..L-1 against the layer above;
    an upward sweep reorders layers L-2..0 against the layer below.
    """
    if downward:
        for layer_idx in range(1, len(layers)):
            layers[layer_idx] = _order_layer_by_barycenter(nodes, layers[layer_idx], up)
    else:
        for layer_idx in range(len(layers) - 2, -1, -1):
            layers[layer_idx] = _order_layer_by_barycenter(nodes, layers[layer_idx], down)


def _edges_by_upper_layer(
    nodes: Sequence[WorkNode], unit_edges: Sequence[UnitEdge], layer_count: int
) -> list[list[UnitEdge]]:
    by_layer: list[list[UnitEdge]] = [[] for _ in range(layer_count)]
    for unit in unit_edges:
        by_layer[nodes[unit.source].layer].append(unit)
    return by_layer


def _pair_crossings(nodes: Sequence[WorkNode], units: Sequence[UnitEdge]) -> int:
    return count_pair_crossings([(nodes[u.source].order, nodes[u.target].order) for u in units])


def _total_crossings(nodes: Sequence[WorkNode], by_layer: list[list[UnitEdge]]) -> int:
    return sum(_pair_crossings(nodes, units) for units in by_layer)


def _refine_layer(
    nodes: list[WorkNode],
    layers: list[list[int]],
    by_layer: list[list[UnitEdge]],
    layer_idx: int,
    passes: int,
) -> None:
    """Swap adjacent nodes of one layer while the local crossing count strictly drops."""
    layer = layers[layer_idx]
    local = [by_layer[layer_idx]]
    if layer_idx > 0:
        local.append(by_layer[layer_idx - 1])

    def local_crossings() -> int:
        return sum(_pair_crossings(nodes, units) for units in local)

    for _ in range(passes):
        improved = False
        for pos in range(len(layer) - 1):
            a, b = layer[pos], layer[pos + 1]
            if nodes[a].group_key != nodes[b].group_key:
                continue
            before = local_crossings()
            layer[pos], layer[pos + 1] = b, a
            nodes[a].order, nodes[b].order = pos + 1, pos
            if local_crossings() < before:
                improved = True
            else:
                layer[pos], layer[pos + 1] = a, b
                nodes[a].order, nodes[b].order = pos, pos + 1
        if not improved:
            break


def reduce_crossings(
    nodes: list[WorkNode],
    layers: list[list[int]],
    unit_edges: Sequence[UnitEdge],
    passes: int = 6,
    refinement_passes: int = 0,
) -> int:
    """
    Reduce edge crossings by barycenter sweeps and adjacent swaps.

    The best ordering seen so far is kept: a sweep that increases the
    crossing count is rolled back, so additional passes never make the
    result worse.

    Args:
        nodes: Working nodes; ``order`` is updated
        layers: Node indices per layer, reordered in place
        unit_edges: Hops between adjacent layers
        passes: Number of barycenter sweeps
        refinement_passes: Maximum adjacent-swap passes per layer

    Returns:
        Final crossing count.
    """
    if not layers:
        return 0

    by_layer = _edges_by_upper_layer(nodes, unit_edges, len(layers))
    best = _total_crossings(nodes, by_layer)

    if len(layers) >= 2:
        up, down = build_neighbors(len(nodes), unit_edges)
        best_layers = [list(layer) for layer in layers]
        for i in range(passes):
            sweep(nodes, layers, up, down, downward=(i % 2 == 0))
            current = _total_crossings(nodes, by_layer)
            if current <= best:
                best = current
                best_layers = [list(layer) for layer in layers]
            else:
                layers[:] = [list(layer) for layer in best_layers]
                _assign_orders(nodes, layers)

    if refinement_passes > 0 and best > 0:
        for layer_idx in range(len(layers)):
            _refine_layer(nodes, layers, by_layer, layer_idx, refinement_passes)
        best = _total_crossings(nodes, by_layer)

    return best


__all__ = [
    "build_neighbors",
    "group_sort_key",
    "initial_order",
    "reduce_crossings",
    "sweep",
]
