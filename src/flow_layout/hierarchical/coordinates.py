"""
Coordinate assignment for layered flowcharts.

Coordinates are computed in a canonical frame: top-to-bottom for
vertical flow and left-to-right for horizontal flow. Bottom-to-top and
right-to-left layouts are produced by mirroring the finished drawing.

The "flow axis" is the axis edges travel along (y for TB, x for LR);
the "cross axis" is the axis nodes of one layer are spread along.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .._work import GroupKey, UnitEdge, WorkEdge, WorkNode
from ..result import Point
from ..style import LayoutStyle
from ..types import Direction


# -----------------------------------------------------------------------------
# Node sizes
# -----------------------------------------------------------------------------


def estimate_node_size(label: str, style: LayoutStyle) -> tuple[float, float]:
    """
    Estimate a node box from its label length.

    Returns:
        (width, height), never smaller than the style minimums.
    """
    width = max(len(label) * style.char_width + 2 * style.node_padding_x, style.min_width)
    height = max(style.char_height + 2 * style.node_padding_y, style.min_height)
    return width, height


def port_spacing(style: LayoutStyle, direction: Direction) -> float:
    """Distance between neighbouring edge ports on one node side."""
    if direction.is_vertical():
        return max(style.char_width, 6.0) * 2
    return max(style.char_height, 10.0) * 1.2


def widen_for_ports(
    nodes: list[WorkNode],
    edges: Sequence[WorkEdge],
    style: LayoutStyle,
    direction: Direction,
) -> None:
    """
    Grow real nodes so that fanned-out edge ports fit on one side.

    A node with k ports (the larger of its in- and out-degree) gets at
    least ``(k - 1) * port_spacing`` plus padding across the flow.
    """
    out_degree = [0] * len(nodes)
    in_degree = [0] * len(nodes)
    for edge in edges:
        if edge.is_self_loop:
            continue
        out_degree[edge.orig_source] += 1
        in_degree[edge.orig_target] += 1

    spacing = port_spacing(style, direction)
    for idx, node in enumerate(nodes):
        if node.is_dummy:
            continue
        ports = max(out_degree[idx], in_degree[idx], 1)
        if direction.is_vertical():
            needed = (ports - 1) * spacing + 2 * style.node_padding_x + style.char_width
            node.width = max(node.width, needed)
        else:
            needed = (ports - 1) * spacing + 2 * style.node_padding_y + style.char_height
            node.height = max(node.height, needed)


# -----------------------------------------------------------------------------
# Layer gaps
# -----------------------------------------------------------------------------


def lane_size(style: LayoutStyle, direction: Direction) -> float:
    """Spacing reserved per routing lane between two layers."""
    if direction.is_vertical():
        return max(style.char_height + 2 * style.node_padding_y, 18.0)
    return max(style.char_width + style.node_padding_x, 10.0) * 1.5


def _out_edges_per_layer(
    nodes: Sequence[WorkNode], unit_edges: Sequence[UnitEdge]
) -> dict[int, int]:
    counts: dict[int, int] = {}
    for unit in unit_edges:
        layer = nodes[unit.source].layer
        counts[layer] = counts.get(layer, 0) + 1
    return counts


def compute_layer_gap(
    nodes: Sequence[WorkNode],
    unit_edges: Sequence[UnitEdge],
    style: LayoutStyle,
    direction: Direction,
) -> float:
    """
    Grow the base layer gap with the busiest layer's edge fan-out.

    Returns:
        A gap in ``[layer_gap, 4 * layer_gap]``.
    """
    counts = _out_edges_per_layer(nodes, unit_edges)
    max_lanes = max(counts.values(), default=0)
    if max_lanes <= 1:
        return style.layer_gap
    gap = style.layer_gap + (max_lanes - 1) * lane_size(style, direction) * 0.6
    return min(max(gap, style.layer_gap), 4 * style.layer_gap)


# -----------------------------------------------------------------------------
# Placement
# -----------------------------------------------------------------------------


def assign_coordinates(
    nodes: list[WorkNode],
    layers: Sequence[Sequence[int]],
    style: LayoutStyle,
    direction: Direction,
    layer_gap: Optional[float] = None,
) -> None:
    """
    Place node centres layer by layer in the canonical frame.

    Layers are stacked along the flow axis, each as thick as its largest
    node; nodes of a layer are packed along the cross axis in order with
    ``node_gap`` between boxes. Every node is centred in its layer band.
    """
    gap = style.layer_gap if layer_gap is None else layer_gap
    vertical = direction.is_vertical()

    flow = 0.0
    for layer in layers:
        if vertical:
            thickness = max((nodes[idx].height for idx in layer), default=0.0)
        else:
            thickness = max((nodes[idx].width for idx in layer), default=0.0)

        cross = 0.0
        for idx in layer:
            node = nodes[idx]
            if vertical:
                node.x = cross + node.width / 2
                node.y = flow + thickness / 2
                cross += node.width + style.node_gap
            else:
                node.x = flow + thickness / 2
                node.y = cross + node.height / 2
                cross += node.height + style.node_gap

        flow += thickness + gap


def _flow_span(node: WorkNode, vertical: bool) -> tuple[float, float]:
    return (node.top, node.bottom) if vertical else (node.left, node.right)


def expand_layer_gaps(
    nodes: list[WorkNode],
    layers: Sequence[Sequence[int]],
    unit_edges: Sequence[UnitEdge],
    style: LayoutStyle,
    direction: Direction,
) -> None:
    """
    Make room between busy layers.

    Between layer i and i+1 at least ``layer_gap + (k - 1) * lane * 0.7``
    of free space is kept, where k is the number of hops leaving layer
    i. Missing space is added by shifting every later layer. Layer
    extents are measured on real nodes when the layer has any.
    """
    vertical = direction.is_vertical()
    counts = _out_edges_per_layer(nodes, unit_edges)
    lane = lane_size(style, direction)

    def extent(layer: Sequence[int]) -> Optional[tuple[float, float]]:
        members = [nodes[idx] for idx in layer if not nodes[idx].is_dummy]
        if not members:
            members = [nodes[idx] for idx in layer]
        if not members:
            return None
        spans = [_flow_span(node, vertical) for node in members]
        return min(s[0] for s in spans), max(s[1] for s in spans)

    for i in range(len(layers) - 1):
        outgoing = counts.get(i, 0)
        if outgoing <= 1:
            continue
        here = extent(layers[i])
        below = extent(layers[i + 1])
        if here is None or below is None:
            continue
        required = style.layer_gap + (outgoing - 1) * lane * 0.7
        deficit = required - (below[0] - here[1])
        if deficit <= 0:
            continue
        for layer in layers[i + 1 :]:
            for idx in layer:
                if vertical:
                    nodes[idx].y += deficit
                else:
                    nodes[idx].x += deficit


def separate_subgraphs(
    nodes: list[WorkNode],
    style: LayoutStyle,
    direction: Direction,
) -> None:
    """
    Push sibling groups apart along the cross axis, at every nesting level.

    Groups are arranged bottom-up. The children of a group are
    separated first; the group's padded box (its own members plus its
    children's boxes) then takes part when it is separated from its
    siblings. Each sibling box is moved clear of the previous one,
    ordered by cross-axis start. Members a nested group owns directly
    are moved in front of its children, matching the layer order;
    ungrouped nodes are moved past the last top-level group.
    """
    vertical = direction.is_vertical()
    gap = max(style.node_gap, 16.0)
    padding = max(style.node_gap + style.layer_gap * 0.5, 12.0)

    def cross_span(node: WorkNode) -> tuple[float, float]:
        return (node.left, node.right) if vertical else (node.top, node.bottom)

    def shift(node: WorkNode, delta: float) -> None:
        if vertical:
            node.x += delta
        else:
            node.y += delta

    direct: dict[GroupKey, list[WorkNode]] = {}
    for node in nodes:
        direct.setdefault(node.group_key, []).append(node)
    if not any(direct):
        return

    children: dict[GroupKey, set[GroupKey]] = {}
    for key in direct:
        for depth in range(1, len(key) + 1):
            children.setdefault(key[: depth - 1], set()).add(key[:depth])

    def members(key: GroupKey) -> list[WorkNode]:
        found = list(direct.get(key, ()))
        for child in children.get(key, ()):
            found.extend(members(child))
        return found

    def clear_per_layer(group: list[WorkNode], bound: float, after: bool) -> None:
        by_layer: dict[int, list[WorkNode]] = {}
        for node in group:
            by_layer.setdefault(node.layer, []).append(node)
        for layer_nodes in by_layer.values():
            spans = [cross_span(node) for node in layer_nodes]
            if after:
                delta = max(bound - min(s[0] for s in spans), 0.0)
            else:
                delta = min(bound - max(s[1] for s in spans), 0.0)
            if delta:
                for node in layer_nodes:
                    shift(node, delta)

    def arrange(key: GroupKey) -> Optional[tuple[float, float]]:
        """Separate the children of ``key``; return the unpadded span of its contents."""
        boxes: list[tuple[float, float, GroupKey]] = []
        for child in sorted(children.get(key, ())):
            span = arrange(child)
            if span is not None:
                boxes.append((span[0] - padding, span[1] + padding, child))
        boxes.sort()

        previous_end: Optional[float] = None
        for start, end, child in boxes:
            if previous_end is not None and start < previous_end + gap:
                delta = previous_end + gap - start
                for node in members(child):
                    shift(node, delta)
                end += delta
            previous_end = end

        own = direct.get(key, [])
        spans = [cross_span(node) for node in own]
        if boxes:
            first_start = boxes[0][0]
            if own and key:
                clear_per_layer(own, first_start - gap, after=False)
            elif own:
                # Ungrouped nodes come last in every layer
                clear_per_layer(own, previous_end + gap, after=True)
            spans = [cross_span(node) for node in own]
            spans.append((first_start, previous_end))
        if not spans:
            return None
        return min(s[0] for s in spans), max(s[1] for s in spans)

    arrange(())


# -----------------------------------------------------------------------------
# Extent and mirroring
# -----------------------------------------------------------------------------


def compute_extent(
    nodes: Sequence[WorkNode], paths: Sequence[Sequence[Point]] = ()
) -> tuple[float, float, float, float]:
    """
    Bounding box of node boxes and edge points.

    Returns:
        (min_x, min_y, max_x, max_y); all zero for an empty drawing.
    """
    xs: list[float] = []
    ys: list[float] = []
    for node in nodes:
        xs.extend((node.left, node.right))
        ys.extend((node.top, node.bottom))
    for path in paths:
        for x, y in path:
            xs.append(x)
            ys.append(y)
    if not xs:
        return 0.0, 0.0, 0.0, 0.0
    return min(xs), min(ys), max(xs), max(ys)


def mirror_point(point: Point, direction: Direction, width: float, height: float) -> Point:
    """Map a canonical-frame point into the frame of ``direction``."""
    x, y = point
    if direction is Direction.BT:
        return (x, height - y)
    if direction is Direction.RL:
        return (width - x, y)
    return (x, y)


def mirror_nodes(
    nodes: list[WorkNode], direction: Direction, width: float, height: float
) -> None:
    """Mirror node centres in place for bottom-to-top and right-to-left flow."""
    if not direction.is_mirrored():
        return
    for node in nodes:
        node.x, node.y = mirror_point((node.x, node.y), direction, width, height)


__all__ = [
    "assign_coordinates",
    "compute_extent",
    "compute_layer_gap",
    "estimate_node_size",
    "expand_layer_gaps",
    "lane_size",
    "mirror_nodes",
    "mirror_point",
    "port_spacing",
    "separate_subgraphs",
    "widen_for_ports",
]
