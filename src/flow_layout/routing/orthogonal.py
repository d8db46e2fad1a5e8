"""
Orthogonal edge routing along dummy chains.

Every hop of a chain leaves the exit side of its upper node, turns at a
lane between the two layers and enters the entry side of its lower
node, so all segments are axis-aligned:

1. Ports: edge ends sharing a node side are fanned across that side
2. Lanes: edges leaving the same node turn at distinct lanes
3. Chains: hops are joined into one polyline per edge

Coordinates are handled as (cross, flow) pairs so that one code path
serves both top-to-bottom and left-to-right flow.
"""

from __future__ import annotations

from typing import Optional

from .._work import WorkNode
from ..result import Point
from .base import EdgeRouter, RoutingContext
from .ports import PortRequest, Side, assign_port_offsets, push_point, simplify_orthogonal


def _cross(node: WorkNode, vertical: bool) -> float:
    return node.x if vertical else node.y


def _near(node: WorkNode, vertical: bool) -> float:
    """Flow coordinate of the side facing the previous layer."""
    return node.top if vertical else node.left


def _far(node: WorkNode, vertical: bool) -> float:
    """Flow coordinate of the side facing the next layer."""
    return node.bottom if vertical else node.right


def _to_xy(cross: float, flow: float, vertical: bool) -> Point:
    return (cross, flow) if vertical else (flow, cross)


class OrthogonalRouter(EdgeRouter):
    """
    Route edges as axis-aligned polylines through their dummy chains.

    Example:
        router = OrthogonalRouter()
        paths = router.route(context)
    """

    def __init__(self) -> None:
        self._port_offsets: dict[tuple[int, int, Side], float] = {}
        self._lane_offsets: dict[int, float] = {}
        self._exit_side = Side.SOUTH

    # -------------------------------------------------------------------------
    # Preparation
    # -------------------------------------------------------------------------

    def prepare(self, context: RoutingContext) -> None:
        vertical = context.direction.is_vertical()
        self._exit_side = Side.SOUTH if vertical else Side.EAST
        self._port_offsets = self.edge_port_offsets(context)
        self._lane_offsets = self.edge_lane_offsets(context)

    def edge_port_offsets(self, context: RoutingContext) -> dict[tuple[int, int, Side], float]:
        """
        Fan edge ends across node sides.

        Outgoing ends sit on the exit side of the chain's first node and
        are ordered by the position of the next chain node; incoming
        ends sit on the entry side of the last node and are ordered by
        the position of the previous chain node.
        """
        vertical = context.direction.is_vertical()
        exit_side = Side.SOUTH if vertical else Side.EAST
        nodes = context.nodes
        requests: list[PortRequest] = []
        for chain in context.chains:
            if context.edges[chain.edge].is_self_loop:
                continue
            first, second = chain.nodes[0], chain.nodes[1]
            last, before_last = chain.nodes[-1], chain.nodes[-2]
            requests.append(
                PortRequest(first, exit_side, chain.edge, _cross(nodes[second], vertical))
            )
            requests.append(
                PortRequest(
                    last, exit_side.opposite(), chain.edge, _cross(nodes[before_last], vertical)
                )
            )
        return assign_port_offsets(requests, nodes, context.style)

    def edge_lane_offsets(self, context: RoutingContext) -> dict[int, float]:
        """
        Give edges leaving the same node distinct turning lanes.

        The n edges of one source are ordered by the position of their
        next chain node and their lanes spread evenly across the gap
        below the source's layer. A single edge turns at the hop
        midpoint (offset 0).

        Returns:
            Mapping edge index -> lane offset from the first hop's midpoint.
        """
        vertical = context.direction.is_vertical()
        nodes = context.nodes
        style = context.style

        layer_far: dict[int, float] = {}
        layer_near: dict[int, float] = {}
        for node in nodes:
            far = _far(node, vertical)
            near = _near(node, vertical)
            layer_far[node.layer] = max(layer_far.get(node.layer, far), far)
            layer_near[node.layer] = min(layer_near.get(node.layer, near), near)

        by_source: dict[int, list[int]] = {}
        for chain in context.chains:
            if context.edges[chain.edge].is_self_loop:
                continue
            by_source.setdefault(chain.nodes[0], []).append(chain.edge)

        offsets: dict[int, float] = {}
        for source, edge_ids in by_source.items():
            if len(edge_ids) == 1:
                offsets[edge_ids[0]] = 0.0
                continue

            chains = {edge_id: context.chains[edge_id] for edge_id in edge_ids}
            edge_ids.sort(key=lambda e: (_cross(nodes[chains[e].nodes[1]], vertical), e))

            layer = nodes[source].layer
            lane_start = layer_far[layer]
            next_near: Optional[float] = layer_near.get(layer + 1)
            available = (next_near - lane_start) if next_near is not None else 0.0
            gap = max(available, max(style.layer_gap, 24.0))

            n = len(edge_ids)
            for i, edge_id in enumerate(edge_ids):
                lane = lane_start + gap * (i + 1) / (n + 1)
                hop_end = nodes[chains[edge_id].nodes[1]]
                mid = (_far(nodes[source], vertical) + _near(hop_end, vertical)) / 2
                offsets[edge_id] = lane - mid
        return offsets

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def route_edge(self, context: RoutingContext, edge_index: int) -> list[Point]:
        vertical = context.direction.is_vertical()
        nodes = context.nodes
        chain = context.chains[edge_index].nodes
        exit_side = self._exit_side
        entry_side = exit_side.opposite()

        start_offset = self._port_offsets.get((edge_index, chain[0], exit_side), 0.0)
        end_offset = self._port_offsets.get((edge_index, chain[-1], entry_side), 0.0)
        lane_offset = self._lane_offsets.get(edge_index, 0.0)

        points: list[Point] = []
        last_hop = len(chain) - 2
        for hop, (u, v) in enumerate(zip(chain, chain[1:])):
            upper, lower = nodes[u], nodes[v]
            start_cross = _cross(upper, vertical) + (start_offset if hop == 0 else 0.0)
            end_cross = _cross(lower, vertical) + (end_offset if hop == last_hop else 0.0)
            start_flow = _far(upper, vertical)
            end_flow = _near(lower, vertical)

            # Turning lane, kept inside the gap between the two layers
            mid = (start_flow + end_flow) / 2 + lane_offset
            mid = min(max(mid, min(start_flow, end_flow)), max(start_flow, end_flow))

            push_point(points, _to_xy(start_cross, start_flow, vertical))
            if abs(end_cross - start_cross) >= 0.01:
                push_point(points, _to_xy(start_cross, mid, vertical))
                push_point(points, _to_xy(end_cross, mid, vertical))
            push_point(points, _to_xy(end_cross, end_flow, vertical))

        points = simplify_orthogonal(points)
        if len(points) == 1:
            # Touching boxes with no layer gap
            points.append(points[0])
        return points


__all__ = ["OrthogonalRouter"]
