"""
Edge router interface and the routing shared by every strategy.

Routers work in the canonical frame (top-to-bottom or left-to-right)
and return one polyline per working edge, running from the edge's
effective source to its effective target. A reversed edge therefore
runs against its original direction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from .._work import EdgeChain, WorkEdge, WorkNode
from ..result import Point
from ..style import LayoutStyle
from ..types import Direction


@dataclass
class RoutingContext:
    """
    Everything a router needs.

    Attributes:
        nodes: Working nodes (real and dummy) with canonical coordinates
        edges: Working edges
        chains: One chain per edge, indexed like ``edges``
        direction: Canonical direction (TB or LR)
        style: Layout style
    """

    nodes: Sequence[WorkNode]
    edges: Sequence[WorkEdge]
    chains: Sequence[EdgeChain]
    direction: Direction
    style: LayoutStyle


class EdgeRouter(ABC):
    """Abstract base class for edge routing strategies."""

    @abstractmethod
    def route_edge(self, context: RoutingContext, edge_index: int) -> list[Point]:
        """Route one non-loop edge from its effective source to its effective target."""
        pass

    def prepare(self, context: RoutingContext) -> None:
        """Hook run once before any edge is routed."""

    def route(self, context: RoutingContext) -> list[list[Point]]:
        """
        Route all edges.

        Returns:
            One polyline per edge, indexed like ``context.edges``.
        """
        self.prepare(context)
        paths: list[list[Point]] = []
        for idx, edge in enumerate(context.edges):
            if edge.is_self_loop:
                node = context.nodes[edge.orig_source]
                paths.append(route_self_loop(node, context.style, context.direction))
            else:
                paths.append(self.route_edge(context, idx))
        return paths


def route_self_loop(node: WorkNode, style: LayoutStyle, direction: Direction) -> list[Point]:
    """
    Route a self-loop as a small rectangle outside the node.

    Vertical flow puts the loop on the right side, horizontal flow on
    the bottom side. The path is closed: its first and last points are
    the same point on the node border.
    """
    x, y = node.x, node.y
    if direction.is_vertical():
        right = x + node.width / 2
        loop_w = max(style.node_gap, 3 * style.char_width)
        loop_h = max(1.5 * style.char_height, 2 * style.node_padding_y)
        return [
            (right, y),
            (right + loop_w, y),
            (right + loop_w, y - loop_h),
            (right, y - loop_h),
            (right, y),
        ]

    bottom = y + node.height / 2
    loop_h = max(style.node_gap, 2 * style.char_height)
    loop_w = max(1.5 * style.char_width, 2 * style.node_padding_x)
    return [
        (x, bottom),
        (x, bottom + loop_h),
        (x + loop_w, bottom + loop_h),
        (x + loop_w, bottom),
        (x, bottom),
    ]


__all__ = ["EdgeRouter", "RoutingContext", "route_self_loop"]
