"""
Edge routing strategies.

- OrthogonalRouter: Axis-aligned polylines through dummy chains
- ObstacleRouter: Straight lines with detours around blocking nodes
"""

from __future__ import annotations

from typing import Union

from ..style import RoutingMode
from .base import EdgeRouter, RoutingContext, route_self_loop
from .obstacle import ObstacleRouter
from .orthogonal import OrthogonalRouter
from .ports import PortRequest, Side, assign_port_offsets, fan_offsets, side_point


def make_router(mode: Union[RoutingMode, str]) -> EdgeRouter:
    """Create the router for a routing mode."""
    mode = RoutingMode(mode)
    if mode is RoutingMode.GEOMETRY:
        return ObstacleRouter()
    return OrthogonalRouter()


__all__ = [
    "EdgeRouter",
    "ObstacleRouter",
    "OrthogonalRouter",
    "PortRequest",
    "RoutingContext",
    "Side",
    "assign_port_offsets",
    "fan_offsets",
    "make_router",
    "route_self_loop",
    "side_point",
]
