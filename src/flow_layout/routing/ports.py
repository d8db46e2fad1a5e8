"""
Port placement on node sides.

Several edges leaving (or entering) the same side of a node are fanned
out along that side so they do not overlap. Ports are ordered by the
cross-axis position of the node at the other end, which keeps fanned
edges from crossing each other right at the box.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from .._work import WorkNode
from ..result import LayoutNode, Point
from ..style import LayoutStyle

Box = Union[WorkNode, LayoutNode]


class Side(Enum):
    """Side of a node where edges can connect."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    def opposite(self) -> Side:
        """Get the opposite side."""
        opposites = {
            Side.NORTH: Side.SOUTH,
            Side.SOUTH: Side.NORTH,
            Side.EAST: Side.WEST,
            Side.WEST: Side.EAST,
        }
        return opposites[self]

    def is_horizontal(self) -> bool:
        """Check if this side is on a horizontal edge of the node."""
        return self in (Side.NORTH, Side.SOUTH)


@dataclass(frozen=True)
class PortRequest:
    """
    One edge end asking for a port.

    ``sort_key`` is the cross-axis position of the opposite end; ports
    on one side are handed out in ascending key order.
    """

    node: int
    side: Side
    edge: int
    sort_key: float


def side_point(box: Box, side: Side, offset: float = 0.0) -> Point:
    """
    Point on a node side, shifted ``offset`` from the side's midpoint.

    Offsets run left-to-right on north/south sides and top-to-bottom on
    east/west sides.
    """
    if side is Side.NORTH:
        return (box.x + offset, box.y - box.height / 2)
    if side is Side.SOUTH:
        return (box.x + offset, box.y + box.height / 2)
    if side is Side.EAST:
        return (box.x + box.width / 2, box.y + offset)
    return (box.x - box.width / 2, box.y + offset)


def max_port_offset(box: Box, side: Side, style: LayoutStyle) -> float:
    """Largest distance from the side midpoint a port may be placed at."""
    if side.is_horizontal():
        half = box.width / 2
        spread = max(half - style.node_padding_x, style.char_width)
    else:
        half = box.height / 2
        spread = max(half - style.node_padding_y, style.char_height)
    return min(spread, half)


def fan_offsets(count: int, max_offset: float) -> list[float]:
    """Spread ``count`` ports evenly over ``[-max_offset, max_offset]``."""
    if count <= 1:
        return [0.0] * count
    step = 2 * max_offset / (count - 1)
    return [-max_offset + i * step for i in range(count)]


def assign_port_offsets(
    requests: Sequence[PortRequest],
    boxes: Sequence[Box],
    style: LayoutStyle,
) -> dict[tuple[int, int, Side], float]:
    """
    Assign a port offset to every request, grouping by (node, side).

    Args:
        requests: Edge ends needing a port
        boxes: Node boxes indexed by node index
        style: Layout style (padding and character metrics bound the fan)

    Returns:
        Mapping (edge, node, side) -> offset from the side midpoint.
    """
    groups: dict[tuple[int, Side], list[PortRequest]] = {}
    for request in requests:
        groups.setdefault((request.node, request.side), []).append(request)

    offsets: dict[tuple[int, int, Side], float] = {}
    for (node, side), group in groups.items():
        group.sort(key=lambda r: (r.sort_key, r.edge))
        spread = max_port_offset(boxes[node], side, style)
        for request, offset in zip(group, fan_offsets(len(group), spread)):
            offsets[(request.edge, node, side)] = offset
    return offsets


def push_point(points: list[Point], point: Point, tolerance: float = 0.01) -> None:
    """Append a point unless it coincides with the last one."""
    if points:
        last = points[-1]
        if abs(last[0] - point[0]) < tolerance and abs(last[1] - point[1]) < tolerance:
            return
    points.append(point)


def simplify_orthogonal(points: Sequence[Point], tolerance: float = 1e-6) -> list[Point]:
    """Remove interior points lying on the same axis line as both neighbours."""
    if len(points) <= 2:
        return list(points)
    simplified: list[Point] = [points[0]]
    for i in range(1, len(points) - 1):
        px, py = simplified[-1]
        cx, cy = points[i]
        nx, ny = points[i + 1]
        # Same horizontal line
        if abs(py - cy) < tolerance and abs(cy - ny) < tolerance:
            continue
        # Same vertical line
        if abs(px - cx) < tolerance and abs(cx - nx) < tolerance:
            continue
        simplified.append((cx, cy))
    simplified.append(points[-1])
    return simplified


__all__ = [
    "Box",
    "PortRequest",
    "Side",
    "assign_port_offsets",
    "fan_offsets",
    "max_port_offset",
    "push_point",
    "side_point",
    "simplify_orthogonal",
]
