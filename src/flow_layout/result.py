"""
Layout result records.

A finished layout is immutable: positioned nodes (real and dummy),
routed edge polylines, the subgraph tree and the canvas extent.
Coordinates use a y-down canvas with the origin at the top left.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .types import Direction, EdgeStyle, NodeShape, Subgraph

Point = tuple[float, float]


@dataclass(frozen=True)
class LayoutNode:
    """
    A positioned node box.

    ``x`` and ``y`` are the box centre. Dummy nodes carry no label and
    only mark where long edges pass through intermediate layers.
    """

    id: str
    label: Optional[str]
    width: float
    height: float
    layer: int
    order: int
    x: float
    y: float
    is_dummy: bool = False
    shape: NodeShape = NodeShape.PLAIN

    @property
    def left(self) -> float:
        """Left edge x coordinate."""
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        """Right edge x coordinate."""
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        """Top edge y coordinate."""
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        """Bottom edge y coordinate."""
        return self.y + self.height / 2

    def translated(self, dx: float, dy: float) -> LayoutNode:
        return LayoutNode(
            self.id,
            self.label,
            self.width,
            self.height,
            self.layer,
            self.order,
            self.x + dx,
            self.y + dy,
            self.is_dummy,
            self.shape,
        )


@dataclass(frozen=True)
class LayoutEdge:
    """
    A routed edge.

    ``points`` run in the direction the edge was laid out in. For an
    edge reversed to break a cycle that is target to source, so a
    renderer draws its arrowhead at ``points[0]``. ``reversed`` marks
    such edges and ``is_cross`` marks edges routed between composed
    subgraph blocks.
    """

    source: str
    target: str
    points: tuple[Point, ...]
    label: Optional[str] = None
    style: EdgeStyle = EdgeStyle.SOLID
    arrow: bool = True
    reversed: bool = False
    is_cross: bool = False

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def translated(self, dx: float, dy: float) -> LayoutEdge:
        return LayoutEdge(
            self.source,
            self.target,
            tuple((x + dx, y + dy) for x, y in self.points),
            self.label,
            self.style,
            self.arrow,
            self.reversed,
            self.is_cross,
        )


@dataclass(frozen=True)
class LayoutSubgraph:
    """Subgraph tree node mirrored from the input graph."""

    id: str
    title: Optional[str]
    nodes: tuple[str, ...] = ()
    subgraphs: tuple[LayoutSubgraph, ...] = ()

    @classmethod
    def from_subgraph(cls, subgraph: Subgraph) -> LayoutSubgraph:
        return cls(
            subgraph.id,
            subgraph.title,
            tuple(subgraph.nodes),
            tuple(cls.from_subgraph(child) for child in subgraph.subgraphs),
        )


@dataclass(frozen=True)
class LayoutResult:
    """
    The output of a layout run.

    Attributes:
        nodes: Real nodes followed by dummy nodes
        edges: One routed edge per input edge (cross edges deduplicated)
        subgraphs: Subgraph tree
        width: Canvas width
        height: Canvas height
        direction: Flow direction the layout was computed for
    """

    nodes: tuple[LayoutNode, ...] = ()
    edges: tuple[LayoutEdge, ...] = ()
    subgraphs: tuple[LayoutSubgraph, ...] = ()
    width: float = 0.0
    height: float = 0.0
    direction: Direction = Direction.TB
    _index: dict[str, LayoutNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {node.id: node for node in self.nodes})

    def get_node(self, node_id: str) -> Optional[LayoutNode]:
        return self._index.get(node_id)

    def real_nodes(self) -> list[LayoutNode]:
        return [node for node in self.nodes if not node.is_dummy]

    def dummy_nodes(self) -> list[LayoutNode]:
        return [node for node in self.nodes if node.is_dummy]

    def edges_between(self, source: str, target: str) -> list[LayoutEdge]:
        return [edge for edge in self.edges if edge.source == source and edge.target == target]


@dataclass(frozen=True)
class SubgraphBounds:
    """
    Padded bounding rectangle of one subgraph.

    ``path`` joins the ids from the top-level subgraph down with ``/``.
    """

    path: str
    label: str
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def overlaps(self, other: SubgraphBounds) -> bool:
        """Check if the interiors of two rectangles intersect."""
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def contains(self, other: SubgraphBounds) -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )


__all__ = [
    "LayoutEdge",
    "LayoutNode",
    "LayoutResult",
    "LayoutSubgraph",
    "Point",
    "SubgraphBounds",
]
