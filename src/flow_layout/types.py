"""
Graph model for flowchart layout.

This module provides the input records consumed by the layout engine:
- Direction: Flow direction of the diagram (TB, BT, LR, RL)
- NodeShape: Box shape hint carried through to renderers
- EdgeStyle: Line style hint carried through to renderers
- Node: Flowchart vertex with an optional display label
- Edge: Directed connection between two node ids
- Subgraph: Named, possibly nested container of node ids
- Graph: The complete flowchart
- EventType/Event: Layout lifecycle events
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, Iterator, Optional, TypedDict


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout has begun
    - tick: Fired once per pipeline stage
    - end: Layout is complete
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    stage: str
    listener: Optional[Callable[[], None]]


class Direction(Enum):
    """Flow direction of a flowchart."""

    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    def is_vertical(self) -> bool:
        """Check if edges flow along the y axis."""
        return self in (Direction.TB, Direction.BT)

    def is_horizontal(self) -> bool:
        """Check if edges flow along the x axis."""
        return self in (Direction.LR, Direction.RL)

    def is_mirrored(self) -> bool:
        """Check if the layout is computed in the opposite canonical direction."""
        return self in (Direction.BT, Direction.RL)

    def canonical(self) -> Direction:
        """Get the unmirrored direction sharing this one's flow axis."""
        return Direction.TB if self.is_vertical() else Direction.LR

    @classmethod
    def parse(cls, value: Direction | str) -> Direction:
        """
        Parse a direction keyword.

        Accepts enum members and case-insensitive names, plus the
        ``TD`` alias for top-to-bottom.

        Raises:
            ValueError: If the keyword is not a known direction.
        """
        if isinstance(value, Direction):
            return value
        key = str(value).strip().upper()
        if key == "TD":
            key = "TB"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Invalid direction: {value!r}. Must be one of TB, TD, BT, LR, RL"
            ) from None


class NodeShape(Enum):
    """Shape of a node box."""

    PLAIN = "plain"
    BRACKET = "bracket"
    ROUND = "round"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    HEXAGON = "hexagon"


class EdgeStyle(Enum):
    """Line style of an edge."""

    SOLID = "solid"
    DOTTED = "dotted"
    THICK = "thick"


@dataclass
class Node:
    """
    A flowchart vertex.

    Attributes:
        id: Unique identifier within the graph
        label: Display text; the id is shown when absent
        shape: Box shape hint
    """

    id: str
    label: Optional[str] = None
    shape: NodeShape = NodeShape.PLAIN

    @property
    def display_label(self) -> str:
        """Text used for sizing and rendering."""
        return self.label if self.label is not None else self.id


@dataclass
class Edge:
    """
    A directed connection between two nodes.

    Attributes:
        source: Id of the source node
        target: Id of the target node
        label: Optional edge label
        style: Line style
        arrow: Whether the target end carries an arrowhead
    """

    source: str
    target: str
    label: Optional[str] = None
    style: EdgeStyle = EdgeStyle.SOLID
    arrow: bool = True

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass
class Subgraph:
    """
    A named container of nodes.

    Member ids are unique within one subgraph; nested subgraphs hold their
    own members.
    """

    id: str
    title: Optional[str] = None
    nodes: list[str] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)

    @property
    def display_title(self) -> str:
        return self.title if self.title is not None else self.id

    def add_node(self, node_id: str) -> None:
        """Add a member id, ignoring duplicates."""
        if node_id not in self.nodes:
            self.nodes.append(node_id)

    def add_subgraph(self, subgraph: Subgraph) -> Subgraph:
        self.subgraphs.append(subgraph)
        return subgraph

    def all_node_ids(self) -> list[str]:
        """Collect member ids of this subgraph and all descendants, in order."""
        seen: set[str] = set()
        result: list[str] = []
        stack = [self]
        # Depth-first, own members before children's
        order: list[Subgraph] = []
        while stack:
            sub = stack.pop()
            order.append(sub)
            stack.extend(reversed(sub.subgraphs))
        for sub in order:
            for node_id in sub.nodes:
                if node_id not in seen:
                    seen.add(node_id)
                    result.append(node_id)
        return result

    def walk(self) -> Iterator[Subgraph]:
        """Iterate over this subgraph and its descendants, depth first."""
        yield self
        for child in self.subgraphs:
            yield from child.walk()


@dataclass
class Graph:
    """
    A flowchart: direction, nodes, edges and top-level subgraphs.

    Example:
        graph = Graph(Direction.LR)
        graph.add_edge("A", "B", label="yes")
        graph.add_edge("A", "C", label="no")
    """

    direction: Direction = Direction.TB
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.direction = Direction.parse(self.direction)

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def add_node(
        self,
        node_id: str,
        label: Optional[str] = None,
        shape: NodeShape = NodeShape.PLAIN,
    ) -> Node:
        """
        Add a node, or update the label and shape of an existing one.

        Returns:
            The node registered under ``node_id``
        """
        existing = self.get_node(node_id)
        if existing is not None:
            if label is not None:
                existing.label = label
            if shape is not NodeShape.PLAIN:
                existing.shape = shape
            return existing
        node = Node(node_id, label, shape)
        self.nodes.append(node)
        return node

    def add_edge(
        self,
        source: str,
        target: str,
        label: Optional[str] = None,
        style: EdgeStyle = EdgeStyle.SOLID,
        arrow: bool = True,
    ) -> Edge:
        """Add an edge, creating plain nodes for unknown endpoints."""
        if self.get_node(source) is None:
            self.add_node(source)
        if self.get_node(target) is None:
            self.add_node(target)
        edge = Edge(source, target, label, style, arrow)
        self.edges.append(edge)
        return edge

    def add_subgraph(self, subgraph: Subgraph) -> Subgraph:
        self.subgraphs.append(subgraph)
        return subgraph


__all__ = [
    "Direction",
    "Edge",
    "EdgeStyle",
    "Event",
    "EventType",
    "Graph",
    "Node",
    "NodeShape",
    "Subgraph",
]
