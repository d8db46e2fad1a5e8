"""
Mutable working records used while a layout is being computed.

Nodes and edges live in flat lists and refer to each other by index.
Dummy nodes are appended after the real nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .types import EdgeStyle, NodeShape

GroupKey = tuple[int, ...]


@dataclass
class WorkNode:
    """A node being laid out. ``x``/``y`` are the box centre."""

    id: str
    label: Optional[str] = None
    width: float = 0.0
    height: float = 0.0
    layer: int = 0
    order: int = 0
    x: float = 0.0
    y: float = 0.0
    is_dummy: bool = False
    shape: NodeShape = NodeShape.PLAIN
    group_key: GroupKey = ()

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2


@dataclass
class WorkEdge:
    """
    An edge being laid out.

    ``orig_source``/``orig_target`` never change. ``source``/``target``
    are the effective endpoints, swapped when the edge is reversed to
    break a cycle.
    """

    orig_source: int
    orig_target: int
    source: int = -1
    target: int = -1
    label: Optional[str] = None
    style: EdgeStyle = EdgeStyle.SOLID
    arrow: bool = True
    reversed: bool = False

    def __post_init__(self) -> None:
        if self.source < 0:
            self.source = self.orig_source
        if self.target < 0:
            self.target = self.orig_target

    @property
    def is_self_loop(self) -> bool:
        return self.orig_source == self.orig_target

    def reverse(self) -> None:
        self.source, self.target = self.target, self.source
        self.reversed = not self.reversed


@dataclass
class EdgeChain:
    """Node indices an edge passes through, from effective source to target."""

    edge: int
    nodes: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class UnitEdge:
    """A hop between adjacent layers."""

    source: int
    target: int


__all__ = ["EdgeChain", "GroupKey", "UnitEdge", "WorkEdge", "WorkNode"]
