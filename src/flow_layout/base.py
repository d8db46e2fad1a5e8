"""
Base classes for flowchart layout algorithms.

This module provides abstract base classes that define the common interface
and shared functionality for the layout pipelines:

- BaseLayout: Abstract base with event system, graph and style management
- StaticLayout: Single-pass layout producing a LayoutResult
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from .result import LayoutResult
from .style import LayoutStyle
from .types import Direction, Event, EventType, Graph
from .validation import (
    validate_edge_references,
    validate_node_ids,
    validate_subgraph_members,
)


class BaseLayout(ABC):
    """
    Abstract base class for flowchart layouts.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Graph and style management via properties
    - Input validation

    Example:
        layout = SomeLayout(graph, style=LayoutStyle(node_gap=32))
        layout.run()

        for node in layout.result.nodes:
            print(f"{node.id}: ({node.x}, {node.y})")
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        *,
        style: Optional[LayoutStyle] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            graph: Flowchart to lay out
            style: Size and spacing parameters (defaults to LayoutStyle())
            on_start: Callback for start event
            on_tick: Callback for tick event (once per pipeline stage)
            on_end: Callback for end event
        """
        self._graph: Graph = Graph()
        self._style: LayoutStyle = LayoutStyle()
        self._result: Optional[LayoutResult] = None
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        if graph is not None:
            self.graph = graph
        if style is not None:
            self.style = style

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> Graph:
        """Get the flowchart being laid out."""
        return self._graph

    @graph.setter
    def graph(self, value: Graph) -> None:
        if not isinstance(value, Graph):
            raise TypeError(f"graph must be a Graph, got {type(value).__name__}")
        self._graph = value
        self._result = None

    @property
    def style(self) -> LayoutStyle:
        """Get the layout style."""
        return self._style

    @style.setter
    def style(self, value: LayoutStyle) -> None:
        if not isinstance(value, LayoutStyle):
            raise TypeError(f"style must be a LayoutStyle, got {type(value).__name__}")
        self._style = value
        self._result = None

    @property
    def direction(self) -> Direction:
        return self._graph.direction

    @property
    def result(self) -> LayoutResult:
        """
        Get the result of the last run.

        Raises:
            RuntimeError: If the layout has not been run yet.
        """
        if self._result is None:
            raise RuntimeError("Layout has not been run; call run() first")
        return self._result

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    def _stage(self, name: str) -> None:
        """Report completion of a pipeline stage."""
        self.trigger({"type": EventType.tick, "stage": name})

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Validate the graph.

        Checks that node ids are unique and that every edge endpoint is a
        known node. Unknown subgraph members only produce a warning.
        Called automatically by run() but can be called early for
        fail-fast behavior.

        Returns:
            self (for chaining)

        Raises:
            InvalidNodeError: If node ids are empty or duplicated.
            InvalidEdgeError: If an edge references an unknown node.
        """
        validate_node_ids(self._graph.nodes, strict=True)
        validate_edge_references(self._graph, strict=True)
        if self._graph.subgraphs:
            validate_subgraph_members(self._graph, strict=False)
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Returns:
            self (for chaining)
        """
        pass


class StaticLayout(BaseLayout):
    """
    Base class for single-pass layouts.

    Example:
        result = SugiyamaLayout(graph).run().result
    """

    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Validates the graph, fires the start event, computes the layout,
        fires the end event.

        Args:
            **kwargs: Additional arguments passed to _compute()

        Returns:
            self (for chaining)
        """
        self.validate()
        self.trigger({"type": EventType.start})

        # Subclasses implement _compute()
        self._result = self._compute(**kwargs)

        self.trigger({"type": EventType.end})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> LayoutResult:
        """
        Compute the layout.

        Subclasses must implement this to perform the actual layout computation.
        """
        pass


__all__ = [
    "BaseLayout",
    "StaticLayout",
]
