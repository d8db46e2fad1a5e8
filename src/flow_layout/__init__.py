"""
flow-layout: Layered layout for flowcharts in Python.

This package positions the nodes of a directed flowchart and routes its
edges, honouring flow direction and nested subgraphs.

Main entry points:
- layout_flowchart / FlowchartLayout: Full layout with subgraph composition
- SugiyamaLayout: Flat layered layout
- subgraph_bounds / suggest_canvas_size: Geometry helpers for renderers
- metrics: Quality measures of a finished layout
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import BaseLayout, StaticLayout

# Renderer helpers
from .bounds import sibling_bounds, subgraph_bounds, suggest_canvas_size

# Layered layouts
from .hierarchical import SugiyamaLayout
from .layout import FlowchartLayout, layout_flowchart

# Metrics for layout quality evaluation
from .metrics import (
    bend_count,
    edge_crossings,
    layout_quality_summary,
    node_overlaps,
    total_edge_length,
)

# Layout output
from .result import (
    LayoutEdge,
    LayoutNode,
    LayoutResult,
    LayoutSubgraph,
    SubgraphBounds,
)

# Style
from .style import LayoutStyle, RoutingMode

# Input model
from .types import (
    Direction,
    Edge,
    EdgeStyle,
    Event,
    EventType,
    Graph,
    Node,
    NodeShape,
    Subgraph,
)

# Validation utilities
from .validation import (
    GraphStructureWarning,
    InvalidEdgeError,
    InvalidNodeError,
    InvalidStyleError,
    InvalidSubgraphError,
    LayoutWarning,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Input model
    "Direction",
    "Node",
    "NodeShape",
    "Edge",
    "EdgeStyle",
    "Subgraph",
    "Graph",
    "EventType",
    "Event",
    # Style
    "LayoutStyle",
    "RoutingMode",
    # Base classes
    "BaseLayout",
    "StaticLayout",
    # Layouts
    "SugiyamaLayout",
    "FlowchartLayout",
    "layout_flowchart",
    # Output
    "LayoutNode",
    "LayoutEdge",
    "LayoutSubgraph",
    "LayoutResult",
    "SubgraphBounds",
    # Renderer helpers
    "subgraph_bounds",
    "sibling_bounds",
    "suggest_canvas_size",
    # Metrics
    "edge_crossings",
    "total_edge_length",
    "bend_count",
    "node_overlaps",
    "layout_quality_summary",
    # Validation
    "ValidationError",
    "InvalidStyleError",
    "InvalidNodeError",
    "InvalidEdgeError",
    "InvalidSubgraphError",
    "LayoutWarning",
    "GraphStructureWarning",
]
