"""
Layout quality metrics.

Provides quantitative measures of a routed flowchart:
- Edge crossings: Number of edge pairs whose polylines intersect
- Total edge length: Sum of polyline lengths
- Bend count: Number of direction changes along edges
- Node overlaps: Number of overlapping real node boxes

All metrics work on a finished LayoutResult.
"""

from __future__ import annotations

from typing import Any, Sequence

from .geometry import EPSILON, orient, path_length, segments_intersect
from .result import LayoutEdge, LayoutResult, Point


def _polylines_cross(a: Sequence[Point], b: Sequence[Point]) -> bool:
    for p1, p2 in zip(a, a[1:]):
        for q1, q2 in zip(b, b[1:]):
            if segments_intersect(p1, p2, q1, q2):
                return True
    return False


def _share_endpoint(e1: LayoutEdge, e2: LayoutEdge) -> bool:
    return bool({e1.source, e1.target} & {e2.source, e2.target})


def edge_crossings(result: LayoutResult) -> int:
    """
    Count the number of edge crossings in the layout.

    Two edges cross if any segment of one touches any segment of the
    other. Pairs sharing an endpoint node and self-loops are skipped.

    Args:
        result: Finished layout

    Returns:
        Number of crossing edge pairs

    Time Complexity: O(m^2 * b^2) where m = edges and b = points per edge
    """
    edges = [edge for edge in result.edges if not edge.is_self_loop and len(edge.points) > 1]
    crossings = 0
    for i in range(len(edges)):
        for j in range(i + 1, len(edges)):
            if _share_endpoint(edges[i], edges[j]):
                continue
            if _polylines_cross(edges[i].points, edges[j].points):
                crossings += 1
    return crossings


def total_edge_length(result: LayoutResult) -> float:
    """Sum of the polyline lengths of all edges."""
    return sum(path_length(edge.points) for edge in result.edges)


def bend_count(result: LayoutResult) -> int:
    """
    Count the bends of all edges.

    A bend is an interior point where the polyline changes direction;
    collinear interior points are not counted.
    """
    bends = 0
    for edge in result.edges:
        points = edge.points
        for a, b, c in zip(points, points[1:], points[2:]):
            if abs(orient(a, b, c)) > EPSILON:
                bends += 1
    return bends


def node_overlaps(result: LayoutResult) -> int:
    """Count pairs of real nodes whose boxes overlap."""
    nodes = result.real_nodes()
    overlaps = 0
    for i in range(len(nodes)):
        a = nodes[i]
        for b in nodes[i + 1 :]:
            if a.left < b.right and b.left < a.right and a.top < b.bottom and b.top < a.bottom:
                overlaps += 1
    return overlaps


def layout_quality_summary(result: LayoutResult) -> dict[str, Any]:
    """
    Compute a summary of layout quality metrics.

    Args:
        result: Finished layout

    Returns:
        Dictionary with all metrics:
        - edge_crossings: Number of crossing edge pairs
        - total_edge_length: Sum of edge lengths
        - bend_count: Number of edge bends
        - node_overlaps: Number of overlapping node pairs
        - reversed_edges: Number of edges reversed to break cycles
        - dummy_nodes: Number of dummy nodes
    """
    return {
        "edge_crossings": edge_crossings(result),
        "total_edge_length": total_edge_length(result),
        "bend_count": bend_count(result),
        "node_overlaps": node_overlaps(result),
        "reversed_edges": sum(1 for edge in result.edges if edge.reversed),
        "dummy_nodes": len(result.dummy_nodes()),
    }


__all__ = [
    "bend_count",
    "edge_crossings",
    "layout_quality_summary",
    "node_overlaps",
    "total_edge_length",
]
