"""
Tests for layout quality metrics.
"""

import math

import pytest

from flow_layout import (
    Graph,
    LayoutEdge,
    LayoutNode,
    LayoutResult,
    bend_count,
    edge_crossings,
    layout_flowchart,
    layout_quality_summary,
    node_overlaps,
    total_edge_length,
)


def _edge(source, target, *points):
    return LayoutEdge(source, target, tuple(points))


class TestEdgeCrossings:
    """Tests for edge crossing counts."""

    def test_crossing_pair(self):
        result = LayoutResult(
            edges=(
                _edge("a", "b", (0.0, 0.0), (10.0, 10.0)),
                _edge("c", "d", (0.0, 10.0), (10.0, 0.0)),
            )
        )
        assert edge_crossings(result) == 1

    def test_shared_endpoint_ignored(self):
        result = LayoutResult(
            edges=(
                _edge("a", "b", (0.0, 0.0), (10.0, 10.0)),
                _edge("a", "c", (0.0, 0.0), (10.0, 0.0)),
            )
        )
        assert edge_crossings(result) == 0

    def test_polyline_crossing(self):
        result = LayoutResult(
            edges=(
                _edge("a", "b", (0.0, 0.0), (0.0, 10.0), (20.0, 10.0)),
                _edge("c", "d", (10.0, 0.0), (10.0, 20.0)),
            )
        )
        assert edge_crossings(result) == 1

    def test_parallel(self):
        result = LayoutResult(
            edges=(
                _edge("a", "b", (0.0, 0.0), (0.0, 10.0)),
                _edge("c", "d", (5.0, 0.0), (5.0, 10.0)),
            )
        )
        assert edge_crossings(result) == 0


class TestLengthsAndBends:
    """Tests for edge length and bend counts."""

    def test_total_edge_length(self):
        result = LayoutResult(
            edges=(
                _edge("a", "b", (0.0, 0.0), (3.0, 4.0)),
                _edge("b", "c", (0.0, 0.0), (0.0, 10.0), (5.0, 10.0)),
            )
        )
        assert total_edge_length(result) == pytest.approx(20.0)

    def test_bend_count_skips_collinear(self):
        result = LayoutResult(
            edges=(_edge("a", "b", (0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (20.0, 10.0)),)
        )
        assert bend_count(result) == 1

    def test_straight_edges_have_no_bends(self):
        result = LayoutResult(edges=(_edge("a", "b", (0.0, 0.0), (0.0, 10.0)),))
        assert bend_count(result) == 0


class TestNodeOverlaps:
    """Tests for node overlap counts."""

    def test_overlapping_boxes(self):
        nodes = (
            LayoutNode("a", "a", 60.0, 40.0, 0, 0, 30.0, 20.0),
            LayoutNode("b", "b", 60.0, 40.0, 0, 1, 50.0, 20.0),
            LayoutNode("c", "c", 60.0, 40.0, 0, 2, 200.0, 20.0),
        )
        assert node_overlaps(LayoutResult(nodes=nodes)) == 1

    def test_dummies_ignored(self):
        nodes = (
            LayoutNode("a", "a", 60.0, 40.0, 0, 0, 30.0, 20.0),
            LayoutNode("__dummy0", None, 1.0, 1.0, 0, 1, 30.0, 20.0, is_dummy=True),
        )
        assert node_overlaps(LayoutResult(nodes=nodes)) == 0


class TestQualitySummary:
    """Tests for the metrics summary."""

    def test_summary_keys(self):
        graph = Graph()
        graph.add_edge("A", "B")
        graph.add_edge("B", "C")
        graph.add_edge("A", "C")
        graph.add_edge("C", "A")
        summary = layout_quality_summary(layout_flowchart(graph))
        assert set(summary) == {
            "edge_crossings",
            "total_edge_length",
            "bend_count",
            "node_overlaps",
            "reversed_edges",
            "dummy_nodes",
        }
        assert summary["node_overlaps"] == 0
        assert summary["reversed_edges"] == 1
        assert summary["dummy_nodes"] >= 1
        assert math.isfinite(summary["total_edge_length"])
