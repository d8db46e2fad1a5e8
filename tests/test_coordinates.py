"""
Tests for node sizing, coordinate assignment, adaptive spacing and mirroring.
"""

import pytest

from flow_layout._work import UnitEdge, WorkEdge, WorkNode
from flow_layout.hierarchical.coordinates import (
    assign_coordinates,
    compute_extent,
    compute_layer_gap,
    estimate_node_size,
    expand_layer_gaps,
    lane_size,
    mirror_nodes,
    mirror_point,
    port_spacing,
    separate_subgraphs,
    widen_for_ports,
)
from flow_layout.style import LayoutStyle
from flow_layout.types import Direction

# =============================================================================
# Helpers
# =============================================================================


def _make_box(layer=0, width=60.0, height=40.0, group_key=(), is_dummy=False):
    return WorkNode(
        id=f"box{layer}",
        width=width,
        height=height,
        layer=layer,
        group_key=group_key,
        is_dummy=is_dummy,
    )


def _fan_out(count):
    """One node on layer 0 with ``count`` children on layer 1."""
    nodes = [_make_box(0)] + [_make_box(1) for _ in range(count)]
    layers = [[0], list(range(1, count + 1))]
    units = [UnitEdge(0, i) for i in range(1, count + 1)]
    return nodes, layers, units


# =============================================================================
# Node Sizes
# =============================================================================


class TestEstimateNodeSize:
    """Tests for label-based box estimates."""

    def test_short_label_uses_minimums(self):
        assert estimate_node_size("A", LayoutStyle()) == (60.0, 40.0)

    def test_long_label_grows_width(self):
        width, height = estimate_node_size("abcdefghij", LayoutStyle())
        assert width == pytest.approx(10 * 7 + 2 * 12)
        assert height == 40.0

    def test_padding_grows_height(self):
        style = LayoutStyle(node_padding_y=20)
        assert estimate_node_size("A", style)[1] == pytest.approx(14 + 40)


class TestWidenForPorts:
    """Tests for widening nodes with many ports."""

    def test_fan_out_widens_source(self):
        style = LayoutStyle()
        nodes = [_make_box(0)] + [_make_box(1) for _ in range(5)]
        edges = [WorkEdge(0, i) for i in range(1, 6)]
        widen_for_ports(nodes, edges, style, Direction.TB)
        spacing = port_spacing(style, Direction.TB)
        assert nodes[0].width == pytest.approx(4 * spacing + 2 * 12 + 7)
        assert nodes[1].width == 60.0

    def test_horizontal_flow_grows_height(self):
        style = LayoutStyle()
        nodes = [_make_box(0)] + [_make_box(1) for _ in range(5)]
        edges = [WorkEdge(0, i) for i in range(1, 6)]
        widen_for_ports(nodes, edges, style, Direction.LR)
        assert nodes[0].height > 40.0
        assert nodes[0].width == 60.0

    def test_dummies_not_widened(self):
        nodes = [_make_box(0, width=1.0, height=1.0, is_dummy=True)]
        nodes += [_make_box(1) for _ in range(5)]
        edges = [WorkEdge(0, i) for i in range(1, 6)]
        widen_for_ports(nodes, edges, LayoutStyle(), Direction.TB)
        assert nodes[0].width == 1.0


# =============================================================================
# Placement
# =============================================================================


class TestAssignCoordinates:
    """Tests for layer-by-layer placement."""

    def test_top_to_bottom(self):
        nodes = [_make_box(0), _make_box(0), _make_box(1)]
        assign_coordinates(nodes, [[0, 1], [2]], LayoutStyle(), Direction.TB)
        assert (nodes[0].x, nodes[0].y) == pytest.approx((30.0, 20.0))
        assert (nodes[1].x, nodes[1].y) == pytest.approx((60 + 24 + 30.0, 20.0))
        assert (nodes[2].x, nodes[2].y) == pytest.approx((30.0, 40 + 40 + 20.0))

    def test_left_to_right(self):
        nodes = [_make_box(0), _make_box(0), _make_box(1)]
        assign_coordinates(nodes, [[0, 1], [2]], LayoutStyle(), Direction.LR)
        assert (nodes[0].x, nodes[0].y) == pytest.approx((30.0, 20.0))
        assert (nodes[1].x, nodes[1].y) == pytest.approx((30.0, 40 + 24 + 20.0))
        assert (nodes[2].x, nodes[2].y) == pytest.approx((60 + 40 + 30.0, 20.0))

    def test_layer_band_centres_nodes(self):
        """Nodes of one layer share the band centre."""
        nodes = [_make_box(0, height=40.0), _make_box(0, height=80.0)]
        assign_coordinates(nodes, [[0, 1]], LayoutStyle(), Direction.TB)
        assert nodes[0].y == nodes[1].y == pytest.approx(40.0)

    def test_explicit_layer_gap(self):
        nodes = [_make_box(0), _make_box(1)]
        assign_coordinates(nodes, [[0], [1]], LayoutStyle(), Direction.TB, layer_gap=100.0)
        assert nodes[1].top - nodes[0].bottom == pytest.approx(100.0)

    def test_no_overlap_within_layer(self):
        nodes = [_make_box(0, width=w) for w in (60.0, 120.0, 90.0)]
        assign_coordinates(nodes, [[0, 1, 2]], LayoutStyle(), Direction.TB)
        for a, b in zip(nodes, nodes[1:]):
            assert b.left - a.right == pytest.approx(24.0)


# =============================================================================
# Adaptive Spacing
# =============================================================================


class TestLayerGaps:
    """Tests for adaptive layer gaps."""

    def test_single_edges_keep_base_gap(self):
        nodes, _, units = _fan_out(1)
        assert compute_layer_gap(nodes, units, LayoutStyle(), Direction.TB) == 40.0

    def test_fan_out_grows_gap(self):
        style = LayoutStyle()
        nodes, _, units = _fan_out(3)
        expected = 40.0 + 2 * lane_size(style, Direction.TB) * 0.6
        assert compute_layer_gap(nodes, units, style, Direction.TB) == pytest.approx(expected)

    def test_gap_is_clamped(self):
        nodes, _, units = _fan_out(200)
        assert compute_layer_gap(nodes, units, LayoutStyle(), Direction.TB) == 160.0

    def test_expand_layer_gaps(self):
        style = LayoutStyle()
        nodes, layers, units = _fan_out(3)
        assign_coordinates(nodes, layers, style, Direction.TB)
        expand_layer_gaps(nodes, layers, units, style, Direction.TB)
        required = 40.0 + 2 * lane_size(style, Direction.TB) * 0.7
        assert nodes[1].top - nodes[0].bottom == pytest.approx(required)

    def test_expand_keeps_wide_gaps(self):
        style = LayoutStyle()
        nodes, layers, units = _fan_out(3)
        assign_coordinates(nodes, layers, style, Direction.TB, layer_gap=500.0)
        expand_layer_gaps(nodes, layers, units, style, Direction.TB)
        assert nodes[1].top - nodes[0].bottom == pytest.approx(500.0)


# =============================================================================
# Subgraph Separation
# =============================================================================


class TestSeparateSubgraphs:
    """Tests for pushing groups apart in flat grouped mode."""

    def test_groups_do_not_overlap(self):
        style = LayoutStyle()
        nodes = [
            _make_box(0, group_key=(0,)),
            _make_box(0, group_key=(1,)),
            _make_box(0),
        ]
        assign_coordinates(nodes, [[0, 1, 2]], style, Direction.TB)
        separate_subgraphs(nodes, style, Direction.TB)
        padding = 24 + 40 * 0.5
        assert nodes[1].left - nodes[0].right >= 2 * padding + 24 - 1e-9
        assert nodes[2].left - nodes[1].right >= padding + 24 - 1e-9

    def test_nested_siblings_do_not_overlap(self):
        """Children of one parent are pushed apart; the parent's own node moves in front."""
        style = LayoutStyle()
        nodes = [
            _make_box(0, group_key=(0, 0)),
            _make_box(0, group_key=(0, 1)),
            _make_box(0, group_key=(0,)),
        ]
        assign_coordinates(nodes, [[0, 1, 2]], style, Direction.TB)
        separate_subgraphs(nodes, style, Direction.TB)
        padding = 24 + 40 * 0.5
        assert nodes[1].left - nodes[0].right == pytest.approx(2 * padding + 24)
        assert nodes[0].left - nodes[2].right == pytest.approx(padding + 24)

    def test_nested_groups_move_with_parent(self):
        style = LayoutStyle()
        nodes = [
            _make_box(0, group_key=(0, 0)),
            _make_box(0, group_key=(0, 1)),
            _make_box(0, group_key=(1,)),
        ]
        assign_coordinates(nodes, [[0, 1, 2]], style, Direction.TB)
        separate_subgraphs(nodes, style, Direction.TB)
        padding = 24 + 40 * 0.5
        # Parent box holds both padded child boxes plus its own padding
        assert nodes[2].left - nodes[1].right == pytest.approx(3 * padding + 24)

    def test_horizontal_flow_separates_along_y(self):
        style = LayoutStyle()
        nodes = [_make_box(0, group_key=(0,)), _make_box(0, group_key=(1,))]
        assign_coordinates(nodes, [[0, 1]], style, Direction.LR)
        xs = [node.x for node in nodes]
        separate_subgraphs(nodes, style, Direction.LR)
        assert [node.x for node in nodes] == xs
        assert nodes[1].top > nodes[0].bottom + 24

    def test_no_groups_is_noop(self):
        style = LayoutStyle()
        nodes = [_make_box(0), _make_box(0)]
        assign_coordinates(nodes, [[0, 1]], style, Direction.TB)
        before = [(node.x, node.y) for node in nodes]
        separate_subgraphs(nodes, style, Direction.TB)
        assert [(node.x, node.y) for node in nodes] == before


# =============================================================================
# Extent and Mirroring
# =============================================================================


class TestExtentAndMirroring:
    """Tests for extent computation and direction mirroring."""

    def test_extent_includes_paths(self):
        nodes = [_make_box(0)]
        nodes[0].x, nodes[0].y = 30.0, 20.0
        extent = compute_extent(nodes, [[(0.0, 0.0), (100.0, -5.0)]])
        assert extent == (0.0, -5.0, 100.0, 40.0)

    def test_empty_extent(self):
        assert compute_extent([]) == (0.0, 0.0, 0.0, 0.0)

    def test_mirror_point(self):
        assert mirror_point((10.0, 20.0), Direction.BT, 100.0, 50.0) == (10.0, 30.0)
        assert mirror_point((10.0, 20.0), Direction.RL, 100.0, 50.0) == (90.0, 20.0)
        assert mirror_point((10.0, 20.0), Direction.TB, 100.0, 50.0) == (10.0, 20.0)

    def test_mirror_nodes(self):
        nodes = [_make_box(0)]
        nodes[0].x, nodes[0].y = 30.0, 20.0
        mirror_nodes(nodes, Direction.BT, 60.0, 100.0)
        assert (nodes[0].x, nodes[0].y) == (30.0, 80.0)
        mirror_nodes(nodes, Direction.LR, 60.0, 100.0)
        assert (nodes[0].x, nodes[0].y) == (30.0, 80.0)
