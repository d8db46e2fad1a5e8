"""
Tests for subgraph handling: block composition and flat grouped layout.
"""

import pytest

from flow_layout import (
    Direction,
    FlowchartLayout,
    Graph,
    GraphStructureWarning,
    LayoutStyle,
    Subgraph,
    layout_flowchart,
    node_overlaps,
    sibling_bounds,
    subgraph_bounds,
)

# =============================================================================
# Test Fixtures
# =============================================================================


def create_two_stages(direction=Direction.TB):
    """Two subgraphs of two nodes each, joined by B -> C."""
    graph = Graph(direction)
    graph.add_edge("A", "B")
    graph.add_edge("C", "D")
    graph.add_edge("B", "C")
    graph.add_subgraph(Subgraph("s1", "Stage one", ["A", "B"]))
    graph.add_subgraph(Subgraph("s2", "Stage two", ["C", "D"]))
    return graph


def create_feedback():
    """Two subgraphs with an edge pointing back from the right one."""
    graph = Graph()
    graph.add_edge("A", "B")
    graph.add_edge("C", "D")
    graph.add_edge("D", "A")
    graph.add_subgraph(Subgraph("s1", nodes=["A", "B"]))
    graph.add_subgraph(Subgraph("s2", nodes=["C", "D"]))
    return graph


def _assert_siblings_apart(result):
    for group in sibling_bounds(result):
        for i, first in enumerate(group):
            for second in group[i + 1 :]:
                assert not first.overlaps(second), (first.path, second.path)


def _in_canvas(result, tolerance=1e-6):
    for node in result.nodes:
        assert node.left >= -tolerance and node.right <= result.width + tolerance
        assert node.top >= -tolerance and node.bottom <= result.height + tolerance
    for edge in result.edges:
        for x, y in edge.points:
            assert -tolerance <= x <= result.width + tolerance
            assert -tolerance <= y <= result.height + tolerance


# =============================================================================
# Composition
# =============================================================================


class TestBlockComposition:
    """Tests for laying subgraphs out as blocks in one row."""

    def test_blocks_left_to_right(self):
        result = layout_flowchart(create_two_stages())
        a, b, c, d = (result.get_node(n) for n in "ABCD")
        assert max(a.right, b.right) < min(c.left, d.left)
        # Each block keeps its own top-to-bottom flow
        assert a.y < b.y
        assert c.y < d.y

    def test_sibling_bounds_do_not_overlap(self):
        for direction in Direction:
            result = layout_flowchart(create_two_stages(direction))
            first, second = subgraph_bounds(result)
            assert not first.overlaps(second)

    def test_title_band_above_members(self):
        result = layout_flowchart(create_two_stages())
        a = result.get_node("A")
        style = LayoutStyle()
        bounds = subgraph_bounds(result, padding=0.0)[0]
        title_band = style.char_height + 2 * style.node_padding_y
        assert a.top >= title_band + 2 * style.node_padding_y - 1e-9
        assert bounds.top == pytest.approx(a.top)

    def test_forward_edge_uses_lane_above(self):
        result = layout_flowchart(create_two_stages())
        edge = result.edges_between("B", "C")[0]
        assert edge.is_cross
        b, c = result.get_node("B"), result.get_node("C")
        assert edge.points[0] == pytest.approx((b.x, b.top))
        assert edge.points[-1] == pytest.approx((c.x, c.top))
        lane = edge.points[1][1]
        assert lane < min(node.top for node in result.nodes)
        assert lane > 0.0

    def test_backward_edge_uses_lane_below(self):
        result = layout_flowchart(create_feedback())
        edge = result.edges_between("D", "A")[0]
        assert edge.is_cross
        d, a = result.get_node("D"), result.get_node("A")
        assert edge.points[0] == pytest.approx((d.x, d.bottom))
        assert edge.points[-1] == pytest.approx((a.x, a.bottom))
        lane = edge.points[1][1]
        assert lane > max(node.bottom for node in result.nodes)
        assert lane < result.height

    def test_forward_lanes_are_distinct(self):
        graph = create_two_stages()
        graph.add_edge("A", "D")
        result = layout_flowchart(graph)
        lanes = {edge.points[1][1] for edge in result.edges if edge.is_cross}
        assert len(lanes) == 2

    def test_cross_edges_deduplicated(self):
        graph = create_two_stages()
        graph.add_edge("B", "C")
        graph.add_edge("B", "C", label="again")
        result = layout_flowchart(graph)
        assert len(result.edges_between("B", "C")) == 2
        assert len(result.edges) == 4

    def test_ungrouped_nodes_get_own_blocks(self):
        graph = create_two_stages()
        graph.add_edge("D", "E")
        result = layout_flowchart(graph)
        e = result.get_node("E")
        assert all(e.left > node.right for node in result.nodes if node.id != "E")
        assert result.edges_between("D", "E")[0].is_cross

    def test_dummy_ids_unique(self):
        graph = Graph()
        for a, b, c in (("A", "B", "C"), ("D", "E", "F")):
            graph.add_edge(a, b)
            graph.add_edge(b, c)
            graph.add_edge(a, c)
        graph.add_subgraph(Subgraph("s1", nodes=["A", "B", "C"]))
        graph.add_subgraph(Subgraph("s2", nodes=["D", "E", "F"]))
        result = layout_flowchart(graph)
        assert sorted(node.id for node in result.dummy_nodes()) == ["__dummy0", "__dummy1"]

    def test_dummy_ids_never_shadow_nodes(self):
        graph = Graph()
        graph.add_edge("A", "B")
        graph.add_edge("B", "C")
        graph.add_edge("A", "C")
        graph.add_edge("C", "__dummy0")
        graph.add_subgraph(Subgraph("s1", nodes=["A", "B", "C"]))
        result = layout_flowchart(graph)
        ids = [node.id for node in result.nodes]
        assert len(ids) == len(set(ids))
        assert [node.id for node in result.dummy_nodes()] == ["__dummy1"]
        target = result.get_node("__dummy0")
        assert not target.is_dummy
        edge = result.edges_between("C", "__dummy0")[0]
        assert edge.is_cross
        assert edge.points[-1][1] == pytest.approx(target.top)

    def test_in_canvas(self):
        _in_canvas(layout_flowchart(create_two_stages()))
        _in_canvas(layout_flowchart(create_feedback()))

    def test_no_node_overlaps(self):
        assert node_overlaps(layout_flowchart(create_feedback())) == 0

    def test_stage_events(self):
        stages = []
        FlowchartLayout(create_two_stages(), on_tick=lambda e: stages.append(e["stage"])).run()
        assert stages == ["blocks", "bands"]

    def test_composes_property(self):
        assert FlowchartLayout(create_two_stages()).composes
        style = LayoutStyle(compose_subgraphs=False)
        assert not FlowchartLayout(create_two_stages(), style=style).composes


# =============================================================================
# Nesting and Membership
# =============================================================================


class TestNestedSubgraphs:
    """Tests for nested subgraphs."""

    def _nested(self):
        graph = Graph()
        graph.add_edge("X", "Y")
        graph.add_edge("Y", "Z")
        graph.add_edge("Z", "W")
        inner = Subgraph("inner", "Inner", ["Y", "Z"])
        graph.add_subgraph(Subgraph("outer", "Outer", ["X"], [inner]))
        return graph

    def test_child_inside_parent(self):
        result = layout_flowchart(self._nested())
        bounds = {b.path: b for b in subgraph_bounds(result)}
        assert bounds["outer"].contains(bounds["outer/inner"])

    def test_subgraph_tree_preserved(self):
        result = layout_flowchart(self._nested())
        outer = result.subgraphs[0]
        assert outer.title == "Outer"
        assert outer.nodes == ("X",)
        assert outer.subgraphs[0].nodes == ("Y", "Z")

    def test_nested_in_flat_mode(self):
        style = LayoutStyle(compose_subgraphs=False)
        result = layout_flowchart(self._nested(), style)
        bounds = {b.path: b for b in subgraph_bounds(result)}
        assert bounds["outer"].contains(bounds["outer/inner"])


class TestMembership:
    """Tests for overlapping and unknown subgraph members."""

    def test_unknown_member_warns(self):
        graph = create_two_stages()
        graph.subgraphs[0].add_node("ghost")
        with pytest.warns(GraphStructureWarning, match="unknown node 'ghost'"):
            result = layout_flowchart(graph)
        assert "ghost" not in result.subgraphs[0].nodes

    def test_overlap_keeps_first_claim(self):
        graph = create_two_stages()
        graph.subgraphs[1].add_node("A")
        with pytest.warns(GraphStructureWarning, match="first claim kept"):
            result = layout_flowchart(graph)
        assert result.subgraphs[1].nodes == ("C", "D")

    def test_empty_subgraph_skipped(self):
        graph = create_two_stages()
        graph.add_subgraph(Subgraph("empty"))
        result = layout_flowchart(graph)
        assert [b.path for b in subgraph_bounds(result)] == ["s1", "s2"]
        assert len(result.subgraphs) == 3


# =============================================================================
# Flat Grouped Mode
# =============================================================================


class TestFlatGroupedLayout:
    """Tests for clustering subgraphs inside one layered drawing."""

    def test_siblings_do_not_overlap(self):
        graph = create_two_stages()
        graph.add_edge("A", "D")
        graph.add_edge("C", "E")
        style = LayoutStyle(compose_subgraphs=False)
        for direction in Direction:
            graph.direction = direction
            _assert_siblings_apart(layout_flowchart(graph, style))

    def test_nested_siblings_do_not_overlap(self):
        graph = Graph()
        graph.add_edge("A", "B")
        graph.add_edge("C", "D")
        graph.add_edge("A", "C")
        left = Subgraph("a", nodes=["A", "B"])
        right = Subgraph("b", nodes=["C", "D"])
        graph.add_subgraph(Subgraph("outer", subgraphs=[left, right]))
        style = LayoutStyle(compose_subgraphs=False)
        for direction in Direction:
            graph.direction = direction
            result = layout_flowchart(graph, style)
            _assert_siblings_apart(result)
            bounds = {b.path: b for b in subgraph_bounds(result)}
            assert bounds["outer"].contains(bounds["outer/a"])
            assert bounds["outer"].contains(bounds["outer/b"])
            assert node_overlaps(result) == 0

    def test_ungrouped_outside_groups(self):
        graph = create_two_stages()
        graph.add_edge("C", "E")
        result = layout_flowchart(graph, LayoutStyle(compose_subgraphs=False))
        e = result.get_node("E")
        for b in subgraph_bounds(result):
            assert e.left > b.right or e.right < b.left

    def test_flat_mode_reports_pipeline_stages(self):
        stages = []
        style = LayoutStyle(compose_subgraphs=False)
        layout = FlowchartLayout(
            create_two_stages(), style=style, on_tick=lambda e: stages.append(e["stage"])
        )
        layout.run()
        assert stages[0] == "cycles"
        assert stages[-1] == "routing"
