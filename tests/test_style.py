"""
Tests for the layout style.
"""

import dataclasses

import pytest

from flow_layout import InvalidStyleError, LayoutStyle, RoutingMode


class TestDefaults:
    """Tests for default parameters."""

    def test_defaults(self):
        style = LayoutStyle()
        assert style.min_width == 60.0
        assert style.min_height == 40.0
        assert style.char_width == 7.0
        assert style.char_height == 14.0
        assert style.node_padding_x == 12.0
        assert style.node_padding_y == 8.0
        assert style.node_gap == 24.0
        assert style.layer_gap == 40.0
        assert style.routing is RoutingMode.ORTHOGONAL
        assert style.crossing_passes == 6
        assert style.refinement_passes is None
        assert style.adaptive_spacing
        assert style.compose_subgraphs

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            LayoutStyle().node_gap = 10.0

    def test_as_dict(self):
        data = LayoutStyle().as_dict()
        assert data["layer_gap"] == 40.0
        assert len(data) == 13


class TestRefinementPasses:
    """Tests for the automatic refinement pass count."""

    def test_orthogonal_default(self):
        assert LayoutStyle().effective_refinement_passes == 0

    def test_geometry_default(self):
        style = LayoutStyle(routing=RoutingMode.GEOMETRY)
        assert style.effective_refinement_passes == 8

    def test_explicit(self):
        style = LayoutStyle(routing=RoutingMode.GEOMETRY, refinement_passes=2)
        assert style.effective_refinement_passes == 2


class TestCoercion:
    """Tests for value coercion."""

    def test_routing_from_string(self):
        assert LayoutStyle(routing="Geometry").routing is RoutingMode.GEOMETRY

    def test_ints_become_floats(self):
        style = LayoutStyle(node_gap=10)
        assert style.node_gap == 10.0
        assert isinstance(style.node_gap, float)

    def test_replace_validates(self):
        style = LayoutStyle().replace(layer_gap=80)
        assert style.layer_gap == 80.0
        with pytest.raises(InvalidStyleError):
            LayoutStyle().replace(layer_gap=-1)


class TestInvalidStyle:
    """Tests for out-of-range parameters."""

    @pytest.mark.parametrize("name", ["min_width", "min_height", "char_width", "char_height"])
    def test_positive_required(self, name):
        with pytest.raises(InvalidStyleError, match="must be positive"):
            LayoutStyle(**{name: 0})

    @pytest.mark.parametrize("name", ["node_padding_x", "node_padding_y", "node_gap", "layer_gap"])
    def test_non_negative_required(self, name):
        with pytest.raises(InvalidStyleError, match="must be >= 0"):
            LayoutStyle(**{name: -1.0})

    def test_zero_gaps_allowed(self):
        style = LayoutStyle(node_gap=0, layer_gap=0)
        assert style.node_gap == 0.0

    def test_non_finite(self):
        with pytest.raises(InvalidStyleError, match="must be finite"):
            LayoutStyle(node_gap=float("inf"))
        with pytest.raises(InvalidStyleError, match="must be finite"):
            LayoutStyle(char_width=float("nan"))

    def test_bool_rejected(self):
        with pytest.raises(InvalidStyleError, match="must be a number"):
            LayoutStyle(node_gap=True)

    def test_pass_counts(self):
        with pytest.raises(InvalidStyleError, match="must be an integer"):
            LayoutStyle(crossing_passes=2.5)
        with pytest.raises(InvalidStyleError, match="must be >= 0"):
            LayoutStyle(refinement_passes=-1)

    def test_unknown_routing(self):
        with pytest.raises(InvalidStyleError, match="Invalid routing"):
            LayoutStyle(routing="spline")
