"""
Tests for planar geometry helpers.
"""

import numpy as np
import pytest

from flow_layout.geometry import (
    Rect,
    boundary_point,
    path_length,
    point_in_rect,
    rects_to_array,
    segment_hits_rects,
    segment_intersects_rect,
    segments_intersect,
)


class TestRect:
    """Tests for the rectangle record."""

    def test_from_center(self):
        rect = Rect.from_center(10.0, 20.0, 60.0, 40.0)
        assert rect.as_tuple() == (-20.0, 0.0, 40.0, 40.0)
        assert rect.width == 60.0
        assert rect.height == 40.0
        assert rect.center == (10.0, 20.0)

    def test_corners_clockwise(self):
        rect = Rect(0.0, 0.0, 2.0, 1.0)
        assert rect.corners() == ((0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0))


class TestSegments:
    """Tests for segment predicates."""

    def test_proper_crossing(self):
        assert segments_intersect((0.0, 0.0), (10.0, 10.0), (0.0, 10.0), (10.0, 0.0))

    def test_disjoint(self):
        assert not segments_intersect((0.0, 0.0), (1.0, 0.0), (0.0, 5.0), (1.0, 5.0))

    def test_touching_endpoint(self):
        assert segments_intersect((0.0, 0.0), (5.0, 0.0), (5.0, 0.0), (5.0, 5.0))

    def test_collinear_overlap(self):
        assert segments_intersect((0.0, 0.0), (5.0, 0.0), (3.0, 0.0), (8.0, 0.0))

    def test_collinear_apart(self):
        assert not segments_intersect((0.0, 0.0), (1.0, 0.0), (3.0, 0.0), (8.0, 0.0))


class TestRectangles:
    """Tests for segment/rectangle predicates."""

    def test_point_in_rect_is_strict(self):
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert point_in_rect((5.0, 5.0), rect)
        assert not point_in_rect((0.0, 5.0), rect)

    def test_segment_through_rect(self):
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert segment_intersects_rect((-5.0, 5.0), (15.0, 5.0), rect)

    def test_segment_inside_rect(self):
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert segment_intersects_rect((2.0, 2.0), (3.0, 3.0), rect)

    def test_segment_touching_border(self):
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert segment_intersects_rect((-5.0, 0.0), (15.0, 0.0), rect)

    def test_segment_missing_rect(self):
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert not segment_intersects_rect((-5.0, 20.0), (15.0, 20.0), rect)

    def test_vectorised_matches_scalar(self):
        rects = [
            Rect(0.0, 0.0, 10.0, 10.0),
            Rect(20.0, 0.0, 30.0, 10.0),
            Rect(2.0, 2.0, 3.0, 3.0),
            Rect(-50.0, 40.0, -40.0, 50.0),
        ]
        segments = [
            ((-5.0, 5.0), (35.0, 5.0)),
            ((2.5, -10.0), (2.5, 20.0)),
            ((100.0, 100.0), (200.0, 200.0)),
            ((-45.0, 0.0), (-45.0, 40.0)),
        ]
        array = rects_to_array(rects)
        for a, b in segments:
            expected = [segment_intersects_rect(a, b, rect) for rect in rects]
            assert segment_hits_rects(a, b, array).tolist() == expected

    def test_empty_array(self):
        hits = segment_hits_rects((0.0, 0.0), (1.0, 1.0), rects_to_array([]))
        assert hits.shape == (0,)
        assert hits.dtype == np.bool_


class TestPaths:
    """Tests for path helpers."""

    def test_path_length(self):
        assert path_length([(0.0, 0.0), (3.0, 4.0), (3.0, 10.0)]) == pytest.approx(11.0)
        assert path_length([(1.0, 1.0)]) == 0.0

    def test_boundary_point_vertical(self):
        assert boundary_point((0.0, 0.0), 60.0, 40.0, (0.0, 100.0)) == pytest.approx((0.0, 20.0))

    def test_boundary_point_diagonal(self):
        point = boundary_point((0.0, 0.0), 60.0, 40.0, (100.0, 100.0))
        assert point == pytest.approx((20.0, 20.0))

    def test_boundary_point_shallow(self):
        point = boundary_point((0.0, 0.0), 60.0, 40.0, (100.0, 10.0))
        assert point == pytest.approx((30.0, 3.0))

    def test_boundary_point_same_centre(self):
        assert boundary_point((5.0, 5.0), 60.0, 40.0, (5.0, 5.0)) == (5.0, 5.0)
