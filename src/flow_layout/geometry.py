"""
Planar geometry helpers for edge routing and layout metrics.

Segment tests use an orientation predicate with a small tolerance so
that points lying on a segment (within ``EPSILON``) count as touching.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .result import Point

EPSILON = 0.01


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in a y-down frame."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_center(cls, x: float, y: float, width: float, height: float) -> Rect:
        return cls(x - width / 2, y - height / 2, x + width / 2, y + height / 2)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Point:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def corners(self) -> tuple[Point, Point, Point, Point]:
        """Corners clockwise from the top left."""
        return (
            (self.left, self.top),
            (self.right, self.top),
            (self.right, self.bottom),
            (self.left, self.bottom),
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


# -----------------------------------------------------------------------------
# Scalar predicates
# -----------------------------------------------------------------------------


def orient(a: Point, b: Point, c: Point) -> float:
    """Twice the signed area of triangle abc."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def on_segment(a: Point, b: Point, p: Point, eps: float = EPSILON) -> bool:
    """Check if p lies within the bounding box of segment ab (with tolerance)."""
    return (
        min(a[0], b[0]) - eps <= p[0] <= max(a[0], b[0]) + eps
        and min(a[1], b[1]) - eps <= p[1] <= max(a[1], b[1]) + eps
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point, eps: float = EPSILON) -> bool:
    """Check if segment p1p2 touches or crosses segment q1q2."""
    o1 = orient(p1, p2, q1)
    o2 = orient(p1, p2, q2)
    o3 = orient(q1, q2, p1)
    o4 = orient(q1, q2, p2)

    if ((o1 > eps and o2 < -eps) or (o1 < -eps and o2 > eps)) and (
        (o3 > eps and o4 < -eps) or (o3 < -eps and o4 > eps)
    ):
        return True

    # Collinear or touching cases
    if abs(o1) <= eps and on_segment(p1, p2, q1, eps):
        return True
    if abs(o2) <= eps and on_segment(p1, p2, q2, eps):
        return True
    if abs(o3) <= eps and on_segment(q1, q2, p1, eps):
        return True
    if abs(o4) <= eps and on_segment(q1, q2, p2, eps):
        return True
    return False


def point_in_rect(p: Point, rect: Rect, eps: float = EPSILON) -> bool:
    """Check if p lies strictly inside the rectangle, shrunk by ``eps``."""
    return (
        rect.left + eps < p[0] < rect.right - eps
        and rect.top + eps < p[1] < rect.bottom - eps
    )


def segment_intersects_rect(a: Point, b: Point, rect: Rect, eps: float = EPSILON) -> bool:
    """Check if segment ab enters the rectangle or touches its border."""
    if point_in_rect(a, rect, eps) or point_in_rect(b, rect, eps):
        return True
    corners = rect.corners()
    for i in range(4):
        if segments_intersect(a, b, corners[i], corners[(i + 1) % 4], eps):
            return True
    return False


# -----------------------------------------------------------------------------
# Vectorised predicates
# -----------------------------------------------------------------------------


def rects_to_array(rects: Sequence[Rect]) -> np.ndarray:
    """Stack rectangles into a (k, 4) array of left, top, right, bottom."""
    if not rects:
        return np.empty((0, 4), dtype=float)
    return np.array([r.as_tuple() for r in rects], dtype=float)


def _orient_many(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    return (b[..., 0] - a[..., 0]) * (c[..., 1] - a[..., 1]) - (b[..., 1] - a[..., 1]) * (
        c[..., 0] - a[..., 0]
    )


def _on_segment_many(a: np.ndarray, b: np.ndarray, p: np.ndarray, eps: float) -> np.ndarray:
    return (
        (p[..., 0] >= np.minimum(a[..., 0], b[..., 0]) - eps)
        & (p[..., 0] <= np.maximum(a[..., 0], b[..., 0]) + eps)
        & (p[..., 1] >= np.minimum(a[..., 1], b[..., 1]) - eps)
        & (p[..., 1] <= np.maximum(a[..., 1], b[..., 1]) + eps)
    )


def _segments_intersect_many(
    p1: np.ndarray, p2: np.ndarray, q1: np.ndarray, q2: np.ndarray, eps: float
) -> np.ndarray:
    """Element-wise ``segments_intersect`` over broadcast point arrays."""
    p1 = np.broadcast_to(p1, q1.shape)
    p2 = np.broadcast_to(p2, q1.shape)
    o1 = _orient_many(p1, p2, q1)
    o2 = _orient_many(p1, p2, q2)
    o3 = _orient_many(q1, q2, p1)
    o4 = _orient_many(q1, q2, p2)

    proper = (((o1 > eps) & (o2 < -eps)) | ((o1 < -eps) & (o2 > eps))) & (
        ((o3 > eps) & (o4 < -eps)) | ((o3 < -eps) & (o4 > eps))
    )
    touching = (
        ((np.abs(o1) <= eps) & _on_segment_many(p1, p2, q1, eps))
        | ((np.abs(o2) <= eps) & _on_segment_many(p1, p2, q2, eps))
        | ((np.abs(o3) <= eps) & _on_segment_many(q1, q2, p1, eps))
        | ((np.abs(o4) <= eps) & _on_segment_many(q1, q2, p2, eps))
    )
    return proper | touching


def segment_hits_rects(a: Point, b: Point, rects: np.ndarray, eps: float = EPSILON) -> np.ndarray:
    """
    Vectorised ``segment_intersects_rect`` against many rectangles.

    Args:
        a: Segment start
        b: Segment end
        rects: (k, 4) array of left, top, right, bottom

    Returns:
        Boolean array of length k.
    """
    if rects.shape[0] == 0:
        return np.zeros(0, dtype=bool)

    left, top, right, bottom = rects[:, 0], rects[:, 1], rects[:, 2], rects[:, 3]

    def inside(p: Point) -> np.ndarray:
        return (
            (left + eps < p[0])
            & (p[0] < right - eps)
            & (top + eps < p[1])
            & (p[1] < bottom - eps)
        )

    hits = inside(a) | inside(b)

    pa = np.asarray(a, dtype=float)
    pb = np.asarray(b, dtype=float)
    tl = np.stack([left, top], axis=1)
    tr = np.stack([right, top], axis=1)
    br = np.stack([right, bottom], axis=1)
    bl = np.stack([left, bottom], axis=1)
    for q1, q2 in ((tl, tr), (tr, br), (br, bl), (bl, tl)):
        hits |= _segments_intersect_many(pa, pb, q1, q2, eps)
    return hits


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------


def path_length(points: Sequence[Point]) -> float:
    """Total length of a polyline."""
    return sum(math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(points, points[1:]))


def boundary_point(center: Point, width: float, height: float, toward: Point) -> Point:
    """
    Point where the ray from a box centre toward ``toward`` leaves the box.

    Returns the centre itself when ``toward`` coincides with it.
    """
    dx = toward[0] - center[0]
    dy = toward[1] - center[1]
    if abs(dx) < 1e-9 and abs(dy) < 1e-9:
        return center
    half_w = width / 2
    half_h = height / 2
    scale = min(
        half_w / abs(dx) if abs(dx) >= 1e-9 else math.inf,
        half_h / abs(dy) if abs(dy) >= 1e-9 else math.inf,
    )
    return (center[0] + dx * scale, center[1] + dy * scale)


__all__ = [
    "EPSILON",
    "Rect",
    "boundary_point",
    "on_segment",
    "orient",
    "path_length",
    "point_in_rect",
    "rects_to_array",
    "segment_hits_rects",
    "segment_intersects_rect",
    "segments_intersect",
]
