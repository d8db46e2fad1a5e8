"""
Obstacle-avoiding straight-line routing.

Edges are drawn as straight segments between the box borders of their
real endpoints. When the direct segment passes through another node,
a handful of detours is tried and scored:

1. One bend at the midpoint, pushed sideways by increasing offsets
2. Two bends at one and two thirds of the way, pushed sideways

A candidate scores ``intersections * 1000 + length``; the first
candidate with no intersections wins outright, otherwise the candidate
with the fewest intersections (lowest score on ties, the direct segment
included) is used. Dummy nodes are ignored.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..geometry import Rect, boundary_point, path_length, rects_to_array, segment_hits_rects
from ..result import Point
from .base import EdgeRouter, RoutingContext

SINGLE_BEND_FACTORS = (0.9, 1.5, 2.2)
DOUBLE_BEND_FACTOR = 1.6
INTERSECTION_PENALTY = 1000.0


def count_intersections(path: Sequence[Point], obstacles: np.ndarray) -> int:
    """Number of (segment, obstacle) pairs that touch."""
    total = 0
    for a, b in zip(path, path[1:]):
        total += int(np.count_nonzero(segment_hits_rects(a, b, obstacles)))
    return total


def score_path(path: Sequence[Point], obstacles: np.ndarray) -> tuple[int, float]:
    """
    Score a candidate path.

    Returns:
        Tuple of (intersections, score).
    """
    hits = count_intersections(path, obstacles)
    return hits, hits * INTERSECTION_PENALTY + path_length(path)


def detour_candidates(start: Point, end: Point, node_gap: float) -> list[list[Point]]:
    """
    Build the detour paths tried when the direct segment is blocked.

    Offsets are perpendicular to the direct segment, on both sides.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = math.hypot(dx, dy)
    if length < 1e-9:
        return []
    ux, uy = dx / length, dy / length
    px, py = -uy, ux

    candidates: list[list[Point]] = []
    mid = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)
    for factor in SINGLE_BEND_FACTORS:
        offset = node_gap * factor
        for sign in (-1.0, 1.0):
            bend = (mid[0] + sign * offset * px, mid[1] + sign * offset * py)
            candidates.append([start, bend, end])

    first = (start[0] + dx * 0.33, start[1] + dy * 0.33)
    second = (start[0] + dx * 0.66, start[1] + dy * 0.66)
    offset = node_gap * DOUBLE_BEND_FACTOR
    for sign in (-1.0, 1.0):
        candidates.append(
            [
                start,
                (first[0] + sign * offset * px, first[1] + sign * offset * py),
                (second[0] + sign * offset * px, second[1] + sign * offset * py),
                end,
            ]
        )
    return candidates


class ObstacleRouter(EdgeRouter):
    """
    Route edges as straight lines with detours around blocking nodes.

    Example:
        router = ObstacleRouter()
        paths = router.route(context)
    """

    def __init__(self) -> None:
        self._boxes: list[Rect] = []

    def prepare(self, context: RoutingContext) -> None:
        self._boxes = [
            Rect.from_center(node.x, node.y, node.width, node.height) for node in context.nodes
        ]

    def route_edge(self, context: RoutingContext, edge_index: int) -> list[Point]:
        edge = context.edges[edge_index]
        source = context.nodes[edge.source]
        target = context.nodes[edge.target]

        source_center = (source.x, source.y)
        target_center = (target.x, target.y)
        start = boundary_point(source_center, source.width, source.height, target_center)
        end = boundary_point(target_center, target.width, target.height, source_center)
        direct = [start, end]

        obstacles = rects_to_array(
            [
                self._boxes[idx]
                for idx, node in enumerate(context.nodes)
                if not node.is_dummy and idx not in (edge.source, edge.target)
            ]
        )
        best_key = score_path(direct, obstacles)
        if best_key[0] == 0:
            return direct

        best = direct
        for candidate in detour_candidates(start, end, context.style.node_gap):
            key = score_path(candidate, obstacles)
            if key[0] == 0:
                return candidate
            # Fewest intersections first, then score
            if key < best_key:
                best, best_key = candidate, key
        return best


__all__ = [
    "ObstacleRouter",
    "count_intersections",
    "detour_candidates",
    "score_path",
]
