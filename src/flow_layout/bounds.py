"""
Derived geometry for renderers: subgraph rectangles and canvas size.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from .result import LayoutResult, LayoutSubgraph, SubgraphBounds


def _union(rects: list[np.ndarray]) -> np.ndarray:
    stacked = np.vstack(rects)
    return np.array(
        [
            stacked[:, 0].min(),
            stacked[:, 1].min(),
            stacked[:, 2].max(),
            stacked[:, 3].max(),
        ]
    )


def subgraph_bounds(result: LayoutResult, padding: float = 8.0) -> list[SubgraphBounds]:
    """
    Compute the padded bounding rectangle of every subgraph.

    A subgraph's rectangle is the union of its member node boxes and
    its children's rectangles, grown by ``padding`` on every side, so
    nested subgraphs are framed inside their parents. Subgraphs without
    any positioned member (directly or through children) are skipped.

    Args:
        result: Finished layout
        padding: Margin added around each union

    Returns:
        Bounds in depth-first order, children before their parent.
    """
    bounds: list[SubgraphBounds] = []

    def visit(sub: LayoutSubgraph, prefix: str) -> Optional[np.ndarray]:
        path = f"{prefix}/{sub.id}" if prefix else sub.id
        rects: list[np.ndarray] = []
        for child in sub.subgraphs:
            child_rect = visit(child, path)
            if child_rect is not None:
                rects.append(child_rect)
        for node_id in sub.nodes:
            node = result.get_node(node_id)
            if node is not None:
                rects.append(np.array([node.left, node.top, node.right, node.bottom]))
        if not rects:
            return None

        rect = _union(rects) + np.array([-padding, -padding, padding, padding])
        bounds.append(
            SubgraphBounds(
                path,
                sub.title if sub.title is not None else sub.id,
                float(rect[0]),
                float(rect[1]),
                float(rect[2]),
                float(rect[3]),
            )
        )
        return rect

    for sub in result.subgraphs:
        visit(sub, "")
    return bounds


def sibling_bounds(
    result: LayoutResult, padding: float = 8.0
) -> list[list[SubgraphBounds]]:
    """
    Group subgraph bounds by parent.

    Returns:
        One list per set of siblings (the top level included), holding
        the bounds of the non-empty siblings.
    """
    by_path = {b.path: b for b in subgraph_bounds(result, padding)}
    groups: list[list[SubgraphBounds]] = []

    def visit(siblings: Sequence[LayoutSubgraph], prefix: str) -> None:
        paths = [f"{prefix}/{sub.id}" if prefix else sub.id for sub in siblings]
        groups.append([by_path[p] for p in paths if p in by_path])
        for sub, path in zip(siblings, paths):
            visit(sub.subgraphs, path)

    visit(result.subgraphs, "")
    return [group for group in groups if group]


def suggest_canvas_size(
    result: LayoutResult, padding: float = 16.0, scale: float = 1.0
) -> tuple[int, int]:
    """
    Suggest a pixel canvas for rendering a layout.

    Args:
        result: Finished layout
        padding: Margin on every side, in pixels
        scale: Layout units to pixels

    Returns:
        (width, height), each at least 1.
    """
    width = math.ceil(max(result.width, 1.0) * scale + 2 * padding)
    height = math.ceil(max(result.height, 1.0) * scale + 2 * padding)
    return max(width, 1), max(height, 1)


__all__ = ["sibling_bounds", "subgraph_bounds", "suggest_canvas_size"]
