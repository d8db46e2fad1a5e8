"""
Flowchart layout entry points.

FlowchartLayout picks the pipeline for a graph: graphs declaring
subgraphs are composed from independently laid out blocks (unless the
style disables composition); everything else goes through the flat
layered pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

from .composition import SubgraphComposer
from .hierarchical.sugiyama import SugiyamaLayout
from .result import LayoutResult
from .style import LayoutStyle
from .types import Graph


class FlowchartLayout(SugiyamaLayout):
    """
    Flowchart layout with subgraph composition.

    Example:
        graph = Graph(Direction.LR)
        graph.add_edge("A", "B")
        graph.add_subgraph(Subgraph("s", "Stage", ["B"]))
        result = FlowchartLayout(graph).run().result
    """

    @property
    def composes(self) -> bool:
        """Check if the next run composes subgraph blocks."""
        return bool(self._graph.subgraphs) and self._style.compose_subgraphs

    def _layout_block(self, graph: Graph) -> LayoutResult:
        return FlowchartLayout(graph, style=self._style).run().result

    def _compute(self, **kwargs: Any) -> LayoutResult:
        if not self.composes:
            return super()._compute(**kwargs)
        composer = SubgraphComposer(self._style, self._layout_block, on_stage=self._stage)
        return composer.compose(self._graph)


def layout_flowchart(graph: Graph, style: Optional[LayoutStyle] = None) -> LayoutResult:
    """
    Lay out a flowchart.

    Args:
        graph: Flowchart to lay out
        style: Size and spacing parameters (defaults to LayoutStyle())

    Returns:
        Positioned nodes, routed edges, subgraph tree and canvas extent.

    Raises:
        InvalidNodeError: If node ids are empty or duplicated.
        InvalidEdgeError: If an edge references an unknown node.
    """
    return FlowchartLayout(graph, style=style).run().result


__all__ = ["FlowchartLayout", "layout_flowchart"]
