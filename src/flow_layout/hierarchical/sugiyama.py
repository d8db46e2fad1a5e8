"""
Sugiyama layered layout for flowcharts.

Based on the framework from:
"Methods for Visual Understanding of Hierarchical System Structures"
by Sugiyama, Tagawa, and Toda (1981)

The pipeline runs these phases:
1. Cycle breaking (reverse DFS back edges)
2. Layer assignment (longest path)
3. Dummy node insertion for long edges
4. Crossing reduction (barycenter sweeps, optional adjacent swaps)
5. Coordinate assignment (with adaptive spacing)
6. Edge routing
7. Mirroring for bottom-to-top and right-to-left flow

Subgraph membership is honoured by clustering: members of one subgraph
stay contiguous in every layer and sibling subgraphs are pushed apart.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .._work import EdgeChain, UnitEdge, WorkEdge, WorkNode
from ..base import StaticLayout
from ..preprocessing import (
    assign_group_keys,
    assign_layers,
    break_cycles,
    build_layers,
    insert_dummy_nodes,
    resolve_subgraphs,
)
from ..result import LayoutEdge, LayoutNode, LayoutResult, LayoutSubgraph, Point
from ..routing import RoutingContext, make_router
from ..style import LayoutStyle
from ..types import Event, Graph, Subgraph
from .coordinates import (
    assign_coordinates,
    compute_extent,
    compute_layer_gap,
    estimate_node_size,
    expand_layer_gaps,
    mirror_nodes,
    mirror_point,
    separate_subgraphs,
    widen_for_ports,
)
from .crossing import initial_order, reduce_crossings


class SugiyamaLayout(StaticLayout):
    """
    Layered flowchart layout.

    Arranges nodes in layers with edges flowing in the graph's
    direction, reduces edge crossings and routes every edge.

    Example:
        graph = Graph(Direction.TB)
        graph.add_edge("A", "B")
        graph.add_edge("B", "C")
        result = SugiyamaLayout(graph).run().result
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        *,
        style: Optional[LayoutStyle] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        super().__init__(
            graph,
            style=style,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )

        # Internal state
        self._nodes: list[WorkNode] = []
        self._edges: list[WorkEdge] = []
        self._chains: list[EdgeChain] = []
        self._unit_edges: list[UnitEdge] = []
        self._layers: list[list[int]] = []
        self._subgraphs: list[Subgraph] = []
        self._crossings: int = 0

    @property
    def crossings(self) -> int:
        """Crossing count of the final layer ordering."""
        return self._crossings

    # -------------------------------------------------------------------------
    # Phase 0: Working graph
    # -------------------------------------------------------------------------

    def _build_working_graph(self) -> None:
        graph = self._graph
        style = self._style
        group_keys = assign_group_keys(graph.subgraphs, set(graph.node_ids()))
        self._subgraphs = resolve_subgraphs(graph.subgraphs, group_keys)

        self._nodes = []
        index: dict[str, int] = {}
        for node in graph.nodes:
            width, height = estimate_node_size(node.display_label, style)
            index[node.id] = len(self._nodes)
            self._nodes.append(
                WorkNode(
                    id=node.id,
                    label=node.display_label,
                    width=width,
                    height=height,
                    shape=node.shape,
                    group_key=group_keys.get(node.id, ()),
                )
            )

        self._edges = [
            WorkEdge(
                index[edge.source],
                index[edge.target],
                label=edge.label,
                style=edge.style,
                arrow=edge.arrow,
            )
            for edge in graph.edges
        ]

    # -------------------------------------------------------------------------
    # Phases 1-3: Layering
    # -------------------------------------------------------------------------

    def _assign_layers(self) -> None:
        n = len(self._nodes)
        break_cycles(n, self._edges)
        self._stage("cycles")

        for node, layer in zip(self._nodes, assign_layers(n, self._edges)):
            node.layer = layer
        self._stage("layers")

        self._chains, self._unit_edges = insert_dummy_nodes(self._nodes, self._edges)
        self._stage("dummies")

    # -------------------------------------------------------------------------
    # Phase 4: Crossing reduction
    # -------------------------------------------------------------------------

    def _minimize_crossings(self) -> None:
        self._layers = initial_order(self._nodes, build_layers(self._nodes))
        self._crossings = reduce_crossings(
            self._nodes,
            self._layers,
            self._unit_edges,
            passes=self._style.crossing_passes,
            refinement_passes=self._style.effective_refinement_passes,
        )
        self._stage("crossings")

    # -------------------------------------------------------------------------
    # Phase 5: Coordinate assignment
    # -------------------------------------------------------------------------

    def _assign_coordinates(self) -> None:
        style = self._style
        canonical = self.direction.canonical()

        gap = style.layer_gap
        if style.adaptive_spacing:
            widen_for_ports(self._nodes, self._edges, style, canonical)
            gap = compute_layer_gap(self._nodes, self._unit_edges, style, canonical)

        assign_coordinates(self._nodes, self._layers, style, canonical, layer_gap=gap)

        if style.adaptive_spacing:
            expand_layer_gaps(self._nodes, self._layers, self._unit_edges, style, canonical)
        if any(node.group_key for node in self._nodes):
            separate_subgraphs(self._nodes, style, canonical)
        self._stage("coordinates")

    # -------------------------------------------------------------------------
    # Phases 6-7: Routing and mirroring
    # -------------------------------------------------------------------------

    def _route_edges(self) -> tuple[list[list[Point]], float, float]:
        direction = self.direction
        context = RoutingContext(
            nodes=self._nodes,
            edges=self._edges,
            chains=self._chains,
            direction=direction.canonical(),
            style=self._style,
        )
        paths = make_router(self._style.routing).route(context)

        # Shift so the drawing starts at the origin
        min_x, min_y, max_x, max_y = compute_extent(self._nodes, paths)
        dx = -min_x if min_x < 0 else 0.0
        dy = -min_y if min_y < 0 else 0.0
        if dx or dy:
            for node in self._nodes:
                node.x += dx
                node.y += dy
            paths = [[(x + dx, y + dy) for x, y in path] for path in paths]
        width, height = max_x + dx, max_y + dy

        mirror_nodes(self._nodes, direction, width, height)
        paths = [[mirror_point(p, direction, width, height) for p in path] for path in paths]
        self._stage("routing")
        return paths, width, height

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> LayoutResult:
        """Compute the layered layout."""
        graph = self._graph
        self._build_working_graph()
        subgraphs = tuple(LayoutSubgraph.from_subgraph(sub) for sub in self._subgraphs)
        if not graph.nodes:
            return LayoutResult(subgraphs=subgraphs, direction=graph.direction)

        self._assign_layers()
        self._minimize_crossings()
        self._assign_coordinates()
        paths, width, height = self._route_edges()

        nodes = tuple(
            LayoutNode(
                node.id,
                None if node.is_dummy else node.label,
                node.width,
                node.height,
                node.layer,
                node.order,
                node.x,
                node.y,
                node.is_dummy,
                node.shape,
            )
            for node in self._nodes
        )
        edges = tuple(
            LayoutEdge(
                self._nodes[edge.orig_source].id,
                self._nodes[edge.orig_target].id,
                tuple(path),
                label=edge.label,
                style=edge.style,
                arrow=edge.arrow,
                reversed=edge.reversed,
            )
            for edge, path in zip(self._edges, paths)
        )
        return LayoutResult(nodes, edges, subgraphs, width, height, graph.direction)


__all__ = ["SugiyamaLayout"]
