"""
Subgraph composition.

Each top-level subgraph is laid out on its own and wrapped in a block
(padding plus a title band); every node outside all subgraphs becomes
a bare block of its own. Blocks are placed left-to-right in one row.
Edges running between blocks are routed through horizontal bands: edges
pointing right ("forward") in lanes above the row, edges pointing left
("backward") in lanes below it.

Nested subgraphs are handled by laying out each block with the full
layout entry point, so a block's own children are composed the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from .preprocessing import assign_group_keys, dummy_ids, resolve_subgraphs
from .result import LayoutEdge, LayoutNode, LayoutResult, LayoutSubgraph, Point
from .routing.ports import PortRequest, Side, assign_port_offsets, push_point, side_point
from .style import LayoutStyle
from .types import Edge, Graph, Subgraph

BlockLayoutFn = Callable[[Graph], LayoutResult]


@dataclass
class Block:
    """One entry of the composition row."""

    id: str
    layout: LayoutResult
    padding_x: float = 0.0
    padding_y: float = 0.0
    title_height: float = 0.0
    left: float = 0.0
    top: float = 0.0
    node_ids: list[str] = field(default_factory=list)

    @property
    def width(self) -> float:
        return self.layout.width + 2 * self.padding_x

    @property
    def height(self) -> float:
        return self.layout.height + 2 * self.padding_y + self.title_height

    @property
    def offset(self) -> Point:
        """Translation from block-local to composed coordinates."""
        return (self.left + self.padding_x, self.top + self.padding_y + self.title_height)


@dataclass
class CrossEdge:
    """An edge between two different blocks."""

    edge: Edge
    source: int
    target: int
    forward: bool


def restrict_graph(graph: Graph, node_ids: list[str], subgraphs: list[Subgraph]) -> Graph:
    """
    Build the graph induced by ``node_ids``.

    Nodes keep their document order and only edges with both endpoints
    inside are kept.
    """
    members = set(node_ids)
    return Graph(
        graph.direction,
        [node for node in graph.nodes if node.id in members],
        [edge for edge in graph.edges if edge.source in members and edge.target in members],
        subgraphs,
    )


class SubgraphComposer:
    """
    Compose independently laid out subgraph blocks into one drawing.

    Args:
        style: Layout style
        layout_block: Lays out one block's graph (recursively composing
            any nested subgraphs it declares)
        on_stage: Called with a stage name after blocks are placed and
            after bands are routed
    """

    def __init__(
        self,
        style: LayoutStyle,
        layout_block: BlockLayoutFn,
        on_stage: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._style = style
        self._layout_block = layout_block
        self._on_stage = on_stage

    @property
    def band_gap(self) -> float:
        """Spacing between neighbouring band lanes."""
        return max(self._style.char_height + 2 * self._style.node_padding_y, 24.0)

    def _stage(self, name: str) -> None:
        if self._on_stage is not None:
            self._on_stage(name)

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def build_blocks(self, graph: Graph) -> tuple[list[Block], list[Subgraph]]:
        """
        Lay out one block per non-empty top-level subgraph and per ungrouped node.

        Returns:
            Tuple of (blocks, resolved subgraph tree).
        """
        style = self._style
        keys = assign_group_keys(graph.subgraphs, set(graph.node_ids()))
        resolved = resolve_subgraphs(graph.subgraphs, keys)

        members: dict[int, list[str]] = {}
        for node in graph.nodes:
            key = keys.get(node.id)
            if key is not None:
                members.setdefault(key[0], []).append(node.id)

        blocks: list[Block] = []
        for i, sub in enumerate(resolved):
            node_ids = members.get(i)
            if not node_ids:
                continue
            inner = restrict_graph(graph, node_ids, sub.subgraphs)
            blocks.append(
                Block(
                    sub.id,
                    self._layout_block(inner),
                    padding_x=2 * style.node_padding_x,
                    padding_y=2 * style.node_padding_y,
                    title_height=style.char_height + 2 * style.node_padding_y,
                    node_ids=node_ids,
                )
            )

        for node in graph.nodes:
            if node.id in keys:
                continue
            inner = restrict_graph(graph, [node.id], [])
            blocks.append(
                Block(f"__group_{node.id}", self._layout_block(inner), node_ids=[node.id])
            )

        return blocks, resolved

    def place_blocks(self, blocks: list[Block]) -> None:
        """Place blocks left-to-right with tops aligned at y = 0."""
        gap = self._style.node_gap * 2
        x = 0.0
        for block in blocks:
            block.left = x
            block.top = 0.0
            x += block.width + gap

    # -------------------------------------------------------------------------
    # Cross-block edges
    # -------------------------------------------------------------------------

    def collect_cross_edges(
        self,
        graph: Graph,
        block_of: dict[str, int],
        index: dict[str, int],
        nodes: list[LayoutNode],
    ) -> list[CrossEdge]:
        """
        Collect edges between different blocks, deduplicated by (source, target, label).

        An edge is forward when its source lies left of (or level with)
        its target.
        """
        seen: set[tuple[str, str, Optional[str]]] = set()
        cross: list[CrossEdge] = []
        for edge in graph.edges:
            if edge.is_self_loop:
                continue
            if block_of[edge.source] == block_of[edge.target]:
                continue
            key = (edge.source, edge.target, edge.label)
            if key in seen:
                continue
            seen.add(key)
            source, target = index[edge.source], index[edge.target]
            # Blocks form one horizontal row in every direction, so x decides
            cross.append(CrossEdge(edge, source, target, nodes[source].x <= nodes[target].x))
        return cross

    def route_cross_edges(
        self, cross: list[CrossEdge], nodes: list[LayoutNode], row_top: float, row_bottom: float
    ) -> tuple[list[LayoutEdge], float, float]:
        """
        Route cross-block edges through bands above and below the row.

        Forward edges, sorted by ascending (source x, target x), take
        lanes above the row from the top down. Backward edges, sorted by
        descending position, take lanes below the row from the row down.

        Returns:
            Tuple of (edges, top extent, bottom extent) where the extents
            include half a lane of headroom for labels.
        """
        style = self._style
        band_gap = self.band_gap

        def position(i: int) -> tuple[float, float]:
            return (nodes[cross[i].source].x, nodes[cross[i].target].x)

        forward = sorted((i for i, c in enumerate(cross) if c.forward), key=position)
        backward = sorted(
            (i for i, c in enumerate(cross) if not c.forward), key=position, reverse=True
        )

        requests: list[PortRequest] = []
        for i, c in enumerate(cross):
            side = Side.NORTH if c.forward else Side.SOUTH
            requests.append(PortRequest(c.source, side, i, nodes[c.target].x))
            requests.append(PortRequest(c.target, side, i, nodes[c.source].x))
        offsets = assign_port_offsets(requests, nodes, style)

        def route(i: int, lane_y: float) -> LayoutEdge:
            c = cross[i]
            side = Side.NORTH if c.forward else Side.SOUTH
            start = side_point(nodes[c.source], side, offsets.get((i, c.source, side), 0.0))
            end = side_point(nodes[c.target], side, offsets.get((i, c.target, side), 0.0))
            points: list[Point] = []
            push_point(points, start)
            push_point(points, (start[0], lane_y))
            push_point(points, (end[0], lane_y))
            push_point(points, end)
            return LayoutEdge(
                c.edge.source,
                c.edge.target,
                tuple(points),
                label=c.edge.label,
                style=c.edge.style,
                arrow=c.edge.arrow,
                reversed=False,
                is_cross=True,
            )

        routed: list[LayoutEdge] = []
        top_extent = row_top
        bottom_extent = row_bottom

        if forward:
            lowest = row_top - style.node_padding_y
            count = len(forward)
            for lane, i in enumerate(forward):
                routed.append(route(i, lowest - band_gap * (count - 1 - lane)))
            top_extent = lowest - band_gap * (count - 1) - band_gap / 2

        if backward:
            highest = row_bottom + style.node_padding_y
            for lane, i in enumerate(backward):
                routed.append(route(i, highest + band_gap * lane))
            bottom_extent = highest + band_gap * (len(backward) - 1) + band_gap / 2

        return routed, top_extent, bottom_extent

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def compose(self, graph: Graph) -> LayoutResult:
        """Lay out ``graph`` as a row of subgraph blocks joined by band-routed edges."""
        blocks, resolved = self.build_blocks(graph)
        self.place_blocks(blocks)
        self._stage("blocks")

        nodes: list[LayoutNode] = []
        edges: list[LayoutEdge] = []
        block_of: dict[str, int] = {}
        next_id = dummy_ids(set(graph.node_ids()))
        for b, block in enumerate(blocks):
            dx, dy = block.offset
            for node in block.layout.nodes:
                moved = node.translated(dx, dy)
                if node.is_dummy:
                    moved = replace(moved, id=next(next_id))
                else:
                    block_of[node.id] = b
                nodes.append(moved)
            edges.extend(edge.translated(dx, dy) for edge in block.layout.edges)

        index = {node.id: i for i, node in enumerate(nodes)}
        row_bottom = max((block.top + block.height for block in blocks), default=0.0)
        cross = self.collect_cross_edges(graph, block_of, index, nodes)
        routed, top_extent, bottom_extent = self.route_cross_edges(cross, nodes, 0.0, row_bottom)
        edges.extend(routed)
        self._stage("bands")

        # Shift down so band labels stay on the canvas
        shift = -top_extent if top_extent < 0 else 0.0
        if shift:
            nodes = [node.translated(0.0, shift) for node in nodes]
            edges = [edge.translated(0.0, shift) for edge in edges]

        width = max((block.left + block.width for block in blocks), default=0.0)
        height = bottom_extent + shift
        return LayoutResult(
            tuple(nodes),
            tuple(edges),
            tuple(LayoutSubgraph.from_subgraph(sub) for sub in resolved),
            width,
            height,
            graph.direction,
        )


__all__ = ["Block", "CrossEdge", "SubgraphComposer", "restrict_graph"]
