"""
Layered flowchart layout.

This module provides the Sugiyama-style pipeline and its phases:
- SugiyamaLayout: Flat layered layout
- crossing: Barycenter ordering and adjacent-swap refinement
- coordinates: Node sizing, placement, adaptive spacing and mirroring
"""

from .coordinates import (
    assign_coordinates,
    compute_layer_gap,
    estimate_node_size,
    expand_layer_gaps,
    separate_subgraphs,
    widen_for_ports,
)
from .crossing import initial_order, reduce_crossings
from .sugiyama import SugiyamaLayout

__all__ = [
    "SugiyamaLayout",
    "assign_coordinates",
    "compute_layer_gap",
    "estimate_node_size",
    "expand_layer_gaps",
    "initial_order",
    "reduce_crossings",
    "separate_subgraphs",
    "widen_for_ports",
]
