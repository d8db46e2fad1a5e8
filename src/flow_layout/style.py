"""
Layout style: the tunable metrics of the flowchart layout.

Text is never measured. Node boxes are estimated from an assumed
character cell (``char_width`` x ``char_height``) plus padding, and all
spacing is derived from the same handful of numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Optional

from .validation import (
    InvalidStyleError,
    validate_non_negative,
    validate_pass_count,
    validate_positive,
)


class RoutingMode(Enum):
    """Edge routing strategy."""

    ORTHOGONAL = "orthogonal"
    GEOMETRY = "geometry"


_POSITIVE = ("min_width", "min_height", "char_width", "char_height")
_NON_NEGATIVE = ("node_padding_x", "node_padding_y", "node_gap", "layer_gap")


@dataclass(frozen=True)
class LayoutStyle:
    """
    Size and spacing parameters for flowchart layout.

    Attributes:
        min_width: Minimum node box width
        min_height: Minimum node box height
        char_width: Assumed width of one label character
        char_height: Assumed height of one label line
        node_padding_x: Horizontal padding around a label
        node_padding_y: Vertical padding around a label
        node_gap: Gap between neighbouring nodes of a layer
        layer_gap: Base gap between consecutive layers
        routing: Edge routing strategy
        crossing_passes: Number of barycenter sweeps
        refinement_passes: Adjacent-swap passes after the sweeps.
            None selects 8 for geometry routing and 0 for orthogonal.
        adaptive_spacing: Widen nodes for ports and grow layer gaps
            with edge fan-out
        compose_subgraphs: Lay each top-level subgraph out as its own
            block instead of clustering groups inside one diagram

    Raises:
        InvalidStyleError: If a parameter is out of range
    """

    min_width: float = 60.0
    min_height: float = 40.0
    char_width: float = 7.0
    char_height: float = 14.0
    node_padding_x: float = 12.0
    node_padding_y: float = 8.0
    node_gap: float = 24.0
    layer_gap: float = 40.0
    routing: RoutingMode = RoutingMode.ORTHOGONAL
    crossing_passes: int = 6
    refinement_passes: Optional[int] = None
    adaptive_spacing: bool = True
    compose_subgraphs: bool = True

    def __post_init__(self) -> None:
        for name in _POSITIVE:
            object.__setattr__(self, name, validate_positive(name, getattr(self, name)))
        for name in _NON_NEGATIVE:
            object.__setattr__(self, name, validate_non_negative(name, getattr(self, name)))

        validate_pass_count("crossing_passes", self.crossing_passes)
        if self.refinement_passes is not None:
            validate_pass_count("refinement_passes", self.refinement_passes)

        if not isinstance(self.routing, RoutingMode):
            try:
                object.__setattr__(self, "routing", RoutingMode(str(self.routing).lower()))
            except ValueError:
                raise InvalidStyleError(
                    f"Invalid routing: {self.routing!r}. Must be 'orthogonal' or 'geometry'"
                ) from None

    @property
    def effective_refinement_passes(self) -> int:
        """Refinement pass count after resolving the automatic default."""
        if self.refinement_passes is not None:
            return self.refinement_passes
        return 8 if self.routing is RoutingMode.GEOMETRY else 0

    def replace(self, **changes: Any) -> LayoutStyle:
        """Return a validated copy with some parameters changed."""
        return replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = ["LayoutStyle", "RoutingMode"]
