"""
Input validation utilities for flowchart layout.

Provides centralized validation functions for graphs and layout style
parameters. Raises descriptive exceptions on invalid input, or returns
the list of issues found when called with ``strict=False``.
"""

from __future__ import annotations

import math
import warnings
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from .types import Graph, Node


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidStyleError(ValidationError):
    """Raised when a layout style parameter is out of range."""

    pass


class InvalidNodeError(ValidationError):
    """Raised when node ids are missing or duplicated."""

    pass


class InvalidEdgeError(ValidationError):
    """Raised when an edge references an unknown node id."""

    pass


class InvalidSubgraphError(ValidationError):
    """Raised when a subgraph references an unknown node id."""

    pass


class LayoutWarning(UserWarning):
    """Base warning for recoverable layout problems."""

    pass


class GraphStructureWarning(LayoutWarning):
    """Warning issued when graph structure is inconsistent but recoverable."""

    pass


def validate_node_ids(nodes: Sequence[Node], strict: bool = True) -> list[tuple[int, str]]:
    """
    Validate that every node has a non-empty, unique id.

    Args:
        nodes: Sequence of Node objects
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (node_index, issue_description) tuples

    Raises:
        InvalidNodeError: If strict=True and invalid nodes found
    """
    issues: list[tuple[int, str]] = []
    first_seen: dict[str, int] = {}

    for i, node in enumerate(nodes):
        if not node.id:
            issues.append((i, f"Node {i}: id is empty"))
            continue
        if node.id in first_seen:
            first = first_seen[node.id]
            issues.append((i, f"Node {i}: duplicate id {node.id!r} (first used by node {first})"))
        else:
            first_seen[node.id] = i

    if strict and issues:
        msg = "Invalid nodes:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidNodeError(msg)

    return issues


def validate_edge_references(graph: Graph, strict: bool = True) -> list[tuple[int, str]]:
    """
    Validate that every edge endpoint names a node of the graph.

    Args:
        graph: Graph to check
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (edge_index, issue_description) tuples

    Raises:
        InvalidEdgeError: If strict=True and invalid edges found
    """
    issues: list[tuple[int, str]] = []
    known = {node.id for node in graph.nodes}

    for i, edge in enumerate(graph.edges):
        if edge.source not in known:
            issues.append((i, f"Edge {i}: unknown source node {edge.source!r}"))
        if edge.target not in known:
            issues.append((i, f"Edge {i}: unknown target node {edge.target!r}"))

    if strict and issues:
        msg = "Invalid edges:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidEdgeError(msg)

    return issues


def validate_subgraph_members(graph: Graph, strict: bool = False) -> list[tuple[str, str]]:
    """
    Validate that subgraph members name nodes of the graph.

    Unknown members are harmless to the layout (they are ignored), so by
    default the issues are reported as a GraphStructureWarning.

    Args:
        graph: Graph to check
        strict: If True, raises on invalid. If False, warns and returns issues.

    Returns:
        List of (subgraph_id, issue_description) tuples

    Raises:
        InvalidSubgraphError: If strict=True and unknown members found
    """
    issues: list[tuple[str, str]] = []
    known = {node.id for node in graph.nodes}

    for top in graph.subgraphs:
        for sub in top.walk():
            for member in sub.nodes:
                if member not in known:
                    issues.append((sub.id, f"Subgraph {sub.id!r}: unknown node {member!r}"))

    if issues:
        msg = "Invalid subgraph members:\n" + "\n".join(issue[1] for issue in issues)
        if strict:
            raise InvalidSubgraphError(msg)
        warnings.warn(msg, GraphStructureWarning, stacklevel=3)

    return issues


def validate_positive(name: str, value: Any) -> float:
    """
    Validate a finite, strictly positive number.

    Raises:
        InvalidStyleError: If value is not a finite number > 0
    """
    number = _as_number(name, value)
    if number <= 0:
        raise InvalidStyleError(f"{name} must be positive, got {value}")
    return number


def validate_non_negative(name: str, value: Any) -> float:
    """
    Validate a finite number >= 0.

    Raises:
        InvalidStyleError: If value is not a finite number >= 0
    """
    number = _as_number(name, value)
    if number < 0:
        raise InvalidStyleError(f"{name} must be >= 0, got {value}")
    return number


def validate_pass_count(name: str, value: Any) -> int:
    """
    Validate a pass count.

    Raises:
        InvalidStyleError: If value is not an integer >= 0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStyleError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidStyleError(f"{name} must be >= 0, got {value}")
    return value


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidStyleError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidStyleError(f"{name} must be finite, got {value}")
    return number


__all__ = [
    "ValidationError",
    "InvalidStyleError",
    "InvalidNodeError",
    "InvalidEdgeError",
    "InvalidSubgraphError",
    "LayoutWarning",
    "GraphStructureWarning",
    "validate_node_ids",
    "validate_edge_references",
    "validate_subgraph_members",
    "validate_positive",
    "validate_non_negative",
    "validate_pass_count",
]
