#!/usr/bin/env python3
"""
Visualization script for flowchart layouts.

Generates images of sample flowcharts into ./build/

Usage:
    uv run python scripts/visualize.py
"""

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import FancyArrowPatch, FancyBboxPatch, Rectangle

from flow_layout import (
    Direction,
    EdgeStyle,
    Graph,
    LayoutStyle,
    NodeShape,
    RoutingMode,
    Subgraph,
    layout_flowchart,
    layout_quality_summary,
    subgraph_bounds,
)

# Output directory
BUILD_DIR = Path(__file__).parent.parent / "build"

LINE_STYLES = {
    EdgeStyle.SOLID: ("-", 1.2),
    EdgeStyle.DOTTED: (":", 1.2),
    EdgeStyle.THICK: ("-", 2.5),
}


def ensure_build_dir():
    """Create build directory if it doesn't exist."""
    BUILD_DIR.mkdir(exist_ok=True)


def visualize(result, title="Flowchart Layout", ax=None):
    """Draw a finished layout on an axis (y axis pointing down)."""
    # Subgraph frames, parents drawn first
    for bounds in reversed(subgraph_bounds(result)):
        ax.add_patch(
            Rectangle(
                (bounds.left, bounds.top),
                bounds.width,
                bounds.height,
                facecolor="whitesmoke",
                edgecolor="silver",
                linewidth=1,
                zorder=1,
            )
        )
        ax.annotate(
            bounds.label,
            (bounds.left + 4, bounds.top + 4),
            ha="left",
            va="top",
            fontsize=7,
            color="dimgray",
            zorder=2,
        )

    # Draw edges
    for edge in result.edges:
        xs = [x for x, _ in edge.points]
        ys = [y for _, y in edge.points]
        linestyle, width = LINE_STYLES[edge.style]
        color = "indianred" if edge.is_cross else "gray"
        ax.plot(xs, ys, color=color, linestyle=linestyle, linewidth=width, zorder=3)
        if edge.arrow and len(edge.points) >= 2:
            # Reversed edges run target to source
            tail, head = (1, 0) if edge.reversed else (-2, -1)
            ax.add_patch(
                FancyArrowPatch(
                    edge.points[tail],
                    edge.points[head],
                    arrowstyle="-|>",
                    mutation_scale=10,
                    color=color,
                    linewidth=0,
                    zorder=4,
                )
            )
        if edge.label:
            mid = edge.points[len(edge.points) // 2]
            ax.annotate(edge.label, mid, ha="center", va="bottom", fontsize=7, zorder=6)

    # Draw nodes
    for node in result.real_nodes():
        style = "round,pad=0,rounding_size=8" if node.shape is NodeShape.ROUND else "square,pad=0"
        ax.add_patch(
            FancyBboxPatch(
                (node.left, node.top),
                node.width,
                node.height,
                boxstyle=style,
                facecolor="steelblue",
                edgecolor="white",
                linewidth=1,
                zorder=5,
            )
        )
        ax.annotate(
            node.label or node.id,
            (node.x, node.y),
            ha="center",
            va="center",
            fontsize=8,
            color="white",
            zorder=6,
        )

    ax.set_xlim(-10, result.width + 10)
    ax.set_ylim(result.height + 10, -10)
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_aspect("equal")
    ax.axis("off")


def save_layout(graph, name, filename, style=None):
    """Generate and save a single layout image."""
    result = layout_flowchart(graph, style)

    fig, ax = plt.subplots(figsize=(8, 8))
    visualize(result, name, ax=ax)
    plt.tight_layout()

    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    summary = layout_quality_summary(result)
    print(f"  Saved: {filepath} (crossings={summary['edge_crossings']}, "
          f"bends={summary['bend_count']})")


def save_comparison(variants, filename, title):
    """Generate and save a comparison image."""
    n = len(variants)
    cols = min(n, 4)
    rows = (n + cols - 1) // cols

    fig, axes = plt.subplots(rows, cols, figsize=(5 * cols, 5 * rows))
    if n == 1:
        axes = [axes]
    else:
        axes = axes.flatten() if hasattr(axes, "flatten") else [axes]

    for i, (graph, style, name) in enumerate(variants):
        visualize(layout_flowchart(graph, style), name, ax=axes[i])

    # Hide unused subplots
    for j in range(i + 1, len(axes)):
        axes[j].axis("off")

    fig.suptitle(title, fontsize=14, fontweight="bold")
    plt.tight_layout()

    filepath = BUILD_DIR / filename
    fig.savefig(filepath, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    print(f"  Saved: {filepath}")


def create_sample_flowchart(direction=Direction.TB):
    """Create a small decision flowchart with a retry loop."""
    graph = Graph(direction)
    graph.add_node("start", "Start", NodeShape.ROUND)
    graph.add_node("check", "Is it working?", NodeShape.DIAMOND)
    graph.add_edge("start", "check")
    graph.add_edge("check", "done", label="yes")
    graph.add_edge("check", "debug", label="no")
    graph.add_edge("debug", "fix")
    graph.add_edge("fix", "check", style=EdgeStyle.DOTTED)
    graph.add_edge("debug", "log", arrow=False)
    graph.add_edge("log", "done")
    graph.add_node("done", "Done", NodeShape.ROUND)
    return graph


def create_pipeline():
    """Create a build pipeline with nested stages."""
    graph = Graph(Direction.LR)
    graph.add_edge("src", "lint")
    graph.add_edge("src", "compile")
    graph.add_edge("compile", "unit")
    graph.add_edge("compile", "integration")
    graph.add_edge("lint", "package")
    graph.add_edge("unit", "package")
    graph.add_edge("integration", "package")
    graph.add_edge("package", "deploy", style=EdgeStyle.THICK)
    graph.add_edge("deploy", "src", label="rollback", style=EdgeStyle.DOTTED)

    tests = Subgraph("tests", "Tests", ["unit", "integration"])
    graph.add_subgraph(Subgraph("build", "Build", ["lint", "compile"], [tests]))
    graph.add_subgraph(Subgraph("release", "Release", ["package", "deploy"]))
    return graph


def generate_all():
    """Generate all visualization images."""
    ensure_build_dir()

    print("Generating individual layout images...")
    save_layout(create_sample_flowchart(), "Decision flowchart", "flowchart.png")
    save_layout(create_pipeline(), "Pipeline (composed)", "pipeline_composed.png")
    save_layout(
        create_pipeline(),
        "Pipeline (clustered)",
        "pipeline_clustered.png",
        LayoutStyle(compose_subgraphs=False),
    )

    print("Generating comparison images...")
    save_comparison(
        [(create_sample_flowchart(d), None, d.value) for d in Direction],
        "comparison_directions.png",
        "Flow Directions",
    )
    save_comparison(
        [
            (create_sample_flowchart(), LayoutStyle(), "Orthogonal"),
            (create_sample_flowchart(), LayoutStyle(routing=RoutingMode.GEOMETRY), "Geometry"),
        ],
        "comparison_routing.png",
        "Edge Routing",
    )

    print()
    print(f"All images saved to: {BUILD_DIR.absolute()}")


if __name__ == "__main__":
    generate_all()
