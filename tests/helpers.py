"""Shared test helpers: bare node factories and chart lookups."""

from chartvoice.chart.model import Node, NodeType


def make_node(
    node_id: str,
    label: str,
    x: float = 0,
    y: float = 0,
    width: float = 180,
    height: float = 80,
    voice_label: str | None = None,
    node_type: NodeType = NodeType.RECTANGLE,
) -> Node:
    """Build a Node directly, bypassing ChartState."""
    return Node(
        id=node_id,
        type=node_type,
        x=x,
        y=y,
        width=width,
        height=height,
        label=label,
        voice_label=voice_label if voice_label is not None else label,
    )


def node_named(chart, label: str) -> Node:
    """Return the chart node whose label matches exactly (case-insensitive)."""
    for n in chart.nodes:
        if n.label.lower() == label.lower():
            return n
    raise AssertionError(f"No node labelled {label!r}; have {[n.label for n in chart.nodes]}")
