"""Placement heuristics for new and moved nodes, and connector ports."""

from __future__ import annotations

from collections.abc import Sequence

from chartvoice import config
from chartvoice.chart.model import Node, PortSide
from chartvoice.commands.resolver import find_node

ORIGIN = (100.0, 100.0)

# Size assumed for a node that does not exist yet
NEW_NODE_WIDTH = 200
NEW_NODE_HEIGHT = 100


def offset_from(
    reference: Node,
    direction: str,
    width: float,
    height: float,
    gap: float | None = None,
) -> tuple[float, float]:
    """Position a box of ``width`` x ``height`` beside ``reference``."""
    if gap is None:
        gap = config.PLACEMENT_GAP
    if direction == "right":
        return reference.x + reference.width + gap, reference.y
    if direction == "left":
        return reference.x - width - gap, reference.y
    if direction == "above":
        return reference.x, reference.y - height - gap
    if direction == "below":
        return reference.x, reference.y + reference.height + gap
    raise ValueError(f"Unknown direction {direction!r}")


def place(
    nodes: Sequence[Node],
    direction: str | None = None,
    reference_name: str | None = None,
    gap: float | None = None,
) -> tuple[float, float]:
    """Pick a position for a new node.

    With a direction and a resolvable reference the node goes beside the
    reference. Otherwise it goes right of the most recently created node,
    or at the origin on an empty chart.
    """
    if gap is None:
        gap = config.PLACEMENT_GAP
    if direction and reference_name:
        ref = find_node(nodes, reference_name)
        if ref is not None:
            return offset_from(ref, direction, NEW_NODE_WIDTH, NEW_NODE_HEIGHT, gap)

    if not nodes:
        return ORIGIN
    last = nodes[-1]
    return last.x + last.width + gap, last.y


def place_beside(node: Node, reference: Node, direction: str, gap: float | None = None) -> tuple[float, float]:
    """Position for moving an existing node next to another one."""
    return offset_from(reference, direction, node.width, node.height, gap)


def choose_ports(source: Node, target: Node) -> tuple[PortSide, PortSide]:
    """Pick facing sides for a new connector from the nodes' positions."""
    if source.x < target.x:
        from_port = PortSide.RIGHT
    elif source.x > target.x:
        from_port = PortSide.LEFT
    elif source.y < target.y:
        from_port = PortSide.BOTTOM
    else:
        from_port = PortSide.TOP

    if target.x > source.x:
        to_port = PortSide.LEFT
    elif target.x < source.x:
        to_port = PortSide.RIGHT
    elif target.y > source.y:
        to_port = PortSide.TOP
    else:
        to_port = PortSide.BOTTOM

    return from_port, to_port
