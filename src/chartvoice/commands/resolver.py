"""Resolve spoken names to chart nodes and connectors.

Matching runs three tiers against a node snapshot: exact, then prefix,
then substring, all case-insensitive against the voice label or the
display label. The first tier with any hit wins and ties go to the
earliest node in iteration order. There is no scoring: "order" resolves
to whichever of "Orders" / "OrderItems" was created first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from chartvoice.chart.model import Connector, Node

logger = logging.getLogger(__name__)

_TIERS: list[tuple[str, Callable[[str, str], bool]]] = [
    ("exact", lambda candidate, wanted: candidate == wanted),
    ("prefix", lambda candidate, wanted: candidate.startswith(wanted)),
    ("contains", lambda candidate, wanted: wanted in candidate),
]


def display_name(node: Node) -> str:
    return node.voice_label or node.label


def find_node(nodes: Sequence[Node], name: str) -> Node | None:
    """Find the best-matching node for a spoken name, or None."""
    wanted = name.lower().strip()
    if not wanted:
        return None

    for tier, matches in _TIERS:
        for node in nodes:
            if matches(node.voice_label.lower(), wanted) or matches(node.label.lower(), wanted):
                logger.debug("resolve %r -> %s (%s)", name, node.id, tier)
                return node

    logger.debug("resolve %r: no match among %d node(s)", name, len(nodes))
    return None


def find_connector(
    nodes: Sequence[Node],
    connectors: Sequence[Connector],
    from_name: str,
    to_name: str,
) -> Connector | None:
    """Find the first connector running from one named node to another.

    Direction matters: a connector B -> A does not satisfy a lookup A -> B.
    """
    source = find_node(nodes, from_name)
    target = find_node(nodes, to_name)
    if source is None or target is None:
        return None
    for conn in connectors:
        if conn.from_node_id == source.id and conn.to_node_id == target.id:
            return conn
    return None
