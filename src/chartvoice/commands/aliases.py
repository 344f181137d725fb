"""Spoken-phrase lookup tables: shape kinds, directions, and named colors."""

from __future__ import annotations

import re

from chartvoice.chart.model import NodeType

NODE_TYPE_ALIASES: dict[str, NodeType] = {
    "table": NodeType.TABLE,
    "rectangle": NodeType.RECTANGLE,
    "rect": NodeType.RECTANGLE,
    "box": NodeType.RECTANGLE,
    "process": NodeType.RECTANGLE,
    "widget": NodeType.RECTANGLE,
    "rounded rect": NodeType.ROUNDED_RECT,
    "rounded rectangle": NodeType.ROUNDED_RECT,
    "round rect": NodeType.ROUNDED_RECT,
    "round box": NodeType.ROUNDED_RECT,
    "service": NodeType.ROUNDED_RECT,
    "oval": NodeType.ROUNDED_RECT,
    "diamond": NodeType.DIAMOND,
    "decision": NodeType.DIAMOND,
    "condition": NodeType.DIAMOND,
    "if block": NodeType.DIAMOND,
    "text": NodeType.TEXT,
    "annotation": NodeType.TEXT,
    "note": NodeType.TEXT,
    "comment": NodeType.TEXT,
    "badge": NodeType.BADGE,
    "tag": NodeType.BADGE,
    "chip": NodeType.BADGE,
}

# Anchored directions (relative to another node)
DIRECTION_ALIASES: dict[str, str] = {
    "left": "left",
    "left of": "left",
    "to the left of": "left",
    "to the left": "left",
    "right": "right",
    "right of": "right",
    "to the right of": "right",
    "to the right": "right",
    "above": "above",
    "above of": "above",
    "over": "above",
    "on top of": "above",
    "below": "below",
    "below of": "below",
    "under": "below",
    "beneath": "below",
}

# Free moves, no reference node
NUDGE_ALIASES: dict[str, str] = {
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
}

COLOR_NAMES: dict[str, str] = {
    "red": "#ef4444",
    "blue": "#3b82f6",
    "green": "#22c55e",
    "yellow": "#eab308",
    "orange": "#f97316",
    "purple": "#8b5cf6",
    "violet": "#7c3aed",
    "pink": "#ec4899",
    "cyan": "#06b6d4",
    "teal": "#14b8a6",
    "white": "#ffffff",
    "black": "#000000",
    "gray": "#6b7280",
    "grey": "#6b7280",
    "light gray": "#d1d5db",
    "light grey": "#d1d5db",
    "dark gray": "#374151",
    "dark grey": "#374151",
    "slate": "#64748b",
    "amber": "#f59e0b",
    "indigo": "#6366f1",
}

# Spoken style property -> canonical property handled by the executor
STYLE_PROPERTY_ALIASES: dict[str, str] = {
    "fill": "fill",
    "fill color": "fill",
    "color": "fill",
    "stroke": "stroke",
    "stroke color": "stroke",
    "text color": "text color",
    "font size": "font size",
    "font": "font size",
    "font weight": "font weight",
    "border radius": "border radius",
    "radius": "border radius",
    "opacity": "opacity",
    "width": "width",
    "height": "height",
}

_HEX_COLOR = re.compile(r"^#[0-9a-f]{3,8}$", re.IGNORECASE)


def _key(phrase: str) -> str:
    return " ".join(phrase.lower().split())


def resolve_color(name: str) -> str | None:
    """Map a color name or hex literal to a hex code. Unknown names give None."""
    key = _key(name)
    if key in COLOR_NAMES:
        return COLOR_NAMES[key]
    if _HEX_COLOR.match(key):
        return key
    return None


def resolve_node_type(phrase: str) -> NodeType | None:
    return NODE_TYPE_ALIASES.get(_key(phrase))


def resolve_direction(phrase: str) -> str | None:
    return DIRECTION_ALIASES.get(_key(phrase))


def resolve_nudge(phrase: str) -> str | None:
    return NUDGE_ALIASES.get(_key(phrase))
