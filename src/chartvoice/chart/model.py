"""Chart data model: nodes, connectors, styles, and table data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeType(str, Enum):
    TABLE = "table"
    RECTANGLE = "rectangle"
    ROUNDED_RECT = "rounded-rect"
    DIAMOND = "diamond"
    TEXT = "text"
    BADGE = "badge"


class PortSide(str, Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


@dataclass
class NodeStyle:
    fill_color: str = "#ffffff"
    stroke_color: str = "#334155"
    stroke_width: int = 2
    text_color: str = "#1e293b"
    font_size: int = 12
    font_weight: str = "normal"  # "normal" | "bold"
    border_radius: int = 4
    opacity: float = 1.0


@dataclass
class TableColumn:
    id: str
    label: str
    width: int = 80


@dataclass
class TableRow:
    id: str
    cells: dict[str, str] = field(default_factory=dict)  # column id -> text


@dataclass
class TableData:
    columns: list[TableColumn] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)
    header_bg_color: str = "#334155"
    striped_rows: bool = True

    def column_by_label(self, label: str) -> TableColumn | None:
        """Case-insensitive exact lookup of a column by its label."""
        wanted = label.lower()
        for col in self.columns:
            if col.label.lower() == wanted:
                return col
        return None


@dataclass
class Node:
    id: str
    type: NodeType
    x: float
    y: float
    width: float
    height: float
    label: str
    voice_label: str
    style: NodeStyle = field(default_factory=NodeStyle)
    locked: bool = False
    z_index: int = 0
    table_data: TableData | None = None
    text_content: str | None = None


@dataclass
class Connector:
    id: str
    from_node_id: str
    to_node_id: str
    from_port: PortSide
    to_port: PortSide
    label: str = ""
    line_style: str = "solid"  # "solid" | "dashed" | "dotted"
    color: str = "#64748b"
    stroke_width: int = 2
    start_arrow: str = "none"
    end_arrow: str = "arrow"


# ── Per-type defaults ──

DEFAULT_DIMENSIONS: dict[NodeType, tuple[int, int]] = {
    NodeType.TABLE: (280, 200),
    NodeType.DIAMOND: (160, 100),
    NodeType.TEXT: (200, 40),
    NodeType.RECTANGLE: (180, 80),
    NodeType.ROUNDED_RECT: (180, 80),
    NodeType.BADGE: (80, 32),
}

DEFAULT_STYLES: dict[NodeType, dict] = {
    NodeType.TABLE: {"fill_color": "#f8fafc", "stroke_color": "#334155", "border_radius": 6},
    NodeType.DIAMOND: {"fill_color": "#fef3c7", "stroke_color": "#d97706", "border_radius": 0},
    NodeType.TEXT: {
        "fill_color": "transparent",
        "stroke_color": "transparent",
        "stroke_width": 0,
        "font_size": 14,
    },
    NodeType.RECTANGLE: {"fill_color": "#dbeafe", "stroke_color": "#3b82f6", "border_radius": 4},
    NodeType.ROUNDED_RECT: {"fill_color": "#dcfce7", "stroke_color": "#22c55e", "border_radius": 20},
    NodeType.BADGE: {
        "fill_color": "#7c3aed",
        "stroke_color": "#7c3aed",
        "text_color": "#ffffff",
        "font_size": 10,
        "font_weight": "bold",
        "border_radius": 12,
    },
}

DEFAULT_LABELS: dict[NodeType, str] = {
    NodeType.TABLE: "Table",
    NodeType.DIAMOND: "Decision",
    NodeType.TEXT: "Text",
    NodeType.RECTANGLE: "Process",
    NodeType.ROUNDED_RECT: "Service",
    NodeType.BADGE: "Label",
}


def default_style(node_type: NodeType) -> NodeStyle:
    return NodeStyle(**DEFAULT_STYLES.get(node_type, {}))


def snap_to_grid(value: float, grid_size: int) -> float:
    return round(value / grid_size) * grid_size
