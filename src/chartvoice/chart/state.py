"""In-memory chart state with snapshot undo/redo.

Every mutation replaces the affected Node/Connector objects instead of
editing them in place, so the lists handed out by ``nodes`` and
``connectors`` are stable snapshots callers can hold on to.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections import deque
from dataclasses import asdict, fields, replace
from typing import Any

from chartvoice import config
from chartvoice.chart.model import (
    DEFAULT_DIMENSIONS,
    DEFAULT_LABELS,
    Connector,
    Node,
    NodeStyle,
    NodeType,
    PortSide,
    TableColumn,
    TableData,
    TableRow,
    default_style,
    snap_to_grid,
)

logger = logging.getLogger(__name__)

_NODE_FIELDS = {f.name for f in fields(Node)} - {"id"}
_STYLE_FIELDS = {f.name for f in fields(NodeStyle)}
_CONNECTOR_FIELDS = {f.name for f in fields(Connector)} - {"id"}

TABLE_ROW_HEIGHT = 28
TABLE_COLUMN_WIDTH = 80
MIN_WIDTH = 40
MIN_HEIGHT = 24
DUPLICATE_OFFSET = 20


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


class ChartState:
    """Mutable chart: nodes, connectors, selection, and undo history."""

    def __init__(
        self,
        snap: bool | None = None,
        grid_size: int | None = None,
        undo_limit: int | None = None,
    ) -> None:
        self.snap = config.SNAP_TO_GRID if snap is None else snap
        self.grid_size = grid_size or config.GRID_SIZE
        limit = undo_limit or config.UNDO_LIMIT
        self._nodes: list[Node] = []
        self._connectors: list[Connector] = []
        self.selected_node_ids: list[str] = []
        self.selected_connector_ids: list[str] = []
        self._undo: deque[tuple[list[Node], list[Connector]]] = deque(maxlen=limit)
        self._redo: list[tuple[list[Node], list[Connector]]] = []

    # ── Snapshots ──

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def connectors(self) -> list[Connector]:
        return list(self._connectors)

    def get_node(self, node_id: str) -> Node:
        for n in self._nodes:
            if n.id == node_id:
                return n
        raise KeyError(f"Unknown node {node_id!r}")

    def get_connector(self, connector_id: str) -> Connector:
        for c in self._connectors:
            if c.id == connector_id:
                return c
        raise KeyError(f"Unknown connector {connector_id!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [asdict(n) for n in self._nodes],
            "connectors": [asdict(c) for c in self._connectors],
            "selected_node_ids": list(self.selected_node_ids),
            "selected_connector_ids": list(self.selected_connector_ids),
        }

    # ── Undo / redo ──

    def _capture(self) -> tuple[list[Node], list[Connector]]:
        return copy.deepcopy(self._nodes), copy.deepcopy(self._connectors)

    def _push_history(self) -> None:
        self._undo.append(self._capture())
        self._redo.clear()

    def _restore(self, entry: tuple[list[Node], list[Connector]]) -> None:
        self._nodes, self._connectors = entry
        self.selected_node_ids = []
        self.selected_connector_ids = []

    def undo(self) -> None:
        if not self._undo:
            logger.debug("undo: history empty")
            return
        self._redo.append(self._capture())
        self._restore(self._undo.pop())

    def redo(self) -> None:
        if not self._redo:
            logger.debug("redo: nothing to redo")
            return
        self._undo.append(self._capture())
        self._restore(self._redo.pop())

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    # ── Node operations ──

    def _snap(self, value: float) -> float:
        return snap_to_grid(value, self.grid_size) if self.snap else value

    def _replace_node(self, node_id: str, **changes: Any) -> None:
        node = self.get_node(node_id)
        idx = self._nodes.index(node)
        self._nodes[idx] = replace(node, **changes)

    def add_node(
        self, node_type: NodeType | str, x: float, y: float, label: str | None = None
    ) -> str:
        node_type = NodeType(node_type)
        self._push_history()
        width, height = DEFAULT_DIMENSIONS[node_type]
        name = label or DEFAULT_LABELS[node_type]
        node = Node(
            id=generate_id("node"),
            type=node_type,
            x=self._snap(x),
            y=self._snap(y),
            width=width,
            height=height,
            label=name,
            voice_label=name,
            style=default_style(node_type),
            z_index=len(self._nodes),
        )
        if node_type is NodeType.TABLE:
            name_col = TableColumn(id=generate_id("col"), label="Column", width=120)
            type_col = TableColumn(id=generate_id("col"), label="Type", width=80)
            node.table_data = TableData(
                columns=[name_col, type_col],
                rows=[TableRow(id=generate_id("row"), cells={name_col.id: "id", type_col.id: "int"})],
            )
        elif node_type is NodeType.TEXT:
            node.text_content = "Annotation"

        self._nodes.append(node)
        self.selected_node_ids = [node.id]
        self.selected_connector_ids = []
        logger.debug("add_node %s %s at (%s, %s)", node_type.value, node.id, node.x, node.y)
        return node.id

    def update_node(self, node_id: str, **updates: Any) -> None:
        unknown = set(updates) - _NODE_FIELDS
        if unknown:
            raise ValueError(f"Unknown node field(s): {', '.join(sorted(unknown))}")
        self.get_node(node_id)
        self._push_history()
        self._replace_node(node_id, **updates)

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self.get_node(node_id)
        if node.locked:
            logger.debug("move_node %s ignored: node is locked", node_id)
            return
        self._push_history()
        self._replace_node(node_id, x=self._snap(x), y=self._snap(y))

    def resize_node(self, node_id: str, width: float, height: float) -> None:
        self.get_node(node_id)
        self._push_history()
        self._replace_node(node_id, width=max(MIN_WIDTH, width), height=max(MIN_HEIGHT, height))

    def delete_nodes(self, node_ids: list[str]) -> None:
        ids = set(node_ids)
        self._push_history()
        self._nodes = [n for n in self._nodes if n.id not in ids]
        self._connectors = [
            c for c in self._connectors
            if c.from_node_id not in ids and c.to_node_id not in ids
        ]
        self.selected_node_ids = [i for i in self.selected_node_ids if i not in ids]

    def update_node_style(self, node_id: str, **style: Any) -> None:
        unknown = set(style) - _STYLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown style field(s): {', '.join(sorted(unknown))}")
        node = self.get_node(node_id)
        self._push_history()
        self._replace_node(node_id, style=replace(node.style, **style))

    # ── Connector operations ──

    def add_connector(
        self,
        from_node_id: str,
        from_port: PortSide | str,
        to_node_id: str,
        to_port: PortSide | str,
        label: str | None = None,
    ) -> str:
        # Both endpoints must exist; no dangling connectors.
        self.get_node(from_node_id)
        self.get_node(to_node_id)
        self._push_history()
        conn = Connector(
            id=generate_id("conn"),
            from_node_id=from_node_id,
            to_node_id=to_node_id,
            from_port=PortSide(from_port),
            to_port=PortSide(to_port),
            label=label or "",
        )
        self._connectors.append(conn)
        self.selected_connector_ids = [conn.id]
        self.selected_node_ids = []
        return conn.id

    def update_connector(self, connector_id: str, **updates: Any) -> None:
        unknown = set(updates) - _CONNECTOR_FIELDS
        if unknown:
            raise ValueError(f"Unknown connector field(s): {', '.join(sorted(unknown))}")
        conn = self.get_connector(connector_id)
        self._push_history()
        idx = self._connectors.index(conn)
        self._connectors[idx] = replace(conn, **updates)

    # ── Selection ──

    def select_nodes(self, node_ids: list[str], additive: bool = False) -> None:
        if additive:
            merged = list(self.selected_node_ids)
            merged.extend(i for i in node_ids if i not in merged)
            self.selected_node_ids = merged
        else:
            self.selected_node_ids = list(node_ids)
            self.selected_connector_ids = []

    def clear_selection(self) -> None:
        self.selected_node_ids = []
        self.selected_connector_ids = []

    # ── Duplicate ──

    def duplicate_selected(self) -> list[str]:
        """Copy the selected nodes (and connectors between them), offset by 20."""
        if not self.selected_node_ids:
            return []
        self._push_history()

        id_map: dict[str, str] = {}
        new_nodes: list[Node] = []
        for node_id in self.selected_node_ids:
            try:
                node = self.get_node(node_id)
            except KeyError:
                continue
            new_id = generate_id("node")
            id_map[node_id] = new_id
            new_nodes.append(replace(
                copy.deepcopy(node),
                id=new_id,
                x=node.x + DUPLICATE_OFFSET,
                y=node.y + DUPLICATE_OFFSET,
            ))

        new_connectors = [
            replace(
                c,
                id=generate_id("conn"),
                from_node_id=id_map[c.from_node_id],
                to_node_id=id_map[c.to_node_id],
            )
            for c in self._connectors
            if c.from_node_id in id_map and c.to_node_id in id_map
        ]

        self._nodes.extend(new_nodes)
        self._connectors.extend(new_connectors)
        self.selected_node_ids = [n.id for n in new_nodes]
        self.selected_connector_ids = [c.id for c in new_connectors]
        return self.selected_node_ids

    # ── Table operations ──

    def _table(self, node_id: str) -> Node:
        node = self.get_node(node_id)
        if node.table_data is None:
            raise ValueError(f"Node {node_id!r} is not a table")
        return node

    def add_table_row(self, node_id: str) -> str:
        node = self._table(node_id)
        self._push_history()
        data = copy.deepcopy(node.table_data)
        row = TableRow(id=generate_id("row"), cells={col.id: "" for col in data.columns})
        data.rows.append(row)
        self._replace_node(node_id, table_data=data, height=node.height + TABLE_ROW_HEIGHT)
        return row.id

    def add_table_column(self, node_id: str, label: str) -> str:
        node = self._table(node_id)
        self._push_history()
        data = copy.deepcopy(node.table_data)
        col = TableColumn(id=generate_id("col"), label=label, width=TABLE_COLUMN_WIDTH)
        data.columns.append(col)
        for row in data.rows:
            row.cells[col.id] = ""
        self._replace_node(node_id, table_data=data, width=node.width + TABLE_COLUMN_WIDTH)
        return col.id

    def update_table_cell(self, node_id: str, row_id: str, col_id: str, value: str) -> None:
        node = self._table(node_id)
        data = copy.deepcopy(node.table_data)
        for row in data.rows:
            if row.id == row_id:
                break
        else:
            raise KeyError(f"Unknown row {row_id!r} in table {node_id!r}")
        if not any(c.id == col_id for c in data.columns):
            raise KeyError(f"Unknown column {col_id!r} in table {node_id!r}")
        self._push_history()
        row.cells[col_id] = value
        self._replace_node(node_id, table_data=data)
