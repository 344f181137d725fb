"""Parsed command types and the chart-mutation protocol the engine drives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from chartvoice.chart.model import Connector, Node, NodeType, PortSide


class CommandKind(str, Enum):
    ADD = "add"
    ADD_RELATIVE = "add-relative"
    CONNECT = "connect"
    MOVE_RELATIVE = "move-relative"
    MOVE_NUDGE = "move-nudge"
    DELETE = "delete"
    DELETE_ALL = "delete-all"
    RENAME = "rename"
    LABEL_CONNECTOR = "label-connector"
    SET_STYLE = "set-style"
    RESIZE = "resize"
    RESIZE_RELATIVE = "resize-relative"
    TABLE_ADD_ROW = "table-add-row"
    TABLE_ADD_COLUMN = "table-add-column"
    TABLE_SET_CELL = "table-set-cell"
    SELECT = "select"
    SELECT_ALL = "select-all"
    DESELECT = "deselect"
    UNDO = "undo"
    REDO = "redo"
    DUPLICATE = "duplicate"
    LIST = "list"
    HELP = "help"
    UNKNOWN = "unknown"


@dataclass
class ParsedCommand:
    """One recognized command. Numeric fields hold raw matched text."""

    kind: CommandKind
    node_type: NodeType | None = None
    label: str | None = None
    from_name: str | None = None
    to_name: str | None = None
    direction: str | None = None
    relative_to: str | None = None
    connector_label: str | None = None
    property: str | None = None
    value: str | None = None
    amount: str | None = None
    width: str | None = None
    height: str | None = None
    column_label: str | None = None
    row_index: str | None = None
    col_index: str | None = None


@runtime_checkable
class ChartOps(Protocol):
    """Mutation surface of a chart. ``ChartState`` is the in-memory implementation."""

    @property
    def nodes(self) -> list[Node]: ...

    @property
    def connectors(self) -> list[Connector]: ...

    def add_node(
        self, node_type: NodeType, x: float, y: float, label: str | None = None
    ) -> str: ...

    def move_node(self, node_id: str, x: float, y: float) -> None: ...

    def resize_node(self, node_id: str, width: float, height: float) -> None: ...

    def delete_nodes(self, node_ids: list[str]) -> None: ...

    def update_node(self, node_id: str, **updates: Any) -> None: ...

    def update_node_style(self, node_id: str, **style: Any) -> None: ...

    def add_connector(
        self,
        from_node_id: str,
        from_port: PortSide,
        to_node_id: str,
        to_port: PortSide,
        label: str | None = None,
    ) -> str: ...

    def update_connector(self, connector_id: str, **updates: Any) -> None: ...

    def add_table_row(self, node_id: str) -> Any: ...

    def add_table_column(self, node_id: str, label: str) -> Any: ...

    def update_table_cell(self, node_id: str, row_id: str, col_id: str, value: str) -> None: ...

    def select_nodes(self, node_ids: list[str], additive: bool = False) -> None: ...

    def clear_selection(self) -> None: ...

    def undo(self) -> None: ...

    def redo(self) -> None: ...

    @property
    def can_undo(self) -> bool: ...

    @property
    def can_redo(self) -> bool: ...

    def duplicate_selected(self) -> Any: ...
