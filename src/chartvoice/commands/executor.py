"""Command engine: parse a transcript, apply it to a chart, log the outcome.

Every command produces exactly one log entry and a human-readable result.
Bad input never raises: unresolved names, invalid values and unmet
preconditions come back as failure messages, and all checks run before
the chart is touched so a failed command leaves it unchanged.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from chartvoice import config
from chartvoice.chart.model import Node, NodeType
from chartvoice.commands.aliases import resolve_color
from chartvoice.commands.grammar import parse
from chartvoice.commands.history import CommandEntry, CommandLog
from chartvoice.commands.placement import choose_ports, place, place_beside
from chartvoice.commands.resolver import display_name, find_connector, find_node
from chartvoice.commands.types import ChartOps, CommandKind, ParsedCommand

logger = logging.getLogger(__name__)

Outcome = tuple[str, bool]

FONT_SIZE_RANGE = (6, 72)
MIN_SET_DIMENSION = 20
RESIZE_STEP = 40
RESIZE_FLOOR = (40, 24)

_RELATION = {"right": "right of", "left": "left of", "above": "above", "below": "below"}

HELP_TEXT = "\n".join([
    "Voice commands:",
    "  add <shape> called <name>",
    "  add <shape> called <name> right of <ref>",
    "  connect <A> to <B> [with <label>]",
    "  label <A> to <B> with <label>",
    "  move <node> right of <ref>",
    "  move <node> up/down/left/right [px]",
    "  set <node> fill/color to <color>",
    "  set <node> font size to <n>",
    "  set <node> bold / normal",
    "  resize <node> to <w> by <h>",
    "  make <node> wider/taller/smaller/bigger",
    "  add row to <table>",
    "  add column <name> to <table>",
    "  fill <table> row N column N to <value>",
    "  fill <table> <column> with <value>",
    "  rename <old> to <new>",
    "  delete <node> / delete all",
    "  select <node> / select all / deselect",
    "  duplicate <node>",
    "  list nodes",
    "  undo / redo",
])


def _int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _cannot_find(name: str | None) -> Outcome:
    return f'Cannot find "{name or ""}"', False


class VoiceCommandEngine:
    """Executes transcripts against a chart and keeps a bounded command log."""

    def __init__(
        self,
        chart: ChartOps,
        history_limit: int | None = None,
        nudge_step: int | None = None,
        gap: int | None = None,
    ) -> None:
        self.chart = chart
        self.nudge_step = config.NUDGE_STEP if nudge_step is None else nudge_step
        self.gap = config.PLACEMENT_GAP if gap is None else gap
        self._log = CommandLog(config.HISTORY_LIMIT if history_limit is None else history_limit)
        self._last_result = ""
        self._handlers: dict[CommandKind, Callable[[ParsedCommand], Outcome]] = {
            CommandKind.UNDO: self._undo,
            CommandKind.REDO: self._redo,
            CommandKind.HELP: self._help,
            CommandKind.LIST: self._list,
            CommandKind.SELECT: self._select,
            CommandKind.SELECT_ALL: self._select_all,
            CommandKind.DESELECT: self._deselect,
            CommandKind.DUPLICATE: self._duplicate,
            CommandKind.DELETE: self._delete,
            CommandKind.DELETE_ALL: self._delete_all,
            CommandKind.ADD: self._add,
            CommandKind.ADD_RELATIVE: self._add_relative,
            CommandKind.CONNECT: self._connect,
            CommandKind.LABEL_CONNECTOR: self._label_connector,
            CommandKind.MOVE_RELATIVE: self._move_relative,
            CommandKind.MOVE_NUDGE: self._move_nudge,
            CommandKind.RENAME: self._rename,
            CommandKind.SET_STYLE: self._set_style,
            CommandKind.RESIZE: self._resize,
            CommandKind.RESIZE_RELATIVE: self._resize_relative,
            CommandKind.TABLE_ADD_ROW: self._table_add_row,
            CommandKind.TABLE_ADD_COLUMN: self._table_add_column,
            CommandKind.TABLE_SET_CELL: self._table_set_cell,
        }

    # ── Public surface ──

    def execute(self, transcript: str) -> str:
        """Run one transcript. Always returns a message and logs one entry."""
        return self.run(transcript).result

    def run(self, transcript: str) -> CommandEntry:
        """Like ``execute`` but returns the full log entry."""
        try:
            cmd = parse(transcript)
            handler = self._handlers.get(cmd.kind)
            if handler is None:
                msg, success = f'Could not understand: "{transcript}". Say "help" for commands.', False
            else:
                msg, success = handler(cmd)
        except Exception as e:
            logger.exception("Command %r failed", transcript)
            msg, success = f"Error: {e}", False

        self._last_result = msg
        entry = self._log.append(transcript, msg, success)
        if success:
            logger.info("command %r -> %s", transcript, msg.splitlines()[0])
        else:
            logger.warning("command %r failed: %s", transcript, msg)
        return entry

    @property
    def last_result(self) -> str:
        return self._last_result

    @property
    def command_history(self) -> list[CommandEntry]:
        return self._log.entries()

    @property
    def node_inventory(self) -> list[dict[str, str]]:
        return [
            {"id": n.id, "label": display_name(n), "type": n.type.value}
            for n in self.chart.nodes
        ]

    # ── Helpers ──

    def _find(self, name: str | None) -> Node | None:
        if not name:
            return None
        return find_node(self.chart.nodes, name)

    # ── Meta ──

    def _undo(self, cmd: ParsedCommand) -> Outcome:
        self.chart.undo()
        return "Undone.", True

    def _redo(self, cmd: ParsedCommand) -> Outcome:
        self.chart.redo()
        return "Redone.", True

    def _help(self, cmd: ParsedCommand) -> Outcome:
        return HELP_TEXT, True

    def _list(self, cmd: ParsedCommand) -> Outcome:
        nodes = self.chart.nodes
        if not nodes:
            return "Canvas is empty.", True
        return ", ".join(f"{display_name(n)} ({n.type.value})" for n in nodes), True

    # ── Selection / duplication ──

    def _select(self, cmd: ParsedCommand) -> Outcome:
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        self.chart.select_nodes([node.id])
        return f'Selected "{display_name(node)}"', True

    def _select_all(self, cmd: ParsedCommand) -> Outcome:
        ids = [n.id for n in self.chart.nodes]
        self.chart.select_nodes(ids)
        return f"Selected all {len(ids)} nodes", True

    def _deselect(self, cmd: ParsedCommand) -> Outcome:
        self.chart.clear_selection()
        return "Deselected all.", True

    def _duplicate(self, cmd: ParsedCommand) -> Outcome:
        if cmd.label:
            node = self._find(cmd.label)
            if node is None:
                return _cannot_find(cmd.label)
            self.chart.select_nodes([node.id])
        self.chart.duplicate_selected()
        return (f'Duplicated "{cmd.label}"' if cmd.label else "Duplicated selection"), True

    # ── Deletion ──

    def _delete(self, cmd: ParsedCommand) -> Outcome:
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        self.chart.delete_nodes([node.id])
        return f'Deleted "{cmd.label}"', True

    def _delete_all(self, cmd: ParsedCommand) -> Outcome:
        self.chart.delete_nodes([n.id for n in self.chart.nodes])
        return "Cleared canvas.", True

    # ── Creation / connection ──

    def _add(self, cmd: ParsedCommand) -> Outcome:
        if cmd.node_type is None:
            return "Could not determine shape type.", False
        x, y = place(self.chart.nodes, gap=self.gap)
        self.chart.add_node(cmd.node_type, x, y, cmd.label)
        suffix = f' "{cmd.label}"' if cmd.label else ""
        return f"Added {cmd.node_type.value}{suffix}", True

    def _add_relative(self, cmd: ParsedCommand) -> Outcome:
        if cmd.node_type is None:
            return "Could not determine shape type.", False
        ref = self._find(cmd.relative_to)
        x, y = place(self.chart.nodes, cmd.direction, cmd.relative_to, gap=self.gap)
        self.chart.add_node(cmd.node_type, x, y, cmd.label)
        added = f'Added {cmd.node_type.value} "{cmd.label}"'
        if ref is None:
            # place() fell back to default placement
            return f'{added} (cannot find "{cmd.relative_to}", placed by default)', True
        return f'{added} {_RELATION[cmd.direction]} "{display_name(ref)}"', True

    def _connect(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.from_name or not cmd.to_name:
            return "Missing source or target.", False
        source = self._find(cmd.from_name)
        if source is None:
            return _cannot_find(cmd.from_name)
        target = self._find(cmd.to_name)
        if target is None:
            return _cannot_find(cmd.to_name)
        from_port, to_port = choose_ports(source, target)
        # Repeating a connect adds another connector; there is no dedup.
        self.chart.add_connector(source.id, from_port, target.id, to_port, cmd.connector_label)
        suffix = f" ({cmd.connector_label})" if cmd.connector_label else ""
        return f"Connected {cmd.from_name} → {cmd.to_name}{suffix}", True

    def _label_connector(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.from_name or not cmd.to_name or not cmd.connector_label:
            return "Missing parameters.", False
        if self._find(cmd.from_name) is None:
            return _cannot_find(cmd.from_name)
        if self._find(cmd.to_name) is None:
            return _cannot_find(cmd.to_name)
        conn = find_connector(self.chart.nodes, self.chart.connectors, cmd.from_name, cmd.to_name)
        if conn is None:
            return f'No connector from "{cmd.from_name}" to "{cmd.to_name}"', False
        self.chart.update_connector(conn.id, label=cmd.connector_label)
        return f'Labeled connector: "{cmd.connector_label}"', True

    # ── Movement / rename ──

    def _move_relative(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label or not cmd.direction or not cmd.relative_to:
            return "Missing move parameters.", False
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        ref = self._find(cmd.relative_to)
        if ref is None:
            return _cannot_find(cmd.relative_to)
        x, y = place_beside(node, ref, cmd.direction, gap=self.gap)
        self.chart.move_node(node.id, x, y)
        return f'Moved "{cmd.label}" {cmd.direction} "{cmd.relative_to}"', True

    def _move_nudge(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label or not cmd.direction:
            return "Missing move parameters.", False
        if cmd.amount is None:
            step = self.nudge_step
        else:
            step = _int(cmd.amount)
            if step is None or step <= 0:
                return f'Invalid amount "{cmd.amount}"', False
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        dx, dy = {"up": (0, -step), "down": (0, step), "left": (-step, 0), "right": (step, 0)}[cmd.direction]
        self.chart.move_node(node.id, node.x + dx, node.y + dy)
        return f'Moved "{cmd.label}" {cmd.direction} {step}px', True

    def _rename(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.from_name or not cmd.to_name:
            return "Missing rename parameters.", False
        node = self._find(cmd.from_name)
        if node is None:
            return _cannot_find(cmd.from_name)
        # Both names change so the old one stops resolving
        self.chart.update_node(node.id, label=cmd.to_name, voice_label=cmd.to_name)
        return f'Renamed "{cmd.from_name}" → "{cmd.to_name}"', True

    # ── Style / geometry ──

    def _set_style(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label or not cmd.property:
            return "Missing parameters.", False
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)

        prop = cmd.property
        val = cmd.value or ""

        if prop in ("fill", "stroke", "text color"):
            color = resolve_color(val)
            if color is None:
                return f'Unknown color "{val}"', False
            field_name = {"fill": "fill_color", "stroke": "stroke_color", "text color": "text_color"}[prop]
            self.chart.update_node_style(node.id, **{field_name: color})
            return f'Set "{cmd.label}" {prop} to {val}', True

        if prop == "font size":
            size = _int(val)
            low, high = FONT_SIZE_RANGE
            if size is None or not low <= size <= high:
                return f'Invalid font size "{val}"', False
            self.chart.update_node_style(node.id, font_size=size)
            return f'Set "{cmd.label}" font size to {size}', True

        if prop == "font weight":
            weight = "bold" if val == "bold" else "normal"
            self.chart.update_node_style(node.id, font_weight=weight)
            return f'Set "{cmd.label}" font weight to {weight}', True

        if prop == "border radius":
            radius = _int(val)
            if radius is None:
                return f'Invalid radius "{val}"', False
            self.chart.update_node_style(node.id, border_radius=radius)
            return f'Set "{cmd.label}" border radius to {radius}', True

        if prop == "opacity":
            try:
                opacity = float(val)
            except ValueError:
                opacity = math.nan
            if not 0 <= opacity <= 1:
                return f'Invalid opacity "{val}" (0-1)', False
            self.chart.update_node_style(node.id, opacity=opacity)
            return f'Set "{cmd.label}" opacity to {opacity:g}', True

        if prop in ("width", "height"):
            size = _int(val)
            if size is None or size < MIN_SET_DIMENSION:
                return f'Invalid {prop} "{val}"', False
            if prop == "width":
                self.chart.resize_node(node.id, size, node.height)
            else:
                self.chart.resize_node(node.id, node.width, size)
            return f'Set "{cmd.label}" {prop} to {size}', True

        return f'Unknown property "{prop}"', False

    def _resize(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label:
            return "Missing node name.", False
        width = _int(cmd.width)
        if width is None or width < MIN_SET_DIMENSION:
            return f'Invalid width "{cmd.width}"', False
        height = _int(cmd.height)
        if height is None or height < MIN_SET_DIMENSION:
            return f'Invalid height "{cmd.height}"', False
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        self.chart.resize_node(node.id, width, height)
        return f'Resized "{cmd.label}" to {width}×{height}', True

    def _resize_relative(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label:
            return "Missing node name.", False
        node = self._find(cmd.label)
        if node is None:
            return _cannot_find(cmd.label)
        min_w, min_h = RESIZE_FLOOR
        w, h = node.width, node.height
        if cmd.value == "wider":
            w += RESIZE_STEP
        elif cmd.value == "narrower":
            w = max(min_w, w - RESIZE_STEP)
        elif cmd.value == "taller":
            h += RESIZE_STEP
        elif cmd.value == "shorter":
            h = max(min_h, h - RESIZE_STEP)
        elif cmd.value == "bigger":
            w, h = w + RESIZE_STEP, h + RESIZE_STEP
        elif cmd.value == "smaller":
            w, h = max(min_w, w - RESIZE_STEP), max(min_h, h - RESIZE_STEP)
        else:
            return f'Unknown size change "{cmd.value}"', False
        self.chart.resize_node(node.id, w, h)
        return f'Made "{cmd.label}" {cmd.value}', True

    # ── Tables ──

    def _table(self, name: str | None) -> tuple[Node | None, Outcome | None]:
        node = self._find(name)
        if node is None:
            return None, _cannot_find(name)
        if node.type is not NodeType.TABLE or node.table_data is None:
            return None, (f'"{name}" is not a table.', False)
        return node, None

    def _table_add_row(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label:
            return "Missing table name.", False
        node, failure = self._table(cmd.label)
        if failure:
            return failure
        self.chart.add_table_row(node.id)
        return f'Added row to "{cmd.label}"', True

    def _table_add_column(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label or not cmd.column_label:
            return "Missing parameters.", False
        node, failure = self._table(cmd.label)
        if failure:
            return failure
        self.chart.add_table_column(node.id, cmd.column_label)
        return f'Added column "{cmd.column_label}" to "{cmd.label}"', True

    def _table_set_cell(self, cmd: ParsedCommand) -> Outcome:
        if not cmd.label or not cmd.value:
            return "Missing parameters.", False
        node, failure = self._table(cmd.label)
        if failure:
            return failure
        data = node.table_data

        if cmd.row_index is not None and cmd.col_index is not None:
            row_no, col_no = _int(cmd.row_index), _int(cmd.col_index)
            if row_no is None:
                return f'Invalid row "{cmd.row_index}"', False
            if col_no is None:
                return f'Invalid column "{cmd.col_index}"', False
            # Spoken indices are 1-based
            if not (1 <= row_no <= len(data.rows) and 1 <= col_no <= len(data.columns)):
                return f"Row {row_no} or column {col_no} out of range.", False
            row, col = data.rows[row_no - 1], data.columns[col_no - 1]
            self.chart.update_table_cell(node.id, row.id, col.id, cmd.value)
            return f'Set {cmd.label}[{row_no},{col_no}] = "{cmd.value}"', True

        if cmd.column_label:
            col = data.column_by_label(cmd.column_label)
            if col is None:
                return f'Column "{cmd.column_label}" not found in "{cmd.label}".', False
            for row in data.rows:
                if not row.cells.get(col.id, "").strip():
                    break
            else:
                return f'No empty rows in column "{cmd.column_label}".', False
            self.chart.update_table_cell(node.id, row.id, col.id, cmd.value)
            return f'Filled "{cmd.label}" {cmd.column_label} with "{cmd.value}"', True

        return "Missing row/column specifier.", False
