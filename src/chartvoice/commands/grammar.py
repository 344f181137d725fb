"""Transcript grammar: an ordered list of regex rules.

Rules are tried in the order they are declared below and the first one
that both matches and accepts wins. Several patterns overlap on purpose
("set X row 1 column 2 to Y" also fits the looser "fill X <column> with Y"
form; "add X called Y right of Z" also fits "add X called Y"), so the
more specific rule must always be declared first.

A rule's builder may return None to decline a match (e.g. the shape
phrase is not a known shape kind); parsing then continues with the next
rule. Builders only extract raw substrings. Numbers, colors and other
values are validated by the executor.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from chartvoice.commands.aliases import (
    DIRECTION_ALIASES,
    STYLE_PROPERTY_ALIASES,
    resolve_color,
    resolve_direction,
    resolve_node_type,
    resolve_nudge,
)
from chartvoice.commands.types import CommandKind, ParsedCommand

logger = logging.getLogger(__name__)

Builder = Callable[[re.Match], "ParsedCommand | None"]


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: re.Pattern
    build: Builder


RULES: list[Rule] = []


def _rule(name: str, pattern: str) -> Callable[[Builder], Builder]:
    """Register a builder for ``pattern``. Declaration order is precedence."""
    compiled = re.compile(pattern, re.IGNORECASE)

    def decorator(fn: Builder) -> Builder:
        RULES.append(Rule(name=name, pattern=compiled, build=fn))
        return fn

    return decorator


def _fixed(name: str, pattern: str, kind: CommandKind) -> None:
    _rule(name, pattern)(lambda m: ParsedCommand(kind))


def _alternation(phrases) -> str:
    # Longest first so "to the left of" wins over "left of" at the same spot
    return "|".join(re.escape(p) for p in sorted(phrases, key=len, reverse=True))


# Directions that need a reference node ("left of X", "above X")
_ANCHORED = _alternation(
    p for p in DIRECTION_ALIASES if p not in ("left", "right", "to the left", "to the right")
)
_SET_PROPERTIES = _alternation(p for p in STYLE_PROPERTY_ALIASES if p != "font weight")


def normalize(transcript: str) -> str:
    """Lower-case, collapse whitespace and drop trailing sentence punctuation."""
    return " ".join(transcript.lower().split()).rstrip(".!?").strip()


def _clean(text: str | None) -> str | None:
    return text.strip() if text is not None else None


# ── 1. Meta ──

_fixed("undo", r"^undo$", CommandKind.UNDO)
_fixed("redo", r"^redo$", CommandKind.REDO)
_fixed("help", r"^(?:help|what can i say|commands|voice commands)$", CommandKind.HELP)
_fixed(
    "list",
    r"^(?:list|list nodes|list all|what['’]?s on the canvas|show nodes|inventory)$",
    CommandKind.LIST,
)

# ── 2. Selection ──

_fixed("select-all", r"^select all$", CommandKind.SELECT_ALL)
_fixed(
    "deselect",
    r"^(?:deselect|deselect all|clear selection|unselect)$",
    CommandKind.DESELECT,
)


@_rule("select", r"^select\s+(.+)$")
def _select(m: re.Match) -> ParsedCommand:
    return ParsedCommand(CommandKind.SELECT, label=_clean(m.group(1)))


# ── 3. Duplication ──


@_rule("duplicate", r"^(?:duplicate|copy|clone)(?:\s+(.+))?$")
def _duplicate(m: re.Match) -> ParsedCommand:
    return ParsedCommand(CommandKind.DUPLICATE, label=_clean(m.group(1)))


# ── 4. Deletion ──

_fixed(
    "delete-all",
    r"^(?:delete all|remove all|clear canvas|clear all)$",
    CommandKind.DELETE_ALL,
)


@_rule("delete", r"^(?:delete|remove)\s+(.+)$")
def _delete(m: re.Match) -> ParsedCommand:
    return ParsedCommand(CommandKind.DELETE, label=_clean(m.group(1)))


# ── 5. Tables ──


@_rule("table-add-row", r"^add\s+row\s+to\s+(.+)$")
def _add_row(m: re.Match) -> ParsedCommand:
    return ParsedCommand(CommandKind.TABLE_ADD_ROW, label=_clean(m.group(1)))


@_rule("table-add-column", r"^add\s+column\s+(.+?)\s+to\s+(.+)$")
def _add_column(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.TABLE_ADD_COLUMN,
        column_label=_clean(m.group(1)),
        label=_clean(m.group(2)),
    )


@_rule(
    "table-set-cell",
    r"^(?:set|fill)\s+(.+?)\s+row\s+(\S+)\s+column\s+(\S+)\s+(?:to|with|as)\s+(.+)$",
)
def _set_cell(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.TABLE_SET_CELL,
        label=_clean(m.group(1)),
        row_index=m.group(2),
        col_index=m.group(3),
        value=_clean(m.group(4)),
    )


@_rule("table-fill-column", r"^fill\s+(.+?)\s+(\w+)\s+(?:with|to|as)\s+(.+)$")
def _fill_column(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.TABLE_SET_CELL,
        label=_clean(m.group(1)),
        column_label=m.group(2),
        value=_clean(m.group(3)),
    )


# ── 6. Style ──


@_rule("set-weight", r"^(?:set|make)\s+(.+?)\s+(bold|normal)$")
def _set_weight(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.SET_STYLE,
        label=_clean(m.group(1)),
        property="font weight",
        value=m.group(2).lower(),
    )


@_rule("set-style", rf"^set\s+(.+?)\s+({_SET_PROPERTIES})\s+(?:to|=)\s+(.+)$")
def _set_style(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.SET_STYLE,
        label=_clean(m.group(1)),
        property=STYLE_PROPERTY_ALIASES[" ".join(m.group(2).lower().split())],
        value=_clean(m.group(3)),
    )


# ── 7. Color shorthand ──


@_rule(
    "set-color-shorthand",
    r"^(?:set|make|color)\s+(.+?)\s+(?:to\s+)?((?:light|dark)\s+\w+|#?\w+)$",
)
def _color_shorthand(m: re.Match) -> ParsedCommand | None:
    if resolve_color(m.group(2)) is None:
        return None
    return ParsedCommand(
        CommandKind.SET_STYLE,
        label=_clean(m.group(1)),
        property="fill",
        value=m.group(2).strip(),
    )


# ── 8. Resize ──


@_rule("resize", r"^resize\s+(.+?)\s+to\s+(\S+)\s+(?:by|x|×)\s+(\S+)$")
def _resize(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.RESIZE,
        label=_clean(m.group(1)),
        width=m.group(2),
        height=m.group(3),
    )


@_rule("resize-relative", r"^make\s+(.+?)\s+(wider|narrower|taller|shorter|bigger|smaller)$")
def _resize_relative(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.RESIZE_RELATIVE,
        label=_clean(m.group(1)),
        value=m.group(2).lower(),
    )


# ── 9. Creation ──


@_rule(
    "add-relative",
    rf"^add\s+([\w\s]+?)\s+(?:called|named)\s+(.+?)\s+({_ANCHORED})\s+(.+)$",
)
def _add_relative(m: re.Match) -> ParsedCommand | None:
    node_type = resolve_node_type(m.group(1))
    direction = resolve_direction(m.group(3))
    if node_type is None or direction is None:
        return None
    return ParsedCommand(
        CommandKind.ADD_RELATIVE,
        node_type=node_type,
        label=_clean(m.group(2)),
        direction=direction,
        relative_to=_clean(m.group(4)),
    )


@_rule("add-named", r"^add\s+([\w\s]+?)\s+(?:called|named)\s+(.+)$")
def _add_named(m: re.Match) -> ParsedCommand | None:
    node_type = resolve_node_type(m.group(1))
    if node_type is None:
        return None
    return ParsedCommand(CommandKind.ADD, node_type=node_type, label=_clean(m.group(2)))


@_rule("add-loose", r"^add\s+(\w[\w\s]*?)\s+(\S.*)$")
def _add_loose(m: re.Match) -> ParsedCommand | None:
    # The regex split is lazy, so "add rounded rect users" first offers
    # "rounded" as the shape. Try every word boundary, longest shape first.
    words = f"{m.group(1)} {m.group(2)}".split()
    for cut in range(len(words) - 1, 0, -1):
        node_type = resolve_node_type(" ".join(words[:cut]))
        if node_type is not None:
            return ParsedCommand(CommandKind.ADD, node_type=node_type, label=" ".join(words[cut:]))
    return None


@_rule("add", r"^add\s+([\w\s]+?)$")
def _add(m: re.Match) -> ParsedCommand | None:
    node_type = resolve_node_type(m.group(1))
    if node_type is None:
        return None
    return ParsedCommand(CommandKind.ADD, node_type=node_type)


# ── 10. Connection ──


@_rule("connect", r"^connect\s+(.+?)\s+to\s+(.+?)(?:\s+(?:with|as|label)\s+(.+))?$")
def _connect(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.CONNECT,
        from_name=_clean(m.group(1)),
        to_name=_clean(m.group(2)),
        connector_label=_clean(m.group(3)),
    )


# ── 11. Connector labels ──


@_rule("label-connector", r"^label\s+(.+?)\s+to\s+(.+?)\s+(?:with|as)\s+(.+)$")
def _label_connector(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.LABEL_CONNECTOR,
        from_name=_clean(m.group(1)),
        to_name=_clean(m.group(2)),
        connector_label=_clean(m.group(3)),
    )


# ── 12. Movement ──


@_rule("move-relative", rf"^move\s+(.+?)\s+({_ANCHORED})\s+(.+)$")
def _move_relative(m: re.Match) -> ParsedCommand | None:
    direction = resolve_direction(m.group(2))
    if direction is None:
        return None
    return ParsedCommand(
        CommandKind.MOVE_RELATIVE,
        label=_clean(m.group(1)),
        direction=direction,
        relative_to=_clean(m.group(3)),
    )


@_rule("move-nudge", r"^(?:move|nudge|push)\s+(.+?)\s+(up|down|left|right)(?:\s+(\S+))?$")
def _nudge(m: re.Match) -> ParsedCommand:
    return ParsedCommand(
        CommandKind.MOVE_NUDGE,
        label=_clean(m.group(1)),
        direction=resolve_nudge(m.group(2)),
        amount=m.group(3),
    )


# ── 13. Rename ──


@_rule("rename", r"^rename\s+(.+?)\s+to\s+(.+)$")
def _rename(m: re.Match) -> ParsedCommand:
    return ParsedCommand(CommandKind.RENAME, from_name=_clean(m.group(1)), to_name=_clean(m.group(2)))


def match(transcript: str) -> tuple[str | None, ParsedCommand]:
    """Parse a transcript, also returning the name of the rule that fired."""
    text = normalize(transcript)
    for rule in RULES:
        m = rule.pattern.match(text)
        if m is None:
            continue
        cmd = rule.build(m)
        if cmd is None:
            logger.debug("rule %s declined %r", rule.name, text)
            continue
        logger.debug("rule %s matched %r -> %s", rule.name, text, cmd.kind.value)
        return rule.name, cmd
    return None, ParsedCommand(CommandKind.UNKNOWN)


def parse(transcript: str) -> ParsedCommand:
    return match(transcript)[1]
