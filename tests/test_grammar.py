"""Tests for transcript parsing and rule precedence."""

from __future__ import annotations

import pytest

from chartvoice.chart.model import NodeType
from chartvoice.commands.grammar import RULES, match, normalize, parse
from chartvoice.commands.types import CommandKind


class TestNormalize:
    def test_collapses_whitespace(self):
        assert normalize("  add   table  called   users ") == "add table called users"

    def test_strips_trailing_punctuation(self):
        assert normalize("undo.") == "undo"
        assert normalize("delete users!") == "delete users"

    def test_lowercases(self):
        assert normalize("  Delete USERS ") == "delete users"
        assert parse("ADD Rectangle Called Foo").label == "foo"


class TestMetaCommands:
    @pytest.mark.parametrize("text,kind", [
        ("undo", CommandKind.UNDO),
        ("Undo.", CommandKind.UNDO),
        ("redo", CommandKind.REDO),
        ("help", CommandKind.HELP),
        ("What can I say", CommandKind.HELP),
        ("list", CommandKind.LIST),
        ("list nodes", CommandKind.LIST),
        ("what's on the canvas", CommandKind.LIST),
        ("whats on the canvas", CommandKind.LIST),
    ])
    def test_fixed_phrases(self, text, kind):
        assert parse(text).kind == kind

    def test_fixed_phrases_carry_no_parameters(self):
        cmd = parse("undo")
        assert cmd.label is None
        assert cmd.value is None

    def test_meta_checked_first(self):
        assert match("undo")[0] == RULES[0].name


class TestSelection:
    def test_select_all_before_select_name(self):
        assert parse("select all").kind == CommandKind.SELECT_ALL

    def test_select_name(self):
        cmd = parse("select Users")
        assert cmd.kind == CommandKind.SELECT
        assert cmd.label == "users"

    @pytest.mark.parametrize("text", ["deselect", "clear selection", "unselect", "deselect all"])
    def test_deselect(self, text):
        assert parse(text).kind == CommandKind.DESELECT


class TestDuplicateAndDelete:
    @pytest.mark.parametrize("verb", ["duplicate", "copy", "clone"])
    def test_duplicate_verbs(self, verb):
        cmd = parse(f"{verb} Users")
        assert cmd.kind == CommandKind.DUPLICATE
        assert cmd.label == "users"

    def test_bare_duplicate_targets_selection(self):
        cmd = parse("duplicate")
        assert cmd.kind == CommandKind.DUPLICATE
        assert cmd.label is None

    @pytest.mark.parametrize("text", ["delete all", "remove all", "clear canvas", "clear all"])
    def test_delete_all_before_single(self, text):
        assert parse(text).kind == CommandKind.DELETE_ALL

    def test_delete_single(self):
        cmd = parse("remove Order Items")
        assert cmd.kind == CommandKind.DELETE
        assert cmd.label == "order items"


class TestTables:
    def test_add_row_is_not_an_add(self):
        cmd = parse("add row to Users")
        assert cmd.kind == CommandKind.TABLE_ADD_ROW
        assert cmd.label == "users"

    def test_add_column(self):
        cmd = parse("add column Created At to Users")
        assert cmd.kind == CommandKind.TABLE_ADD_COLUMN
        assert cmd.column_label == "created at"
        assert cmd.label == "users"

    def test_add_column_single_word(self):
        cmd = parse("add column Email to Users")
        assert cmd.column_label == "email"
        assert cmd.label == "users"

    def test_set_cell_by_index(self):
        cmd = parse("set Users row 1 column 2 to varchar")
        assert cmd.kind == CommandKind.TABLE_SET_CELL
        assert cmd.label == "users"
        assert cmd.row_index == "1"
        assert cmd.col_index == "2"
        assert cmd.value == "varchar"
        assert cmd.column_label is None

    def test_fill_by_index_wins_over_fill_by_column(self):
        rule, cmd = match("fill Users row 2 column 1 with email")
        assert rule == "table-set-cell"
        assert cmd.row_index == "2"
        assert cmd.value == "email"

    def test_fill_by_column_name(self):
        rule, cmd = match("fill Users email with varchar")
        assert rule == "table-fill-column"
        assert cmd.kind == CommandKind.TABLE_SET_CELL
        assert cmd.label == "users"
        assert cmd.column_label == "email"
        assert cmd.value == "varchar"
        assert cmd.row_index is None

    def test_non_numeric_index_is_extracted_raw(self):
        cmd = parse("set Users row one column 2 to x")
        assert cmd.kind == CommandKind.TABLE_SET_CELL
        assert cmd.row_index == "one"


class TestStyle:
    def test_bold_before_generic_set(self):
        cmd = parse("set Users bold")
        assert cmd.kind == CommandKind.SET_STYLE
        assert cmd.property == "font weight"
        assert cmd.value == "bold"

    def test_make_normal(self):
        assert parse("make Users normal").value == "normal"

    @pytest.mark.parametrize("spoken,canonical", [
        ("fill", "fill"),
        ("fill color", "fill"),
        ("color", "fill"),
        ("stroke", "stroke"),
        ("stroke color", "stroke"),
        ("text color", "text color"),
        ("font size", "font size"),
        ("font", "font size"),
        ("border radius", "border radius"),
        ("radius", "border radius"),
        ("opacity", "opacity"),
        ("width", "width"),
        ("height", "height"),
    ])
    def test_property_synonyms_normalized(self, spoken, canonical):
        cmd = parse(f"set Users {spoken} to 12")
        assert cmd.kind == CommandKind.SET_STYLE
        assert cmd.label == "users"
        assert cmd.property == canonical
        assert cmd.value == "12"

    def test_equals_sign_accepted(self):
        assert parse("set Users opacity = 0.5").value == "0.5"

    def test_unknown_color_still_parses_via_generic_set(self):
        cmd = parse("set Foo color to mauve")
        assert cmd.kind == CommandKind.SET_STYLE
        assert cmd.property == "fill"
        assert cmd.value == "mauve"

    def test_color_shorthand(self):
        rule, cmd = match("make Users red")
        assert rule == "set-color-shorthand"
        assert cmd.property == "fill"
        assert cmd.value == "red"

    def test_color_shorthand_with_to(self):
        cmd = parse("set Users to blue")
        assert cmd.label == "users"
        assert cmd.value == "blue"

    def test_color_shorthand_two_word_color(self):
        cmd = parse("color Users light gray")
        assert cmd.label == "users"
        assert cmd.value == "light gray"

    def test_color_shorthand_declines_non_colors(self):
        # "wider" is not a color, so the resize-relative rule gets it
        cmd = parse("make Users wider")
        assert cmd.kind == CommandKind.RESIZE_RELATIVE
        assert cmd.value == "wider"


class TestResize:
    @pytest.mark.parametrize("sep", ["by", "x", "×"])
    def test_absolute(self, sep):
        cmd = parse(f"resize Users to 300 {sep} 200")
        assert cmd.kind == CommandKind.RESIZE
        assert (cmd.width, cmd.height) == ("300", "200")

    def test_non_numeric_extracted_raw(self):
        cmd = parse("resize Users to wide by 200")
        assert cmd.kind == CommandKind.RESIZE
        assert cmd.width == "wide"

    @pytest.mark.parametrize("word", ["wider", "narrower", "taller", "shorter", "bigger", "smaller"])
    def test_relative(self, word):
        cmd = parse(f"make Users {word}")
        assert cmd.kind == CommandKind.RESIZE_RELATIVE
        assert cmd.value == word


class TestCreation:
    def test_add_relative(self):
        cmd = parse("add table called Orders right of Users")
        assert cmd.kind == CommandKind.ADD_RELATIVE
        assert cmd.node_type == NodeType.TABLE
        assert cmd.label == "orders"
        assert cmd.direction == "right"
        assert cmd.relative_to == "users"

    @pytest.mark.parametrize("phrase,direction", [
        ("to the left of", "left"),
        ("left of", "left"),
        ("above", "above"),
        ("over", "above"),
        ("on top of", "above"),
        ("below", "below"),
        ("under", "below"),
        ("beneath", "below"),
    ])
    def test_add_relative_direction_phrases(self, phrase, direction):
        cmd = parse(f"add diamond named Check {phrase} Orders")
        assert cmd.kind == CommandKind.ADD_RELATIVE
        assert cmd.direction == direction
        assert cmd.label == "check"
        assert cmd.relative_to == "orders"

    def test_add_named(self):
        cmd = parse("add table called Users")
        assert cmd.kind == CommandKind.ADD
        assert cmd.node_type == NodeType.TABLE
        assert cmd.label == "users"

    def test_labels_keep_spoken_case(self):
        assert parse("add box called OrderItems").label == "orderitems"

    def test_multi_word_shape(self):
        cmd = parse("add rounded rectangle called Auth")
        assert cmd.node_type == NodeType.ROUNDED_RECT
        assert cmd.label == "auth"

    def test_shape_synonyms(self):
        assert parse("add decision called Valid").node_type == NodeType.DIAMOND
        assert parse("add if block called Valid").node_type == NodeType.DIAMOND
        assert parse("add widget called W").node_type == NodeType.RECTANGLE

    def test_add_without_keyword(self):
        cmd = parse("add badge V2")
        assert cmd.kind == CommandKind.ADD
        assert cmd.node_type == NodeType.BADGE
        assert cmd.label == "v2"

    def test_add_without_keyword_multi_word_shape(self):
        cmd = parse("add rounded rect Users")
        assert cmd.node_type == NodeType.ROUNDED_RECT
        assert cmd.label == "users"

    def test_add_without_name(self):
        cmd = parse("add rectangle")
        assert cmd.kind == CommandKind.ADD
        assert cmd.node_type == NodeType.RECTANGLE
        assert cmd.label is None

    def test_unknown_shape_is_unknown(self):
        assert parse("add spaceship").kind == CommandKind.UNKNOWN
        assert parse("add spaceship called Apollo").kind == CommandKind.UNKNOWN

    def test_unresolved_direction_falls_through_to_add(self):
        # "near" is not a direction, so the whole tail is the name
        cmd = parse("add box called Cache near Users")
        assert cmd.kind == CommandKind.ADD
        assert cmd.label == "cache near users"


class TestConnect:
    def test_connect(self):
        cmd = parse("connect Users to Orders")
        assert cmd.kind == CommandKind.CONNECT
        assert cmd.from_name == "users"
        assert cmd.to_name == "orders"
        assert cmd.connector_label is None

    @pytest.mark.parametrize("kw", ["with", "as", "label"])
    def test_connect_with_label(self, kw):
        cmd = parse(f"connect Users to Orders {kw} has many")
        assert cmd.to_name == "orders"
        assert cmd.connector_label == "has many"

    def test_label_connector(self):
        cmd = parse("label Users to Orders as owns")
        assert cmd.kind == CommandKind.LABEL_CONNECTOR
        assert cmd.from_name == "users"
        assert cmd.to_name == "orders"
        assert cmd.connector_label == "owns"


class TestMovement:
    def test_move_relative(self):
        cmd = parse("move Orders right of Users")
        assert cmd.kind == CommandKind.MOVE_RELATIVE
        assert cmd.label == "orders"
        assert cmd.direction == "right"
        assert cmd.relative_to == "users"

    def test_up_is_a_nudge_not_a_relative_move(self):
        cmd = parse("move Orders up")
        assert cmd.kind == CommandKind.MOVE_NUDGE
        assert cmd.direction == "up"
        assert cmd.amount is None

    @pytest.mark.parametrize("verb", ["move", "nudge", "push"])
    def test_nudge_with_amount(self, verb):
        cmd = parse(f"{verb} Orders left 100")
        assert cmd.kind == CommandKind.MOVE_NUDGE
        assert cmd.label == "orders"
        assert cmd.direction == "left"
        assert cmd.amount == "100"

    def test_bare_left_is_a_nudge(self):
        assert parse("move Orders left").kind == CommandKind.MOVE_NUDGE


class TestRenameAndUnknown:
    def test_rename(self):
        cmd = parse("rename Users to Accounts")
        assert cmd.kind == CommandKind.RENAME
        assert cmd.from_name == "users"
        assert cmd.to_name == "accounts"

    @pytest.mark.parametrize("text", ["", "   ", "blorp", "make coffee", "connect Users"])
    def test_unknown(self, text):
        rule, cmd = match(text)
        assert rule is None
        assert cmd.kind == CommandKind.UNKNOWN
        assert cmd.label is None


def test_rule_names_are_unique():
    names = [r.name for r in RULES]
    assert len(names) == len(set(names))
