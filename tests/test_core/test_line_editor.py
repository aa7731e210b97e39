# tests/test_core/test_line_editor.py
"""Unit tests for the line-buffer editing engine.
=================================================

Covers every key transition of `cosmosql.core.LineEditor.handle_key`,
including the boundary cases of Backspace and Delete, the viewport limits of
Tab, Enter and character insertion, and `reconcile` after a resize.
"""

import pytest

from cosmosql.core.LineEditor import (
    COPY_PASTE_NOTICE,
    INSERT_MODE_NOTICE,
    Action,
    Cursor,
    Key,
    KeyEvent,
    Viewport,
    build_query,
    handle_key,
    reconcile,
)


def press(key: Key, buffer, cursor, viewport):
    return handle_key(KeyEvent(key), buffer, cursor, viewport)


def type_char(char: str, buffer, cursor, viewport):
    return handle_key(KeyEvent.of_char(char), buffer, cursor, viewport)


class TestBackspace:
    def test_deletes_character_left_of_cursor(self, viewport: Viewport) -> None:
        result = press(Key.BACKSPACE, ["abcd"], Cursor(0, 2), viewport)
        assert result.buffer == ["acd"]
        assert result.cursor == Cursor(0, 1)
        assert result.action is Action.CONTINUE

    def test_removes_empty_previous_line(self, viewport: Viewport) -> None:
        result = press(Key.BACKSPACE, ["x", "", "abc"], Cursor(2, 0), viewport)
        assert result.buffer == ["x", "abc"]
        assert result.cursor == Cursor(1, 0)

    def test_merges_into_non_empty_previous_line(self, viewport: Viewport) -> None:
        result = press(Key.BACKSPACE, ["select", " * from c"], Cursor(1, 0), viewport)
        assert result.buffer == ["select * from c"]
        assert result.cursor == Cursor(0, 6)

    def test_merges_empty_current_line(self, viewport: Viewport) -> None:
        result = press(Key.BACKSPACE, ["abc", ""], Cursor(1, 0), viewport)
        assert result.buffer == ["abc"]
        assert result.cursor == Cursor(0, 3)

    def test_top_left_is_noop(self, viewport: Viewport) -> None:
        result = press(Key.BACKSPACE, ["abc", "def"], Cursor(0, 0), viewport)
        assert result.buffer == ["abc", "def"]
        assert result.cursor == Cursor(0, 0)

    def test_input_buffer_is_not_mutated(self, viewport: Viewport) -> None:
        buffer = ["abc"]
        press(Key.BACKSPACE, buffer, Cursor(0, 3), viewport)
        assert buffer == ["abc"]


class TestDelete:
    def test_deletes_character_under_cursor(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, ["abcd"], Cursor(0, 1), viewport)
        assert result.buffer == ["acd"]
        assert result.cursor == Cursor(0, 1)

    def test_removes_empty_line_that_is_not_last(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, ["a", "", "b"], Cursor(1, 0), viewport)
        assert result.buffer == ["a", "b"]
        assert result.cursor == Cursor(1, 0)

    def test_keeps_empty_last_line(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, ["a", ""], Cursor(1, 0), viewport)
        assert result.buffer == ["a", ""]

    def test_single_empty_line_stays(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, [""], Cursor(0, 0), viewport)
        assert result.buffer == [""]

    def test_joins_next_line_at_end_of_line(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, ["abc", "def"], Cursor(0, 3), viewport)
        assert result.buffer == ["abcdef"]
        assert result.cursor == Cursor(0, 3)

    def test_end_of_last_line_is_noop(self, viewport: Viewport) -> None:
        result = press(Key.DELETE, ["abc"], Cursor(0, 3), viewport)
        assert result.buffer == ["abc"]
        assert result.cursor == Cursor(0, 3)


class TestArrows:
    def test_left_and_right_are_clamped(self, viewport: Viewport) -> None:
        assert press(Key.LEFT, ["ab"], Cursor(0, 0), viewport).cursor == Cursor(0, 0)
        assert press(Key.LEFT, ["ab"], Cursor(0, 2), viewport).cursor == Cursor(0, 1)
        assert press(Key.RIGHT, ["ab"], Cursor(0, 1), viewport).cursor == Cursor(0, 2)
        assert press(Key.RIGHT, ["ab"], Cursor(0, 2), viewport).cursor == Cursor(0, 2)

    def test_up_clamps_column_to_shorter_line(self, viewport: Viewport) -> None:
        result = press(Key.UP, ["ab", "abcdef"], Cursor(1, 5), viewport)
        assert result.cursor == Cursor(0, 2)

    def test_up_on_first_row_is_noop(self, viewport: Viewport) -> None:
        assert press(Key.UP, ["ab"], Cursor(0, 1), viewport).cursor == Cursor(0, 1)

    def test_down_keeps_column_when_it_fits(self, viewport: Viewport) -> None:
        result = press(Key.DOWN, ["abc", "abcdef"], Cursor(0, 2), viewport)
        assert result.cursor == Cursor(1, 2)

    def test_down_on_last_line_is_noop(self, viewport: Viewport) -> None:
        assert press(Key.DOWN, ["a", "b"], Cursor(1, 0), viewport).cursor == Cursor(1, 0)

    def test_down_stops_at_last_visible_row(self, small_viewport: Viewport) -> None:
        # max_visible_row is 3; rows 4 and 5 exist but are not visible.
        buffer = ["0", "1", "2", "3", "4", "5"]
        result = press(Key.DOWN, buffer, Cursor(3, 0), small_viewport)
        assert result.cursor == Cursor(3, 0)

    def test_home_and_end(self, viewport: Viewport) -> None:
        assert press(Key.HOME, ["abc"], Cursor(0, 2), viewport).cursor == Cursor(0, 0)
        assert press(Key.END, ["abc"], Cursor(0, 0), viewport).cursor == Cursor(0, 3)


class TestTab:
    def test_inserts_four_spaces(self, viewport: Viewport) -> None:
        result = press(Key.TAB, ["ab"], Cursor(0, 1), viewport)
        assert result.buffer == ["a    b"]
        assert result.cursor == Cursor(0, 5)

    def test_fills_line_exactly_to_last_visible_column(self, small_viewport: Viewport) -> None:
        line = "x" * 15
        result = press(Key.TAB, [line], Cursor(0, 15), small_viewport)
        assert result.buffer == [line + "    "]
        assert result.cursor == Cursor(0, 19)

    def test_dropped_when_line_would_overflow(self, small_viewport: Viewport) -> None:
        line = "x" * 16
        result = press(Key.TAB, [line], Cursor(0, 0), small_viewport)
        assert result.buffer == [line]
        assert result.cursor == Cursor(0, 0)


class TestEnter:
    def test_splits_line_at_cursor(self, viewport: Viewport) -> None:
        result = press(Key.ENTER, ["select * from c"], Cursor(0, 8), viewport)
        assert result.buffer == ["select *", " from c"]
        assert result.cursor == Cursor(1, 0)

    def test_at_end_of_line_appends_empty_line(self, viewport: Viewport) -> None:
        result = press(Key.ENTER, ["abc", "def"], Cursor(0, 3), viewport)
        assert result.buffer == ["abc", "", "def"]
        assert result.cursor == Cursor(1, 0)

    def test_at_start_of_line_pushes_line_down(self, viewport: Viewport) -> None:
        result = press(Key.ENTER, ["abc"], Cursor(0, 0), viewport)
        assert result.buffer == ["", "abc"]
        assert result.cursor == Cursor(1, 0)

    def test_noop_on_last_visible_row(self, small_viewport: Viewport) -> None:
        buffer = ["0", "1", "2", "abc"]
        result = press(Key.ENTER, buffer, Cursor(3, 1), small_viewport)
        assert result.buffer == buffer
        assert result.cursor == Cursor(3, 1)


class TestCharacters:
    def test_inserts_at_cursor(self, viewport: Viewport) -> None:
        result = type_char("X", ["abc"], Cursor(0, 1), viewport)
        assert result.buffer == ["aXbc"]
        assert result.cursor == Cursor(0, 2)

    def test_dropped_at_last_visible_column(self, small_viewport: Viewport) -> None:
        line = "x" * 19
        result = type_char("y", [line], Cursor(0, 19), small_viewport)
        assert result.buffer == [line]
        assert result.cursor == Cursor(0, 19)

    def test_dropped_when_full_line_would_overflow(self, small_viewport: Viewport) -> None:
        line = "x" * 19
        result = type_char("y", [line], Cursor(0, 5), small_viewport)
        assert result.buffer == [line]

    def test_non_printable_character_is_ignored(self, viewport: Viewport) -> None:
        result = type_char("\x07", ["abc"], Cursor(0, 1), viewport)
        assert result.buffer == ["abc"]
        assert result.cursor == Cursor(0, 1)


class TestActions:
    def test_escape_exits(self, viewport: Viewport) -> None:
        assert press(Key.ESCAPE, ["abc"], Cursor(0, 0), viewport).action is Action.EXIT

    def test_ctrl_e_executes_without_mutation(self, viewport: Viewport) -> None:
        result = handle_key(KeyEvent.ctrl_of("e"), ["a", "b"], Cursor(1, 1), viewport)
        assert result.action is Action.EXECUTE
        assert result.buffer == ["a", "b"]
        assert result.cursor == Cursor(1, 1)

    @pytest.mark.parametrize("letter", ["x", "c", "v"])
    def test_clipboard_chords_show_notice(self, letter: str, viewport: Viewport) -> None:
        result = handle_key(KeyEvent.ctrl_of(letter), ["abc"], Cursor(0, 2), viewport)
        assert result.action is Action.NOTICE
        assert result.notice == COPY_PASTE_NOTICE
        assert result.buffer == ["abc"]

    def test_insert_shows_notice(self, viewport: Viewport) -> None:
        result = press(Key.INSERT, ["abc"], Cursor(0, 2), viewport)
        assert result.action is Action.NOTICE
        assert result.notice == INSERT_MODE_NOTICE

    @pytest.mark.parametrize("key", [Key.PAGE_UP, Key.PAGE_DOWN, Key.NONE])
    def test_ignored_keys(self, key: Key, viewport: Viewport) -> None:
        result = press(key, ["abc"], Cursor(0, 2), viewport)
        assert result == (["abc"], Cursor(0, 2), Action.CONTINUE, None)

    def test_other_ctrl_chords_do_nothing(self, viewport: Viewport) -> None:
        result = handle_key(KeyEvent.ctrl_of("q"), ["abc"], Cursor(0, 2), viewport)
        assert result.action is Action.CONTINUE
        assert result.buffer == ["abc"]


class TestReconcile:
    def test_truncates_only_current_line(self) -> None:
        buffer = ["a" * 30, "b" * 30, "c" * 30]
        lines, cursor = reconcile(buffer, Cursor(1, 25), Viewport(20, 24))
        assert lines == ["a" * 30, "b" * 19, "c" * 30]
        assert cursor == Cursor(1, 19)

    def test_clamps_row_to_last_visible_row(self) -> None:
        buffer = [str(i) for i in range(10)]
        lines, cursor = reconcile(buffer, Cursor(8, 1), Viewport(80, 6))
        assert lines[8] == "8"
        assert cursor == Cursor(3, 1)

    def test_no_change_when_everything_fits(self, viewport: Viewport) -> None:
        lines, cursor = reconcile(["abc"], Cursor(0, 3), viewport)
        assert lines == ["abc"]
        assert cursor == Cursor(0, 3)


def test_build_query_joins_lines_with_single_space() -> None:
    assert build_query(["select *", "from c", "where c.id = 1"]) == "select * from c where c.id = 1"
    assert build_query([""]) == ""


def test_viewport_limits() -> None:
    vp = Viewport(80, 24)
    assert vp.max_visible_row == 21
    assert vp.max_visible_col == 79
