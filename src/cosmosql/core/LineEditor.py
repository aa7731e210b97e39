# cosmosql/core/LineEditor.py
"""LineEditor.py
========================
The line-buffer editing engine of the cosmosql console.

This module holds the editing state machine and nothing else: it never touches
the terminal. A key press is turned into a new buffer/cursor pair plus an
`Action` telling the session loop what to do next (keep editing, execute the
query, leave, or show a notice).

Key concepts:
- Buffer: a list of text lines. Always at least one line.
- Cursor: a (row, column) pair; column may equal the line length (append position).
- Viewport: terminal width/height, re-read by the caller on every iteration
  because the terminal can be resized between keystrokes.

The editor is bound to the visible region: Enter never grows the buffer past
the last visible row and characters are never inserted past the last visible
column. There is no scrolling.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional


HEADER_ROWS = 2
TAB_WIDTH = 4

COPY_PASTE_NOTICE = "Use mouse right click actions for copy/paste.\nHit any key to continue..."
INSERT_MODE_NOTICE = "Insert mode is always ON.\nHit any key to continue..."


# ==================== Key events ====================
class Key(enum.Enum):
    """Logical identity of a key press."""

    NONE = "none"
    CHAR = "char"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ENTER = "enter"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    TAB = "tab"
    ESCAPE = "escape"
    INSERT = "insert"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"


@dataclass(frozen=True)
class KeyEvent:
    """One discrete unit of keyboard input.

    Attributes:
        key: Logical key identity.
        char: The literal character for `Key.CHAR` events (lowercase letter
            for Ctrl chords), empty otherwise.
        ctrl: True when the Control modifier was held.
    """

    key: Key
    char: str = ""
    ctrl: bool = False

    @classmethod
    def none(cls) -> "KeyEvent":
        return cls(Key.NONE)

    @classmethod
    def of_char(cls, char: str) -> "KeyEvent":
        return cls(Key.CHAR, char=char)

    @classmethod
    def ctrl_of(cls, letter: str) -> "KeyEvent":
        return cls(Key.CHAR, char=letter.lower(), ctrl=True)


class Action(enum.Enum):
    """What the session loop should do after a key has been handled."""

    CONTINUE = "continue"
    EXECUTE = "execute"
    EXIT = "exit"
    NOTICE = "notice"


# ==================== Geometry ====================
@dataclass(frozen=True)
class Cursor:
    row: int = 0
    col: int = 0


@dataclass(frozen=True)
class Viewport:
    """Terminal dimensions as seen by the editor for one iteration."""

    width: int
    height: int

    @property
    def max_visible_row(self) -> int:
        return self.height - HEADER_ROWS - 1

    @property
    def max_visible_col(self) -> int:
        return self.width - 1


class EditResult(NamedTuple):
    buffer: list[str]
    cursor: Cursor
    action: Action
    notice: Optional[str] = None


# ==================== Key transitions ====================
def _backspace(lines: list[str], row: int, col: int) -> tuple[int, int]:
    if col > 0:
        line = lines[row]
        lines[row] = line[: col - 1] + line[col:]
        return row, col - 1
    if row == 0:
        return row, col
    if lines[row - 1] == "":
        # The empty predecessor goes away; the current line slides up intact.
        del lines[row - 1]
        return row - 1, col
    joined_at = len(lines[row - 1])
    lines[row - 1] += lines.pop(row)
    return row - 1, joined_at


def _delete(lines: list[str], row: int, col: int) -> tuple[int, int]:
    line = lines[row]
    is_last = row == len(lines) - 1
    if col < len(line):
        lines[row] = line[:col] + line[col + 1 :]
    elif line == "":
        if not is_last:
            del lines[row]
    elif not is_last:
        lines[row] = line + lines.pop(row + 1)
    return row, col


def _vertical(lines: list[str], row: int, col: int, step: int, viewport: Viewport) -> tuple[int, int]:
    upper = min(len(lines) - 1, viewport.max_visible_row)
    new_row = row + step
    if new_row < 0 or new_row > upper:
        return row, col
    return new_row, min(col, len(lines[new_row]))


def _insert(lines: list[str], row: int, col: int, text: str) -> tuple[int, int]:
    line = lines[row]
    lines[row] = line[:col] + text + line[col:]
    return row, col + len(text)


def handle_key(
    event: KeyEvent, buffer: list[str], cursor: Cursor, viewport: Viewport
) -> EditResult:
    """Applies one key event to the buffer.

    The input buffer is never mutated; a new list is returned. The function
    performs no I/O.

    Args:
        event: The key to apply.
        buffer: Current lines (at least one).
        cursor: Current cursor; must satisfy the buffer invariants.
        viewport: Terminal geometry for this iteration.

    Returns:
        EditResult: The new buffer, the new cursor, the resulting `Action`
        and, for `Action.NOTICE`, the message to show.
    """
    lines = list(buffer)
    row, col = cursor.row, cursor.col
    key = event.key

    if key is Key.BACKSPACE:
        row, col = _backspace(lines, row, col)
    elif key is Key.DELETE:
        row, col = _delete(lines, row, col)
    elif key is Key.LEFT:
        col = max(0, col - 1)
    elif key is Key.RIGHT:
        col = min(len(lines[row]), col + 1)
    elif key is Key.UP:
        row, col = _vertical(lines, row, col, -1, viewport)
    elif key is Key.DOWN:
        row, col = _vertical(lines, row, col, 1, viewport)
    elif key is Key.HOME:
        col = 0
    elif key is Key.END:
        col = len(lines[row])
    elif key is Key.TAB:
        if len(lines[row]) + TAB_WIDTH <= viewport.max_visible_col:
            row, col = _insert(lines, row, col, " " * TAB_WIDTH)
    elif key is Key.ENTER:
        if row < viewport.max_visible_row:
            line = lines[row]
            lines[row] = line[:col]
            lines.insert(row + 1, line[col:])
            row, col = row + 1, 0
    elif key is Key.ESCAPE:
        return EditResult(lines, Cursor(row, col), Action.EXIT)
    elif key is Key.INSERT:
        return EditResult(lines, Cursor(row, col), Action.NOTICE, INSERT_MODE_NOTICE)
    elif key is Key.CHAR and event.ctrl:
        if event.char == "e":
            return EditResult(lines, Cursor(row, col), Action.EXECUTE)
        if event.char in ("x", "c", "v"):
            return EditResult(lines, Cursor(row, col), Action.NOTICE, COPY_PASTE_NOTICE)
        logging.debug("handle_key: ignoring ctrl+%s", event.char)
    elif key is Key.CHAR:
        if (
            len(event.char) == 1
            and event.char.isprintable()
            and col < viewport.max_visible_col
            and len(lines[row]) < viewport.max_visible_col
        ):
            row, col = _insert(lines, row, col, event.char)
    # PAGE_UP, PAGE_DOWN and NONE fall through untouched.

    return EditResult(lines, Cursor(row, col), Action.CONTINUE)


def reconcile(buffer: list[str], cursor: Cursor, viewport: Viewport) -> tuple[list[str], Cursor]:
    """Fits the buffer and cursor to the (possibly resized) viewport.

    Only the current line is truncated, and only to `width - 1` characters.
    Other lines are left alone even when they no longer fit.
    """
    lines = list(buffer)
    row = min(cursor.row, len(lines) - 1)
    lines[row] = lines[row][: max(0, viewport.width - 1)]
    col = min(cursor.col, viewport.max_visible_col, len(lines[row]))
    row = min(row, viewport.max_visible_row)
    col = min(col, len(lines[row]))
    return lines, Cursor(max(0, row), max(0, col))


def build_query(buffer: list[str]) -> str:
    """Joins the buffer lines into one query string (single space separator)."""
    return " ".join(buffer)
