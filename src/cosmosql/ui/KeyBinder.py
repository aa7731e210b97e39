# cosmosql/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates raw curses input into the logical `KeyEvent`s consumed by the line editor.

curses delivers three kinds of values from `get_wch()`:
- `str` for characters, including control characters (Ctrl+E arrives as "\\x05");
- `int` for keys curses has already decoded (`KEY_LEFT`, `KEY_DC`, ...);
- a lone "\\x1b" that is either the ESC key or the start of an escape sequence
  curses did not decode itself (common on TTYs and some terminal emulators).

Escape sequences are drained without blocking and looked up in
`ESCAPE_SEQUENCE_MAP`; a lone ESC becomes `Key.ESCAPE`.

Printable characters are accepted only when they occupy exactly one terminal
cell (checked with `wcwidth`), which keeps the editor's one-column-per-character
geometry true on screen.
"""

import curses
import logging
import re
from typing import Optional, Union

from wcwidth import wcwidth

from cosmosql.core.LineEditor import Key, KeyEvent
from cosmosql.utils.logging_config import KEY_LOGGER


RawKey = Union[str, int]


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Reads keys from a curses window and decodes them into `KeyEvent`s.

    Attributes:
        stdscr: The curses window keys are read from.
        code_map (dict): curses key codes -> logical keys.
    """

    # Keys do NOT include the leading ESC (0x1B); `read()` strips it.
    ESCAPE_SEQUENCE_MAP: dict[str, Key] = {
        # Arrows (CSI and SS3)
        "[A": Key.UP, "[B": Key.DOWN, "[C": Key.RIGHT, "[D": Key.LEFT,
        "OA": Key.UP, "OB": Key.DOWN, "OC": Key.RIGHT, "OD": Key.LEFT,

        # Home/End (CSI/SS3 and tilde variants)
        "[H": Key.HOME, "[F": Key.END, "OH": Key.HOME, "OF": Key.END,
        "[1~": Key.HOME, "[4~": Key.END, "[7~": Key.HOME, "[8~": Key.END,

        # Insert/Delete/PageUp/PageDown (~ style)
        "[2~": Key.INSERT, "[3~": Key.DELETE, "[5~": Key.PAGE_UP, "[6~": Key.PAGE_DOWN,
    }

    CHAR_MAP: dict[str, Key] = {
        "\x08": Key.BACKSPACE,
        "\x7f": Key.BACKSPACE,
        "\n": Key.ENTER,
        "\r": Key.ENTER,
        "\t": Key.TAB,
    }

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self.code_map = self._build_code_map()

    @staticmethod
    def _build_code_map() -> dict[int, Key]:
        """Maps the curses key constants to logical keys."""
        return {
            curses.KEY_BACKSPACE: Key.BACKSPACE,
            curses.KEY_DC: Key.DELETE,
            curses.KEY_ENTER: Key.ENTER,
            curses.KEY_LEFT: Key.LEFT,
            curses.KEY_RIGHT: Key.RIGHT,
            curses.KEY_UP: Key.UP,
            curses.KEY_DOWN: Key.DOWN,
            curses.KEY_HOME: Key.HOME,
            getattr(curses, "KEY_END", curses.KEY_LL): Key.END,
            curses.KEY_IC: Key.INSERT,
            curses.KEY_PPAGE: Key.PAGE_UP,
            curses.KEY_NPAGE: Key.PAGE_DOWN,
        }

    def decode(self, raw: RawKey) -> KeyEvent:
        """Turns one raw value from `get_wch()` into a `KeyEvent`.

        ESC is decoded as `Key.ESCAPE` here; sequence handling lives in `read()`.
        """
        if isinstance(raw, int):
            return KeyEvent(self.code_map.get(raw, Key.NONE))

        if not raw:
            return KeyEvent.none()

        if raw == "\x1b":
            return KeyEvent(Key.ESCAPE)
        if raw in self.CHAR_MAP:
            return KeyEvent(self.CHAR_MAP[raw])

        code = ord(raw[0])
        if 1 <= code <= 26:
            # Ctrl+A .. Ctrl+Z arrive as 0x01 .. 0x1A.
            return KeyEvent.ctrl_of(chr(ord("a") + code - 1))

        if len(raw) == 1 and wcwidth(raw) == 1:
            return KeyEvent.of_char(raw)

        logging.debug("KeyBinder.decode: dropping non-printable input %r", raw)
        return KeyEvent.none()

    def decode_escape_sequence(self, seq: str) -> KeyEvent:
        """Decodes the characters that followed an ESC."""
        if not seq:
            return KeyEvent(Key.ESCAPE)

        # Some terminals deliver ESC-prefixed sequences: strip any leading ESC.
        if seq[0] == "\x1b":
            seq = seq[1:]

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if mapped is None:
            # Tolerant cleanup: keep only tokens relevant to term sequences.
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

        if mapped is None:
            logging.warning("KeyBinder: unknown escape sequence: ESC + %r", seq)
            return KeyEvent.none()
        return KeyEvent(mapped)

    def _drain_pending(self, window: "curses.window") -> str:
        seq = ""
        window.nodelay(True)
        try:
            while True:
                try:
                    nx = window.get_wch()
                except curses.error:
                    break
                if isinstance(nx, str):
                    seq += nx
                else:
                    # Extended code inside a sequence; keep a marker the regex strips.
                    seq += f"<{nx}>"
        finally:
            window.nodelay(False)
        return seq

    def read(self, window: Optional["curses.window"] = None) -> KeyEvent:
        """Blocks until one key is available and returns it decoded.

        Returns:
            KeyEvent: `Key.NONE` for resize notifications, curses errors and
            anything that is not a key the editor knows about.
        """
        target = window or self.stdscr
        try:
            raw = target.get_wch()
        except curses.error:
            return KeyEvent.none()

        if raw == "\x1b":
            event = self.decode_escape_sequence(self._drain_pending(target))
        else:
            event = self.decode(raw)

        KEY_LOGGER.debug("raw=%r -> %s", raw, event)
        return event
