# cosmosql/ui/Console.py
"""Console.py
========================
The terminal surface of the cosmosql console, implemented on curses.

Console is the only object that writes to the screen. It offers the small set
of primitives the editor and the execution loop need:

- live window size and cursor position,
- cursor positioning, plain writes, and colored write spans,
- screen clearing and refresh,
- blocking key reads (decoded by `KeyBinder`),
- execution of the draw commands produced by `DrawScreen.render`.

Colors are addressed by role name ("header", "text", "error", ...). The
current attribute is saved and restored around every colored span, so a
spinner frame drawn in the middle of a span cannot leak its color.

Console does not lock. Callers that share the screen with the busy indicator
hold `BusyState.lock` around their multi-step writes.
"""

import contextlib
import curses
import logging
from typing import Iterator, Mapping, Optional, Sequence

from cosmosql.core.LineEditor import Key, KeyEvent
from cosmosql.ui.DrawScreen import DrawCommand, DrawText, PlaceCursor
from cosmosql.ui.KeyBinder import KeyBinder


## ================= class Console ==============================
class Console:
    """curses-backed terminal surface.

    Attributes:
        stdscr: The curses window everything is drawn on.
        keybinder: Decoder for key reads.
        color_names: Role name -> curses color name (e.g. "green").
        colors: Role name -> curses attribute, filled by `init_colors`.
    """

    def __init__(
        self,
        stdscr: "curses.window",
        color_names: Optional[Mapping[str, str]] = None,
        keybinder: Optional[KeyBinder] = None,
    ) -> None:
        self.stdscr = stdscr
        self.keybinder = keybinder or KeyBinder(stdscr)
        self.color_names: dict[str, str] = dict(color_names or {})
        self.colors: dict[str, int] = {}
        self._attr: int = 0

    # --------------------- colors ---------------------
    def init_colors(self) -> None:
        """Initializes one curses color pair per role, with monochrome fallback."""
        self.colors = {}
        if not curses.has_colors():
            logging.warning("Terminal has no color support. Using monochrome attributes.")
            for role in self.color_names:
                self.colors[role] = curses.A_BOLD if role in ("error", "marker") else curses.A_NORMAL
            return

        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK

        for pair_number, (role, name) in enumerate(sorted(self.color_names.items()), start=1):
            foreground = getattr(curses, f"COLOR_{str(name).upper()}", None)
            if foreground is None:
                logging.warning("Unknown color %r for role %r, using white.", name, role)
                foreground = curses.COLOR_WHITE
            try:
                curses.init_pair(pair_number, foreground, background)
                self.colors[role] = curses.color_pair(pair_number)
            except curses.error as exc:
                logging.warning("init_pair failed for %r (%s), falling back to A_NORMAL", role, exc)
                self.colors[role] = curses.A_NORMAL

    @contextlib.contextmanager
    def color(self, role: str) -> Iterator[None]:
        """Writes inside the block use the color of `role`; the previous attribute is restored."""
        previous = self._attr
        self._set_attr(self.colors.get(role, previous))
        try:
            yield
        finally:
            self._set_attr(previous)

    def _set_attr(self, attr: int) -> None:
        self._attr = attr
        self.stdscr.attrset(attr)

    # --------------------- geometry ---------------------
    def size(self) -> tuple[int, int]:
        """Returns the live (width, height) of the window."""
        height, width = self.stdscr.getmaxyx()
        return width, height

    def cursor_position(self) -> tuple[int, int]:
        """Returns the current (col, row) of the cursor."""
        row, col = self.stdscr.getyx()
        return col, row

    def move(self, col: int, row: int) -> None:
        try:
            self.stdscr.move(row, col)
        except curses.error:
            logging.debug("Console.move(%d, %d) outside the window", col, row)

    # --------------------- output ---------------------
    def write(self, text: str) -> None:
        try:
            self.stdscr.addstr(text)
        except curses.error:
            # Writing the bottom-right cell raises after the text is drawn.
            pass

    def say(self, text: str, role: Optional[str] = None) -> None:
        """Writes `text` (optionally colored) at the cursor and refreshes."""
        if role is None:
            self.write(text)
        else:
            with self.color(role):
                self.write(text)
        self.refresh()

    def draw_in_place(self, glyph: str) -> None:
        """Writes `glyph` at the cursor and puts the cursor back."""
        col, row = self.cursor_position()
        self.write(glyph)
        self.move(col, row)
        self.refresh()

    def clear(self) -> None:
        self.stdscr.erase()
        self.stdscr.move(0, 0)
        self.refresh()

    def refresh(self) -> None:
        try:
            self.stdscr.refresh()
        except curses.error as e:
            logging.error("Curses refresh error: %s", e)

    @contextlib.contextmanager
    def scrolling(self) -> Iterator[None]:
        """Lets output scroll the window (used while streaming results)."""
        self.stdscr.scrollok(True)
        try:
            yield
        finally:
            self.stdscr.scrollok(False)

    def draw(self, commands: Sequence[DrawCommand]) -> None:
        """Executes the commands produced by `DrawScreen.render`."""
        for command in commands:
            if isinstance(command, DrawText):
                self.move(command.col, command.row)
                with self.color(command.color):
                    self.write(command.text)
            elif isinstance(command, PlaceCursor):
                self.move(command.col, command.row)
        self.refresh()

    # --------------------- input ---------------------
    def read_key(self) -> KeyEvent:
        return self.keybinder.read()

    def wait_key(self) -> KeyEvent:
        """Blocks until a real key arrives; resizes and read errors are skipped."""
        event = self.read_key()
        while event.key is Key.NONE:
            event = self.read_key()
        return event

    def show_notice(self, message: str) -> KeyEvent:
        """Clears the screen, shows `message` and waits for any key."""
        self.clear()
        self.write(message)
        self.refresh()
        return self.wait_key()
