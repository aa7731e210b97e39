# cosmosql/ui/DrawScreen.py
"""DrawScreen.py
========================
Pure rendering of the editor screen into a list of draw commands.

`render()` never touches the terminal. It describes one full redraw:

- the two fixed header lines, in the "header" color;
- every viewport row, in the "text" color, holding the buffer line padded or
  cut to exactly `width` columns, or blanks when the buffer has no such line;
- a "more ↓" marker in the "marker" color at the bottom-right when the buffer
  holds more lines than the viewport shows;
- finally, the cursor placement at `(col, row + HEADER_ROWS)`.

`cosmosql.ui.Console.Console.draw` executes the commands against curses.
A full redraw on every iteration is the whole policy; there is no diffing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from cosmosql.core.LineEditor import HEADER_ROWS, Cursor, Viewport


MORE_MARKER = "more ↓"


@dataclass(frozen=True)
class DrawText:
    col: int
    row: int
    text: str
    color: str


@dataclass(frozen=True)
class PlaceCursor:
    col: int
    row: int


DrawCommand = Union[DrawText, PlaceCursor]


def fit(text: str, width: int) -> str:
    """Pads or truncates `text` to exactly `width` columns."""
    if width <= 0:
        return ""
    return text.ljust(width)[:width]


def render(
    buffer: Sequence[str],
    cursor: Cursor,
    viewport: Viewport,
    header: Sequence[str],
) -> list[DrawCommand]:
    """Builds the draw commands for one frame of the editor.

    Args:
        buffer: Editor lines.
        cursor: Editor cursor (already reconciled to the viewport).
        viewport: Terminal geometry for this frame.
        header: The fixed status lines; exactly `HEADER_ROWS` are drawn.

    Returns:
        list[DrawCommand]: Commands in drawing order, ending with `PlaceCursor`.
    """
    width = viewport.width
    commands: list[DrawCommand] = []

    for index in range(HEADER_ROWS):
        text = header[index] if index < len(header) else ""
        commands.append(DrawText(0, index, fit(text, width), "header"))

    last_row = viewport.max_visible_row
    for index in range(last_row + 1):
        text = buffer[index] if index < len(buffer) else ""
        commands.append(DrawText(0, index + HEADER_ROWS, fit(text, width), "text"))

    if len(buffer) - 1 > last_row and last_row >= 0:
        marker_col = max(0, width - len(MORE_MARKER) - 1)
        commands.append(DrawText(marker_col, last_row + HEADER_ROWS, MORE_MARKER, "marker"))

    commands.append(PlaceCursor(cursor.col, cursor.row + HEADER_ROWS))
    return commands
