# cosmosql/core/Editor.py
"""cosmosql.core.Editor.py
============================
The foreground loop of the console: read a key, apply it, fit the result to the
terminal, redraw, repeat.

Each iteration:

1. reads the viewport from the live terminal size,
2. applies the pending key with `LineEditor.handle_key`,
3. acts on the returned `Action` (leave, show a notice, or hand the joined
   query to `QueryRunner` and come back with the buffer untouched),
4. reconciles buffer and cursor with the viewport,
5. redraws the whole screen via `DrawScreen.render` and `Console.draw`,
6. blocks on the next key.

The very first iteration runs with an empty key so the screen is drawn before
anything is typed.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from cosmosql.core.LineEditor import (
    Action,
    Cursor,
    KeyEvent,
    Viewport,
    build_query,
    handle_key,
    reconcile,
)
from cosmosql.ui.DrawScreen import render
from cosmosql.utils.logging_config import logger


if TYPE_CHECKING:
    from cosmosql.core.QueryRunner import QueryRunner
    from cosmosql.ui.Console import Console


SEED_QUERY = "select * from c"


class Editor:
    """Interactive query editor bound to one console.

    Attributes:
        console: Terminal surface.
        runner: Execution loop used for Ctrl+E.
        header: The two fixed status lines.
        buffer: Current lines.
        cursor: Current cursor.
    """

    def __init__(
        self,
        console: "Console",
        runner: "QueryRunner",
        header: Sequence[str],
        initial_text: str = SEED_QUERY,
    ) -> None:
        self.console = console
        self.runner = runner
        self.header = tuple(header)
        self.buffer: list[str] = [initial_text]
        self.cursor = Cursor(0, 0)
        self.running = False

    def viewport(self) -> Viewport:
        width, height = self.console.size()
        return Viewport(width, height)

    def step(self, event: KeyEvent) -> bool:
        """Processes one key and redraws.

        Returns:
            bool: False once the user asked to leave.
        """
        viewport = self.viewport()
        result = handle_key(event, self.buffer, self.cursor, viewport)
        self.buffer, self.cursor = result.buffer, result.cursor

        if result.action is Action.EXIT:
            logger.info("Editor: exit requested")
            return False
        if result.action is Action.NOTICE:
            self.console.show_notice(result.notice or "")
            self.console.clear()
        elif result.action is Action.EXECUTE:
            self.execute()

        if result.action is not Action.CONTINUE:
            # The terminal may have been resized while away from the editor.
            viewport = self.viewport()

        self.buffer, self.cursor = reconcile(self.buffer, self.cursor, viewport)
        self.console.draw(render(self.buffer, self.cursor, viewport, self.header))
        return True

    def execute(self) -> None:
        query = build_query(self.buffer)
        self.console.move(0, len(self.buffer) + len(self.header))
        self.runner.run(query)

    def run(self, first_event: Optional[KeyEvent] = None) -> None:
        """The main loop; returns when ESC is pressed."""
        logger.info("Editor main loop started.")
        self.running = True
        self.console.clear()
        event = first_event or KeyEvent.none()
        try:
            while self.step(event):
                event = self.console.read_key()
        finally:
            self.running = False
            logger.info("Editor main loop finished.")
