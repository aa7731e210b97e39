# cosmosql/core/QueryRunner.py
"""QueryRunner.py
========================
The paged execution loop.

Given a finished query string, `QueryRunner.run` opens one page cursor, then
repeatedly:

1. starts the busy indicator and prints the "Fetching" line,
2. fetches one page (the only long blocking call),
3. stops the indicator and prints the page, pretty-printed, plus the query
   metrics when they were requested,
4. asks the user to continue (any key) or abort (ESC), or, after the last
   page, to return to the editor.

A failed page, a malformed payload or any other error raised while the loop
runs is shown to the user (message cut to the first 1000 characters), one key
is awaited and control returns to the editor. Nothing is retried here. On
every exit path the cursor is closed, the indicator stopped and the screen
cleared.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable, Optional

from cosmosql.core.BusyIndicator import BusyIndicator, BusyState
from cosmosql.core.LineEditor import Key
from cosmosql.core.Paging import Page, PageSource
from cosmosql.utils.utils import ERROR_DISPLAY_LIMIT, find_labeled, pretty_json, truncate_message


if TYPE_CHECKING:
    from cosmosql.ui.Console import Console


MORE_PROMPT = "\nPress any key to fetch more data, ESC to go back to editor"
DONE_PROMPT = "\nQuery completed. Press any key to return to the editor"
ERROR_PROMPT = "\nPress any key to return to the editor"


class RunOutcome(enum.Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"


# ==================== QueryRunner Class ====================
class QueryRunner:
    """Streams the pages of one query at a time to the console.

    Attributes:
        console: Terminal surface, shared with the busy indicator.
        source: Where pages come from.
        metrics: When True, query metrics are printed after every page.
        state: Busy flag and console lock owned by this runner.
        indicator: The spinner shown while a fetch is in flight.
    """

    def __init__(
        self,
        console: "Console",
        source: PageSource,
        metrics: bool = False,
        pretty_printer: Callable[[str], str] = pretty_json,
    ) -> None:
        self.console = console
        self.source = source
        self.metrics = metrics
        self.pretty_printer = pretty_printer
        self.state = BusyState()
        self.indicator = BusyIndicator(console, self.state)

    def _say(self, text: str, role: Optional[str] = None) -> None:
        with self.state.lock:
            self.console.say(text, role)

    def run(self, query: str) -> RunOutcome:
        """Executes `query` page by page until exhausted, aborted or failed."""
        logging.info("QueryRunner: executing query (%d chars)", len(query))
        outcome = RunOutcome.COMPLETED
        pages = 0
        try:
            with self.console.scrolling():
                try:
                    with self.source.open(query) as cursor:
                        while cursor.has_more:
                            self.indicator.start()
                            self._say(f"...Fetching (max:{self.source.page_size})...", "fetching")

                            page = cursor.fetch()
                            self.indicator.stop()
                            if not page.ok:
                                outcome = RunOutcome.FAILED
                                logging.error("QueryRunner: page %d failed: %s", pages + 1, page.error)
                                self._show_error(page.error or "Unknown error")
                                self.console.wait_key()
                                break

                            pages += 1
                            self._show_page(page)

                            if cursor.has_more:
                                self._say(MORE_PROMPT, "prompt")
                                if self.console.wait_key().key is Key.ESCAPE:
                                    logging.info("QueryRunner: aborted by user after %d page(s)", pages)
                                    outcome = RunOutcome.ABORTED
                                    break
                            else:
                                self._say(DONE_PROMPT, "prompt")
                                self.console.wait_key()
                except Exception as exc:
                    outcome = RunOutcome.FAILED
                    self.indicator.stop()
                    logging.error("QueryRunner: query failed after %d page(s): %s", pages, exc, exc_info=True)
                    self._show_error(str(exc))
                    self.console.wait_key()
        finally:
            self.indicator.stop()
            self.console.clear()

        logging.info("QueryRunner: %s after %d page(s)", outcome.value, pages)
        return outcome

    def _show_page(self, page: Page) -> None:
        # Parsing runs before any output, so a malformed page prints nothing.
        beautified = self.pretty_printer(page.content)
        width, _ = self.console.size()
        separator = "-" * max(0, width - 1)
        self._say(f"\n{separator}\n{beautified}\n{separator}\n", "content")

        if self.metrics:
            lines = ["", "Metrics"]
            lines.extend(str(value) for value in find_labeled(page.diagnostics))
            self._say("\n".join(lines) + "\n", "metrics")

    def _show_error(self, message: str) -> None:
        text = f"\n\nError:\n\nError message first {ERROR_DISPLAY_LIMIT} chars:\n{truncate_message(message)}\n"
        self._say(text + ERROR_PROMPT, "error")
