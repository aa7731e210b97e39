# cosmosql/core/BusyIndicator.py
"""BusyIndicator.py
========================
A one-cell spinner animated by a background thread while a page fetch is in flight.

The spinner overwrites the cell under the terminal cursor with the next glyph
of `\\ | / -` every 100 ms and puts the cursor back where it was. Every frame
is drawn while holding `BusyState.lock`; the execution loop takes the same
lock for its own multi-step writes, so output never interleaves.

`BusyState` is owned by one `QueryRunner` instance, not by the process.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from cosmosql.ui.Console import Console


class BusyState:
    """Running flag, console lock and bookkeeping for one spinner."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.running: bool = False
        self.generation: int = 0
        self.thread: Optional[threading.Thread] = None


# ==================== BusyIndicator Class ====================
class BusyIndicator:
    """Background spinner guarded by a shared `BusyState`.

    Attributes:
        GLYPHS: Animation frames, drawn in order.
        INTERVAL: Seconds between two frames.
        console: Terminal surface the frames are drawn on.
        state: Shared flag and lock.
    """

    GLYPHS = ("\\", "|", "/", "-")
    INTERVAL = 0.1

    def __init__(self, console: "Console", state: BusyState) -> None:
        self.console = console
        self.state = state

    @property
    def running(self) -> bool:
        return self.state.running

    def start(self) -> bool:
        """Starts the animation thread.

        Returns:
            bool: False when a spinner was already running (nothing started).
        """
        with self.state.lock:
            if self.state.running:
                return False
            self.state.running = True
            self.state.generation += 1
            generation = self.state.generation

        thread = threading.Thread(
            target=self._animate,
            args=(generation,),
            daemon=True,
            name=f"BusyIndicatorThread-{generation}",
        )
        self.state.thread = thread
        thread.start()
        logging.debug("BusyIndicator: started generation %d", generation)
        return True

    def stop(self) -> None:
        """Asks the spinner to exit on its next wake. Safe to call repeatedly."""
        with self.state.lock:
            was_running = self.state.running
            self.state.running = False
        if was_running:
            logging.debug("BusyIndicator: stop requested")

    def _alive(self, generation: int) -> bool:
        with self.state.lock:
            return self.state.running and self.state.generation == generation

    def _animate(self, generation: int) -> None:
        frame = 0
        while self._alive(generation):
            with self.state.lock:
                try:
                    self.console.draw_in_place(self.GLYPHS[frame])
                except Exception:
                    logging.exception("BusyIndicator: frame could not be drawn")
                    self.state.running = False
                    break
            frame = (frame + 1) % len(self.GLYPHS)
            time.sleep(self.INTERVAL)
        logging.debug("BusyIndicator: generation %d exited", generation)
