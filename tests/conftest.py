# tests/conftest.py
"""Pytest configuration with shared fixtures for the cosmosql console tests.

Provides:
- `FakeConsole`: an in-memory stand-in for `cosmosql.ui.Console.Console`
  that records everything written and replays scripted key presses.
- `FakePageSource` / `FakeCursor`: a scripted page source for the
  execution loop.
- Settings, config and viewport fixtures.
"""

from __future__ import annotations

import contextlib
import json
from typing import Any, Iterator, Optional, Sequence

import pytest

from cosmosql.core.LineEditor import Key, KeyEvent, Viewport
from cosmosql.core.Paging import Page
from cosmosql.utils.settings import ConnectionMode, Settings
from cosmosql.utils.utils import DEFAULT_CONFIG, deep_merge


# --- Console double ---
class FakeConsole:
    """Records console output; `read_key` pops scripted keys (ESC when exhausted)."""

    def __init__(self, keys: Sequence[KeyEvent] = (), width: int = 80, height: int = 24) -> None:
        self.keys: list[KeyEvent] = list(keys)
        self.width = width
        self.height = height
        self.output: list[tuple[str, Optional[str]]] = []
        self.frames: list[list[Any]] = []
        self.notices: list[str] = []
        self.clears = 0
        self.keys_read = 0
        self.moves: list[tuple[int, int]] = []
        self.glyphs: list[str] = []
        self.scrolling_active = False

    # geometry
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def cursor_position(self) -> tuple[int, int]:
        return 0, 0

    def move(self, col: int, row: int) -> None:
        self.moves.append((col, row))

    # output
    def say(self, text: str, role: Optional[str] = None) -> None:
        self.output.append((text, role))

    def write(self, text: str) -> None:
        self.output.append((text, None))

    def draw_in_place(self, glyph: str) -> None:
        self.glyphs.append(glyph)

    def clear(self) -> None:
        self.clears += 1

    def draw(self, commands: Sequence[Any]) -> None:
        self.frames.append(list(commands))

    @contextlib.contextmanager
    def scrolling(self) -> Iterator[None]:
        self.scrolling_active = True
        try:
            yield
        finally:
            self.scrolling_active = False

    # input
    def read_key(self) -> KeyEvent:
        self.keys_read += 1
        if self.keys:
            return self.keys.pop(0)
        return KeyEvent(Key.ESCAPE)

    def wait_key(self) -> KeyEvent:
        event = self.read_key()
        while event.key is Key.NONE:
            event = self.read_key()
        return event

    def show_notice(self, message: str) -> KeyEvent:
        self.notices.append(message)
        return self.wait_key()

    # helpers
    @property
    def text(self) -> str:
        return "".join(text for text, _ in self.output)

    def texts_in(self, role: str) -> list[str]:
        return [text for text, r in self.output if r == role]


# --- Page source double ---
def json_page(docs: list[dict[str, Any]], diagnostics: Any = None) -> Page:
    return Page(ok=True, content=json.dumps({"Documents": docs, "_count": len(docs)}), diagnostics=diagnostics)


class FakeCursor:
    def __init__(self, source: "FakePageSource", query: str) -> None:
        self.source = source
        self.query = query
        self.index = 0
        self.closed = False

    @property
    def has_more(self) -> bool:
        return self.index < len(self.source.pages)

    def fetch(self) -> Page:
        page = self.source.pages[self.index]
        self.index += 1
        self.source.fetched += 1
        if isinstance(page, Exception):
            raise page
        return page

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FakePageSource:
    def __init__(self, pages: Sequence[Any], page_size: int = 100) -> None:
        self.pages = list(pages)
        self.page_size = page_size
        self.fetched = 0
        self.cursors: list[FakeCursor] = []

    def open(self, query: str) -> FakeCursor:
        cursor = FakeCursor(self, query)
        self.cursors.append(cursor)
        return cursor


# --- Fixtures ---
@pytest.fixture
def viewport() -> Viewport:
    """An 80x24 terminal: max_visible_row 21, max_visible_col 79."""
    return Viewport(80, 24)


@pytest.fixture
def small_viewport() -> Viewport:
    """A 20x6 terminal: max_visible_row 3, max_visible_col 19."""
    return Viewport(20, 6)


@pytest.fixture
def fake_console() -> FakeConsole:
    return FakeConsole()


@pytest.fixture
def mock_config() -> dict[str, Any]:
    return deep_merge(DEFAULT_CONFIG, {})


@pytest.fixture
def settings(mock_config: dict[str, Any]) -> Settings:
    return Settings(
        endpoint="https://acct.documents.azure.com:443/",
        key="secret-key",
        database="db",
        container="items",
        mode=ConnectionMode.GATEWAY,
        page_size=10,
        metrics=False,
        colors=mock_config["colors"],
    )
