# cosmosql/core/Paging.py
"""Paging.py
========================
Result types and collaborator interfaces for paged query execution.

`QueryRunner` only ever talks to a `PageSource`: it opens one `PageCursor`
per query, asks it whether more pages remain and fetches them one at a time.
A fetch never raises for a remote failure; it returns a `Page` whose `ok`
flag is False and whose `error` carries the server message.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class Page:
    """One batch of results returned by a single remote fetch.

    Attributes:
        ok: True when the remote call succeeded.
        content: Raw JSON text of the page (empty for failed pages).
        diagnostics: Optional diagnostics tree (nested dicts/lists).
        error: Server or transport message for failed pages.
    """

    ok: bool
    content: str = ""
    diagnostics: Optional[Any] = None
    error: str = ""

    @classmethod
    def failure(cls, message: str) -> "Page":
        return cls(ok=False, error=message)


class PageCursor(Protocol):
    """The execution context of one query. Closed on every exit path."""

    @property
    def has_more(self) -> bool: ...

    def fetch(self) -> Page: ...

    def close(self) -> None: ...

    def __enter__(self) -> "PageCursor": ...

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None: ...


class PageSource(Protocol):
    """Opens a fresh, lazy page sequence for a query string."""

    page_size: int

    def open(self, query: str) -> PageCursor: ...
