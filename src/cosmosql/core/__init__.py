# src/cosmosql/core/__init__.py
"""Public facade for cosmosql.core: re-export main classes from CamelCase modules.

Keeps the CamelCase file names (LineEditor.py, QueryRunner.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .BusyIndicator import BusyIndicator, BusyState  # noqa: F401
from .Editor import Editor  # noqa: F401
from .LineEditor import Action, Cursor, Key, KeyEvent, Viewport, handle_key, reconcile  # noqa: F401
from .Paging import Page  # noqa: F401
from .QueryRunner import QueryRunner, RunOutcome  # noqa: F401


__all__ = [
    "Action",
    "BusyIndicator",
    "BusyState",
    "Cursor",
    "Editor",
    "Key",
    "KeyEvent",
    "Page",
    "QueryRunner",
    "RunOutcome",
    "Viewport",
    "handle_key",
    "reconcile",
]
