# cosmosql/utils/settings.py
"""settings.py
========================
Validated, immutable process settings.

Values are resolved in this order (later wins):

1. `DEFAULT_CONFIG` merged with `~/.config/cosmosql/config.toml` (see `load_config`).
2. Environment variables, including those loaded from `~/.config/cosmosql/.env`.
3. Command-line flags.

`Settings.resolve` raises `SettingsError` for anything missing or invalid; the
CLI layer turns that into a usage message and a non-zero exit before curses starts.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


ENV_KEYS = {
    "endpoint": "COSMOS_ENDPOINT",
    "key": "COSMOS_KEY",
    "database": "COSMOS_DATABASE",
    "container": "COSMOS_CONTAINER",
}


class SettingsError(ValueError):
    """Missing or invalid configuration value."""


class ConnectionMode(enum.Enum):
    DIRECT = "Direct"
    GATEWAY = "Gateway"

    @classmethod
    def parse(cls, value: Any) -> "ConnectionMode":
        text = str(value).strip().lower()
        for mode in cls:
            if mode.value.lower() == text:
                return mode
        raise SettingsError(f"Invalid connection mode {value!r}: expected Direct or Gateway")


def parse_page_size(value: Any) -> int:
    """Converts `value` to a positive page size.

    Raises:
        SettingsError: If the value is not an integer or is not positive.
    """
    if isinstance(value, bool):
        raise SettingsError(f"Invalid page size {value!r}")
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise SettingsError(f"Invalid page size {value!r}: expected a positive integer") from None
    if size <= 0:
        raise SettingsError(f"Invalid page size {size}: must be greater than zero")
    return size


@dataclass(frozen=True)
class Settings:
    """Everything the console needs for the lifetime of the process."""

    endpoint: str
    key: str = field(repr=False)
    database: str
    container: str
    mode: ConnectionMode = ConnectionMode.DIRECT
    page_size: int = 100
    metrics: bool = False
    max_retry_attempts: int = 10
    colors: Mapping[str, str] = field(default_factory=dict)

    @property
    def header(self) -> tuple[str, str]:
        """The two fixed status lines shown above the editor."""
        return (
            f"CosmosSQL | ({self.endpoint}{self.mode.value})({self.database})({self.container})",
            "Editor Mode | Press CTRL+E to execute query | ESC to exit",
        )

    @classmethod
    def resolve(
        cls,
        cli: Mapping[str, Any],
        config: Mapping[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """Builds settings from CLI values, environment and the config dictionary.

        Args:
            cli: Parsed flags; `None` values mean "not given".
            config: Merged configuration (see `load_config`).
            environ: Environment mapping, usually `os.environ`.

        Raises:
            SettingsError: When a required value is missing or a value is invalid.
        """
        environ = environ or {}
        connection = config.get("connection", {})

        def pick(name: str) -> str:
            value = cli.get(name) or environ.get(ENV_KEYS[name], "")
            if not str(value).strip():
                raise SettingsError(f"Missing required option --{name}")
            return str(value).strip()

        mode = cli.get("cp")
        page_size = cli.get("maxfetchsize")
        metrics = cli.get("metrics")
        return cls(
            endpoint=pick("endpoint"),
            key=pick("key"),
            database=pick("database"),
            container=pick("container"),
            mode=ConnectionMode.parse(mode if mode is not None else connection.get("mode", "Direct")),
            page_size=parse_page_size(page_size if page_size is not None else connection.get("page_size", 100)),
            metrics=bool(metrics) if metrics else bool(connection.get("metrics", False)),
            max_retry_attempts=int(connection.get("max_retry_attempts", 10)),
            colors=MappingProxyType(dict(config.get("colors", {}))),
        )
