# cosmosql/utils/logging_config.py
"""cosmosql.utils.logging_config
===============================

Log handlers for the cosmosql console. curses owns the terminal, so logs go
to files by default:

    - cosmosql.log: rotating main log.
    - error.log: ERROR and above, when ``separate_error_log`` is set.
    - keytrace.log: decoded key events, when ``COSMOSQL_KEYTRACE`` is set.
      Every typed key lands there, query text included.
    - stderr: opt-in through ``log_to_console``.

A log directory that cannot be created falls back to the temp directory.
Handler failures are reported on stderr and never stop the console.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


logger = logging.getLogger("cosmosql")
KEY_LOGGER = logging.getLogger("cosmosql.keyevents")


def setup_logging(config: Optional[dict[str, Any]] = None, log_filename: str = "cosmosql.log") -> None:
    """Installs the cosmosql handlers on the root and key event loggers.

    Args:
        config (dict | None): Application configuration; only the ``logging``
            section is read (``file_level``, ``console_level``,
            ``log_to_console``, ``separate_error_log``).
        log_filename (str): Path of the main log file.

    Existing handlers are replaced, so calling it twice does not duplicate output.
    """
    section = (config or {}).get("logging", {})
    file_level = _level(section.get("file_level"), logging.DEBUG)

    log_dir = os.path.dirname(log_filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            log_filename = os.path.join(tempfile.gettempdir(), "cosmosql.log")
            print(
                f"Cannot create log directory '{log_dir}' ({e_mkdir}), logging to '{log_filename}'",
                file=sys.stderr,
            )
    log_dir = os.path.dirname(log_filename)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    handlers: list[logging.Handler] = []

    main_handler = _rotating(log_filename, 2 * 1024 * 1024, 5, file_formatter, file_level)
    if main_handler:
        handlers.append(main_handler)

    if section.get("log_to_console", False):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        stderr_handler.setLevel(_level(section.get("console_level"), logging.WARNING))
        handlers.append(stderr_handler)

    if section.get("separate_error_log", False):
        error_handler = _rotating(os.path.join(log_dir, "error.log"), 1024 * 1024, 3, file_formatter, logging.ERROR)
        if error_handler:
            handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(file_level)

    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = True
    if os.environ.get("COSMOSQL_KEYTRACE", "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        trace_handler = _rotating(
            key_trace_filename, 1024 * 1024, 3, logging.Formatter("%(asctime)s - %(message)s"), logging.DEBUG
        )
        if trace_handler:
            KEY_LOGGER.addHandler(trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        else:
            logging.error("Key event tracing requested but '%s' could not be opened.", key_trace_filename)
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging ready: root level %s, main log '%s'.",
        logging.getLevelName(root_logger.level),
        log_filename,
    )


def _level(name: Any, default: int) -> int:
    return getattr(logging, str(name).upper(), default) if name else default


def _rotating(
    filename: str, max_bytes: int, backups: int, formatter: logging.Formatter, level: int
) -> Optional[logging.Handler]:
    """Returns a rotating file handler, or None (reported on stderr) when the file cannot be opened."""
    try:
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except OSError as e_fh:
        print(f"Cannot open log file '{filename}': {e_fh}", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler
