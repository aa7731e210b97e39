# cosmosql/cli.py
"""
cosmosql command-line entry point
=================================

Startup sequence:
1) Environment Loading: reads ~/.config/cosmosql/.env so connection secrets can
   live outside the shell history.
2) Configuration & Logging: loads the layered config and initializes logging.
3) Argument Parsing: resolves flags into validated `Settings`. Missing or
   invalid values print usage and exit with status 1 before the terminal is touched.
4) Curses Wrapper: safely initializes/tears down curses around the editor.
"""

from __future__ import annotations

import argparse
import curses
import locale
import os
import signal
import sys
import traceback
from typing import Any, Mapping, Optional, Sequence

from dotenv import load_dotenv

from cosmosql.core.Editor import Editor
from cosmosql.core.QueryRunner import QueryRunner
from cosmosql.integrations.CosmosBridge import CosmosPageSource
from cosmosql.ui.Console import Console
from cosmosql.ui.TerminalAppMode import TerminalAppMode
from cosmosql.utils.logging_config import logger, setup_logging
from cosmosql.utils.settings import Settings, SettingsError
from cosmosql.utils.utils import get_config_dir, load_config


EXIT_USAGE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cosmosql",
        description="Interactive query console for Azure Cosmos DB containers.",
        allow_abbrev=False,
    )
    parser.add_argument("--endpoint", help="Azure Cosmos DB account endpoint URI (env: COSMOS_ENDPOINT)")
    parser.add_argument("--key", help="Azure Cosmos DB account read access key (env: COSMOS_KEY)")
    parser.add_argument("--database", help="Target database to use (env: COSMOS_DATABASE)")
    parser.add_argument("--container", help="Target container to use (env: COSMOS_CONTAINER)")
    parser.add_argument("--cp", help="Connection policy: Direct|Gateway (default: Direct)")
    parser.add_argument("--maxfetchsize", help="Number of items per fetch (default: 100)")
    parser.add_argument("--metrics", action="store_true", default=None, help="Include query metrics")
    return parser


def normalize_argv(argv: Sequence[str]) -> list[str]:
    """Lower-cases long option names so flags are case-insensitive (values are kept)."""
    normalized: list[str] = []
    for arg in argv:
        if arg.startswith("--"):
            name, sep, value = arg.partition("=")
            normalized.append(name.lower() + sep + value)
        else:
            normalized.append(arg)
    return normalized


def parse_settings(
    argv: Sequence[str],
    config: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Parses `argv` into `Settings`; prints usage and exits with status 1 on any error."""
    parser = build_parser()
    try:
        args = parser.parse_args(normalize_argv(argv))
    except SystemExit as exc:
        # --help exits 0; argparse errors exit 2 after printing usage.
        if exc.code:
            raise SystemExit(EXIT_USAGE) from None
        raise
    try:
        return Settings.resolve(vars(args), config, environ if environ is not None else os.environ)
    except SettingsError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        logger.error("Invalid settings: %s", exc)
        raise SystemExit(EXIT_USAGE) from None


def main_app_runner(stdscr: curses.window, settings: Settings) -> None:
    """Target for `curses.wrapper`: builds the console and runs the editor."""
    mode = TerminalAppMode()
    mode.enter(stdscr)

    # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
    if hasattr(signal, "SIGTSTP"):
        try:
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        except (OSError, ValueError):
            pass

    try:
        console = Console(stdscr, settings.colors)
        console.init_colors()
        runner = QueryRunner(console, CosmosPageSource(settings), metrics=settings.metrics)
        Editor(console, runner, settings.header).run()
    finally:
        mode.exit()


def start(argv: Optional[Sequence[str]] = None) -> None:
    """Loads configuration, validates flags and runs the console under curses."""
    try:
        load_dotenv(dotenv_path=get_config_dir() / ".env")
    except OSError:
        # Later, settings validation reports whatever is still missing.
        pass

    config = load_config()
    setup_logging(config, log_filename=str(get_config_dir() / "cosmosql.log"))

    settings = parse_settings(sys.argv[1:] if argv is None else argv, config)
    logger.info("cosmosql starting up: %r", settings)

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        curses.wrapper(main_app_runner, settings)
        logger.info("cosmosql shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    start()
