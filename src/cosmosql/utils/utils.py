# cosmosql/utils/utils.py
"""
cosmosql.utils.utils.py
=======================

Core utility functions for the cosmosql console.

Key functionalities include:
- Automatic User Configuration: creates `config.toml` and `.env` templates in
  `~/.config/cosmosql` on first run.
- Robust Configuration Loading: starts from the embedded `DEFAULT_CONFIG` and
  recursively merges user settings from `~/.config/cosmosql/config.toml`.
- Result helpers: JSON pretty-printing, labelled-value search in diagnostics
  trees, and message truncation for display.

The application is always runnable, even if the user configuration files are
missing or corrupted, because it falls back to the embedded defaults.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import toml

logger = logging.getLogger("cosmosql")

# --- Constants ---
APP_NAME = "cosmosql"
ERROR_DISPLAY_LIMIT = 1000
QUERY_METRICS_LABEL = "Query Metrics"

ENV_TEMPLATE = """# Azure Cosmos DB connection defaults.
# Command-line flags always win over the values below.
COSMOS_ENDPOINT=
COSMOS_KEY=
COSMOS_DATABASE=
COSMOS_CONTAINER=
"""

CONFIG_TEMPLATE = """# cosmosql user configuration. Every key is optional.

[connection]
# mode = "Direct"        # Direct | Gateway
# page_size = 100
# metrics = false

[colors]
# header = "white"
# text = "green"
# marker = "red"

[logging]
# file_level = "DEBUG"
# log_to_console = false
"""

# This dictionary is the ultimate fallback, ensuring the application can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "connection": {
        "mode": "Direct",
        "page_size": 100,
        "metrics": False,
        "max_retry_attempts": 10,
    },
    "colors": {
        "header": "white",
        "text": "green",
        "marker": "red",
        "fetching": "cyan",
        "content": "yellow",
        "prompt": "green",
        "error": "red",
        "metrics": "white",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        # curses owns the terminal; stderr output would corrupt the screen.
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns `~/.config/cosmosql`."""
    return Path.home() / ".config" / APP_NAME


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/cosmosql` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def pretty_json(raw: str) -> str:
    """Re-indents a JSON document for display.

    Raises:
        json.JSONDecodeError: If `raw` is not valid JSON.
    """
    return json.dumps(json.loads(raw), indent=2, ensure_ascii=False)


def find_labeled(tree: Any, label: str = QUERY_METRICS_LABEL) -> List[Any]:
    """Collects every value stored under `label` anywhere in a nested dict/list tree.

    Values are returned in depth-first order. A matching value is not searched further.
    """
    found: List[Any] = []
    if isinstance(tree, dict):
        for key, value in tree.items():
            if key == label:
                found.append(value)
            else:
                found.extend(find_labeled(value, label))
    elif isinstance(tree, list):
        for item in tree:
            found.extend(find_labeled(item, label))
    return found


def truncate_message(message: str, limit: int = ERROR_DISPLAY_LIMIT) -> str:
    """Returns at most the first `limit` characters of `message`."""
    return message[:limit]
