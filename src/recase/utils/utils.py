# recase/utils/utils.py
"""
recase.utils.utils
==================

Configuration helpers for recase.

- Embedded Defaults: `DEFAULT_CONFIG` is always enough to run; nothing on
  disk is required.
- Layered Loading: `load_config` deep-merges an optional user file
  (``~/.config/recase/config.toml`` unless another path is given) over the
  embedded defaults. A missing file is normal; a malformed one is logged and
  ignored.

Recognised settings::

    [regions]
    overlap_strategy = "merge"     # or "as_given"

    [logging]
    log_file = "recase.log"
    file_level = "DEBUG"
    console_level = "WARNING"
    log_to_console = true
    separate_error_log = false
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

logger = logging.getLogger("recase")


# The embedded fallback; user files only override keys they mention.
DEFAULT_CONFIG: Dict[str, Any] = {
    "regions": {"overlap_strategy": "merge"},
    "logging": {
        "log_file": "recase.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": True,
        "separate_error_log": False,
    },
}


def get_user_config_path() -> Path:
    """Location of the per-user configuration file."""
    return Path.home() / ".config" / "recase" / "config.toml"


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the TOML file at `path` over them.

    Args:
        path: The configuration file; defaults to `get_user_config_path()`.

    Returns:
        The merged configuration. Never raises for missing or unreadable files.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    config_path = Path(path) if path is not None else get_user_config_path()
    if config_path.is_file():
        try:
            user_config = toml.load(config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged config from {config_path}")
        except Exception as e:
            logger.error(f"Could not parse config '{config_path}': {e}. Using defaults.")
    else:
        logger.debug(f"No config file at {config_path}; using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into a copy of `base`.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result
