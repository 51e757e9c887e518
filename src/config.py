"""Configuration loading and CLI overrides for runtime tunables.

Precedence: CLI flags, then the YAML file, then ``Constants`` defaults.
Config problems are logged and never abort the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# YAML key -> Constants attribute
_CONFIG_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "fileno_flag": "FILENO_FLAG",
    "indent": "DEFAULT_INDENT",
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the ``pkgdesc`` section of a YAML config file.

    Falls back to the ``PKGDESC_CONFIG`` environment variable when no path is
    given. Returns an empty dict when nothing usable is found.
    """
    path = config_path or os.environ.get(Constants.CONFIG_ENV)
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if not isinstance(data, dict):
        return {}
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Copy recognised keys from ``cfg`` onto ``Constants``."""
    for key, attr in _CONFIG_KEYS.items():
        if key not in cfg:
            continue
        value = cfg[key]
        if key == "indent" and value is not None:
            try:
                value = int(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-integer indent in config: %r", value)
                continue
        setattr(Constants, attr, value)
    unknown = sorted(set(cfg) - set(_CONFIG_KEYS))
    if unknown:
        logger.warning("Unknown config keys ignored: %s", ", ".join(unknown))


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with highest precedence."""
    if getattr(args, "LOG_LEVEL", None):
        Constants.LOG_LEVEL = str(args.LOG_LEVEL).upper()  # type: ignore[assignment]
    if getattr(args, "LOG_FILE", None):
        Constants.LOG_FILE = args.LOG_FILE  # type: ignore[attr-defined]
    if getattr(args, "INDENT", None) is not None:
        Constants.DEFAULT_INDENT = int(args.INDENT)
