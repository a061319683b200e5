"""Runtime configuration for Maintenance Reporter - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from maintenance_reporter.utils.constants import CONFIG_FILE_NAME, ENV_PREFIX, STATE_DIR_NAME
from maintenance_reporter.utils.logging import logger

DRUPAL_ADVISORIES_URL = (
    "https://raw.githubusercontent.com/drupal-composer/"
    "drupal-security-advisories/9.x/composer.json"
)

DEFAULTS = {
    "git": {
        "executable": "git",
        "remote": "origin",
    },
    "files": {
        "lock": "composer.lock",
        "manifest": "composer.json",
    },
    "audit": {
        "executable": "composer",
    },
    "feed": {
        "url": DRUPAL_ADVISORIES_URL,
        "include_dev": False,
    },
    "workspace": {
        "prefix": "maintenance-report-",
        "base_dir": "",
    },
    "timeouts": {
        "git": 60,
        "audit": 300,
        "feed_fetch": 30,
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(value: str, default_value: Any) -> Any:
    """Convert an environment string to the type of the default value."""
    if isinstance(default_value, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"expected a boolean, got '{value}'")
    if isinstance(default_value, int):
        return int(value)
    if isinstance(default_value, float):
        return float(value)
    return value


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .mreport/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (MREPORT_<SECTION>_<KEY>)
    2. .mreport/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / STATE_DIR_NAME / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {path}: {err}", path=path, err=e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce(value, cfg[section][key])
                except ValueError as e:
                    logger.warning(
                        "Invalid value for environment variable {var}: '{value}' - {err}",
                        var=env_var,
                        value=value,
                        err=e,
                    )
                    logger.info("Using default value: {default}", default=cfg[section][key])

    return cfg
