"""Runtime configuration for consolesweep - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from consolesweep.utils.constants import (
    CATCH_LOOKBACK,
    CONDITIONAL_LOOKBACK,
    CONFIG_FILE_NAME,
    DEFAULT_BACKUP_DIR,
    DEFAULT_CALL_TOKEN,
    DEFAULT_CONTEXT_LINES,
    DEFAULT_ERROR_CALL,
    DEFAULT_INFO_CALL,
    ENV_PREFIX,
    FUNCTION_LOOKBACK,
    SOURCE_EXTENSIONS,
    STATE_DIR,
)
from consolesweep.utils.logging import logger

DEFAULTS = {
    "scan": {
        "call_token": DEFAULT_CALL_TOKEN,
        "extensions": list(SOURCE_EXTENSIONS),
        "exclude": [],
        "context_lines": DEFAULT_CONTEXT_LINES,
    },
    "analysis": {
        "catch_lookback": CATCH_LOOKBACK,
        "function_lookback": FUNCTION_LOOKBACK,
        "conditional_lookback": CONDITIONAL_LOOKBACK,
        "arrow_rule": "direct",
    },
    "transform": {
        "error_call": DEFAULT_ERROR_CALL,
        "info_call": DEFAULT_INFO_CALL,
    },
    "backup": {
        "dir": DEFAULT_BACKUP_DIR,
        "auto_cleanup": False,
    },
    "logging": {
        "error_log": True,
    },
}

_TRUE_VALUES = frozenset(["1", "true", "yes", "on"])
_FALSE_VALUES = frozenset(["0", "false", "no", "off"])


def _coerce(raw: str, default: Any) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"expected one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, list):
        return [v.strip() for v in raw.split(",") if v.strip()]
    return raw


def _same_type(value: Any, default: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, type(default))


def config_path(root: str | Path = ".") -> Path:
    return Path(root) / STATE_DIR / CONFIG_FILE_NAME


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .consolesweep/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (CONSOLESWEEP_<SECTION>_<KEY>)
    2. .consolesweep/config.json file
    3. Built-in defaults

    Args:
        root: Project root to look for the config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = config_path(root)
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key not in cfg[section]:
                                logger.warning("Unknown config key {section}.{key} in {path}",
                                               section=section, key=key, path=path)
                            elif _same_type(value, cfg[section][key]):
                                cfg[section][key] = value
                            else:
                                logger.warning("Ignoring {section}.{key}: expected {type}",
                                               section=section, key=key,
                                               type=type(cfg[section][key]).__name__)
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
                except (ValueError, AttributeError) as e:
                    logger.warning("Invalid value for environment variable {var}: '{value}' - {err}",
                                   var=env_var, value=value, err=e)
                    logger.info("Using default value: {default}", default=cfg[section][key])

    return cfg
