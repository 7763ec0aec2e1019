"""Persisted logging settings (currently the log level)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from proinfer.paths import resolve_config_file

PathLike = Optional[os.PathLike[str] | str]


def log_config_path(config_file: PathLike = None) -> Path:
    """``config_file``, ``$PROINFER_LOG_CONFIG`` or ``<config dir>/logging.json``."""

    return resolve_config_file(config_file, "PROINFER_LOG_CONFIG", "logging.json")


def load_config(config_file: PathLike = None) -> Dict[str, Any]:
    """Read the logging config; unreadable or missing files give ``{}``."""

    path = log_config_path(config_file)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: Dict[str, Any], config_file: PathLike = None) -> Path:
    path = log_config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path


def level_value(level: str | int) -> Optional[int]:
    """Numeric value of a level name or number, ``None`` if unknown."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else None


def _normalize_level(level: str | int) -> tuple[str, int]:
    """``(name, value)`` of a level.

    Raises
    ------
    ValueError
        If the level is unknown.
    """

    value = level_value(level)
    if value is None:
        raise ValueError(f"Unknown logging level: {level!r}")
    name = logging.getLevelName(value)
    if not isinstance(name, str) or name.startswith("Level "):
        name = str(value)
    return name, value


def load_log_level(config_file: PathLike = None) -> Optional[int]:
    value = load_config(config_file).get("log_level")
    if value is None:
        return None
    return level_value(value)


def save_log_level(level: str | int, config_file: PathLike = None) -> Path:
    """Store ``level`` and return the path of the config file."""

    name, _ = _normalize_level(level)
    config = load_config(config_file)
    config["log_level"] = name
    return save_config(config, config_file)


__all__ = [
    "load_config",
    "log_config_path",
    "save_config",
    "load_log_level",
    "save_log_level",
]
