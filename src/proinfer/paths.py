"""Locations of proinfer's configuration files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def config_dir() -> Path:
    """``$PROINFER_CONFIG_DIR`` or ``~/.proinfer``."""

    raw = os.environ.get("PROINFER_CONFIG_DIR")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return Path.home() / ".proinfer"


def resolve_config_file(
    override: Optional[os.PathLike[str] | str],
    env_var: str,
    file_name: str,
) -> Path:
    """Explicit path, else the path in ``env_var``, else ``file_name`` in :func:`config_dir`."""

    if override is not None:
        return Path(override)
    raw = os.environ.get(env_var)
    if raw and raw.strip():
        return Path(raw).expanduser()
    return config_dir() / file_name
