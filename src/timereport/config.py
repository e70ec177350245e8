#!/usr/bin/env python3
"""
Load optional time-report settings from TOML.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

CONFIG_PATH_ENV = "TIME_REPORT_CONFIG"


@dataclass(frozen=True)
class Settings:
    """
    Tunable settings.

    Attributes
    ----------
    editor : Optional[str]
        Editor command; None defers to $VISUAL/$EDITOR.
    debounce_ms : int
        Quiet time required before a file change triggers a reload.
    poll_ms : int
        Keyboard and file polling interval.
    refresh_seconds : int
        Interval of the periodic tick that re-evaluates today's period.
    recent_days : int
        Look-back window for projects pre-filled by append.
    recent_count : int
        Number of projects pre-filled by append.
    """

    editor: Optional[str] = None
    debounce_ms: int = 200
    poll_ms: int = 100
    refresh_seconds: int = 60
    recent_days: int = 30
    recent_count: int = 5


DEFAULT_SETTINGS = Settings()


def get_config_path() -> Path:
    """
    Return the settings file path.

    Returns
    -------
    Path
        Settings TOML path.

    Examples
    --------
    >>> isinstance(get_config_path(), Path)
    True
    """
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(os.path.expandvars(os.path.expanduser(override)))
    return Path.home() / ".config" / "time-report" / "config.toml"


def _coerce(name: str, value: Any) -> Optional[Any]:
    if name == "editor":
        text = str(value).strip() if isinstance(value, str) else ""
        return text or None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def settings_from_mapping(raw: Dict[str, Any]) -> Settings:
    """
    Build settings from a parsed mapping, ignoring invalid values.

    Examples
    --------
    >>> settings_from_mapping({"debounce_ms": 300, "poll_ms": -1}).debounce_ms
    300
    >>> settings_from_mapping({"poll_ms": -1}).poll_ms
    100
    """
    updates: Dict[str, Any] = {}
    for item in fields(Settings):
        if item.name not in raw:
            continue
        value = _coerce(item.name, raw[item.name])
        if value is not None:
            updates[item.name] = value
    return replace(DEFAULT_SETTINGS, **updates)


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from disk.

    Parameters
    ----------
    path : Optional[Path], optional
        Path to the settings file (defaults to the standard path).

    Returns
    -------
    Settings
        Parsed settings, or defaults when missing or unreadable.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return DEFAULT_SETTINGS
    try:
        parsed = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return DEFAULT_SETTINGS
    return settings_from_mapping(parsed)
