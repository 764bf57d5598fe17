"""In-memory cache for app settings."""

from __future__ import annotations

import os
import threading
from typing import Any

from utils.file_utils import load_json
from utils.log_utils import set_min_level, tprint

_lock = threading.Lock()
_settings_cache: dict[str, Any] = {}

_DEFAULT_SETTINGS: dict[str, Any] = {
    "log_level": "INFO",
    "http_access_log": False,
}


def settings_path() -> str:
    return os.getenv("APP_SETTINGS", "config/app_settings.json")


def refresh_settings() -> dict[str, Any]:
    """Reload settings from disk and replace the cache."""
    data = dict(_DEFAULT_SETTINGS)
    data.update(load_json(settings_path()))
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        snapshot = dict(_settings_cache)
    level = str(snapshot.get("log_level", "INFO")).upper()
    set_min_level(level)
    return snapshot


def get_settings() -> dict[str, Any]:
    """Return a copy of the cached settings."""
    with _lock:
        cached = dict(_settings_cache)
    if not cached:
        return refresh_settings()
    return cached


def is_deep_logging() -> bool:
    """Return True when log_level requests deep tracing."""
    level = str(get_settings().get("log_level", "")).upper()
    return level in {"DEEP"}


def deep_log(message: str) -> None:
    """Per-frame tracing; silent unless log_level is DEEP."""
    if is_deep_logging():
        tprint(message)
