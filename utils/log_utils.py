"""Timestamped logging helpers.

Messages are printed as ``[timestamp][SYSTEM][VARIANT] text``. A leading tag
run such as ``[WARN][PINCH]`` or ``[PINCH][WARN]`` is normalized to that order.
"""

from __future__ import annotations

import builtins
import time
from typing import Any


_LEVELS = ("DEEP", "DEBUG", "INFO", "WARN", "ERROR")
_LEVEL_RANK = {name: rank for rank, name in enumerate(_LEVELS)}

_min_level = "INFO"


def set_min_level(level: str) -> None:
    """Drop messages whose variant ranks below ``level``."""
    global _min_level
    normalized = str(level).strip().upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized in _LEVEL_RANK:
        _min_level = normalized


def get_min_level() -> str:
    return _min_level


def is_enabled(variant: str | None) -> bool:
    rank = _LEVEL_RANK.get((variant or "INFO").upper(), _LEVEL_RANK["INFO"])
    return rank >= _LEVEL_RANK[_min_level]


def _split_tags(message: str) -> tuple[list[str], str]:
    tags: list[str] = []
    remaining = message.lstrip()
    while remaining.startswith("["):
        end = remaining.find("]")
        if end == -1:
            break
        tag = remaining[1:end].strip()
        if not tag:
            break
        tags.append(tag)
        remaining = remaining[end + 1 :].lstrip()
    return tags, remaining


def _parse(message: str) -> tuple[str, str | None, list[str], str]:
    tags, remaining = _split_tags(message)
    if not tags:
        return "APP", None, [], remaining
    first = tags[0].upper()
    if first in _LEVEL_RANK:
        system = tags[1] if len(tags) > 1 else "APP"
        return system, first, tags[2:], remaining
    variant = tags[1].upper() if len(tags) > 1 and tags[1].upper() in _LEVEL_RANK else None
    extra = tags[2:] if variant else tags[1:]
    return tags[0], variant, extra, remaining


def _format_message(message: str) -> tuple[str | None, str]:
    system, variant, extra_tags, remaining = _parse(message)
    extra = f" [{' '.join(extra_tags)}]" if extra_tags else ""
    suffix = f" {remaining}" if remaining else ""
    if variant:
        return variant, f"[{system}][{variant}]{extra}{suffix}"
    return None, f"[{system}]{extra}{suffix}"


def tprint(*args: Any, **kwargs: Any) -> None:
    """Print with a timestamp prefix and normalized tag order."""
    message = " ".join(str(arg) for arg in args)
    variant, formatted = _format_message(message)
    if not is_enabled(variant):
        return
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    builtins.print(f"[{timestamp}]{formatted}", **kwargs)


def log(system: str, message: str, variant: str | None = None) -> None:
    """Log with explicit system and optional variant."""
    if variant:
        tprint(f"[{system}][{variant.upper()}] {message}")
    else:
        tprint(f"[{system}] {message}")
