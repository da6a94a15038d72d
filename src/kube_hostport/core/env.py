"""Centralized environment variable helpers."""

from __future__ import annotations

import os

_TRUTHY = {"1", "true", "yes", "on"}


def getenv(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def getenv_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY
