"""Unified configuration layer.

Goals
-----
* Centralize defaults for task adapters and logging.
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       ``NO_THANKS_CONFIG_FILE``
    3. Environment variables (``NO_THANKS_FINE_GRAINED``,
       ``NO_THANKS_INTERRUPTIBLE``, ``NO_THANKS_LOG_LEVEL``,
       ``NO_THANKS_LOG_JSON``)
    4. In-code overrides passed to ``get_settings``
* Provide a single call site: ``get_settings()``.

External Config File
--------------------
JSON is attempted first, then YAML. Structure example::

    fine_grained: true
    interruptible: false
    log_level: DEBUG

Public API
----------
* get_settings(overrides: dict | None = None) -> NoThanksSettings
* reset_settings_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..base.errors import ConfigurationError
from .env import CONFIG_FILE_ENV, read_env_overrides
from .settings import NoThanksSettings

_CACHED: Optional[NoThanksSettings] = None


def _load_external_config() -> Dict[str, Any]:
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.is_file():
        raise ConfigurationError(f"{CONFIG_FILE_ENV} points to a missing file: {p}")
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"cannot parse config file {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {p} must contain a mapping")
    return data


def _build_settings(overrides: Optional[Dict[str, Any]]) -> NoThanksSettings:
    cfg: Dict[str, Any] = {}
    cfg |= _load_external_config()
    try:
        cfg |= read_env_overrides()
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    try:
        return NoThanksSettings(**cfg)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def _apply_logging(settings: NoThanksSettings) -> None:
    # Local import: base.logging must stay importable without settings.
    from ..base.logging import apply_log_settings

    apply_log_settings(level=settings.log_level, json_mode=settings.log_json)


def get_settings(overrides: Optional[Dict[str, Any]] = None) -> NoThanksSettings:
    """Return merged settings.

    Without ``overrides`` the result is cached for the process and its
    ``log_level`` / ``log_json`` are applied to the shared logger; call
    :func:`reset_settings_cache` after changing the environment.
    """
    global _CACHED  # noqa: PLW0603 - documented module cache
    if overrides:
        return _build_settings(overrides)
    if _CACHED is None:
        _CACHED = _build_settings(None)
        _apply_logging(_CACHED)
    return _CACHED


def reset_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads all sources."""
    global _CACHED  # noqa: PLW0603
    _CACHED = None


__all__ = [
    "NoThanksSettings",
    "get_settings",
    "reset_settings_cache",
]
