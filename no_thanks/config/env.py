"""no_thanks.config.env
====================

Environment variable names and parsing helpers for package settings.

Design Notes
------------
- ``ENV_FIELD_MAP`` is the single source of truth mapping settings fields to
  environment variable names.
- Parsing helpers never touch the settings model; validation happens in
  :mod:`no_thanks.config.settings`.

Failure Modes
-------------
- ``parse_bool`` raises ``ValueError`` on unrecognized strings; callers turn
  that into a ``ConfigurationError``.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

CONFIG_FILE_ENV = "NO_THANKS_CONFIG_FILE"

ENV_FIELD_MAP: Dict[str, str] = {
    "fine_grained": "NO_THANKS_FINE_GRAINED",
    "interruptible": "NO_THANKS_INTERRUPTIBLE",
    "log_level": "NO_THANKS_LOG_LEVEL",
    "log_json": "NO_THANKS_LOG_JSON",
}

BOOL_FIELDS = frozenset(("fine_grained", "interruptible", "log_json"))

_TRUE = frozenset(("1", "true", "yes", "on"))
_FALSE = frozenset(("0", "false", "no", "off"))


def parse_bool(raw: str) -> bool:
    """Parse a boolean environment value (case-insensitive).

    Accepts ``1/0``, ``true/false``, ``yes/no`` and ``on/off``.
    """
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def read_env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Return settings fields present in the environment.

    Empty values are treated as unset. Boolean fields are parsed with
    :func:`parse_bool`.
    """
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for field, name in ENV_FIELD_MAP.items():
        raw = env.get(name)
        if raw is None or not raw.strip():
            continue
        out[field] = parse_bool(raw) if field in BOOL_FIELDS else raw.strip()
    return out


__all__ = [
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
    "BOOL_FIELDS",
    "parse_bool",
    "read_env_overrides",
]
