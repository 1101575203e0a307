"""Typed settings model for the package.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Failure modes
-------------
Pydantic validation errors are converted into ``ConfigurationError`` by
:func:`no_thanks.config.get_settings`.
"""
from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, field_validator

from .defaults import (
    DEFAULT_FINE_GRAINED,
    DEFAULT_INTERRUPTIBLE,
    DEFAULT_LOG_JSON,
    DEFAULT_LOG_LEVEL,
)


class NoThanksSettings(BaseModel):
    """Process-wide defaults for task adapters and logging.

    Attributes
    ----------
    fine_grained:
        Default for the ``fine_grained`` argument of ``cancellable``,
        ``interruptible`` and ``coroutine`` when the caller passes ``None``.
    interruptible:
        When true, ``cancellable`` builds interruptible tasks as well.
    log_level:
        Level name applied to the ``no_thanks`` logger on first use.
    log_json:
        Emit JSON lines (``True``) or plain text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fine_grained: bool = DEFAULT_FINE_GRAINED
    interruptible: bool = DEFAULT_INTERRUPTIBLE
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = DEFAULT_LOG_JSON

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        name = value.strip().upper()
        if name == "WARN":
            name = "WARNING"
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {value!r}")
        return name


__all__ = ["NoThanksSettings"]
