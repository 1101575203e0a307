"""Structured logging utilities for the cancellation layer.

Rationale:
- Central place to configure consistent JSON (or plain) logging.
- Avoid sprinkling ad-hoc logger setup across the promise, grain and driver
  modules.

The first logger request reads ``NO_THANKS_LOG_LEVEL`` and
``NO_THANKS_LOG_JSON`` straight from the environment and never raises:
unknown values fall back to WARNING and JSON output. Once settings are built,
:func:`no_thanks.config.get_settings` applies their validated values through
``apply_log_settings``; ``configure_logger`` adjusts level, format and an
optional log file at runtime.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "no_thanks"
LOG_LEVEL_ENV = "NO_THANKS_LOG_LEVEL"
LOG_JSON_ENV = "NO_THANKS_LOG_JSON"

_BASE_LOGGER_ATTR = "_no_thanks_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_no_thanks_console_handler"
_FILE_HANDLER_ATTR = "_no_thanks_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: str | int | None, default: int = logging.WARNING) -> int:
    """Parse a logging level name or number into an integer constant.

    Accepts common names (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    case-insensitively. Falls back to ``default`` on unknown values.
    """
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _json_from_env(default: bool = True) -> bool:
    raw = (os.getenv(LOG_JSON_ENV) or "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_base_logger() -> logging.Logger:
    """Initialize and return the shared ``no_thanks`` logger."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    raw_level = os.getenv(LOG_LEVEL_ENV)
    if getattr(logger, _BASE_LOGGER_ATTR, False):
        if raw_level:
            desired = _parse_level(raw_level, default=logger.level)
            if logger.level != desired:
                logger.setLevel(desired)
                for h in logger.handlers:
                    h.setLevel(desired)
        return logger

    level = _parse_level(raw_level)
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_make_formatter(_json_from_env()))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.handlers[:] = [
        h for h in logger.handlers if not getattr(h, _CONSOLE_HANDLER_ATTR, False)
    ] + [handler]
    logger.propagate = False
    setattr(logger, _BASE_LOGGER_ATTR, True)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME) -> logging.Logger:
    """Return the shared logger, or a child of it that propagates to it."""
    base_logger = _ensure_base_logger()
    if name == BASE_LOGGER_NAME:
        return base_logger
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: Optional[bool] = None,
) -> logging.Logger:
    """Reconfigure the shared ``no_thanks`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        Desired logging level. Accepts numeric levels or names (e.g.,
        ``"DEBUG"``). When ``None``, the current level is preserved.
    file_path: Optional[str]
        When provided, a rotating file handler writing to ``file_path`` is
        attached (or reused when it already points there). When ``None``,
        any file handler previously attached by this function is removed.
    json_mode: Optional[bool]
        Switch every managed handler between JSON and plain text output.
        ``None`` keeps the current formatters.

    Returns
    -------
    logging.Logger
        The configured base logger.

    Notes
    -----
    Handlers not created by this module are left untouched.
    """
    logger = _ensure_base_logger()

    managed = [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]
    if file_path is None:
        for h in managed:
            logger.removeHandler(h)
            with contextlib.suppress(OSError):
                h.close()
    else:
        abs_path = os.path.abspath(os.path.expanduser(file_path))
        os.makedirs(os.path.dirname(abs_path), exist_ok=True)
        existing: Optional[logging.FileHandler] = None
        for h in managed:
            if isinstance(h, logging.FileHandler) and h.baseFilename == abs_path:
                existing = h
            else:
                logger.removeHandler(h)
                with contextlib.suppress(OSError):
                    h.close()
        if existing is None:
            fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
            setattr(fh, _FILE_HANDLER_ATTR, True)
            fh.setLevel(logger.level)
            fh.setFormatter(_make_formatter(True if json_mode is None else json_mode))
            logger.addHandler(fh)

    return apply_log_settings(level=level, json_mode=json_mode)


def apply_log_settings(
    *,
    level: int | str | None = None,
    json_mode: Optional[bool] = None,
) -> logging.Logger:
    """Set the level and output mode of the shared logger and its handlers.

    Unlike :func:`configure_logger` this never attaches or removes file
    handlers, so it is safe to call whenever settings are (re)loaded.
    """
    logger = _ensure_base_logger()

    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))
        for h in logger.handlers:
            h.setLevel(logger.level)

    if json_mode is not None:
        for h in logger.handlers:
            if getattr(h, _CONSOLE_HANDLER_ATTR, False) or getattr(h, _FILE_HANDLER_ATTR, False):
                h.setFormatter(_make_formatter(json_mode))

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.DEBUG,
    **fields: Any,
) -> None:
    """Emit a structured log event as a single JSON line.

    Keys whose values are ``None`` are dropped to keep logs concise. The
    payload is only built when ``level`` is enabled on ``logger``.
    """
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=repr))


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "apply_log_settings",
    "configure_logger",
    "get_logger",
    "log_event",
]
