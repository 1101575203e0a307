"""
Structured exception types raised by the cancellation layer.

Every exception carries a normalized :class:`ErrorCode`. The concrete types
also derive from the matching builtin (``TypeError`` / ``ValueError``) so
callers that do not know this package can still handle them generically.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode


class NoThanksError(Exception):
    """Base class for errors raised by ``no_thanks``.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code.value}: {self.message}"


class ConstructionError(NoThanksError, TypeError):
    """The task or finalizer handed to a constructor has an unusable shape."""

    code = ErrorCode.CONSTRUCTION


class ResumableTypeError(NoThanksError, TypeError):
    """A resumable factory did not produce a generator-like object."""

    code = ErrorCode.RESUMABLE_TYPE


class ConfigurationError(NoThanksError, ValueError):
    """Settings could not be parsed or validated."""

    code = ErrorCode.CONFIGURATION


__all__ = [
    "NoThanksError",
    "ConstructionError",
    "ResumableTypeError",
    "ConfigurationError",
]
