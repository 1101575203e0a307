"""Error taxonomy public surface.

This module re-exports the one-class-per-concern implementations under
``no_thanks.base.errors_parts`` to maintain a stable import path.

Finalizer failures are not wrapped: the exception raised by a finalizer (or
by the awaitable it returns) is delivered unchanged through the future
returned by ``cancel()`` and tagged ``finalizer`` in structured logs.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.no_thanks_error import (
    ConfigurationError,
    ConstructionError,
    NoThanksError,
    ResumableTypeError,
)
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "NoThanksError",
    "ConstructionError",
    "ResumableTypeError",
    "ConfigurationError",
    "classify_exception",
]
