"""
Map arbitrary exceptions to normalized :class:`ErrorCode` values.

Used by structured logging so that finalizer failures and muted rejections
are tagged consistently regardless of the exception type raised by caller
code.
"""
from __future__ import annotations

import asyncio

from .error_code import ErrorCode
from .no_thanks_error import NoThanksError


def classify_exception(exc: BaseException, *, during_finalize: bool = False) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ``NoThanksError`` passthrough.
        2. ``asyncio.CancelledError`` maps to ``CANCELLED``.
        3. Anything raised by a finalizer maps to ``FINALIZER``.
        4. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, NoThanksError):
        return exc.code
    if isinstance(exc, asyncio.CancelledError):
        return ErrorCode.CANCELLED
    if during_finalize:
        return ErrorCode.FINALIZER
    return ErrorCode.UNKNOWN


__all__ = ["classify_exception"]
