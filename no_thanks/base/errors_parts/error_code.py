"""
Normalized error codes for the cancellation layer.

Defines the `ErrorCode` enumeration attached to every library exception and
to structured log events. Values are lowercase snake_case and are considered
a stable public contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated error codes representing failure categories."""

    CONSTRUCTION = "construction"
    RESUMABLE_TYPE = "resumable_type"
    FINALIZER = "finalizer"
    CONFIGURATION = "configuration"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
