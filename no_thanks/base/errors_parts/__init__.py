"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `no_thanks.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .no_thanks_error import (
    ConfigurationError,
    ConstructionError,
    NoThanksError,
    ResumableTypeError,
)
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "NoThanksError",
    "ConstructionError",
    "ResumableTypeError",
    "ConfigurationError",
    "classify_exception",
]
