"""no_thanks package

Cooperative cancellation for asyncio pipelines.

Purpose:
    Start an asynchronous computation and later request its cancellation.
    Cancellation mutes the eventual result or error instead of propagating
    it, and triggers exactly one finalizer call carrying the partial results
    produced so far. The underlying work is never interrupted; releasing
    resources is the finalizer's job.

Public API (re-exported):
    - Version: ``__version__``
    - Adapters: :func:`cancellable` (alias ``create``), :func:`interruptible`
      (alias ``create_interruptible``), :func:`coroutine` (alias
      ``from_resumable``)
    - Handle: :class:`CancellablePromise`
    - Exceptions: :class:`NoThanksError`, :class:`ConstructionError`,
      :class:`ResumableTypeError`, :class:`ConfigurationError`,
      :class:`ErrorCode`
    - Settings: :func:`get_settings`
"""

from .base.errors import (
    ConfigurationError,
    ConstructionError,
    ErrorCode,
    NoThanksError,
    ResumableTypeError,
)
from .base.promise import CancellablePromise
from .base.adapters import cancellable, interruptible
from .base.coroutine import coroutine
from .config import get_settings

__version__ = "0.1.0"

create = cancellable
create_interruptible = interruptible
from_resumable = coroutine

__all__ = [
    # Version
    "__version__",
    # Adapters
    "cancellable",
    "interruptible",
    "coroutine",
    "create",
    "create_interruptible",
    "from_resumable",
    # Handle
    "CancellablePromise",
    # Exceptions
    "ErrorCode",
    "NoThanksError",
    "ConstructionError",
    "ResumableTypeError",
    "ConfigurationError",
    # Settings
    "get_settings",
]
