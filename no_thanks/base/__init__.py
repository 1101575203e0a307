"""
Cancellation Base Package

Exports the cancellation engine:
- Cancellation state and chain links (``cancellation``)
- Grain wrapping strategies (``grains``)
- The cancellable task wrapper (``promise``)
- Task adapters and the resumable-computation driver
- Error taxonomy and structured logging helpers
"""

from .errors import (
    ConfigurationError,
    ConstructionError,
    ErrorCode,
    NoThanksError,
    ResumableTypeError,
    classify_exception,
)
from .cancellation import CancellationChain, CancellationContext
from .grains import awaitable_grain, bind_grain, grain, resolver_grain, value_grain
from .promise import CancellablePromise
from .adapters import cancellable, interruptible
from .coroutine import coroutine

__all__ = [
    # Errors
    "ErrorCode",
    "NoThanksError",
    "ConstructionError",
    "ResumableTypeError",
    "ConfigurationError",
    "classify_exception",
    # State
    "CancellationContext",
    "CancellationChain",
    # Grains
    "grain",
    "bind_grain",
    "value_grain",
    "awaitable_grain",
    "resolver_grain",
    # Handles and adapters
    "CancellablePromise",
    "cancellable",
    "interruptible",
    "coroutine",
]
