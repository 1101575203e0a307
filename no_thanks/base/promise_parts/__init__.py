"""Promise parts package: the cancellable task wrapper."""

from .cancellable_promise import CancellablePromise

__all__ = ["CancellablePromise"]
