"""Cancellable task wrapper (public API facade).

``CancellablePromise`` composes an ``asyncio.Future`` with a cancellation
chain link and exposes ``then``, ``catch``, ``finally_`` and ``cancel``.
"""

from .promise_parts.cancellable_promise import CancellablePromise

__all__ = ["CancellablePromise"]
