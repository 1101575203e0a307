"""Small helpers over ``asyncio.Future`` used by grains and promises.

``asyncio.Future`` stands in for the host promise type: ``set_result`` is
fulfilment and ``set_exception`` is rejection. A source future cancelled at
the asyncio level is reported as a ``CancelledError`` rejection.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Optional, Tuple


def is_awaitable(value: Any) -> bool:
    return inspect.isawaitable(value)


def outcome(fut: "asyncio.Future[Any]") -> Tuple[Any, Optional[BaseException]]:
    """Return ``(value, None)`` or ``(None, exc)`` for a settled future."""
    if fut.cancelled():
        return None, asyncio.CancelledError()
    exc = fut.exception()
    if exc is not None:
        return None, exc
    return fut.result(), None


def settle(fut: "asyncio.Future[Any]", value: Any = None, exc: Optional[BaseException] = None) -> None:
    """Fulfil or reject ``fut`` unless it is already settled."""
    if fut.done():
        return
    if exc is None:
        fut.set_result(value)
    elif isinstance(exc, asyncio.CancelledError):
        fut.cancel()
    else:
        fut.set_exception(exc)


def transfer(source: "asyncio.Future[Any]", target: "asyncio.Future[Any]") -> None:
    """Copy the outcome of a settled ``source`` into ``target``."""
    value, exc = outcome(source)
    settle(target, value, exc)


def adopt(target: "asyncio.Future[Any]", value: Any) -> None:
    """Settle ``target`` with ``value``, following it first if awaitable."""
    if target.done():
        return
    if is_awaitable(value):
        inner = asyncio.ensure_future(value)
        inner.add_done_callback(lambda src: transfer(src, target))
    else:
        target.set_result(value)


__all__ = ["is_awaitable", "outcome", "settle", "transfer", "adopt"]
