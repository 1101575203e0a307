"""Grain for awaitables.

Wraps an awaitable into a new future that takes part in cancellation
bookkeeping:

* canceled before wrapping: nothing is scheduled, finalization is requested
  immediately and the returned future never settles;
* fulfilled while not canceled: the result is recorded into ``chain`` and the
  returned future is fulfilled;
* fulfilled after cancellation: finalization is requested instead and the
  returned future never settles. With ``collect_late`` the late result is
  still recorded so the finalizer can release it;
* rejected while not canceled: the rejection is forwarded;
* rejected after cancellation: the error is muted and finalization is
  requested.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Optional

from ..cancellation import CancellationChain
from ..errors import classify_exception
from ..logging import get_logger, log_event
from .finalize_quietly import finalize_quietly
from .future_helpers import outcome, settle, transfer

_logger = get_logger("no_thanks.grains")


def awaitable_grain(
    chain: Optional[CancellationChain],
    awaitable: Awaitable[Any],
    *,
    collect_late: bool = False,
) -> "asyncio.Future[Any]":
    loop = asyncio.get_running_loop()
    wrapped: "asyncio.Future[Any]" = loop.create_future()

    if chain is not None and chain.canceled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        finalize_quietly(chain)
        return wrapped

    inner = asyncio.ensure_future(awaitable)

    def _on_settled(src: "asyncio.Future[Any]") -> None:
        if chain is None:
            transfer(src, wrapped)
            return
        value, exc = outcome(src)
        if exc is not None:
            if not chain.canceled:
                settle(wrapped, exc=exc)
                return
            log_event(
                _logger,
                "grain.muted_rejection",
                chain.context.log_context(chain.depth),
                level=logging.DEBUG,
                error_code=classify_exception(exc).value,
                failure_class=exc.__class__.__name__,
            )
            finalize_quietly(chain)
            return
        if collect_late:
            chain.collect(value)
        else:
            chain.add_result(value)
        if not chain.canceled:
            settle(wrapped, value)
        else:
            finalize_quietly(chain)

    inner.add_done_callback(_on_settled)
    return wrapped


__all__ = ["awaitable_grain"]
