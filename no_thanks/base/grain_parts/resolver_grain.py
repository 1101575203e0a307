"""Grain for promise-constructor style resolvers.

Same bookkeeping as :func:`awaitable_grain`, expressed over an imperative
``resolver(resolve, reject)`` function instead of an awaitable.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..cancellation import CancellationChain
from ..errors import classify_exception
from ..logging import get_logger, log_event
from .finalize_quietly import finalize_quietly

_logger = get_logger("no_thanks.grains")

Resolve = Callable[..., None]
Reject = Callable[[BaseException], None]
Resolver = Callable[[Resolve, Reject], Any]


def resolver_grain(
    chain: Optional[CancellationChain],
    resolver: Resolver,
    *,
    collect_late: bool = False,
) -> Resolver:
    def run(resolve: Resolve, reject: Reject) -> None:
        if chain is not None and chain.canceled:
            finalize_quietly(chain)
            return

        def on_resolve(value: Any = None) -> None:
            if chain is None:
                resolve(value)
                return
            if collect_late:
                chain.collect(value)
            else:
                chain.add_result(value)
            if not chain.canceled:
                resolve(value)
            else:
                finalize_quietly(chain)

        def on_reject(exc: BaseException) -> None:
            if chain is None or not chain.canceled:
                reject(exc)
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

        resolver(on_resolve, on_reject)

    return run


__all__ = ["resolver_grain", "Resolver", "Resolve", "Reject"]
