"""Finalization entry point for loop callbacks.

Grains request finalization from inside ``add_done_callback`` callbacks,
where a raised exception would only reach the loop's exception handler. The
finalizer outcome normally travels through the resolver registered by
``cancel()``; anything that still escapes is logged here with its traceback.
"""
from __future__ import annotations

import logging

from ..cancellation import CancellationChain
from ..errors import classify_exception
from ..logging import get_logger, log_event

_logger = get_logger("no_thanks.grains")


def finalize_quietly(chain: CancellationChain) -> None:
    try:
        chain.finalize()
    except Exception as exc:
        log_event(
            _logger,
            "finalize.unobserved_error",
            chain.context.log_context(chain.depth),
            level=logging.ERROR,
            error_code=classify_exception(exc, during_finalize=True).value,
            failure_class=exc.__class__.__name__,
            error=str(exc),
        )


__all__ = ["finalize_quietly"]
