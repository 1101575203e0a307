"""Shared cancellation state for one root task.

A single :class:`CancellationContext` is created per root task (or per
invocation of a task factory) and shared by reference by every
:class:`~no_thanks.base.cancellation_parts.cancellation_chain.CancellationChain`
link derived from it, so cancelling any derived handle cancels the whole
pipeline.

There is no real concurrency: every method runs within one synchronous turn
of the event loop, which is what makes the ``finalized`` check-and-set guard
sufficient without locks.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Optional

from ..errors import ConstructionError, classify_exception
from ..logging import LogContext, get_logger, log_event
from .finalization_resolver import FinalizationResolver

_logger = get_logger("no_thanks.cancellation")

Finalizer = Callable[..., Any]


def _do_nothing(*_results: Any) -> None:
    return None


class CancellationContext:
    """Canceled/finalized flags plus the finalizer of one pipeline.

    Invariant: the finalizer runs at most once, and only after ``cancel()``.
    """

    def __init__(self, finalizer: Optional[Finalizer] = None, interruptible: bool = False) -> None:
        if finalizer is not None and not callable(finalizer):
            raise ConstructionError(f"finalizer must be callable, got {type(finalizer).__name__}")
        self._canceled = False
        self._finalizer: Finalizer = finalizer if finalizer is not None else _do_nothing
        self._finalized = False
        self._finalization_resolver: Optional[FinalizationResolver] = None
        self._interruptible = bool(interruptible)
        self.id = uuid.uuid4().hex[:12]

    @property
    def canceled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._canceled

    @property
    def finalized(self) -> bool:
        """Whether the finalizer has already been invoked."""
        return self._finalized

    @property
    def interruptible(self) -> bool:
        """Whether ``cancel()`` finalizes without waiting for in-flight work."""
        return self._interruptible

    def log_context(self, depth: Optional[int] = None) -> LogContext:
        return LogContext(chain_id=self.id, depth=depth, interruptible=self._interruptible)

    def cancel(self) -> bool:
        """Mark the pipeline canceled; returns ``True`` only on the first call."""
        if self._canceled:
            return False
        self._canceled = True
        return True

    def set_finalization_resolver(
        self,
        resolve: Callable[[Any], None],
        reject: Callable[[BaseException], None],
    ) -> None:
        """Register where the finalizer outcome goes once ``finalize`` runs."""
        self._finalization_resolver = FinalizationResolver(resolve, reject)

    def finalize(self, *results: Any) -> Any:
        """Invoke the finalizer once, after cancellation.

        With a registered resolver the outcome (value, awaitable, or
        exception) is delivered through it and nothing is raised here.
        Without one the finalizer's return value is returned and its
        exception propagates to the caller. Calls made before ``cancel()``
        or after the first finalization return ``None``.
        """
        if not self._canceled or self._finalized:
            return None
        self._finalized = True
        ctx = self.log_context()
        log_event(_logger, "finalize.start", ctx, results=len(results))
        resolver = self._finalization_resolver
        try:
            result = self._finalizer(*results)
        except Exception as exc:
            log_event(
                _logger,
                "finalize.error",
                ctx,
                level=logging.WARNING,
                error_code=classify_exception(exc, during_finalize=True).value,
                failure_class=exc.__class__.__name__,
            )
            if resolver is None:
                raise
            resolver.reject(exc)
            return None
        log_event(_logger, "finalize.done", ctx)
        if resolver is not None:
            resolver.resolve(result)
        return result

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationContext(id={self.id!r}, canceled={self._canceled}, "
            f"finalized={self._finalized}, interruptible={self._interruptible})"
        )


__all__ = ["CancellationContext", "Finalizer"]
