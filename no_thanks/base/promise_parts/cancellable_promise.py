"""Cancellable promise: the handle returned by every task adapter.

The handle owns an ``asyncio.Future`` (composition, not subclassing) and the
:class:`CancellationChain` link that marks where in the pipeline it sits.
``then``/``catch`` grow the chain by one link and return a new handle owning
it; ``cancel`` flips the shared state and returns a future for the
finalizer's outcome.

Timing of ``cancel()``
----------------------
* default: the finalizer runs once the in-flight work settles, either through
  a grain that observes the cancellation or through this handle's own future
  settling. Cancellation mutes the outcome, not the timing.
* interruptible: the finalizer runs synchronously inside ``cancel()``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generator, Optional, Union

from ..cancellation import CancellationChain, CancellationContext, Finalizer
from ..errors import ConstructionError
from ..grains import awaitable_grain, grain, resolver_grain
from ..grain_parts.future_helpers import adopt, is_awaitable, outcome, settle
from ..logging import get_logger, log_event

_logger = get_logger("no_thanks.promise")

OnFulfilled = Callable[[Any], Any]
OnRejected = Callable[[BaseException], Any]


def _make_chain(ctx_or_finalizer: Union[CancellationChain, CancellationContext, Finalizer, None]) -> CancellationChain:
    if isinstance(ctx_or_finalizer, CancellationChain):
        return ctx_or_finalizer
    if ctx_or_finalizer is None or isinstance(ctx_or_finalizer, CancellationContext) or callable(ctx_or_finalizer):
        return CancellationChain(ctx_or_finalizer)
    raise ConstructionError(
        "second argument of CancellablePromise must be a finalizer, "
        f"CancellationChain or CancellationContext, got {type(ctx_or_finalizer).__name__}"
    )


def _resolved(value: Any = None) -> "asyncio.Future[Any]":
    fut = asyncio.get_running_loop().create_future()
    fut.set_result(value)
    return fut


class CancellablePromise:
    """Awaitable handle with ``then``/``catch``/``finally_``/``cancel``.

    Parameters
    ----------
    resolver:
        Either an awaitable (coroutine, task, future or another handle) or a
        promise-constructor style callable ``resolver(resolve, reject)``.
    ctx_or_finalizer:
        ``None`` for a fresh chain without finalizer, a finalizer callable, a
        :class:`CancellationContext`, or the :class:`CancellationChain` link
        this handle should own.

    Raises
    ------
    ConstructionError
        If ``resolver`` is neither awaitable nor callable.
    RuntimeError
        If no event loop is running.
    """

    def __init__(
        self,
        resolver: Any,
        ctx_or_finalizer: Union[CancellationChain, CancellationContext, Finalizer, None] = None,
    ) -> None:
        chain = _make_chain(ctx_or_finalizer)
        loop = asyncio.get_running_loop()
        if is_awaitable(resolver):
            future = awaitable_grain(chain, resolver)
        elif callable(resolver):
            future = loop.create_future()
            run = resolver_grain(chain, resolver)
            try:
                run(
                    lambda value=None: adopt(future, value),
                    lambda exc: settle(future, exc=exc),
                )
            except Exception as exc:
                settle(future, exc=exc)
        else:
            raise ConstructionError(
                "resolver must be an awaitable or a resolver function; "
                f"got {type(resolver).__name__}. A task passed to cancellable() "
                "should be an awaitable or an async function"
            )
        self._future: "asyncio.Future[Any]" = future
        self._chain: CancellationChain = chain

    @classmethod
    def _from_future(cls, future: "asyncio.Future[Any]", chain: CancellationChain) -> "CancellablePromise":
        promise = cls.__new__(cls)
        promise._future = future
        promise._chain = chain
        return promise

    # Introspection ---------------------------------------------------------
    @property
    def chain(self) -> CancellationChain:
        """The chain link this handle currently owns."""
        return self._chain

    @property
    def canceled(self) -> bool:
        return self._chain.canceled

    def done(self) -> bool:
        """Whether the underlying future has settled."""
        return self._future.done()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    # Chaining --------------------------------------------------------------
    def then(
        self,
        on_fulfilled: Optional[OnFulfilled] = None,
        on_rejected: Optional[OnRejected] = None,
    ) -> "CancellablePromise":
        """Attach continuations; returns a new handle owning the next link."""
        next_chain = self._next_chain()
        return self._pipe(
            self._wrap_on_fulfilled(on_fulfilled, next_chain),
            self._wrap_on_rejected(on_rejected),
            next_chain,
        )

    def catch(self, on_rejected: OnRejected) -> "CancellablePromise":
        """Attach a rejection handler; fulfilment values pass through."""
        return self._pipe(None, self._wrap_on_rejected(on_rejected), self._next_chain())

    def finally_(self, on_finally: Callable[[], Any]) -> "CancellablePromise":
        """Run ``on_finally()`` on settlement, passing the outcome through.

        Once the pipeline is canceled the handler is skipped and the outcome
        is muted: the returned handle resolves with ``None``.
        """
        wrapped = self._wrap_on_finally(on_finally)
        chain = self._chain

        def passthrough(value: Any) -> Any:
            first = wrapped()
            if chain.canceled:
                return None
            return _after(first, lambda: value)

        def rethrow(exc: BaseException) -> Any:
            def _raise() -> Any:
                raise exc

            first = wrapped()
            if chain.canceled:
                return None
            return _after(first, _raise)

        return self._pipe(passthrough, rethrow, self._next_chain())

    def _next_chain(self) -> CancellationChain:
        # No links are grown past cancellation; the handle stays on this one.
        nxt = self._chain.next()
        return nxt if nxt is not None else self._chain

    def _pipe(
        self,
        on_fulfilled: Optional[OnFulfilled],
        on_rejected: Optional[OnRejected],
        next_chain: CancellationChain,
    ) -> "CancellablePromise":
        target: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()

        def _on_settled(src: "asyncio.Future[Any]") -> None:
            value, exc = outcome(src)
            handler = on_fulfilled if exc is None else on_rejected
            if handler is None:
                settle(target, value, exc)
                return
            try:
                result = handler(value if exc is None else exc)
            except Exception as err:
                settle(target, exc=err)
                return
            adopt(target, result)

        self._future.add_done_callback(_on_settled)
        return type(self)._from_future(target, next_chain)

    def _wrap_on_fulfilled(
        self, handler: Optional[OnFulfilled], next_chain: CancellationChain
    ) -> Optional[OnFulfilled]:
        if handler is None:
            return None
        chain = self._chain

        def wrapped(value: Any) -> Any:
            if chain.canceled:
                chain.finalize()
                return None
            result = handler(value)
            if is_awaitable(result):
                return grain(next_chain, result)
            next_chain.add_result(result)
            return result

        return wrapped

    def _wrap_on_rejected(self, handler: Optional[OnRejected]) -> Optional[OnRejected]:
        if handler is None:
            return None
        chain = self._chain

        def wrapped(exc: BaseException) -> Any:
            if chain.canceled:
                return None
            return handler(exc)

        return wrapped

    def _wrap_on_finally(self, handler: Callable[[], Any]) -> Callable[[], Any]:
        chain = self._chain

        def wrapped() -> Any:
            if chain.canceled:
                chain.finalize()
                return None
            return handler()

        return wrapped

    # Cancellation ----------------------------------------------------------
    def cancel(self) -> "asyncio.Future[Any]":
        """Cancel the whole pipeline this handle belongs to.

        The underlying work is not interrupted; its result or error is muted
        and the finalizer runs once with the results collected so far.

        Returns
        -------
        asyncio.Future
            Settles with the finalizer's return value (or the outcome of the
            awaitable it returns) and rejects with the finalizer's exception.
            Repeated calls return an already-resolved ``None`` future.
        """
        chain = self._chain
        ctx = chain.context.log_context(chain.depth)
        if not chain.cancel():
            log_event(_logger, "cancel.repeat", ctx)
            return _resolved(None)
        log_event(_logger, "cancel.request", ctx, level=logging.INFO)
        return self._finalize()

    def _finalize(self) -> "asyncio.Future[Any]":
        chain = self._chain
        result: "asyncio.Future[Any]" = asyncio.get_running_loop().create_future()

        def resolve(value: Any) -> None:
            adopt(result, value)

        def reject(exc: BaseException) -> None:
            settle(result, exc=exc)

        if chain.interruptible:
            try:
                resolve(chain.finalize())
            except Exception as exc:
                reject(exc)
            return result

        chain.set_finalization_resolver(resolve, reject)
        self._future.add_done_callback(lambda _src: chain.finalize())
        return result

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        state = "canceled" if self.canceled else ("settled" if self.done() else "pending")
        return f"CancellablePromise({state}, depth={self._chain.depth})"


def _after(first: Any, then_call: Callable[[], Any]) -> Any:
    """Call ``then_call`` after ``first`` settles, if it is awaitable."""
    if not is_awaitable(first):
        return then_call()

    async def _wait() -> Any:
        await first
        return then_call()

    return _wait()


__all__ = ["CancellablePromise"]
