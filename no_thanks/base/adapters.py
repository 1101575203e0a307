"""Task adapters: turn a task of any shape into a cancellable handle.

Task shapes
-----------
* ``CancellablePromise``: returned unchanged.
* ``None``: an immediately available empty task.
* awaitable (coroutine, task, future): wrapped with one fresh
  cancellation state.
* callable (typically an ``async def``): a reusable factory is returned.
  Each call creates a fresh cancellation state and root link, calls the
  task (with a grain function prepended to its arguments when
  ``fine_grained``) and wraps whatever it returns. The factory is
  multi-shot; every handle it produces is one-shot.
* any other value: an immediately available task producing that value.

``interruptible`` differs only in the flag given to the root state: its
``cancel()`` finalizes right away instead of waiting for in-flight work.
Neither variant stops the underlying operation; only the finalizer can.
"""
from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Optional

from .cancellation import CancellationChain, CancellationContext, Finalizer
from .errors import ConstructionError
from .grains import bind_grain
from .grain_parts.future_helpers import is_awaitable
from .promise import CancellablePromise

TopGrainFactory = Callable[[CancellationChain], Any]


def resolve_fine_grained(fine_grained: Optional[bool]) -> bool:
    """Return ``fine_grained`` or, when ``None``, the configured default."""
    if fine_grained is None:
        # Local import to break the config -> errors -> base package cycle.
        from ..config import get_settings

        return get_settings().fine_grained
    if not isinstance(fine_grained, bool):
        raise ConstructionError(f"fine_grained must be a bool, got {type(fine_grained).__name__}")
    return fine_grained


def check_finalizer(finalizer: Optional[Finalizer]) -> None:
    if finalizer is not None and not callable(finalizer):
        raise ConstructionError(f"finalizer must be callable, got {type(finalizer).__name__}")


def _ready(value: Any) -> "asyncio.Future[Any]":
    fut = asyncio.get_running_loop().create_future()
    fut.set_result(value)
    return fut


def wrap_top(create_top: TopGrainFactory, finalizer: Optional[Finalizer], interruptible: bool) -> CancellablePromise:
    """Create the root state and link, build the top task and wrap it."""
    chain = CancellationChain(CancellationContext(finalizer, interruptible))
    top = create_top(chain)
    if not is_awaitable(top):
        top = _ready(top)
    return CancellablePromise(top, chain)


def _granulate(task: Any, fine_grained: bool, wrapper: Callable[[TopGrainFactory], CancellablePromise]) -> Any:
    if task is None:
        return wrapper(lambda _chain: _ready(None))
    if is_awaitable(task):
        return wrapper(lambda _chain: task)
    if callable(task):

        @functools.wraps(task)
        def factory(*args: Any, **kwargs: Any) -> CancellablePromise:
            if fine_grained:
                return wrapper(lambda chain: task(bind_grain(chain), *args, **kwargs))
            return wrapper(lambda _chain: task(*args, **kwargs))

        return factory
    return wrapper(lambda _chain: _ready(task))


def _adapt(task: Any, finalizer: Optional[Finalizer], fine_grained: Optional[bool], interruptible: bool) -> Any:
    if isinstance(task, CancellablePromise):
        return task
    check_finalizer(finalizer)
    fine = resolve_fine_grained(fine_grained)
    return _granulate(task, fine, lambda create_top: wrap_top(create_top, finalizer, interruptible))


def cancellable(task: Any, finalizer: Optional[Finalizer] = None, fine_grained: Optional[bool] = None) -> Any:
    """Make ``task`` cancellable.

    Parameters
    ----------
    task:
        Awaitable, callable returning an awaitable, plain value, ``None`` or
        an existing ``CancellablePromise``.
    finalizer:
        Called once after ``cancel()`` with the results collected so far.
        May return a value or an awaitable.
    fine_grained:
        For callable tasks, prepend a grain function to the arguments.
        ``None`` uses the configured default (``True``).

    Returns
    -------
    CancellablePromise | Callable[..., CancellablePromise]
        A handle, or a factory of handles when ``task`` is callable.

    Notes
    -----
    ``cancel()`` waits for in-flight work before finalizing by default. When
    the ``interruptible`` setting is on (``NO_THANKS_INTERRUPTIBLE`` or the
    config file), handles built here behave exactly like those from
    :func:`interruptible` and finalize inside ``cancel()``.

    Raises
    ------
    ConfigurationError
        If the settings sources hold invalid values.
    """
    # Local import to break the config -> errors -> base package cycle.
    from ..config import get_settings

    return _adapt(task, finalizer, fine_grained, get_settings().interruptible)


def interruptible(task: Any, finalizer: Optional[Finalizer] = None, fine_grained: Optional[bool] = None) -> Any:
    """Like :func:`cancellable`, but ``cancel()`` finalizes immediately."""
    return _adapt(task, finalizer, fine_grained, True)


__all__ = [
    "cancellable",
    "interruptible",
    "resolve_fine_grained",
    "check_finalizer",
    "wrap_top",
]
