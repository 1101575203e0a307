"""Resumable computations: generators that yield awaitables.

``coroutine(generator_function)`` returns a factory. Each call creates the
generator, checks it can be resumed, and drives it on the event loop: every
yielded awaitable is awaited, its value is recorded into the root link and
sent back into the generator; a failure is thrown into it.

Two cancellation granularities:

* fine-grained (default): every step goes through a grain, and before every
  step the driver checks the shared state; once canceled it stops stepping
  for good and requests finalization. A step in flight at cancel time never
  resumes the generator. The rest of the generator body does not run, and
  the generator is not closed by the driver.
* coarse: the generator always runs to completion and every intermediate
  value is recorded, but after cancellation the final value is not
  delivered. Steps are awaited directly, because a grain would stop
  delivering values once canceled. Finalization happens once stepping ends.
"""
from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Generator, Optional

from .adapters import check_finalizer, resolve_fine_grained, wrap_top
from .cancellation import CancellationChain, Finalizer
from .errors import ConstructionError, ResumableTypeError
from .grain_parts.finalize_quietly import finalize_quietly
from .grain_parts.future_helpers import is_awaitable
from .grains import awaitable_grain, value_grain
from .logging import get_logger, log_event
from .promise import CancellablePromise

_logger = get_logger("no_thanks.coroutine")

Resumable = Generator[Any, Any, Any]


def _is_resumable(obj: Any) -> bool:
    return callable(getattr(obj, "send", None)) and callable(getattr(obj, "throw", None))


def _drop(step: Any) -> None:
    if inspect.iscoroutine(step):
        step.close()


async def run_resumable(chain: CancellationChain, gen: Resumable) -> Any:
    """Coarse driver: step to completion, recording every settled value."""
    send_value: Any = None
    error: Optional[BaseException] = None
    while True:
        try:
            step = gen.throw(error) if error is not None else gen.send(send_value)
        except StopIteration as stop:
            return stop.value
        error = None
        if is_awaitable(step):
            try:
                send_value = await step
            except Exception as exc:
                error = exc
                continue
        else:
            send_value = step
        chain.collect(send_value)


async def run_fine_grained_resumable(chain: CancellationChain, gen: Resumable) -> Any:
    """Fine-grained driver: stop stepping as soon as the chain is canceled."""
    send_value: Any = None
    error: Optional[BaseException] = None
    steps = 0
    while True:
        if chain.canceled:
            log_event(_logger, "resumable.halt", chain.context.log_context(chain.depth), steps=steps)
            finalize_quietly(chain)
            return None
        try:
            step = gen.throw(error) if error is not None else gen.send(send_value)
        except StopIteration as stop:
            return stop.value
        steps += 1
        error = None
        if chain.canceled:
            _drop(step)
            continue
        if is_awaitable(step):
            try:
                send_value = await awaitable_grain(chain, step)
            except Exception as exc:
                error = exc
                continue
        else:
            send_value = value_grain(chain, step)


def coroutine(
    generator: Callable[..., Resumable],
    finalizer: Optional[Finalizer] = None,
    fine_grained: Optional[bool] = None,
) -> Callable[..., CancellablePromise]:
    """Build a factory of cancellable handles from a generator function.

    Raises
    ------
    ConstructionError
        If ``generator`` or ``finalizer`` is not callable.
    ResumableTypeError
        From the factory, if ``generator(...)`` does not return a
        generator-like object.
    """
    if not callable(generator):
        raise ConstructionError(f"coroutine() expects a generator function, got {type(generator).__name__}")
    check_finalizer(finalizer)
    fine = resolve_fine_grained(fine_grained)
    runner = run_fine_grained_resumable if fine else run_resumable

    # Local import to break the config -> errors -> base package cycle.
    from ..config import get_settings

    interruptible = get_settings().interruptible

    @functools.wraps(generator)
    def factory(*args: Any, **kwargs: Any) -> CancellablePromise:
        gen = generator(*args, **kwargs)
        if inspect.iscoroutine(gen) or not _is_resumable(gen):
            _drop(gen)
            raise ResumableTypeError(
                f"{getattr(generator, '__name__', generator)!s} did not return a generator "
                f"(got {type(gen).__name__}); coroutine() needs a generator function"
            )
        return wrap_top(lambda chain: runner(chain, gen), finalizer, interruptible)

    return factory


__all__ = ["coroutine", "run_resumable", "run_fine_grained_resumable"]
