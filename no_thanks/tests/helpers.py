"""Shared helpers for the asyncio test-suite.

Exports:
    - delayed(value, delay, log=None, name=None): coroutine resolving to
      ``value`` after ``delay`` seconds, optionally logging start/done.
    - failing(exc, delay): coroutine raising ``exc`` after ``delay`` seconds.
    - Recorder: finalizer double capturing every call's arguments.
    - settle_for(seconds): let the loop run pending callbacks for a while.
"""
from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional, Tuple


async def delayed(value: Any, delay: float, log: Optional[List[str]] = None, name: Optional[str] = None) -> Any:
    label = name if name is not None else str(value)
    if log is not None:
        log.append(f"start {label}")
    await asyncio.sleep(delay)
    if log is not None:
        log.append(f"done {label}")
    return value


async def failing(exc: BaseException, delay: float = 0.0) -> Any:
    await asyncio.sleep(delay)
    raise exc


class Recorder:
    """Finalizer double; returns ``result`` and remembers its calls."""

    def __init__(self, result: Any = None) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.times: List[float] = []
        self.result = result

    def __call__(self, *results: Any) -> Any:
        self.calls.append(results)
        self.times.append(time.monotonic())
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


async def settle_for(seconds: float = 0.0) -> None:
    """Sleep so that scheduled callbacks get a chance to run."""
    await asyncio.sleep(seconds)
    # Two extra turns for callbacks chained through add_done_callback.
    await asyncio.sleep(0)
    await asyncio.sleep(0)
