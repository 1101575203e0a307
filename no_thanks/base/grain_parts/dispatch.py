"""Pick a grain by the shape of the wrapped value."""
from __future__ import annotations

import functools
from typing import Any, Callable, Optional

from ..cancellation import CancellationChain
from .awaitable_grain import awaitable_grain
from .future_helpers import is_awaitable
from .value_grain import value_grain


def grain(chain: Optional[CancellationChain], value: Any) -> Any:
    """Make one sub-unit of work cancellation-aware.

    Awaitables get a future back (await it); plain values are recorded and
    returned unchanged. Sub-units started before cancellation keep their late
    results for the finalizer.
    """
    if is_awaitable(value):
        return awaitable_grain(chain, value, collect_late=True)
    return value_grain(chain, value)


def bind_grain(chain: Optional[CancellationChain]) -> Callable[[Any], Any]:
    """Return the one-argument grain handed to fine-grained task callables."""
    return functools.partial(grain, chain)


__all__ = ["grain", "bind_grain"]
