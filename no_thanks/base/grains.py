"""Grain wrapping strategies (public API facade).

A grain makes one unit of work cancellation-aware: its result is recorded
into the current chain link while the pipeline is live, and finalization is
triggered instead of delivery once it is canceled.
"""

from .grain_parts.awaitable_grain import awaitable_grain
from .grain_parts.dispatch import bind_grain, grain
from .grain_parts.resolver_grain import resolver_grain
from .grain_parts.value_grain import value_grain

__all__ = ["awaitable_grain", "bind_grain", "grain", "resolver_grain", "value_grain"]
