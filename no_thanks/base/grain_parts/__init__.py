"""Grain parts package: value, awaitable and resolver wrapping strategies."""

from .awaitable_grain import awaitable_grain
from .dispatch import bind_grain, grain
from .resolver_grain import resolver_grain
from .value_grain import value_grain

__all__ = ["awaitable_grain", "bind_grain", "grain", "resolver_grain", "value_grain"]
