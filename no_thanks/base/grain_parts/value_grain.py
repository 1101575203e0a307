"""Grain for plain values: record into the current link and pass through."""
from __future__ import annotations

from typing import Any, Optional

from ..cancellation import CancellationChain


def value_grain(chain: Optional[CancellationChain], value: Any) -> Any:
    if chain is not None:
        chain.add_result(value)
    return value


__all__ = ["value_grain"]
