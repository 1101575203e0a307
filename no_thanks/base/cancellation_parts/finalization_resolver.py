"""Pending finalization callback pair.

Holds the resolve/reject callables registered by a non-interruptible
``cancel()`` so that whichever code path eventually runs the finalizer can
deliver its outcome to the future returned by ``cancel()``.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple


class FinalizationResolver(NamedTuple):
    """Resolve/reject pair for the future returned by ``cancel()``."""

    resolve: Callable[[Any], None]
    reject: Callable[[BaseException], None]


__all__ = ["FinalizationResolver"]
