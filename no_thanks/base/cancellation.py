"""Cooperative cancellation state (public API facade).

Purpose
-------
Expose the cancellation bookkeeping constructs via the canonical
``no_thanks.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationContext`` is the one mutable record shared by a pipeline:
  canceled/finalized flags, the finalizer and the interruptible flag.
- ``CancellationChain`` is one stage's result buffer plus links to its
  neighbours; finalization aggregates buffers from the root forward.
"""

from .cancellation_parts.cancellation_context import CancellationContext, Finalizer
from .cancellation_parts.cancellation_chain import CancellationChain

__all__ = ["CancellationContext", "CancellationChain", "Finalizer"]
