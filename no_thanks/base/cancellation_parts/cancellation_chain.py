"""Chain of result buffers, one link per pipeline stage.

Each handle owns one link. The first ``then``/``catch`` on a handle grows the
chain by one link through :meth:`CancellationChain.next`; later continuation
calls on the same handle reuse that cached link, so results of sibling
handlers land in the same buffer. On finalization the buffers from the root
up to the finalizing link are concatenated in root-to-current order.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple, Union

from ..errors import ConstructionError
from .cancellation_context import CancellationContext, Finalizer


class CancellationChain:
    """One stage of a cancellable pipeline."""

    def __init__(self, ctx_or_finalizer: Union[CancellationContext, Finalizer, None] = None) -> None:
        if isinstance(ctx_or_finalizer, CancellationContext):
            ctx = ctx_or_finalizer
        elif ctx_or_finalizer is None:
            ctx = CancellationContext()
        elif callable(ctx_or_finalizer):
            ctx = CancellationContext(ctx_or_finalizer)
        else:
            raise ConstructionError(
                f"expected a finalizer or CancellationContext, got {type(ctx_or_finalizer).__name__}"
            )
        self._ctx = ctx
        self._results: List[Any] = []
        self._next: Optional[CancellationChain] = None
        # Plain reference: the forward/backward cycle is left to the GC.
        self._previous: Optional[CancellationChain] = None
        self._depth = 0

    @property
    def context(self) -> CancellationContext:
        return self._ctx

    @property
    def canceled(self) -> bool:
        return self._ctx.canceled

    @property
    def interruptible(self) -> bool:
        return self._ctx.interruptible

    @property
    def results(self) -> Tuple[Any, ...]:
        """Results recorded at this stage only."""
        return tuple(self._results)

    @property
    def previous(self) -> Optional["CancellationChain"]:
        return self._previous

    @property
    def depth(self) -> int:
        """Distance from the root link (root is 0)."""
        return self._depth

    def add_result(self, value: Any) -> None:
        """Record ``value`` unless the pipeline is canceled."""
        if not self._ctx.canceled:
            self._results.append(value)

    def collect(self, value: Any) -> None:
        """Record ``value`` even after cancellation.

        Used for sub-units that were already in flight when ``cancel()`` was
        called, so the finalizer still receives what they produced.
        """
        self._results.append(value)

    def cancel(self) -> bool:
        return self._ctx.cancel()

    def next(self) -> Optional["CancellationChain"]:
        """Return the forward link, creating it on first use.

        Returns ``None`` once the pipeline is canceled.
        """
        if self._ctx.canceled:
            return None
        if self._next is None:
            nxt = CancellationChain(self._ctx)
            nxt._previous = self
            nxt._depth = self._depth + 1
            self._next = nxt
        return self._next

    def set_finalization_resolver(self, resolve, reject) -> None:
        self._ctx.set_finalization_resolver(resolve, reject)

    def finalize(self) -> Any:
        """Run the shared finalizer with the results aggregated up to here."""
        return self._ctx.finalize(*self.aggregate())

    def aggregate(self) -> Tuple[Any, ...]:
        """Concatenate result buffers from the root link to this one."""
        buffers = [self._results]
        prev = self._previous
        while prev is not None:
            buffers.append(prev._results)
            prev = prev._previous
        return tuple(value for buf in reversed(buffers) for value in buf)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationChain(id={self._ctx.id!r}, depth={self._depth}, "
            f"results={len(self._results)}, canceled={self._ctx.canceled})"
        )


__all__ = ["CancellationChain"]
