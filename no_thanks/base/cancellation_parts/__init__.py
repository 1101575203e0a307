"""Cancellation parts package: shared state and per-stage chain links."""

from .cancellation_context import CancellationContext, Finalizer
from .cancellation_chain import CancellationChain
from .finalization_resolver import FinalizationResolver

__all__ = ["CancellationContext", "CancellationChain", "FinalizationResolver", "Finalizer"]
