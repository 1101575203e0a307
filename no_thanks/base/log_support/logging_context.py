"""Structured logging context object for cancellation events.

This module defines :class:`LogContext`, a dataclass used to carry common
fields for cancellation logging events (chain id, link depth, interruptible
flag, and extra metadata). ``to_dict`` merges the ``extra`` mapping and
prunes ``None`` values for clean structured output.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for cancellation logging events."""

    chain_id: Optional[str] = None
    depth: Optional[int] = None
    interruptible: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
