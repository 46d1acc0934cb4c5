"""Trace identifiers threaded explicitly through service calls.

There is no ambient "current trace": callers hold a :class:`TraceContext` and
pass it down.  Components that need an identifier without one in hand take a
:data:`TraceProvider` callable instead.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Callable, Mapping

TRACE_HEADER = "x-trace-id"

TraceProvider = Callable[[], str]


def new_trace_id() -> str:
    """Generate a fresh 16-character trace identifier."""
    return uuid.uuid4().hex[:16]


@dataclass(frozen=True)
class TraceContext:
    """Correlates one logical request across service boundaries."""

    trace_id: str = field(default_factory=new_trace_id)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "TraceContext":
        """Reuse an incoming ``x-trace-id`` header, or start a new trace."""
        incoming = headers.get(TRACE_HEADER)
        if incoming:
            return cls(trace_id=incoming)
        return cls()

    def as_headers(self) -> dict[str, str]:
        return {TRACE_HEADER: self.trace_id}
