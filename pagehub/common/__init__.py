"""Cross-cutting helpers: trace context and the outbound HTTP client."""

from pagehub.common.trace_context import TRACE_HEADER, TraceContext, new_trace_id

__all__ = ["TRACE_HEADER", "TraceContext", "new_trace_id"]
