"""Outbound HTTP client with trace propagation and uniform failure logging.

Every request sent through :class:`HttpService` carries an ``x-trace-id``
header.  The value comes from the :class:`TraceContext` handed to ``get`` /
``post``; without one, the service's trace provider is asked at send time.

Reconfiguration swaps the client and its config together in one attribute
assignment.  A call reads that reference once when it starts, so requests
already in flight finish against the client they started with.  A replaced
client is closed once none of its requests are still running: when its last
request completes, or by the next request if it was already idle.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from pagehub.common.trace_context import (
    TRACE_HEADER,
    TraceContext,
    TraceProvider,
    new_trace_id,
)
from pagehub.logger import get_logger

logger = get_logger(__name__)

# Request extension key carrying the caller's TraceContext to the hook.
TRACE_EXTENSION = "pagehub.trace"


@dataclass(frozen=True)
class HttpClientConfig:
    """Target host and timeout for the current client.

    ``timeout_ms=None`` keeps httpx's default timeout; ``0`` disables it.
    """

    base_url: str = ""
    timeout_ms: Optional[int] = None

    def timeout_seconds(self) -> Optional[float]:
        """Timeout in the unit httpx expects.  Only meaningful when set."""
        if not self.timeout_ms:
            return None
        return self.timeout_ms / 1000


@dataclass(eq=False)
class _ClientState:
    config: HttpClientConfig
    client: httpx.AsyncClient
    in_flight: int = 0


def _decode_body(response: httpx.Response) -> Any:
    """Return JSON for JSON responses, text otherwise, ``None`` when empty."""
    if not response.content:
        return None
    if "json" in response.headers.get("content-type", ""):
        return response.json()
    return response.text


def _failure_body(exc: Exception) -> Optional[str]:
    """Serialise the response body attached to *exc*, if there is one."""
    if not isinstance(exc, httpx.HTTPStatusError) or not exc.response.content:
        return None
    try:
        return json.dumps(exc.response.json())
    except ValueError:
        return exc.response.text


class HttpService:
    """Tracing-aware async HTTP client.

    Args:
        trace_provider: Called for every request that was not given an
            explicit :class:`TraceContext`.  Defaults to minting a new id.
    """

    def __init__(self, trace_provider: TraceProvider = new_trace_id) -> None:
        self._trace_provider = trace_provider
        self._retired: list[_ClientState] = []
        self._state = self._build(HttpClientConfig())

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> HttpClientConfig:
        return self._state.config

    def configure(self, base_url: str, timeout_ms: Optional[int]) -> None:
        """Replace the client with one scoped to *base_url* and *timeout_ms*.

        ``timeout_ms=0`` disables the timeout; ``None`` keeps httpx's default.

        Raises:
            ValueError: If ``timeout_ms`` is negative.
            httpx.InvalidURL: If ``base_url`` cannot be parsed.
        """
        if timeout_ms is not None and timeout_ms < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")

        state = self._build(HttpClientConfig(base_url=base_url, timeout_ms=timeout_ms))
        self._retired.append(self._state)
        self._state = state
        logger.info("HTTP client configured: base_url=%s timeout_ms=%s", base_url, timeout_ms)

    def _build(self, config: HttpClientConfig) -> _ClientState:
        client_kwargs: dict[str, Any] = {
            "base_url": config.base_url,
            "event_hooks": {"request": [self._inject_trace_id]},
        }
        if config.timeout_ms is not None:
            client_kwargs["timeout"] = config.timeout_seconds()
        return _ClientState(config=config, client=httpx.AsyncClient(**client_kwargs))

    async def _inject_trace_id(self, request: httpx.Request) -> None:
        trace = request.extensions.get(TRACE_EXTENSION)
        if trace is not None:
            request.headers[TRACE_HEADER] = trace.trace_id
        else:
            request.headers[TRACE_HEADER] = self._trace_provider()

    @asynccontextmanager
    async def _checkout(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the current client, counting the request against it."""
        await self._close_idle_retired()
        state = self._state
        state.in_flight += 1
        try:
            yield state.client
        finally:
            state.in_flight -= 1
            await self._close_idle_retired()

    async def _close_idle_retired(self) -> None:
        idle = [s for s in self._retired if s.in_flight == 0]
        if not idle:
            return
        self._retired = [s for s in self._retired if s.in_flight > 0]
        for state in idle:
            await state.client.aclose()
            logger.debug("Closed replaced HTTP client for %r", state.config.base_url)

    @staticmethod
    def _extensions(trace: Optional[TraceContext]) -> Optional[dict[str, Any]]:
        if trace is None:
            return None
        return {TRACE_EXTENSION: trace}

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def get(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        trace: Optional[TraceContext] = None,
    ) -> Any:
        """Send a GET request and return the decoded response body.

        Args:
            endpoint: Path resolved against the base URL, or a full URL.
            params: Query-string parameters.
            trace: Trace to propagate; the trace provider is used when omitted.

        Raises:
            httpx.HTTPError: Transport failures and non-2xx responses, logged
                and re-raised unchanged.
        """
        async with self._checkout() as client:
            try:
                logger.debug("Making API request to %s", endpoint)
                response = await client.get(
                    endpoint,
                    params=params,
                    extensions=self._extensions(trace),
                )
                response.raise_for_status()
                return _decode_body(response)
            except Exception as exc:
                self._log_failure("API call failed", exc)
                raise

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_ms: Optional[int] = None,
        trace: Optional[TraceContext] = None,
    ) -> Any:
        """Send a POST request and return the decoded response body.

        ``data`` is sent as JSON unless it is already ``str`` or ``bytes``.
        ``timeout_ms`` overrides the client timeout for this call only.
        Failures are logged and re-raised exactly as in :meth:`get`.
        """
        request_kwargs: dict[str, Any] = {
            "params": params,
            "headers": headers,
            "extensions": self._extensions(trace),
        }
        if isinstance(data, (str, bytes)):
            request_kwargs["content"] = data
        elif data is not None:
            request_kwargs["json"] = data
        if timeout_ms is not None:
            request_kwargs["timeout"] = HttpClientConfig(timeout_ms=timeout_ms).timeout_seconds()

        async with self._checkout() as client:
            try:
                logger.debug("Making API POST request to %s", endpoint)
                response = await client.post(endpoint, **request_kwargs)
                response.raise_for_status()
                return _decode_body(response)
            except Exception as exc:
                self._log_failure("API POST call failed", exc)
                raise

    def _log_failure(self, message: str, exc: Exception) -> None:
        body = _failure_body(exc)
        if body is not None:
            logger.error("%s: %s | %s", message, exc, body)
        else:
            logger.error("%s: %s", message, exc, exc_info=exc)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the current client and every replaced client still open."""
        states, self._retired = [*self._retired, self._state], []
        for state in states:
            await state.client.aclose()
