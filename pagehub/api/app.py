"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection, initialises the schema
and binds a :class:`PageRepository` to it (``request.app.state.pages``).  On
shutdown it closes the connection cleanly.

Tracing
-------
Every response carries an ``x-trace-id`` header: the incoming one when the
request had it, otherwise a freshly minted id.

Routers
-------
    /pages     Create, list, filter and fetch Page documents
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response

from pagehub.common.trace_context import TraceContext
from pagehub.config import settings
from pagehub.db import PageRepository, get_connection, init_db
from pagehub.logger import configure_logging, get_logger

from pagehub.api.routers import pages as pages_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    configure_logging(settings.log_level)
    conn = await get_connection()
    await init_db(conn)
    app.state.db = conn
    app.state.pages = PageRepository.from_connection(conn)
    logger.info("Document store ready at %s", settings.db_path)
    try:
        yield
    finally:
        await conn.close()


async def trace_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    trace = TraceContext.from_headers(request.headers)
    logger.debug("%s %s trace_id=%s", request.method, request.url.path, trace.trace_id)
    response = await call_next(request)
    response.headers.update(trace.as_headers())
    return response


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="pagehub API",
        description="Create and query Page documents.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.middleware("http")(trace_requests)
    app.include_router(pages_router.router, prefix="/pages", tags=["pages"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn pagehub.api.app:app --reload
app = create_app()
