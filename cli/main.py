"""pagehub CLI: entry-point for document-store and outbound HTTP operations.

Usage:
    python -m cli.main --help

Command groups:
    db     schema initialisation
    pages  create / list / fetch Page documents
    http   one-off traced requests through HttpService
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import httpx
import typer
from pydantic import ValidationError

from pagehub.common.http import HttpService
from pagehub.common.trace_context import TraceContext
from pagehub.config import settings
from pagehub.db import InvalidDocumentId, PageRepository, PageType, get_connection, init_db
from pagehub.logger import configure_logging

T = TypeVar("T")

app = typer.Typer(
    name="pagehub",
    help="pagehub backend CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level or settings.log_level)


def _run_with_repository(fn: Callable[[PageRepository], Awaitable[T]]) -> T:
    """Open the store, run *fn* against a PageRepository, close the store."""

    async def _runner() -> T:
        conn = await get_connection()
        try:
            await init_db(conn)
            return await fn(PageRepository.from_connection(conn))
        finally:
            await conn.close()

    return asyncio.run(_runner())


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the document store (create tables if they do not exist)."""

    async def _init() -> None:
        conn = await get_connection()
        try:
            await init_db(conn)
        finally:
            await conn.close()

    asyncio.run(_init())
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# pages
# ---------------------------------------------------------------------------
pages_app = typer.Typer(help="Page documents.", no_args_is_help=True)
app.add_typer(pages_app, name="pages")


@pages_app.command("create")
def pages_create(
    slug: str = typer.Option(..., "--slug", help="Slug URL, e.g. /home."),
    page_type: PageType = typer.Option(..., "--type", help="Page type."),
) -> None:
    """Create a new page."""
    try:
        page = _run_with_repository(
            lambda repo: repo.create({"slug_url": slug, "page_type": page_type})
        )
    except ValidationError as exc:
        typer.echo(f"[pages create] Invalid page: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=1)
    except sqlite3.IntegrityError:
        typer.echo(f"[pages create] Page already exists: {slug!r}")
        raise typer.Exit(code=1)

    typer.echo(
        f"[pages create] Created page: {page.id}  slug_url={page.slug_url!r}  "
        f"type={page.page_type.value!r}"
    )


@pages_app.command("list")
def pages_list(
    page_types: Optional[List[PageType]] = typer.Option(
        None, "--type", help="Only list pages of this type (repeatable)."
    ),
) -> None:
    """List all pages, or summaries of pages of the given types."""
    if page_types:
        pages: list[Any] = _run_with_repository(
            lambda repo: repo.find_pages_by_type(page_types)
        )
    else:
        pages = _run_with_repository(lambda repo: repo.find_all())

    if not pages:
        typer.echo("[pages list] No pages found.")
        return
    for p in pages:
        prefix = f"  {p.id}" if hasattr(p, "id") else " "
        typer.echo(f"{prefix}  [{p.page_type.value}]  {p.slug_url}")


@pages_app.command("get")
def pages_get(
    page_id: str = typer.Argument(..., help="Page id."),
) -> None:
    """Print one page as JSON."""
    try:
        page = _run_with_repository(lambda repo: repo.find_by_id(page_id))
    except InvalidDocumentId as exc:
        typer.echo(f"[pages get] {exc}")
        raise typer.Exit(code=1)

    if page is None:
        typer.echo(f"[pages get] Page not found: {page_id!r}")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(page.model_dump(mode="json"), indent=2))


# ---------------------------------------------------------------------------
# http
# ---------------------------------------------------------------------------
http_app = typer.Typer(help="Outbound HTTP requests.", no_args_is_help=True)
app.add_typer(http_app, name="http")


def _parse_params(raw: Optional[List[str]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--param")
        params[key] = value
    return params


@http_app.command("get")
def http_get(
    endpoint: str = typer.Argument(..., help="Path (resolved against --base-url) or full URL."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override HTTP_BASE_URL."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Override HTTP_TIMEOUT_MS."),
    param: Optional[List[str]] = typer.Option(None, "--param", help="Query parameter key=value (repeatable)."),
) -> None:
    """Send a traced GET request and print the response body."""
    params = _parse_params(param)
    base = base_url if base_url is not None else settings.http_base_url
    timeout = timeout_ms if timeout_ms is not None else settings.http_timeout_ms
    trace = TraceContext()

    async def _get() -> Any:
        service = HttpService()
        try:
            if base or timeout is not None:
                service.configure(base, timeout)
            return await service.get(endpoint, params or None, trace=trace)
        finally:
            await service.aclose()

    typer.echo(f"[http get] {endpoint}  trace_id={trace.trace_id}")
    try:
        body = asyncio.run(_get())
    except httpx.HTTPError as exc:
        typer.echo(f"[http get] Request failed: {exc}")
        raise typer.Exit(code=1)

    if isinstance(body, str):
        typer.echo(body)
    else:
        typer.echo(json.dumps(body, indent=2))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
