"""Endpoints for Page documents.

Routes
------
POST   /pages                       Create a page
GET    /pages                       List every page (all fields)
GET    /pages?type=home&type=...    List summaries of pages of the given types
GET    /pages/{page_id}             Fetch a single page by id
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, ValidationError

from pagehub.db.collection import InvalidDocumentId
from pagehub.db.models import PageType
from pagehub.db.repositories import PageRepository

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class PageCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    slug_url: str
    page_type: PageType
    last_updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _repository(request: Request) -> PageRepository:
    return request.app.state.pages


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
async def create(body: PageCreate, request: Request) -> dict[str, Any]:
    """Create a new page.  ``id`` and missing timestamps are filled in."""
    try:
        page = await _repository(request).create(body.model_dump(exclude_none=True))
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    except sqlite3.IntegrityError as exc:
        raise HTTPException(
            status_code=409, detail=f"Page already exists: {body.slug_url!r}"
        ) from exc
    return page.model_dump(mode="json")


@router.get("")
async def list_all(
    request: Request,
    page_type: Optional[list[PageType]] = Query(None, alias="type"),
) -> list[dict[str, Any]]:
    """Return every page, or summaries of the pages matching ``type``."""
    repository = _repository(request)
    if page_type:
        pages = await repository.find_pages_by_type(page_type)
    else:
        pages = await repository.find_all()
    return [p.model_dump(mode="json") for p in pages]


@router.get("/{page_id}")
async def get_one(page_id: str, request: Request) -> dict[str, Any]:
    """Fetch a single page by its id."""
    try:
        page = await _repository(request).find_by_id(page_id)
    except InvalidDocumentId as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if page is None:
        raise HTTPException(status_code=404, detail=f"Page not found: {page_id!r}")
    return page.model_dump(mode="json")
