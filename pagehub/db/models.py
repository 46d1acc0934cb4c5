"""Schemas for documents held in the store.

These pydantic models are the schema layer: they validate incoming data and
fill in store-assigned defaults (identifier, timestamps) before a document is
written.  Fields the schema does not declare are kept as-is.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PageType(str, Enum):
    HOME = "home"
    CATEGORY = "category"
    PRODUCT = "product"
    ARTICLE = "article"
    LANDING = "landing"
    INSTITUTIONAL = "institutional"


class Page(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    slug_url: str
    page_type: PageType
    last_updated_at: datetime = Field(default_factory=_utcnow)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("id")
    @classmethod
    def _id_is_uuid(cls, value: str) -> str:
        # Stored in the same canonical form find_by_id looks up.
        try:
            return str(uuid.UUID(value))
        except ValueError as exc:
            raise ValueError("id must be a UUID") from exc

    @field_validator("slug_url")
    @classmethod
    def _slug_is_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("slug_url must start with '/'")
        return value


class PageSummary(BaseModel):
    """Projection of :class:`Page` used for listings; carries no identifier."""

    slug_url: str
    page_type: PageType
    last_updated_at: datetime
