"""Typed access to the ``pages`` collection."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

import aiosqlite

from pagehub.db.collection import DocumentCollection
from pagehub.db.models import Page, PageSummary, PageType

# Fields returned by listings; the identifier is deliberately absent.
SUMMARY_FIELDS = ("slug_url", "page_type", "last_updated_at")


class PageRepository:
    def __init__(self, pages: DocumentCollection[Page]) -> None:
        self._pages = pages

    @classmethod
    def from_connection(cls, conn: aiosqlite.Connection) -> "PageRepository":
        """Bind a repository to the ``pages`` collection on *conn*."""
        return cls(DocumentCollection(conn, "pages", Page))

    async def find_pages_by_type(
        self,
        page_type: Union[PageType, Sequence[PageType]],
    ) -> list[PageSummary]:
        """Return summaries of pages of one type, or of any type in a sequence.

        Results keep the store's insertion order.  No match is an empty list.
        """
        if isinstance(page_type, str):
            type_filter: dict[str, Any] = {"page_type": PageType(page_type)}
        else:
            type_filter = {"page_type": {"$in": [PageType(t) for t in page_type]}}

        documents = await self._pages.find(type_filter, projection=SUMMARY_FIELDS)
        return [PageSummary.model_validate(doc) for doc in documents]

    async def create(self, data: Mapping[str, Any]) -> Page:
        """Insert a page; the schema fills in ``id`` and timestamps."""
        return await self._pages.create(data)

    async def find_all(self) -> list[Page]:
        return await self._pages.find_all()

    async def find_by_id(self, page_id: str) -> Optional[Page]:
        """Returns ``None`` when absent; raises ``InvalidDocumentId`` on a malformed id."""
        return await self._pages.find_by_id(page_id)
