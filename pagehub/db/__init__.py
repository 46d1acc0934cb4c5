"""Database layer package.

Public re-exports so callers can write::

    from pagehub.db import get_connection, init_db, PageRepository
"""

from pagehub.db.collection import DocumentCollection, InvalidDocumentId
from pagehub.db.connection import get_connection
from pagehub.db.migrations import init_db
from pagehub.db.models import Page, PageSummary, PageType
from pagehub.db.repositories import PageRepository

__all__ = [
    "DocumentCollection",
    "InvalidDocumentId",
    "get_connection",
    "init_db",
    "Page",
    "PageSummary",
    "PageType",
    "PageRepository",
]
