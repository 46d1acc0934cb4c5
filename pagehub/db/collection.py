"""Schema-bound document collections on top of SQLite.

A :class:`DocumentCollection` is the handle repositories use per call: it
owns no connection lifecycle, only a reference to an open one.  Documents
are stored as JSON in the collection's table (see ``schema.sql``) and come
back in insertion order.

Filters are plain mappings::

    {"page_type": "home"}                         # equality
    {"page_type": {"$eq": "home"}}                # same, explicit
    {"page_type": {"$in": ["home", "article"]}}   # membership
"""

from __future__ import annotations

import json
import re
import uuid
from enum import Enum
from typing import Any, Generic, Iterable, Mapping, Optional, TypeVar

import aiosqlite
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class InvalidDocumentId(ValueError):
    """Raised when a lookup key is not a well-formed document identifier."""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _checked_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid field or collection name: {name!r}")
    return name


def _sql_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _compile_filter(filter: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Translate a filter mapping into a WHERE clause and its parameters."""
    clauses: list[str] = []
    params: list[Any] = []

    for field, condition in filter.items():
        path = f"$.{_checked_identifier(field)}"
        operators = condition if isinstance(condition, Mapping) else {"$eq": condition}

        for op, operand in operators.items():
            if op == "$eq":
                clauses.append("json_extract(body, ?) = ?")
                params.extend([path, _sql_value(operand)])
            elif op == "$in":
                values = [_sql_value(v) for v in operand]
                if not values:
                    clauses.append("0")
                    continue
                placeholders = ", ".join("?" for _ in values)
                clauses.append(f"json_extract(body, ?) IN ({placeholders})")
                params.extend([path, *values])
            else:
                raise ValueError(f"Unsupported filter operator: {op!r}")

    if not clauses:
        return "", []
    return " WHERE " + " AND ".join(clauses), params


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class DocumentCollection(Generic[ModelT]):
    """One collection of documents validated by a pydantic *schema*.

    The schema must declare an ``id`` field with a default factory; that is
    where store-assigned identifiers come from.
    """

    def __init__(
        self,
        conn: aiosqlite.Connection,
        name: str,
        schema: type[ModelT],
    ) -> None:
        self._conn = conn
        self.name = _checked_identifier(name)
        self.schema = schema

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """Validate *data*, insert it, and return the materialised document.

        Raises:
            pydantic.ValidationError: If *data* violates the schema.
            sqlite3.IntegrityError: If a unique index rejects the document.
        """
        document = self.schema.model_validate(dict(data))
        body = document.model_dump(mode="json")

        try:
            await self._conn.execute(
                f"INSERT INTO {self.name} (id, body) VALUES (?, ?)",  # noqa: S608
                (body["id"], json.dumps(body)),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

        return document

    async def find(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        projection: Optional[Iterable[str]] = None,
    ) -> list[dict[str, Any]]:
        """Return matching documents as plain dicts.

        When *projection* is given only those fields are kept; everything
        else, the identifier included, is dropped.
        """
        where, params = _compile_filter(filter or {})
        async with self._conn.execute(
            f"SELECT body FROM {self.name}{where} ORDER BY rowid", params  # noqa: S608
        ) as cursor:
            rows = await cursor.fetchall()

        documents = [json.loads(row["body"]) for row in rows]
        if projection is None:
            return documents

        fields = tuple(projection)
        return [{f: doc[f] for f in fields if f in doc} for doc in documents]

    async def find_all(self) -> list[ModelT]:
        """Return every document in the collection, all fields."""
        return [self.schema.model_validate(doc) for doc in await self.find()]

    async def find_by_id(self, document_id: str) -> Optional[ModelT]:
        """Fetch one document by identifier.  Returns ``None`` if not found.

        Raises:
            InvalidDocumentId: If *document_id* is not a UUID.
        """
        try:
            key = str(uuid.UUID(document_id))
        except ValueError as exc:
            raise InvalidDocumentId(f"Invalid document id: {document_id!r}") from exc

        async with self._conn.execute(
            f"SELECT body FROM {self.name} WHERE id = ?", (key,)  # noqa: S608
        ) as cursor:
            row = await cursor.fetchone()
        return self.schema.model_validate(json.loads(row["body"])) if row else None
