"""Database initialisation.

``init_db(conn)`` is idempotent: safe to call on an existing database.
"""

from __future__ import annotations

import aiosqlite

from pagehub.config import settings
from pagehub.logger import get_logger

logger = get_logger(__name__)


def _read_schema() -> str:
    return settings.schema_path.read_text(encoding="utf-8")


async def init_db(conn: aiosqlite.Connection) -> None:
    """Create every collection table and its indexes.

    Every DDL statement uses ``IF NOT EXISTS`` so calling this multiple
    times on the same database is safe.

    Args:
        conn: An open connection from :func:`pagehub.db.connection.get_connection`.
    """
    # executescript() issues an implicit COMMIT first, fine for DDL-only scripts.
    await conn.executescript(_read_schema())
    await conn.commit()
    logger.debug("Document store schema ready")
