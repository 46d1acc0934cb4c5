"""Async SQLite connection factory.

Usage::

    from pagehub.db.connection import get_connection

    conn = await get_connection()
    try:
        cursor = await conn.execute("SELECT 1")
    finally:
        await conn.close()
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import aiosqlite

from pagehub.config import settings


async def get_connection(
    db_path: Optional[Union[Path, str]] = None,
) -> aiosqlite.Connection:
    """Open and configure a SQLite connection for the document store.

    Steps performed on every new connection:
    1. Create the workspace directory (skipped for ``:memory:``).
    2. Set ``row_factory`` to :class:`aiosqlite.Row`.
    3. Switch to WAL journal mode for concurrent readers.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.
    """
    path = db_path or settings.db_path

    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(path))
    conn.row_factory = aiosqlite.Row

    await conn.execute("PRAGMA journal_mode = WAL")

    return conn
