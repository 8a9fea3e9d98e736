"""
Shared connection handling for the SQLite-backed stores.
"""

import asyncio
import os
from abc import abstractmethod
from pathlib import Path

import aiosqlite


class SQLiteStoreBase:
    """Lazily opens one aiosqlite connection and creates the store's tables."""

    def __init__(self, db_path: str) -> None:
        if db_path != ":memory:":
            db_path = os.path.expanduser(db_path)
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._conn_lock = asyncio.Lock()

    async def _get_conn(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn
        async with self._conn_lock:
            if self._conn is None:
                conn = await aiosqlite.connect(self._db_path)
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA journal_mode=WAL")
                await self._create_tables(conn)
                await conn.commit()
                self._conn = conn
        return self._conn

    @abstractmethod
    async def _create_tables(self, conn: aiosqlite.Connection) -> None:
        """Create tables and indexes; seed rows if the store wants them."""
        ...

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
