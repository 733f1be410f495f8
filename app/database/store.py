"""
Ordered key-value snapshot store on top of SQLite.

This module provides the persistent byte-keyed store behind the rates
cache, using the aiosqlite driver so every query runs on the driver's
own worker thread and never stalls the event loop.
"""

import aiosqlite
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, List, Optional, Tuple, Union

from core.errors import DatabaseError

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS entries (
        key BLOB PRIMARY KEY,
        value BLOB NOT NULL
    ) WITHOUT ROWID
"""


class SnapshotStore:
    """
    Async ordered key -> value store with a single shared SQLite connection.

    Keys and values are opaque bytes. Keys are compared as unsigned byte
    strings, so range() returns entries in ascending key order. One instance
    is connected at process start, shared by every caller, and closed at
    shutdown.

    Attributes:
        path (Path): Location of the SQLite database file
        conn (aiosqlite.Connection | None): Active connection or None

    Example:
        >>> store = SnapshotStore("/app/storage/rates.sqlite3")
        >>> await store.connect()
        >>> await store.put(b"key", b"value")
        >>> await store.get(b"key")
        b'value'
        >>> await store.flush()
        >>> await store.close()

    Note:
        - Every put is an independent autocommitted upsert
        - WAL journal with synchronous=NORMAL; flush() checkpoints the WAL
          into the main file, which is the durability barrier
        - aiosqlite queues all calls on one connection thread, so point and
          range operations from concurrent callers never interleave
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Initialize store configuration.

        Does not touch the filesystem yet. Call connect() explicitly.

        Args:
            path: SQLite database file location
        """
        self.path = Path(path)
        self.conn: Optional[aiosqlite.Connection] = None

    @property
    def is_open(self) -> bool:
        return self.conn is not None

    async def connect(self) -> "SnapshotStore":
        """
        Open (or create) the database file and ensure the schema exists.

        Returns:
            self, for chaining

        Raises:
            DatabaseError: If the file cannot be opened or initialized
        """
        if self.conn is not None:
            return self

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(self.path, isolation_level=None)
        except (aiosqlite.Error, OSError) as e:
            raise DatabaseError(f"could not open {self.path}: {e}") from e

        try:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA synchronous=NORMAL")
            await conn.execute(SCHEMA)
        except aiosqlite.Error as e:
            await conn.close()
            raise DatabaseError(f"could not initialize {self.path}: {e}") from e

        self.conn = conn
        logger.info(f"Snapshot store opened: {self.path}")
        return self

    async def close(self) -> None:
        """
        Flush and close the connection.

        Safe to call multiple times or when the store was never connected.
        """
        if self.conn is None:
            return
        try:
            await self.flush()
        except DatabaseError as e:
            logger.error(f"Final flush failed while closing store: {e}")

        conn, self.conn = self.conn, None
        try:
            await conn.close()
            logger.info("Snapshot store closed")
        except aiosqlite.Error as e:
            logger.error(f"Error closing snapshot store: {e}")

    async def __aenter__(self) -> "SnapshotStore":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @asynccontextmanager
    async def get_cursor(self) -> AsyncGenerator[aiosqlite.Cursor, None]:
        """
        Async context manager yielding a cursor on the shared connection.

        Raises:
            DatabaseError: If the store is not connected or SQLite reports
                an error while the cursor is in use
        """
        if self.conn is None:
            raise DatabaseError("store is not open")

        try:
            cur = await self.conn.cursor()
        except aiosqlite.Error as e:
            raise DatabaseError(e) from e
        try:
            yield cur
        except aiosqlite.Error as e:
            logger.error(f"Store operation failed: {e}")
            raise DatabaseError(e) from e
        finally:
            await cur.close()

    async def put(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite the value stored under key."""
        async with self.get_cursor() as cur:
            await cur.execute(
                "INSERT INTO entries (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (bytes(key), bytes(value)),
            )

    async def get(self, key: bytes) -> Optional[bytes]:
        """Return the value stored under key, or None if absent."""
        async with self.get_cursor() as cur:
            await cur.execute("SELECT value FROM entries WHERE key = ?", (bytes(key),))
            row = await cur.fetchone()
        return bytes(row[0]) if row is not None else None

    async def range(self, start: bytes, end: bytes) -> List[Tuple[bytes, bytes]]:
        """
        Return all (key, value) pairs with start <= key <= end.

        Args:
            start: Inclusive lower bound
            end: Inclusive upper bound

        Returns:
            Pairs in ascending key order; empty if start > end
        """
        async with self.get_cursor() as cur:
            await cur.execute(
                "SELECT key, value FROM entries WHERE key >= ? AND key <= ? ORDER BY key",
                (bytes(start), bytes(end)),
            )
            rows = await cur.fetchall()
        return [(bytes(k), bytes(v)) for k, v in rows]

    async def is_empty(self) -> bool:
        async with self.get_cursor() as cur:
            await cur.execute("SELECT 1 FROM entries LIMIT 1")
            return await cur.fetchone() is None

    async def flush(self) -> None:
        """Block until every prior put is persisted in the main database file."""
        async with self.get_cursor() as cur:
            await cur.execute("PRAGMA wal_checkpoint(FULL)")
