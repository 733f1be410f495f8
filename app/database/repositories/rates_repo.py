"""
Rates repository module: read-only queries over the snapshot store.

This module resolves the current pointer, single days and date ranges
into decoded Snapshot records.
"""

import logging
from typing import List, Optional

from core.errors import DatabaseError, DateNotFound
from database.models import Snapshot
from database.store import SnapshotStore
from utils.dates import DateLike, KEY_SIZE, date_as_key, key_as_date

logger = logging.getLogger(__name__)

# Reserved key holding the key of the newest stored snapshot
CURRENT_KEY = b"current"


class RatesRepository:
    """
    Repository for reading ECB reference rate snapshots.

    All lookups go through the shared SnapshotStore; keys are derived from
    calendar dates with date_as_key. Safe to use from any number of
    concurrent callers, including while a sync is writing.

    Attributes:
        store (SnapshotStore): Shared snapshot store handle

    Example:
        >>> repo = RatesRepository(store)
        >>> current = await repo.get_current()
        >>> print(current.value)
        2020-01-02
        >>> await repo.get_day("2020-01-01")
        Snapshot(value='2020-01-01', currencies=[...])
        >>> [s.value for s in await repo.get_range("2020-01-01", "2020-01-02")]
        ['2020-01-01', '2020-01-02']
    """

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    async def get_current_key(self) -> Optional[bytes]:
        """
        Read the current pointer.

        Returns:
            The 8-byte key of the newest snapshot, or None when the pointer
            has never been written (fresh or interrupted bootstrap)

        Raises:
            DatabaseError: If the stored pointer is not a valid key
        """
        key = await self.store.get(CURRENT_KEY)
        if key is not None and len(key) != KEY_SIZE:
            raise DatabaseError(f"corrupted `current` pointer {key!r}")
        return key

    async def get_current(self) -> Snapshot:
        """
        Return the newest stored snapshot.

        Raises:
            DatabaseError: If the `current` pointer is missing
            DateNotFound: If the pointer references a key with no snapshot
        """
        key = await self.get_current_key()
        if key is None:
            raise DatabaseError("could not find `current` key on the database")

        blob = await self.store.get(key)
        if blob is None:
            raise DateNotFound(key_as_date(key).isoformat())
        return Snapshot.from_bytes(blob)

    async def get_day(self, day: DateLike) -> Optional[Snapshot]:
        """
        Return the snapshot for one calendar day, or None if it was never stored.

        Raises:
            DateParseError: If day is not a valid date (before any I/O)
            DatabaseError: If the stored record is corrupted
        """
        key = date_as_key(day)
        blob = await self.store.get(key)
        if blob is None:
            return None
        return Snapshot.from_bytes(blob)

    async def get_range(self, start_at: DateLike, end_at: DateLike) -> List[Snapshot]:
        """
        Return every stored snapshot between start_at and end_at inclusive.

        Bounds are used as given; callers validate start_at <= end_at.
        A single undecodable record fails the whole call.

        Raises:
            DateParseError: If either bound is not a valid date
            DatabaseError: If any record in the range is corrupted
        """
        range_start = date_as_key(start_at)
        range_end = date_as_key(end_at)

        rows = await self.store.range(range_start, range_end)
        try:
            return [Snapshot.from_bytes(value) for _key, value in rows]
        except DatabaseError:
            logger.error(f"could not get range {start_at}..{end_at} from db")
            raise
