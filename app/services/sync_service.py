"""
Store synchronization service: bootstrap and incremental update.

This module populates an empty snapshot store from the full ECB history
and keeps it current afterwards, choosing the cheapest feed that covers
the gap between the stored and the published latest day.
"""

import asyncio
import logging
from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from core.errors import EmptyDataset, InvalidDateRange
from database.models import Snapshot
from database.repositories import RatesRepository, CURRENT_KEY
from database.store import SnapshotStore
from utils.dates import date_as_key

logger = logging.getLogger(__name__)

# Gap sizes deciding which feed an update pulls
DAILY_WINDOW = timedelta(days=1)
LAST90_WINDOW = timedelta(days=90)


def newest_first(snapshots: Iterable[Snapshot]) -> List[Snapshot]:
    """Sort snapshots by date, newest first (the feed order is not trusted)."""
    return sorted(snapshots, key=lambda s: s.date, reverse=True)


class SyncService:
    """
    Writer side of the rates cache.

    Owns every write to the snapshot store: snapshots are only ever created
    here, and the `current` pointer only ever moves forward. bootstrap() and
    update() share one asyncio.Lock so a single process never runs two
    writers against the same store at once.

    Attributes:
        store (SnapshotStore): Shared snapshot store handle
        fetcher: Remote feed with fetch_historical/fetch_last90/fetch_daily
        rates (RatesRepository): Read-side view used to resolve `current`

    Example:
        >>> sync = SyncService(store, EcbFetcherService())
        >>> await sync.bootstrap()          # first run only
        >>> inserted = await sync.update()  # every refresh afterwards
        >>> print(inserted)
        1

    Note:
        - Data is always written before the pointer that references it
        - Each put is an independent upsert; re-running a partial sync
          rewrites identical content
        - Storage and feed errors propagate unchanged; retries belong to
          the caller (see services.scheduler)
    """

    def __init__(self, store: SnapshotStore, fetcher) -> None:
        self.store = store
        self.fetcher = fetcher
        self.rates = RatesRepository(store)
        self._lock = asyncio.Lock()

    async def bootstrap(self) -> int:
        """
        Populate an empty store from the full historical feed.

        Workflow:
        1. Fetch the full history (FetcherError / EmptyDataset on failure)
        2. Order it newest first; the first element becomes `current`
        3. Store every snapshot with its EUR base entry
        4. Point `current` at the newest snapshot
        5. Flush

        Returns:
            Number of snapshots stored

        Raises:
            InvalidDateRange: If the store already has a `current` pointer
            FetcherError: If the feed cannot be downloaded or parsed
            EmptyDataset: If the feed holds no day at all
            DatabaseError: On storage failure

        Note:
            - The pointer is written after all snapshots, so an aborted
              bootstrap leaves no pointer behind and can simply be re-run
            - A bootstrapped store is never re-bootstrapped; use update()
        """
        async with self._lock:
            if await self.rates.get_current_key() is not None:
                raise InvalidDateRange("store is already bootstrapped, refusing to move `current`")

            logger.info("Downloading ECB's currency values since 1999")
            dates = newest_first(await self.fetcher.fetch_historical())
            if not dates:
                raise EmptyDataset("fetched historical reference rates from ECB are empty")

            current = dates[0]
            current_key = date_as_key(current.value)

            logger.info(f"Populating new store with {len(dates)} days of currency values")
            for date in dates:
                await self.store.put(date_as_key(date.value), date.with_base().to_bytes())

            await self.store.put(CURRENT_KEY, current_key)
            await self.store.flush()

            logger.info(f"Bootstrap complete, current rates are from {current.value}")
            return len(dates)

    async def update(self) -> int:
        """
        Bring the store up to the latest published day.

        Compares the latest day published by the feed with the stored
        `current` day:
        - equal: nothing to do
        - feed older than store: InvalidDateRange, nothing is written
        - feed newer by more than 90 days: refetch the full history
        - feed newer by more than 1 and up to 90 days: fetch the last 90 days
        - feed newer by at most 1 day: use the daily snapshot already fetched

        Every fetched day strictly newer than the stored `current` is stored
        oldest first, each followed by a pointer write, so the pointer only
        moves forward even if the loop is interrupted.

        Returns:
            Number of snapshots inserted (0 when already up to date)

        Raises:
            FetcherError: If a feed cannot be downloaded or parsed
            EmptyDataset: If the daily feed is empty
            DatabaseError: If the `current` pointer is missing or storage fails
            DateNotFound: If the pointer references a missing snapshot
            InvalidDateRange: If the feed is behind the stored data
        """
        async with self._lock:
            daily = await self.fetcher.fetch_daily()
            latest = daily.date
            stored = (await self.rates.get_current()).date

            if latest == stored:
                logger.debug("Database currencies up to date")
                return 0

            if latest < stored:
                raise InvalidDateRange(
                    f"current database rates ({stored}) are younger than fetched from ECB ({latest})"
                )

            gap = latest - stored
            logger.debug(f"Going to update database with new currencies, {gap.days} day(s) behind")
            if gap > LAST90_WINDOW:
                dates = await self.fetcher.fetch_historical()
            elif gap > DAILY_WINDOW:
                dates = await self.fetcher.fetch_last90()
            else:
                dates = [daily]

            inserted = 0
            for date in reversed(newest_first(dates)):
                if date.date <= stored:
                    continue
                key = date_as_key(date.value)
                await self.store.put(key, date.with_base().to_bytes())
                await self.store.put(CURRENT_KEY, key)
                inserted += 1
                logger.info(f"Inserted rates for {date.value}")

            await self.store.flush()
            return inserted


async def initialize(
    path: Union[str, Path],
    fetcher,
) -> Tuple[SnapshotStore, SyncService]:
    """
    Open the store at path, bootstrapping it when it holds no `current` pointer.

    A store whose bootstrap was interrupted has snapshots but no pointer and
    is bootstrapped again; the rewrite is idempotent.

    Args:
        path: SQLite database file location
        fetcher: Remote feed used for bootstrap and later updates

    Returns:
        (store, sync) sharing the same open store handle

    Raises:
        FetcherError, EmptyDataset, DatabaseError: From bootstrap or open;
            the store is closed again before the error propagates
    """
    store = SnapshotStore(path)
    await store.connect()
    sync = SyncService(store, fetcher)
    try:
        if await sync.rates.get_current_key() is None:
            logger.info("No bootstrapped database found, going to bootstrap a new one")
            await sync.bootstrap()
        else:
            logger.info("Previous database found, going to open it")
    except BaseException:
        await store.close()
        raise
    return store, sync
