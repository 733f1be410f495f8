"""
Scheduled tasks module for automatic rate updates.

This module provides cron-based scheduling of the incremental store
update. Uses aiocron for timezone-aware scheduling and wraps each run
with a timeout and retry/backoff policy.
"""

import asyncio
import logging
from typing import Optional

import aiocron

from config.settings import Settings
from core.errors import DatabaseError, FetcherError, InvalidDateRange, RatesError
from core.retry import call_with_retries
from services.sync_service import SyncService

logger = logging.getLogger(__name__)

# Failures worth another attempt; anything else is reported and dropped
RETRYABLE_ERRORS = (FetcherError, DatabaseError, asyncio.TimeoutError)


class Scheduler:
    """
    Scheduler for automatic periodic store updates.

    Registers one aiocron job (Settings.UPDATE_CRON, Settings.SERVER_TZ)
    that runs refresh(). Being the single scheduled owner of
    SyncService.update(), it is what keeps writers serialized in a
    deployment.

    Attributes:
        sync (SyncService): Writer side of the rates cache
        timeout (float): Upper bound in seconds for a single update attempt
        retries (int): Maximum attempts per scheduled run
        job (aiocron.Cron | None): Registered cron job, None until start()

    Example:
        >>> scheduler = Scheduler(sync)
        >>> scheduler.start()
        # Job runs according to UPDATE_CRON
        >>> scheduler.stop()

    Note:
        - Failed runs are logged, never raised into the cron loop
        - A feed older than the store (InvalidDateRange) is not retried:
          it needs an operator to look at it
    """

    def __init__(
        self,
        sync: SyncService,
        *,
        cron: str = Settings.UPDATE_CRON,
        tz=Settings.SERVER_TZ,
        timeout: float = Settings.UPDATE_TIMEOUT,
        retries: int = Settings.FETCH_RETRIES,
        backoff_base: float = 5.0,
        backoff_cap: float = 120.0,
    ) -> None:
        self.sync = sync
        self.cron = cron
        self.tz = tz
        self.timeout = timeout
        self.retries = retries
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self.job: Optional[aiocron.Cron] = None

    def start(self) -> None:
        """Register the cron job (idempotent)."""
        if self.job is not None:
            return

        logger.info(f"Registering update cron job '{self.cron}' with timezone: {self.tz}")

        self.job = aiocron.crontab(self.cron, func=self.refresh, start=True, tz=self.tz)

    def stop(self) -> None:
        if self.job is not None:
            self.job.stop()
            self.job = None
            logger.info("Update cron job stopped")

    async def refresh(self) -> Optional[int]:
        """
        Run one store update with timeout and retries.

        Returns:
            Number of inserted snapshots, or None if the run failed

        Note:
            - Each attempt is bounded by self.timeout seconds
            - Only RETRYABLE_ERRORS trigger another attempt
            - Does not re-raise exceptions (scheduler continues)
        """
        logger.info("Starting scheduled rates update")

        async def attempt() -> int:
            return await asyncio.wait_for(self.sync.update(), timeout=self.timeout)

        try:
            inserted = await call_with_retries(
                attempt,
                retries=self.retries,
                base=self.backoff_base,
                cap=self.backoff_cap,
                retry_on=RETRYABLE_ERRORS,
                name="Rates update",
            )
        except InvalidDateRange as e:
            logger.error(f"Rates update rejected, store is ahead of the feed: {e}")
            return None
        except (RatesError, asyncio.TimeoutError) as e:
            logger.error(f"Rates update failed: {e!r}", exc_info=True)
            return None
        except Exception as e:
            logger.error(f"Unexpected error during rates update: {e!r}", exc_info=True)
            return None

        if inserted:
            logger.info(f"Rates update inserted {inserted} new day(s)")
        else:
            logger.info("Rates update found nothing new")
        return inserted
