import asyncio

import pytest

from conftest import FakeFetcher, make_snapshot
from core.errors import FetcherError, InvalidDateRange
from services.scheduler import Scheduler


class ScriptedSync:
    """SyncService stand-in replaying a fixed list of outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def update(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome == "hang":
            await asyncio.Event().wait()
        return outcome


def make_scheduler(sync, **kwargs):
    options = dict(timeout=5, retries=3, backoff_base=0, backoff_cap=0)
    options.update(kwargs)
    return Scheduler(sync, **options)


@pytest.mark.asyncio
async def test_refresh_returns_inserted_count():
    sync = ScriptedSync(3)
    assert await make_scheduler(sync).refresh() == 3
    assert sync.calls == 1


@pytest.mark.asyncio
async def test_refresh_retries_fetch_errors():
    sync = ScriptedSync(FetcherError("reset"), FetcherError("reset"), 1)
    assert await make_scheduler(sync).refresh() == 1
    assert sync.calls == 3


@pytest.mark.asyncio
async def test_refresh_gives_up_after_retries():
    sync = ScriptedSync(*[FetcherError("down")] * 3)
    assert await make_scheduler(sync).refresh() is None
    assert sync.calls == 3


@pytest.mark.asyncio
async def test_refresh_does_not_retry_regression():
    sync = ScriptedSync(InvalidDateRange("store ahead of feed"), 1)
    assert await make_scheduler(sync).refresh() is None
    assert sync.calls == 1


@pytest.mark.asyncio
async def test_refresh_swallows_unexpected_errors():
    sync = ScriptedSync(UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"), 1)
    assert await make_scheduler(sync).refresh() is None
    assert sync.calls == 1


@pytest.mark.asyncio
async def test_refresh_times_out_hung_update():
    sync = ScriptedSync("hang", 0)
    assert await make_scheduler(sync, timeout=0.05).refresh() == 0
    assert sync.calls == 2


@pytest.mark.asyncio
async def test_refresh_against_real_sync(store):
    from services.sync_service import SyncService

    fetcher = FakeFetcher(historical=[make_snapshot("2020-01-01")])
    sync = SyncService(store, fetcher)
    await sync.bootstrap()
    fetcher.daily = make_snapshot("2020-01-02")

    scheduler = make_scheduler(sync)
    assert await scheduler.refresh() == 1
    assert await scheduler.refresh() == 0


@pytest.mark.asyncio
async def test_start_and_stop_register_cron_job():
    scheduler = make_scheduler(ScriptedSync(), cron="0 16 * * 1-5")
    scheduler.start()
    job = scheduler.job
    assert job is not None
    scheduler.start()
    assert scheduler.job is job
    scheduler.stop()
    assert scheduler.job is None
