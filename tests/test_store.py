import asyncio

import pytest

from core.errors import DatabaseError
from database.store import SnapshotStore
from utils.dates import date_as_key

LOWEST = b"\x00" * 8
HIGHEST = b"\xff" * 8


@pytest.mark.asyncio
async def test_put_get(store):
    key = date_as_key("1999-01-04")
    await store.put(key, b"payload")
    await store.flush()
    assert await store.get(key) == b"payload"


@pytest.mark.asyncio
async def test_get_missing_key_returns_none(store):
    assert await store.get(date_as_key("1999-01-04")) is None


@pytest.mark.asyncio
async def test_put_overwrites(store):
    key = date_as_key("2020-01-02")
    await store.put(key, b"first")
    await store.put(key, b"second")
    assert await store.get(key) == b"second"
    assert await store.range(LOWEST, HIGHEST) == [(key, b"second")]


@pytest.mark.asyncio
async def test_range_is_inclusive_and_ascending(store):
    days = ["2012-01-04", "1999-01-04", "2003-01-04", "2015-06-01"]
    for day in days:
        await store.put(date_as_key(day), day.encode())

    rows = await store.range(date_as_key("1999-01-04"), date_as_key("2012-01-04"))
    assert [value for _key, value in rows] == [b"1999-01-04", b"2003-01-04", b"2012-01-04"]
    assert [key for key, _value in rows] == sorted(key for key, _value in rows)


@pytest.mark.asyncio
async def test_range_skips_pointer_entry(store):
    await store.put(date_as_key("2020-01-02"), b"day")
    await store.put(b"current", date_as_key("2020-01-02"))
    rows = await store.range(date_as_key("1999-01-04"), date_as_key("2100-01-01"))
    assert rows == [(date_as_key("2020-01-02"), b"day")]


@pytest.mark.asyncio
async def test_range_with_reversed_bounds_is_empty(store):
    await store.put(date_as_key("2020-01-02"), b"day")
    assert await store.range(date_as_key("2021-01-01"), date_as_key("2019-01-01")) == []


@pytest.mark.asyncio
async def test_is_empty(store):
    assert await store.is_empty()
    await store.put(b"current", date_as_key("2020-01-02"))
    assert not await store.is_empty()


@pytest.mark.asyncio
async def test_data_survives_reopen(db_path):
    key = date_as_key("2020-01-02")
    async with SnapshotStore(db_path) as store:
        await store.put(key, b"persisted")
        await store.flush()

    async with SnapshotStore(db_path) as reopened:
        assert await reopened.get(key) == b"persisted"


@pytest.mark.asyncio
async def test_concurrent_reads_and_writes(store):
    keys = [date_as_key(f"2020-01-{day:02d}") for day in range(1, 29)]
    await asyncio.gather(*(store.put(key, key) for key in keys))

    values = await asyncio.gather(*(store.get(key) for key in keys))
    assert values == keys


@pytest.mark.asyncio
async def test_operations_on_closed_store_raise(db_path):
    store = SnapshotStore(db_path)
    with pytest.raises(DatabaseError):
        await store.get(b"current")

    await store.connect()
    await store.close()
    await store.close()
    assert not store.is_open
    with pytest.raises(DatabaseError):
        await store.put(b"current", b"x")


@pytest.mark.asyncio
async def test_open_failure_raises_database_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = SnapshotStore(blocker / "rates.sqlite3")
    with pytest.raises(DatabaseError):
        await store.connect()
    assert not store.is_open


@pytest.mark.asyncio
async def test_close_persists_unflushed_writes(db_path):
    key = date_as_key("2020-01-02")
    store = await SnapshotStore(db_path).connect()
    await store.put(key, b"unflushed")
    await store.close()
    assert store.conn is None

    async with SnapshotStore(db_path) as reopened:
        assert await reopened.get(key) == b"unflushed"
