import pytest
import pytest_asyncio

from database.models import Currency, Snapshot
from database.store import SnapshotStore


def make_snapshot(value, **rates):
    """Build a feed snapshot; defaults to a small USD/GBP/JPY basket."""
    if not rates:
        rates = {"USD": 1.1193, "GBP": 0.8508, "JPY": 121.75}
    return Snapshot(
        value=value,
        currencies=[Currency(name=name, rate=rate) for name, rate in rates.items()],
    )


class FakeFetcher:
    """In-memory stand-in for EcbFetcherService that records every call."""

    def __init__(self, historical=(), last90=(), daily=None):
        self.historical = list(historical)
        self.last90 = list(last90)
        self.daily = daily
        self.errors = {}
        self.calls = []

    async def _answer(self, name, value):
        self.calls.append(name)
        error = self.errors.get(name)
        if error is not None:
            raise error
        return value

    async def fetch_historical(self):
        return await self._answer("historical", list(self.historical))

    async def fetch_last90(self):
        return await self._answer("last90", list(self.last90))

    async def fetch_daily(self):
        return await self._answer("daily", self.daily)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "storage" / "rates.sqlite3"


@pytest_asyncio.fixture
async def store(db_path):
    store = SnapshotStore(db_path)
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def fetcher():
    return FakeFetcher()
