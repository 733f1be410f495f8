"""
ECB euro foreign exchange reference rates fetcher.

Non-blocking aiohttp download + BeautifulSoup parsing of the three
eurofxref XML documents (full history, last 90 days, latest day).
Rates are quoted against EUR; the EUR base itself is never in the feed.
"""

import asyncio
import logging
import warnings
from typing import List

import aiohttp
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from config.settings import Settings
from core.errors import DateParseError, EmptyDataset, FetcherError
from database.models import Currency, Snapshot
from utils.dates import parse_date

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "eurofxref-cache/1.0 (+aiohttp)",
    "Accept": "application/xml, text/xml",
}


def parse_feed(xml: str) -> List[Snapshot]:
    """
    Parse an eurofxref XML document into snapshots, newest first.

    The document nests one ``<Cube time="YYYY-MM-DD">`` per day, each holding
    ``<Cube currency="USD" rate="1.1193"/>`` entries. html.parser lowercases
    tag and attribute names, hence the lowercase lookups.

    Raises:
        FetcherError: If a day carries an invalid date or rate
    """
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(xml, "html.parser")

    snapshots = []
    for day in soup.find_all("cube", attrs={"time": True}):
        value = day["time"].strip()
        try:
            parse_date(value)
            currencies = [
                Currency(name=cube["currency"].strip().upper(), rate=float(cube["rate"]))
                for cube in day.find_all("cube", attrs={"currency": True, "rate": True})
            ]
        except (DateParseError, ValueError) as e:
            raise FetcherError(f"malformed entry for `{value}`: {e}") from e
        snapshots.append(Snapshot(value=value, currencies=currencies))

    snapshots.sort(key=lambda s: s.date, reverse=True)
    return snapshots


class EcbFetcherService:
    """
    Remote feed of ECB reference rates (async).

    Each fetch opens its own session with a total timeout of
    Settings.FETCH_TIMEOUT seconds. Every transport, HTTP status or parse
    failure is raised as FetcherError; retry policy belongs to the caller.

    Example:
        >>> fetcher = EcbFetcherService()
        >>> today = await fetcher.fetch_daily()
        >>> print(today.value, len(today.currencies))
        2020-01-02 32
    """

    def __init__(
        self,
        hist_url: str = Settings.ECB_HIST_URL,
        last90_url: str = Settings.ECB_LAST90_URL,
        daily_url: str = Settings.ECB_DAILY_URL,
        timeout: float = Settings.FETCH_TIMEOUT,
    ) -> None:
        self.hist_url = hist_url
        self.last90_url = last90_url
        self.daily_url = daily_url
        self.timeout = timeout

    async def fetch_historical(self) -> List[Snapshot]:
        """Every published day since 1999-01-04, newest first."""
        return await self._fetch(self.hist_url)

    async def fetch_last90(self) -> List[Snapshot]:
        """The last 90 days of published rates, newest first."""
        return await self._fetch(self.last90_url)

    async def fetch_daily(self) -> Snapshot:
        """
        The most recently published day.

        Raises:
            FetcherError: On transport or parse failure
            EmptyDataset: If the document holds no day at all
        """
        snapshots = await self._fetch(self.daily_url)
        if not snapshots:
            raise EmptyDataset("daily reference rates from ECB are empty")
        return snapshots[0]

    async def _fetch(self, url: str) -> List[Snapshot]:
        """Download and parse one feed document (internal helper)."""
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout, headers=HEADERS) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    xml = await response.text()
        except aiohttp.ClientError as error:
            logger.error(f"HTTP request to ECB failed ({url}): {error}")
            raise FetcherError(error) from error
        except asyncio.TimeoutError as error:
            logger.error(f"HTTP request to ECB timed out after {self.timeout}s ({url})")
            raise FetcherError(f"timed out after {self.timeout}s") from error
        except UnicodeDecodeError as error:
            logger.error(f"Undecodable response from ECB ({url}): {error}")
            raise FetcherError(f"undecodable response: {error}") from error

        snapshots = parse_feed(xml)
        logger.info(f"Fetched {len(snapshots)} day(s) of reference rates from {url}")
        return snapshots
