"""
Rates cache entry point with initialization and lifecycle management.

This module opens (or bootstraps) the snapshot store, starts the
scheduled refresh, and handles graceful shutdown. The store handle is
opened once here and closed on exit; presentation layers receive it
from this process rather than through global state.
"""

import asyncio
import logging
import signal
from config.settings import Settings
from core.errors import FetcherError
from core.logger import setup_logger
from core.retry import call_with_retries
from database.repositories import RatesRepository
from services import EcbFetcherService, Scheduler, initialize
from utils.formatters import order_currencies

logger = logging.getLogger(__name__)


def install_shutdown_handlers(shutdown_event: asyncio.Event) -> None:
    """
    Register SIGTERM and SIGINT handlers that set shutdown_event.

    Handles system shutdown signals (docker stop, system reboot, Ctrl+C)
    so the store is flushed and closed before the process exits. Must be
    called from inside the running event loop.
    """
    loop = asyncio.get_running_loop()

    def handle_shutdown_signal(signum):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        shutdown_event.set()

    loop.add_signal_handler(signal.SIGTERM, handle_shutdown_signal, signal.SIGTERM)  # Docker stop / system shutdown
    loop.add_signal_handler(signal.SIGINT, handle_shutdown_signal, signal.SIGINT)    # Ctrl+C


async def main() -> None:
    """
    Main initialization and execution function.

    Initialization steps:
    1. Open the store, bootstrapping it from the full ECB history on first
       run (bootstrap retried with backoff on feed errors)
    2. Log the current stored day
    3. Start the scheduler for periodic incremental updates
    4. Wait for a shutdown signal
    5. Stop the scheduler and close the store

    Note:
        - A failed bootstrap aborts startup; there is nothing to serve
        - The store is always closed (and flushed) in the finally block
    """
    setup_logger()
    logger.info("Starting rates cache")

    shutdown_event = asyncio.Event()
    install_shutdown_handlers(shutdown_event)

    fetcher = EcbFetcherService()

    async def open_store():
        return await initialize(Settings.DB_PATH, fetcher)

    store, sync = await call_with_retries(
        open_store,
        retries=Settings.FETCH_RETRIES,
        base=2.0,
        cap=60.0,
        retry_on=(FetcherError,),
        name="Store initialization",
    )

    scheduler = Scheduler(sync)
    try:
        current = await RatesRepository(store).get_current()
        headline = ", ".join(f"{c.name} {c.rate}" for c in order_currencies(current.currencies)[:3])
        logger.info(f"Serving rates, current day is {current.value} ({headline})")

        # Catch up right away instead of waiting for the first cron tick
        await scheduler.refresh()
        scheduler.start()

        await shutdown_event.wait()
        logger.info("Shutdown signal detected, stopping scheduler...")
    except Exception as e:
        logger.exception(f"Critical error in main loop: {e}")
    finally:
        scheduler.stop()
        await store.close()
        logger.info("Rates cache shutdown complete")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == '__main__':
    run()
