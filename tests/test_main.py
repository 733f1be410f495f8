import asyncio
import os
import signal

import pytest

from main import install_shutdown_handlers


@pytest.mark.asyncio
@pytest.mark.parametrize("signum", [signal.SIGTERM, signal.SIGINT])
async def test_shutdown_signal_wakes_waiting_loop(signum):
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    install_shutdown_handlers(shutdown_event)
    try:
        os.kill(os.getpid(), signum)
        await asyncio.wait_for(shutdown_event.wait(), timeout=1)
    finally:
        loop.remove_signal_handler(signal.SIGTERM)
        loop.remove_signal_handler(signal.SIGINT)
    assert shutdown_event.is_set()
