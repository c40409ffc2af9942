"""Entry point for the BEP-20 trader intelligence API."""

import asyncio
import signal
import sys

from loguru import logger

from config.settings import settings
from src.api.server import run_api_server
from src.utils.logger import setup_logger


def _check_api_keys() -> bool:
    ok = True
    if not settings.nansen_api_key:
        logger.error("NANSEN_API_KEY not found in environment variables")
        ok = False
    if not settings.moralis_api_key:
        logger.error("MORALIS_API_KEY not found in environment variables")
        ok = False
    return ok


async def main() -> None:
    setup_logger(level="INFO")
    if not _check_api_keys():
        sys.exit(1)
    logger.info("Starting BEP-20 trader intelligence API...")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    server_task = asyncio.create_task(run_api_server())

    done, pending = await asyncio.wait(
        [server_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )

    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
