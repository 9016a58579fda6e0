"""Service runner utility for long-running async services."""

import asyncio
import signal
from collections.abc import Awaitable, Callable
from contextlib import suppress

from soilmon.lib.config import get_settings
from soilmon.logging import configure, get_logger


def run_service(
    main: Callable[[], Awaitable[None]],
    *,
    name: str = "service",
) -> None:
    """Run an async service with signal handling.

    Provides a standard entry point for services that:
    - Configures logging
    - Sets up graceful shutdown on SIGTERM/SIGINT
    - Runs the async service function

    Args:
        main: Async function to run (typically named ``run``).
        name: Service name for logging.
    """
    logger = get_logger(f"{name}.service")

    configure(get_settings().log_level)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    task = loop.create_task(main())
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, task.cancel)

    logger.info("%s service started", name.capitalize())
    with suppress(KeyboardInterrupt, asyncio.CancelledError):
        loop.run_until_complete(task)
    logger.info("%s service stopped", name.capitalize())
    loop.close()
