"""Outbox worker entry point.

Builds the container from the environment, prepares the read store and runs
the outbox dispatcher until SIGINT or SIGTERM.

Usage:
    python -m iam_admin
"""

import asyncio
import signal
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from iam_admin.core.config import get_settings
from iam_admin.core.container import Container


@asynccontextmanager
async def lifespan(container: Container) -> AsyncGenerator[Container, None]:
    """Start the container's stores and release them on exit.

    Args:
        container: Composition root to manage.

    Yields:
        The started container.
    """
    await container.startup()
    try:
        yield container
    finally:
        await container.shutdown()


async def run_worker(container: Container, stop_event: asyncio.Event | None = None) -> None:
    """Run the outbox dispatcher until stopped.

    Args:
        container: Composition root providing the dispatcher.
        stop_event: Stop signal; SIGINT and SIGTERM set it when omitted.
    """
    if stop_event is None:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop_event.set)

    async with lifespan(container):
        await container.dispatcher.run(stop_event)


def main() -> None:
    asyncio.run(run_worker(Container(get_settings())))


if __name__ == "__main__":
    main()
