# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Process entry point: python -m stocknotifier

Loads configuration from the environment, runs the notifier until the
source ends or SIGINT/SIGTERM arrives, then closes the transport.
"""

import asyncio
import signal
import sys

import structlog

from stocknotifier.config import NotifierConfig
from stocknotifier.core import create_notifier_state, run_notifier
from stocknotifier.env import create_config_from_env
from stocknotifier.exceptions import Cancelled, ConfigurationError
from stocknotifier.logging import configure_logging
from stocknotifier.transport import open_transport

logger = structlog.get_logger()


async def serve(config: NotifierConfig) -> None:
    """Run the notifier with OS signals wired to its stop event."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _request_shutdown(sig: signal.Signals) -> None:
        logger.info("shutdown_requested", signal=sig.name)
        stop_event.set()

    transport = await open_transport(config)
    state = create_notifier_state()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown, sig)

    try:
        await run_notifier(transport.source, transport.sink, stop_event, state)
    except Cancelled:
        logger.info("notifier_cancelled", run_id=state["run_id"])
    finally:
        await transport.close()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

    logger.info("done")


def main() -> int:
    try:
        config = create_config_from_env()
    except ConfigurationError as e:
        print(f"stocknotifier: {e}", file=sys.stderr)
        return 1

    configure_logging(config.log_level, config.log_json)
    asyncio.run(serve(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
