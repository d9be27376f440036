# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Transport Layer - Where updates come from and where notifications go.

The notifier only depends on the two protocols below. Any transport that
implements them is interchangeable: Kafka in production, the in-memory
transport in tests.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Protocol, TypeVar

import structlog

from stocknotifier.config import NotifierConfig, TransportBackend
from stocknotifier.exceptions import Cancelled, ConfigurationError
from stocknotifier.stock import Notification, Update

logger = structlog.get_logger()

T = TypeVar("T")


class UpdateSource(Protocol):
    """Protocol for anything that supplies inventory updates."""

    async def read_update(self, stop_event: asyncio.Event | None = None) -> Update | None:
        """
        Read the next update.

        Returns:
            The next Update, or None for a tombstone record

        Raises:
            EndOfStream: When there are no more records
            DecodeError: When the record is malformed
            Cancelled: When stop_event is set while waiting
        """
        ...


class NotificationSink(Protocol):
    """Protocol for anything that accepts notifications."""

    async def write_notification(
        self,
        notification: Notification,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """
        Deliver a single notification.

        Raises:
            TransientSinkError: When delivery fails
            Cancelled: When stop_event is set while waiting
        """
        ...


async def wait_or_cancel(awaitable: Awaitable[T], stop_event: asyncio.Event | None) -> T:
    """
    Await an operation, giving up as soon as stop_event is set.

    Args:
        awaitable: The read or write to wait for
        stop_event: Event that signals cancellation (None waits forever)

    Returns:
        The result of the awaitable

    Raises:
        Cancelled: If stop_event was set before the operation finished
    """
    if stop_event is None:
        return await awaitable

    if stop_event.is_set():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise Cancelled()

    operation = asyncio.ensure_future(awaitable)
    stopper = asyncio.ensure_future(stop_event.wait())

    try:
        done, _ = await asyncio.wait(
            {operation, stopper},
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        operation.cancel()
        stopper.cancel()
        raise

    if operation in done:
        stopper.cancel()
        return operation.result()

    operation.cancel()
    await asyncio.wait({operation})
    if not operation.cancelled() and operation.exception() is not None:
        logger.debug("cancelled_operation_failed", error=str(operation.exception()))
    raise Cancelled()


@dataclass
class Transport:
    """An opened source/sink pair."""

    source: Any
    sink: Any

    async def close(self) -> None:
        """Stop both ends, logging rather than raising on failure."""
        for name, end in (("source", self.source), ("sink", self.sink)):
            stop = getattr(end, "stop", None)
            if stop is None:
                continue
            try:
                await stop()
            except Exception as e:
                logger.warning("transport_close_failed", end=name, error=str(e))
        logger.info("transport_closed")


async def open_transport(config: NotifierConfig) -> Transport:
    """
    Create and start the source and sink for the configured backend.

    Args:
        config: Notifier configuration

    Returns:
        Started Transport

    Raises:
        ConfigurationError: If the backend is unsupported
    """
    if config.transport == TransportBackend.KAFKA:
        from stocknotifier.transport.kafka import create_kafka_sink, create_kafka_source

        source = create_kafka_source(config)
        sink = create_kafka_sink(config)
    elif config.transport == TransportBackend.MEMORY:
        from stocknotifier.transport.memory import MemoryNotificationSink, MemoryUpdateSource

        # Served in-process: wait for pushed updates instead of ending
        source = MemoryUpdateSource(block_when_empty=True)
        sink = MemoryNotificationSink()
    else:
        raise ConfigurationError(f"Unsupported transport: {config.transport}")

    await source.start()
    try:
        await sink.start()
    except Exception:
        await source.stop()
        raise

    logger.info("transport_opened", backend=config.transport.value)
    return Transport(source=source, sink=sink)


__all__ = [
    "UpdateSource",
    "NotificationSink",
    "Transport",
    "open_transport",
    "wait_or_cancel",
]
