# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier Core - The loop that turns inventory updates into notifications.

The loop reads one update at a time from an UpdateSource, classifies it, and
writes a Notification to a NotificationSink when the product went out of
stock or came back into stock. Updates are processed strictly in order: the
sink call for update n completes before update n+1 is read.

A failing record never stops the loop. Only two things do:

- EndOfStream from the source: the run finishes normally.
- The stop event being set: the run raises Cancelled.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import TypedDict

import structlog
from ulid import ULID

from stocknotifier.exceptions import (
    Cancelled,
    DecodeError,
    EndOfStream,
    SinkStepError,
    SourceStepError,
)
from stocknotifier.stock import UpdateType, classify, notification_for
from stocknotifier.transport import NotificationSink, UpdateSource

logger = structlog.get_logger()


class RunStatus(str, Enum):
    """Lifecycle of a notifier run."""

    IDLE = "idle"  # Never started
    RUNNING = "running"
    STOPPING = "stopping"  # Cancellation observed
    STOPPED = "stopped"  # Terminal


class NotifierState(TypedDict):
    """Runtime state for a notifier run."""

    run_id: str | None  # ULID, new for every run
    status: RunStatus
    started_at: datetime | None
    stopped_at: datetime | None
    updates_read: int
    tombstones: int
    uncategorized: int
    notifications_sent: int
    source_errors: int
    decode_errors: int
    sink_errors: int
    last_error: str | None


@dataclass
class NotifierMetrics:
    """Snapshot of notifier counters."""

    run_id: str | None
    status: str
    started_at: datetime | None
    stopped_at: datetime | None
    uptime_seconds: float
    updates_read: int
    tombstones: int
    uncategorized: int
    notifications_sent: int
    source_errors: int
    decode_errors: int
    sink_errors: int
    last_error: str | None


def create_notifier_state() -> NotifierState:
    """Create a fresh, idle notifier state."""
    return NotifierState(
        run_id=None,
        status=RunStatus.IDLE,
        started_at=None,
        stopped_at=None,
        updates_read=0,
        tombstones=0,
        uncategorized=0,
        notifications_sent=0,
        source_errors=0,
        decode_errors=0,
        sink_errors=0,
        last_error=None,
    )


async def process_next_update(
    source: UpdateSource,
    sink: NotificationSink,
    state: NotifierState,
    stop_event: asyncio.Event | None = None,
) -> UpdateType:
    """
    Read, classify, and (if interesting) forward a single update.

    Args:
        source: Where to read the update from
        sink: Where to write the notification to
        state: Runtime state to update
        stop_event: Cancels an in-flight read or write when set

    Returns:
        The classification of the update that was read

    Raises:
        EndOfStream: The source has no more records
        Cancelled: The stop event was set during the read or write
        SourceStepError: The source failed for any other reason
        SinkStepError: The sink failed for any other reason
    """
    try:
        update = await source.read_update(stop_event)
    except (EndOfStream, Cancelled):
        raise
    except Exception as e:
        raise SourceStepError(f"error from source: {e}") from e

    state["updates_read"] += 1

    update_type = classify(update)
    notification = notification_for(update)

    if notification is None:
        if update_type == UpdateType.TOMBSTONE:
            state["tombstones"] += 1
        else:
            state["uncategorized"] += 1
        logger.debug(
            "update_ignored",
            type=update_type.value,
            product_id=update.product_id if update is not None else None,
        )
        return update_type

    try:
        await sink.write_notification(notification, stop_event)
    except Cancelled:
        raise
    except Exception as e:
        raise SinkStepError(f"error from sink: {e}") from e

    state["notifications_sent"] += 1
    logger.info(
        "notification_sent",
        type=notification.type.value,
        product_id=notification.product_id,
        quantity=notification.quantity,
    )
    return update_type


def _record_step_error(state: NotifierState, error: Exception) -> None:
    cause = error.__cause__ if error.__cause__ is not None else error
    state["last_error"] = str(error)

    if isinstance(error, SinkStepError):
        state["sink_errors"] += 1
        event = "sink_error"
    elif isinstance(cause, DecodeError):
        state["decode_errors"] += 1
        event = "decode_error"
    else:
        state["source_errors"] += 1
        event = "source_error"

    logger.error(
        event,
        run_id=state["run_id"],
        error=str(cause),
        error_type=type(cause).__name__,
    )


async def run_notifier(
    source: UpdateSource,
    sink: NotificationSink,
    stop_event: asyncio.Event | None = None,
    state: NotifierState | None = None,
) -> NotifierState:
    """
    Forward interesting updates from source to sink until told to stop.

    Cancellation is checked once per iteration, before the next read.
    A read or write already in flight observes the same stop event.

    Args:
        source: Update source
        sink: Notification sink
        stop_event: Set this to stop the loop (None runs until end of stream)
        state: State to record progress in (a new one is created if omitted)

    Returns:
        The final state, once the source reports end of stream

    Raises:
        Cancelled: If the stop event was set. Cancellation is never
            reported as a normal return.
    """
    if state is None:
        state = create_notifier_state()

    state["run_id"] = str(ULID())
    state["status"] = RunStatus.RUNNING
    state["started_at"] = datetime.now(UTC)
    state["stopped_at"] = None

    logger.info("notifier_started", run_id=state["run_id"])

    try:
        while True:
            try:
                if stop_event is not None and stop_event.is_set():
                    raise Cancelled()
                await process_next_update(source, sink, state, stop_event)
            except EndOfStream:
                logger.info(
                    "notifier_end_of_stream",
                    run_id=state["run_id"],
                    updates_read=state["updates_read"],
                )
                return state
            except Cancelled:
                state["status"] = RunStatus.STOPPING
                logger.info("notifier_stopping", run_id=state["run_id"])
                raise
            except (SourceStepError, SinkStepError) as e:
                _record_step_error(state, e)
    finally:
        state["status"] = RunStatus.STOPPED
        state["stopped_at"] = datetime.now(UTC)
        logger.info(
            "notifier_stopped",
            run_id=state["run_id"],
            updates_read=state["updates_read"],
            notifications_sent=state["notifications_sent"],
        )


def get_metrics(state: NotifierState) -> NotifierMetrics:
    """Get current notifier metrics."""
    uptime = 0.0
    if state["started_at"] is not None:
        end = state["stopped_at"] or datetime.now(UTC)
        uptime = (end - state["started_at"]).total_seconds()

    return NotifierMetrics(
        run_id=state["run_id"],
        status=state["status"].value,
        started_at=state["started_at"],
        stopped_at=state["stopped_at"],
        uptime_seconds=uptime,
        updates_read=state["updates_read"],
        tombstones=state["tombstones"],
        uncategorized=state["uncategorized"],
        notifications_sent=state["notifications_sent"],
        source_errors=state["source_errors"],
        decode_errors=state["decode_errors"],
        sink_errors=state["sink_errors"],
        last_error=state["last_error"],
    )
