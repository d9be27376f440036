# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier FastAPI Integration - Run the notifier inside a FastAPI app.

This module provides:
- Lifespan management (open transport, run the loop, stop it on shutdown)
- Read-only admin endpoints: health, status, metrics, config
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, UTC

import structlog
from fastapi import FastAPI

from stocknotifier.config import NotifierConfig
from stocknotifier.core import (
    NotifierState,
    RunStatus,
    create_notifier_state,
    get_metrics,
    run_notifier,
)
from stocknotifier.exceptions import Cancelled
from stocknotifier.transport import Transport, open_transport

logger = structlog.get_logger()

DEFAULT_PREFIX = "/admin/stock-notifier"


def register_notifier_routes(
    app: FastAPI,
    config: NotifierConfig,
    state: NotifierState,
    prefix: str = DEFAULT_PREFIX,
) -> None:
    """
    Register notifier admin endpoints on a FastAPI app.

    Args:
        app: FastAPI application
        config: Notifier configuration
        state: Runtime state of the notifier loop
        prefix: URL prefix for endpoints (default: /admin/stock-notifier)
    """

    @app.get(f"{prefix}/health")
    async def health_check() -> dict:
        """
        Health check endpoint.

        Healthy while the loop is running; degraded once it has stopped.
        """
        status = state["status"]
        if status == RunStatus.RUNNING:
            health = "healthy"
        elif status == RunStatus.IDLE:
            health = "starting"
        else:
            health = "degraded"

        return {
            "status": health,
            "notifier_status": status.value,
            "last_error": state["last_error"],
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get(f"{prefix}/status")
    async def get_status() -> dict:
        """
        Get current loop status and headline counters.
        """
        return {
            "run_id": state["run_id"],
            "status": state["status"].value,
            "started_at": (
                state["started_at"].isoformat() if state["started_at"] else None
            ),
            "updates_read": state["updates_read"],
            "notifications_sent": state["notifications_sent"],
            "source_topic": config.source_topic,
            "sink_topic": config.sink_topic,
        }

    @app.get(f"{prefix}/metrics")
    async def get_notifier_metrics() -> dict:
        """
        Get detailed notifier metrics.
        """
        metrics = asdict(get_metrics(state))
        for key in ("started_at", "stopped_at"):
            if metrics[key] is not None:
                metrics[key] = metrics[key].isoformat()
        return metrics

    @app.get(f"{prefix}/config")
    async def get_config() -> dict:
        """
        Get current configuration.
        """
        return {
            "transport": config.transport.value,
            "brokers": list(config.brokers),
            "source_topic": config.source_topic,
            "sink_topic": config.sink_topic,
            "group_id": config.group_id,
            "client_id": config.client_id,
            "auto_offset_reset": config.auto_offset_reset,
            "log_level": config.log_level,
        }


@asynccontextmanager
async def notifier_lifespan(
    app: FastAPI,
    config: NotifierConfig,
    prefix: str = DEFAULT_PREFIX,
):
    """
    Lifespan context manager that runs the notifier alongside the app.

        app = FastAPI(lifespan=lambda app: notifier_lifespan(app, config))

    Args:
        app: FastAPI application
        config: Notifier configuration
        prefix: URL prefix for admin endpoints
    """
    logger.info("notifier_lifespan_starting", transport=config.transport.value)

    state = create_notifier_state()
    stop_event = asyncio.Event()
    transport = await open_transport(config)

    app.state.notifier_config = config
    app.state.notifier_state = state
    app.state.notifier_transport = transport
    register_notifier_routes(app, config, state, prefix)

    task = asyncio.create_task(
        run_notifier(transport.source, transport.sink, stop_event, state)
    )
    app.state.notifier_task = task

    logger.info("notifier_lifespan_started")

    try:
        yield
    finally:
        logger.info("notifier_lifespan_stopping")
        stop_event.set()
        try:
            await task
        except Cancelled:
            logger.info("notifier_cancelled", run_id=state["run_id"])
        except Exception as e:
            logger.error("notifier_task_failed", error=str(e))
        await transport.close()
        logger.info("notifier_lifespan_stopped")


def get_notifier_state(app: FastAPI) -> NotifierState:
    """
    Get notifier state from a FastAPI app.

    Raises:
        RuntimeError: If the notifier lifespan has not run
    """
    state = getattr(app.state, "notifier_state", None)
    if not state:
        raise RuntimeError("Stock notifier not initialized. Use notifier_lifespan first.")
    return state


def get_notifier_transport(app: FastAPI) -> Transport:
    """
    Get the opened transport from a FastAPI app.

    With the memory backend this is how updates are pushed into the
    running notifier and how written notifications are inspected.

    Raises:
        RuntimeError: If the notifier lifespan has not run
    """
    transport = getattr(app.state, "notifier_transport", None)
    if transport is None:
        raise RuntimeError("Stock notifier not initialized. Use notifier_lifespan first.")
    return transport
