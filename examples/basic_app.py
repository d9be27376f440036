# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Example FastAPI application running the stock notifier in the background.

Run with:
    KAFKA_BROKERS=kafka:9092 uvicorn examples.basic_app:app

Or without a broker, pushing updates through POST /demo/updates:
    STOCK_NOTIFIER_TRANSPORT=memory uvicorn examples.basic_app:app
"""

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from stocknotifier import create_config_from_env
from stocknotifier.config import TransportBackend
from stocknotifier.integrations.fastapi import get_notifier_transport, notifier_lifespan
from stocknotifier.logging import configure_logging
from stocknotifier.stock import Update

config = create_config_from_env()
configure_logging(config.log_level, config.log_json)

app = FastAPI(
    title="Stock Notifier",
    lifespan=lambda app: notifier_lifespan(app, config),
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Stock notifier is running",
        "docs": "/docs",
        "admin": "/admin/stock-notifier/health",
    }


class UpdateIn(BaseModel):
    product_id: int
    old_quantity: int | None = None
    new_quantity: int | None = None


@app.post("/demo/updates")
async def push_update(update: UpdateIn):
    """Feed an update to the in-memory source."""
    if config.transport != TransportBackend.MEMORY:
        raise HTTPException(status_code=409, detail="Only available with the memory transport")

    transport = get_notifier_transport(app)
    transport.source.add_update(Update(**update.model_dump()))
    return {"queued": True}


@app.get("/demo/notifications")
async def list_notifications():
    """Notifications written to the in-memory sink."""
    if config.transport != TransportBackend.MEMORY:
        raise HTTPException(status_code=409, detail="Only available with the memory transport")

    transport = get_notifier_transport(app)
    return [
        {"type": n.type.value, "product_id": n.product_id, "quantity": n.quantity}
        for n in transport.sink.written
    ]


# ============================================================================
# Admin Endpoints (registered by notifier_lifespan)
# ============================================================================
#
# GET /admin/stock-notifier/health  - Loop health
# GET /admin/stock-notifier/status  - Run id, status, headline counters
# GET /admin/stock-notifier/metrics - All counters
# GET /admin/stock-notifier/config  - Configuration


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
