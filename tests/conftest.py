# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for stock notifier tests.

Provides in-memory transports, fake aiokafka clients, Debezium record
helpers, and test configuration.
"""

import asyncio
import json
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List

import pytest

from stocknotifier.transport.memory import MemoryNotificationSink, MemoryUpdateSource


# ============================================================================
# Debezium record helpers
# ============================================================================

def debezium_key(product_id: int) -> bytes:
    """Key of a products_on_hand change event (schemas enabled)."""
    return json.dumps({"schema": {}, "payload": {"product_id": product_id}}).encode()


def debezium_value(before: dict | None, after: dict | None, op: str = "u") -> bytes:
    """Value of a products_on_hand change event (schemas enabled)."""
    return json.dumps(
        {
            "schema": {},
            "payload": {"before": before, "after": after, "op": op, "ts_ms": 1700000000000},
        }
    ).encode()


def stock_row(product_id: int, quantity: int) -> dict:
    return {"product_id": product_id, "quantity": quantity}


@dataclass
class FakeRecord:
    """Stand-in for aiokafka.structs.ConsumerRecord."""

    key: bytes | None
    value: bytes | None
    topic: str = "dbserver1.inventory.products_on_hand"
    partition: int = 0
    offset: int = 0


class FakeConsumer:
    """Replays queued records or errors through getone()."""

    def __init__(self, items: List[Any] | None = None):
        self.items: Deque[Any] = deque(items or [])
        self.started = False
        self.stopped = False

    def subscription(self):
        return {"dbserver1.inventory.products_on_hand"}

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def getone(self):
        if not self.items:
            # Nothing left: behave like a live consumer and wait
            await asyncio.Event().wait()
        item = self.items.popleft()
        if isinstance(item, Exception):
            raise item
        return item


class FakeProducer:
    """Records send_and_wait calls; can be primed to fail."""

    def __init__(self):
        self.sent: List[dict] = []
        self.next_errors: Deque[Exception] = deque()
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def send_and_wait(self, topic, value=None, key=None, **kwargs):
        if self.next_errors:
            raise self.next_errors.popleft()
        self.sent.append({"topic": topic, "key": key, "value": value})


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def source() -> MemoryUpdateSource:
    """An empty scripted update source."""
    return MemoryUpdateSource()


@pytest.fixture
def sink() -> MemoryNotificationSink:
    """A recording notification sink."""
    return MemoryNotificationSink()


@pytest.fixture
def fake_consumer() -> FakeConsumer:
    return FakeConsumer()


@pytest.fixture
def fake_producer() -> FakeProducer:
    return FakeProducer()


@pytest.fixture
def kafka_config():
    """Create a test configuration for the kafka transport."""
    from stocknotifier.config import NotifierConfig

    return NotifierConfig(
        brokers=["kafka:9092"],
        source_topic="dbserver1.inventory.products_on_hand",
        sink_topic="stock-notifications",
    )


@pytest.fixture
def memory_config():
    """Create a test configuration for the in-memory transport."""
    from stocknotifier.config import NotifierConfig, TransportBackend

    return NotifierConfig(transport=TransportBackend.MEMORY)
