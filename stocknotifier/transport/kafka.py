# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Kafka Transport - Read Debezium change events and publish notifications.

The source wraps an aiokafka consumer subscribed to the CDC topic and
decodes each record with the codec. The sink wraps an aiokafka producer
and writes one JSON notification per record.

Broker addresses and topic names always come from NotifierConfig.
"""

import asyncio
from typing import Any

import structlog
from aiokafka import AIOKafkaConsumer, AIOKafkaProducer
from aiokafka.errors import ConsumerStoppedError, KafkaError

from stocknotifier.codec import decode_update, encode_notification, encode_notification_key
from stocknotifier.config import NotifierConfig
from stocknotifier.exceptions import DecodeError, EndOfStream, TransientSinkError, TransientSourceError
from stocknotifier.stock import Notification, Update
from stocknotifier.transport import wait_or_cancel

logger = structlog.get_logger()


class KafkaUpdateSource:
    """Update source backed by an aiokafka consumer."""

    def __init__(self, consumer: Any):
        self._consumer = consumer

    async def start(self) -> None:
        await self._consumer.start()
        logger.info("kafka_source_started", topics=sorted(self._consumer.subscription() or []))

    async def stop(self) -> None:
        await self._consumer.stop()
        logger.info("kafka_source_stopped")

    async def read_update(self, stop_event: asyncio.Event | None = None) -> Update | None:
        """
        Read and decode a single record.

        Note that the return value is None for tombstone records.
        """
        try:
            record = await wait_or_cancel(self._consumer.getone(), stop_event)
        except ConsumerStoppedError as e:
            raise EndOfStream("consumer stopped") from e
        except KafkaError as e:
            raise TransientSourceError(f"error reading from Kafka: {e}") from e

        try:
            return decode_update(record.key, record.value)
        except DecodeError as e:
            e.details.update(
                {
                    "topic": record.topic,
                    "partition": record.partition,
                    "offset": record.offset,
                }
            )
            raise


class KafkaNotificationSink:
    """Notification sink backed by an aiokafka producer."""

    def __init__(self, producer: Any, topic: str):
        self._producer = producer
        self._topic = topic

    async def start(self) -> None:
        await self._producer.start()
        logger.info("kafka_sink_started", topic=self._topic)

    async def stop(self) -> None:
        await self._producer.stop()
        logger.info("kafka_sink_stopped")

    async def write_notification(
        self,
        notification: Notification,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """Write a single notification to the notifications topic."""
        value = encode_notification(notification)
        key = encode_notification_key(notification)

        try:
            await wait_or_cancel(
                self._producer.send_and_wait(self._topic, value=value, key=key),
                stop_event,
            )
        except KafkaError as e:
            raise TransientSinkError(
                f"error writing to Kafka: {e}",
                details={"topic": self._topic, "product_id": notification.product_id},
            ) from e


def create_kafka_source(config: NotifierConfig) -> KafkaUpdateSource:
    """Create an (unstarted) Kafka update source from configuration."""
    consumer = AIOKafkaConsumer(
        config.source_topic,
        bootstrap_servers=",".join(config.brokers),
        group_id=config.group_id,
        client_id=config.client_id,
        auto_offset_reset=config.auto_offset_reset,
    )
    return KafkaUpdateSource(consumer)


def create_kafka_sink(config: NotifierConfig) -> KafkaNotificationSink:
    """Create an (unstarted) Kafka notification sink from configuration."""
    producer = AIOKafkaProducer(
        bootstrap_servers=",".join(config.brokers),
        client_id=config.client_id,
    )
    return KafkaNotificationSink(producer, config.sink_topic)
