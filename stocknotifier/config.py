# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier Configuration - Immutable configuration data structures.

All configuration is frozen (immutable) after creation to prevent
accidental modification while the notifier is running.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List
import re

from stocknotifier.errors import (
    explain_invalid_broker,
    explain_invalid_log_level,
    explain_invalid_offset_reset,
    explain_invalid_topic,
    explain_missing_brokers,
)


DEFAULT_SOURCE_TOPIC = "dbserver1.inventory.products_on_hand"
DEFAULT_SINK_TOPIC = "stock-notifications"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TransportBackend(str, Enum):
    """Where updates are read from and notifications are written to."""

    KAFKA = "kafka"
    MEMORY = "memory"  # In-process, for tests and demos


class OffsetReset(str, Enum):
    """Where a new consumer group starts reading."""

    EARLIEST = "earliest"
    LATEST = "latest"


def _validate_broker(broker: str) -> bool:
    """Validate a host:port broker address."""
    if not broker:
        return False
    match = re.match(r"^[A-Za-z0-9_.\-\[\]:]+:(\d{1,5})$", broker)
    if not match:
        return False
    return 0 < int(match.group(1)) <= 65535


def _validate_topic(topic: str) -> bool:
    """Validate a Kafka topic name (legal characters, max 249 chars)."""
    if not topic or len(topic) > 249 or topic in (".", ".."):
        return False
    return re.match(r"^[A-Za-z0-9._\-]+$", topic) is not None


@dataclass(frozen=True)
class NotifierConfig:
    """
    Immutable configuration for the stock notifier.

    Transport endpoints live here rather than in the source and sink
    constructors so the core never hardcodes them.
    """

    # Required: Kafka bootstrap servers as host:port
    brokers: List[str] = field(default_factory=list)

    # Debezium topic carrying products_on_hand changes
    source_topic: str = DEFAULT_SOURCE_TOPIC

    # Topic that receives stock notifications
    sink_topic: str = DEFAULT_SINK_TOPIC

    # Consumer group for the source
    group_id: str = "stock-notifier"

    # Client id reported to the brokers
    client_id: str = "stock-notifier"

    # Start position for a new consumer group
    auto_offset_reset: str = OffsetReset.EARLIEST.value

    # Transport backend (memory needs no brokers)
    transport: TransportBackend = TransportBackend.KAFKA

    # Log level name
    log_level: str = "INFO"

    # Render logs as JSON lines instead of console output
    log_json: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if self.transport == TransportBackend.KAFKA:
            if not self.brokers:
                errors.append(explain_missing_brokers())
            for broker in self.brokers:
                if not _validate_broker(broker):
                    errors.append(explain_invalid_broker(broker))

        if not _validate_topic(self.source_topic):
            errors.append(explain_invalid_topic("source", self.source_topic))

        if not _validate_topic(self.sink_topic):
            errors.append(explain_invalid_topic("sink", self.sink_topic))

        if self.source_topic == self.sink_topic:
            errors.append("source_topic and sink_topic must differ")

        if not self.group_id:
            errors.append("group_id must not be empty")

        if self.auto_offset_reset not in {o.value for o in OffsetReset}:
            errors.append(explain_invalid_offset_reset(self.auto_offset_reset))

        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(explain_invalid_log_level(self.log_level))

        # Raise all errors at once
        if errors:
            from stocknotifier.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    def with_updates(self, **kwargs) -> "NotifierConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return NotifierConfig(**current)
