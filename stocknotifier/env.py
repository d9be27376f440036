# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers.

create_config_from_env() reads a small set of well-known environment
variables and passes them through to create_config().
"""

from __future__ import annotations

import os
from typing import List

from stocknotifier.builder import create_config
from stocknotifier.config import NotifierConfig, OffsetReset, TransportBackend
from stocknotifier.errors import (
    explain_invalid_log_json_env,
    explain_invalid_offset_reset_env,
    explain_invalid_transport_env,
    explain_missing_brokers_env,
)
from stocknotifier.exceptions import ConfigurationError

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _parse_brokers(value: str | None) -> List[str]:
    if not value:
        return []
    return [b.strip() for b in value.split(",") if b.strip()]


def _parse_transport(value: str | None) -> TransportBackend:
    if not value:
        return TransportBackend.KAFKA
    try:
        return TransportBackend(value.lower())
    except ValueError as exc:
        raise ConfigurationError(explain_invalid_transport_env(value)) from exc


def _parse_offset_reset(value: str | None) -> OffsetReset:
    if not value:
        return OffsetReset.EARLIEST
    try:
        return OffsetReset(value.lower())
    except ValueError as exc:
        raise ConfigurationError(explain_invalid_offset_reset_env(value)) from exc


def _parse_bool(value: str | None) -> bool:
    if not value:
        return False
    lower = value.strip().lower()
    if lower in _TRUE:
        return True
    if lower in _FALSE:
        return False
    raise ConfigurationError(explain_invalid_log_json_env(value))


def create_config_from_env() -> NotifierConfig:
    """
    Create a NotifierConfig from environment variables.

    Required (kafka transport only):
        - KAFKA_BROKERS: Comma-separated host:port list, e.g. "kafka:9092"

    Optional environment variables:
        - STOCK_NOTIFIER_TRANSPORT: 'kafka' | 'memory' (default: kafka)
        - STOCK_NOTIFIER_SOURCE_TOPIC: CDC topic (default: dbserver1.inventory.products_on_hand)
        - STOCK_NOTIFIER_SINK_TOPIC: Notifications topic (default: stock-notifications)
        - STOCK_NOTIFIER_GROUP_ID: Consumer group (default: stock-notifier)
        - STOCK_NOTIFIER_CLIENT_ID: Client id (default: stock-notifier)
        - STOCK_NOTIFIER_OFFSET_RESET: 'earliest' | 'latest' (default: earliest)
        - STOCK_NOTIFIER_LOG_LEVEL: Log level name (default: INFO)
        - STOCK_NOTIFIER_LOG_JSON: Render JSON logs (default: false)
    """

    transport = _parse_transport(os.getenv("STOCK_NOTIFIER_TRANSPORT"))

    brokers = _parse_brokers(os.getenv("KAFKA_BROKERS"))
    if transport == TransportBackend.KAFKA and not brokers:
        raise ConfigurationError(explain_missing_brokers_env())

    return create_config(
        brokers,
        source_topic=os.getenv("STOCK_NOTIFIER_SOURCE_TOPIC"),
        sink_topic=os.getenv("STOCK_NOTIFIER_SINK_TOPIC"),
        group_id=os.getenv("STOCK_NOTIFIER_GROUP_ID"),
        client_id=os.getenv("STOCK_NOTIFIER_CLIENT_ID"),
        auto_offset_reset=_parse_offset_reset(os.getenv("STOCK_NOTIFIER_OFFSET_RESET")),
        transport=transport,
        log_level=os.getenv("STOCK_NOTIFIER_LOG_LEVEL", "INFO"),
        log_json=_parse_bool(os.getenv("STOCK_NOTIFIER_LOG_JSON")),
    )
