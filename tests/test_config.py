# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Configuration tests: validation, builder functions, and environment loading.
"""

import pytest

from stocknotifier.builder import (
    build_from_steps,
    consume_from,
    create_config,
    publish_to,
    start_from,
    use_memory_transport,
    with_brokers,
    with_logging,
)
from stocknotifier.config import (
    DEFAULT_SINK_TOPIC,
    DEFAULT_SOURCE_TOPIC,
    NotifierConfig,
    TransportBackend,
)
from stocknotifier.env import create_config_from_env
from stocknotifier.errors import explain_invalid_broker, explain_invalid_offset_reset
from stocknotifier.exceptions import ConfigurationError

_ENV_VARS = [
    "KAFKA_BROKERS",
    "STOCK_NOTIFIER_TRANSPORT",
    "STOCK_NOTIFIER_SOURCE_TOPIC",
    "STOCK_NOTIFIER_SINK_TOPIC",
    "STOCK_NOTIFIER_GROUP_ID",
    "STOCK_NOTIFIER_CLIENT_ID",
    "STOCK_NOTIFIER_OFFSET_RESET",
    "STOCK_NOTIFIER_LOG_LEVEL",
    "STOCK_NOTIFIER_LOG_JSON",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ============================================================================
# NotifierConfig
# ============================================================================

def test_defaults_match_debezium_topics():
    config = NotifierConfig(brokers=["kafka:9092"])

    assert config.source_topic == DEFAULT_SOURCE_TOPIC == "dbserver1.inventory.products_on_hand"
    assert config.sink_topic == DEFAULT_SINK_TOPIC == "stock-notifications"
    assert config.transport == TransportBackend.KAFKA


def test_kafka_transport_requires_brokers():
    with pytest.raises(ConfigurationError) as exc_info:
        NotifierConfig()

    assert any("broker" in e for e in exc_info.value.details["errors"])


def test_memory_transport_needs_no_brokers():
    config = NotifierConfig(transport=TransportBackend.MEMORY)
    assert config.brokers == []


def test_all_validation_errors_are_reported_together():
    with pytest.raises(ConfigurationError) as exc_info:
        NotifierConfig(
            brokers=["no-port"],
            source_topic="bad topic",
            auto_offset_reset="middle",
            log_level="LOUD",
        )

    assert len(exc_info.value.details["errors"]) == 4


def test_validation_errors_use_shared_wording():
    with pytest.raises(ConfigurationError) as exc_info:
        NotifierConfig(brokers=["no-port"], auto_offset_reset="middle")

    assert exc_info.value.details["errors"] == [
        explain_invalid_broker("no-port"),
        explain_invalid_offset_reset("middle"),
    ]


def test_source_and_sink_topics_must_differ():
    with pytest.raises(ConfigurationError):
        NotifierConfig(brokers=["kafka:9092"], source_topic="same", sink_topic="same")


def test_config_is_frozen():
    config = NotifierConfig(brokers=["kafka:9092"])
    with pytest.raises(AttributeError):
        config.sink_topic = "other"  # type: ignore[misc]


def test_with_updates_returns_new_validated_config():
    config = NotifierConfig(brokers=["kafka:9092"])
    updated = config.with_updates(sink_topic="stock-events")

    assert updated.sink_topic == "stock-events"
    assert config.sink_topic == DEFAULT_SINK_TOPIC

    with pytest.raises(ConfigurationError):
        config.with_updates(brokers=[])


# ============================================================================
# Builder
# ============================================================================

def test_create_config():
    config = create_config(
        ["kafka:9092", "kafka-2:9092"],
        sink_topic="stock-events",
        group_id="notifiers",
        auto_offset_reset="latest",
        log_level="debug",
    )

    assert config.brokers == ["kafka:9092", "kafka-2:9092"]
    assert config.sink_topic == "stock-events"
    assert config.group_id == "notifiers"
    assert config.auto_offset_reset == "latest"
    assert config.log_level == "DEBUG"


def test_create_config_memory_transport():
    config = create_config(transport="memory")
    assert config.transport == TransportBackend.MEMORY


def test_create_config_rejects_unknown_transport():
    with pytest.raises(ConfigurationError):
        create_config(["kafka:9092"], transport="carrier-pigeon")


def test_build_from_steps():
    config = build_from_steps(
        lambda c: with_brokers(c, ["kafka:9092"]),
        lambda c: consume_from(c, "cdc.products"),
        lambda c: publish_to(c, "stock-events"),
        lambda c: start_from(c, "LATEST"),
        lambda c: with_logging(c, "warning", json_output=True),
    )

    assert config.source_topic == "cdc.products"
    assert config.sink_topic == "stock-events"
    assert config.auto_offset_reset == "latest"
    assert config.log_level == "WARNING"
    assert config.log_json is True


def test_builder_functions_do_not_mutate_input():
    base = {"brokers": []}
    updated = with_brokers(base, ["kafka:9092"])
    assert base == {"brokers": []}
    assert use_memory_transport(updated)["transport"] == TransportBackend.MEMORY


# ============================================================================
# Environment
# ============================================================================

def test_env_requires_brokers(clean_env):
    with pytest.raises(ConfigurationError, match="KAFKA_BROKERS"):
        create_config_from_env()


def test_env_reads_all_settings(clean_env):
    clean_env.setenv("KAFKA_BROKERS", "kafka:9092, kafka-2:9093")
    clean_env.setenv("STOCK_NOTIFIER_SOURCE_TOPIC", "cdc.products")
    clean_env.setenv("STOCK_NOTIFIER_SINK_TOPIC", "stock-events")
    clean_env.setenv("STOCK_NOTIFIER_GROUP_ID", "notifiers")
    clean_env.setenv("STOCK_NOTIFIER_CLIENT_ID", "notifier-1")
    clean_env.setenv("STOCK_NOTIFIER_OFFSET_RESET", "latest")
    clean_env.setenv("STOCK_NOTIFIER_LOG_LEVEL", "debug")
    clean_env.setenv("STOCK_NOTIFIER_LOG_JSON", "true")

    config = create_config_from_env()

    assert config.brokers == ["kafka:9092", "kafka-2:9093"]
    assert config.source_topic == "cdc.products"
    assert config.sink_topic == "stock-events"
    assert config.group_id == "notifiers"
    assert config.client_id == "notifier-1"
    assert config.auto_offset_reset == "latest"
    assert config.log_level == "DEBUG"
    assert config.log_json is True


def test_env_memory_transport_without_brokers(clean_env):
    clean_env.setenv("STOCK_NOTIFIER_TRANSPORT", "memory")

    config = create_config_from_env()

    assert config.transport == TransportBackend.MEMORY


@pytest.mark.parametrize(
    "name, value",
    [
        ("STOCK_NOTIFIER_TRANSPORT", "smoke-signals"),
        ("STOCK_NOTIFIER_OFFSET_RESET", "middle"),
        ("STOCK_NOTIFIER_LOG_JSON", "maybe"),
    ],
)
def test_env_rejects_invalid_values(clean_env, name, value):
    clean_env.setenv("KAFKA_BROKERS", "kafka:9092")
    clean_env.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        create_config_from_env()
