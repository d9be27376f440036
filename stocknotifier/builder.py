# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier Builder - Functional builder pattern for configuration.

This module provides pure functions for building NotifierConfig objects.
Each function takes a config dict and returns a new dict with the
modification applied (immutable updates).
"""

from typing import Any, Callable, Dict, List

from stocknotifier.config import (
    DEFAULT_SINK_TOPIC,
    DEFAULT_SOURCE_TOPIC,
    NotifierConfig,
    OffsetReset,
    TransportBackend,
)


# Type alias for builder functions
ConfigDict = Dict[str, Any]
BuilderFunc = Callable[[ConfigDict], ConfigDict]


def create_empty_config() -> ConfigDict:
    """
    Create an initial empty configuration dictionary.

    Returns:
        Dict with default values for all configuration fields
    """
    return {
        "brokers": [],
        "source_topic": DEFAULT_SOURCE_TOPIC,
        "sink_topic": DEFAULT_SINK_TOPIC,
        "group_id": "stock-notifier",
        "client_id": "stock-notifier",
        "auto_offset_reset": OffsetReset.EARLIEST.value,
        "transport": TransportBackend.KAFKA,
        "log_level": "INFO",
        "log_json": False,
    }


def with_brokers(config: ConfigDict, brokers: List[str]) -> ConfigDict:
    """
    Set the Kafka bootstrap servers.

    Args:
        config: Current configuration dictionary
        brokers: Broker addresses as host:port (e.g. ['kafka:9092'])

    Returns:
        New configuration dictionary with brokers set
    """
    return {**config, "brokers": list(brokers)}


def consume_from(config: ConfigDict, topic: str) -> ConfigDict:
    """
    Set the CDC topic that updates are read from.

    Args:
        config: Current configuration dictionary
        topic: Debezium topic for the products_on_hand table

    Returns:
        New configuration dictionary with source topic set
    """
    return {**config, "source_topic": topic}


def publish_to(config: ConfigDict, topic: str) -> ConfigDict:
    """
    Set the topic that notifications are written to.

    Args:
        config: Current configuration dictionary
        topic: Notifications topic

    Returns:
        New configuration dictionary with sink topic set
    """
    return {**config, "sink_topic": topic}


def with_group_id(config: ConfigDict, group_id: str, client_id: str | None = None) -> ConfigDict:
    """
    Set the consumer group (and optionally the client id).

    Args:
        config: Current configuration dictionary
        group_id: Kafka consumer group id
        client_id: Client id reported to the brokers (defaults to unchanged)

    Returns:
        New configuration dictionary with group id set
    """
    updated = {**config, "group_id": group_id}
    if client_id:
        updated["client_id"] = client_id
    return updated


def start_from(config: ConfigDict, offset_reset: OffsetReset | str) -> ConfigDict:
    """
    Set where a new consumer group starts reading.

    Args:
        config: Current configuration dictionary
        offset_reset: 'earliest' or 'latest'

    Returns:
        New configuration dictionary with offset reset policy set
    """
    if isinstance(offset_reset, str):
        offset_reset = OffsetReset(offset_reset.lower())
    return {**config, "auto_offset_reset": offset_reset.value}


def with_logging(config: ConfigDict, level: str = "INFO", json_output: bool = False) -> ConfigDict:
    """
    Set log level and output format.

    Args:
        config: Current configuration dictionary
        level: Log level name
        json_output: Render logs as JSON lines

    Returns:
        New configuration dictionary with logging options set
    """
    return {**config, "log_level": level.upper(), "log_json": json_output}


def use_memory_transport(config: ConfigDict) -> ConfigDict:
    """
    Use the in-memory transport instead of Kafka.

    No brokers are required. Intended for tests and local demos.

    Args:
        config: Current configuration dictionary

    Returns:
        New configuration dictionary with memory transport selected
    """
    return {**config, "transport": TransportBackend.MEMORY}


def build_config(config_dict: ConfigDict) -> NotifierConfig:
    """
    Validate and build an immutable NotifierConfig from a configuration dictionary.

    Args:
        config_dict: Configuration dictionary built using builder functions

    Returns:
        Validated, immutable NotifierConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    return NotifierConfig(**config_dict)


def pipe(*funcs: BuilderFunc) -> BuilderFunc:
    """
    Compose multiple builder functions into a single function.

        config = pipe(
            lambda c: with_brokers(c, ["kafka:9092"]),
            lambda c: publish_to(c, "stock-events"),
        )(create_empty_config())

    Args:
        *funcs: Builder functions to compose

    Returns:
        A single function that applies all functions in sequence
    """

    def composed(config: ConfigDict) -> ConfigDict:
        result = config
        for func in funcs:
            result = func(result)
        return result

    return composed


def build_from_steps(*steps: BuilderFunc) -> NotifierConfig:
    """
    Build config by applying a sequence of builder functions.

    Example:
        config = build_from_steps(
            lambda c: with_brokers(c, ["kafka:9092"]),
            lambda c: with_logging(c, "DEBUG"),
        )
    """
    return build_config(pipe(*steps)(create_empty_config()))


def create_config(
    brokers: List[str] | None = None,
    *,
    source_topic: str | None = None,
    sink_topic: str | None = None,
    group_id: str | None = None,
    client_id: str | None = None,
    auto_offset_reset: str | OffsetReset | None = None,
    transport: str | TransportBackend = TransportBackend.KAFKA,
    log_level: str = "INFO",
    log_json: bool = False,
) -> NotifierConfig:
    """
    Create notifier configuration from simple parameters.

    This is the recommended user-facing API for creating configurations.

    Example:
        config = create_config(
            ["kafka:9092"],
            source_topic="dbserver1.inventory.products_on_hand",
            sink_topic="stock-notifications",
        )

        # No broker needed
        config = create_config(transport="memory")

    Returns:
        Validated, immutable NotifierConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    config_dict = create_empty_config()

    if brokers:
        config_dict = with_brokers(config_dict, brokers)

    if source_topic:
        config_dict = consume_from(config_dict, source_topic)

    if sink_topic:
        config_dict = publish_to(config_dict, sink_topic)

    if group_id:
        config_dict = with_group_id(config_dict, group_id, client_id)
    elif client_id:
        config_dict["client_id"] = client_id

    if auto_offset_reset:
        config_dict = start_from(config_dict, auto_offset_reset)

    try:
        backend = TransportBackend(transport)
    except ValueError as exc:
        from stocknotifier.exceptions import ConfigurationError

        raise ConfigurationError(f"Unsupported transport: {transport!r}") from exc
    if backend == TransportBackend.MEMORY:
        config_dict = use_memory_transport(config_dict)

    config_dict = with_logging(config_dict, log_level, log_json)

    return build_config(config_dict)
