# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for the stock notifier.

These helpers centralize wording for common configuration errors so that
all modules present consistent, actionable messages.
"""


def explain_missing_brokers_env() -> str:
    """
    Explain that the Kafka brokers environment variable is missing.
    """

    return (
        "Kafka brokers are not configured. "
        "Set the KAFKA_BROKERS environment variable (e.g. 'kafka:9092') "
        "or pass brokers=[...] to create_config()."
    )


def explain_invalid_transport_env(value: str | None) -> str:
    """
    Explain that STOCK_NOTIFIER_TRANSPORT is invalid.
    """

    return (
        f"Invalid STOCK_NOTIFIER_TRANSPORT value: {value!r}. "
        "Expected 'kafka' or 'memory'."
    )


def explain_invalid_offset_reset_env(value: str | None) -> str:
    """
    Explain that STOCK_NOTIFIER_OFFSET_RESET is invalid.
    """

    return (
        f"Invalid STOCK_NOTIFIER_OFFSET_RESET value: {value!r}. "
        "Expected 'earliest' or 'latest'."
    )


def explain_invalid_log_json_env(value: str | None) -> str:
    """
    Explain that STOCK_NOTIFIER_LOG_JSON is invalid.
    """

    return (
        f"Invalid STOCK_NOTIFIER_LOG_JSON value: {value!r}. "
        "Expected a boolean such as 'true', 'false', '1' or '0'."
    )


def explain_missing_brokers() -> str:
    """
    Explain that the kafka transport was configured without brokers.
    """

    return (
        "At least one broker is required for the kafka transport. "
        "Pass brokers=[...] or use the memory transport."
    )


def explain_invalid_broker(broker: str) -> str:
    """
    Explain that a broker address is not host:port.
    """

    return f"Invalid broker address: {broker!r}, expected host:port (e.g. 'kafka:9092')"


def explain_invalid_topic(role: str, topic: str) -> str:
    """
    Explain that a topic name is not a legal Kafka topic.
    """

    return (
        f"Invalid {role} topic: {topic!r}. Topic names use letters, digits, "
        "'.', '_' and '-' and are at most 249 characters."
    )


def explain_invalid_offset_reset(value: str) -> str:
    """
    Explain that auto_offset_reset is not a known start position.
    """

    return f"Invalid auto_offset_reset: {value!r}, expected 'earliest' or 'latest'"


def explain_invalid_log_level(value: str) -> str:
    """
    Explain that log_level is not a standard level name.
    """

    return (
        f"Invalid log_level: {value!r}, expected one of "
        "DEBUG, INFO, WARNING, ERROR or CRITICAL"
    )
