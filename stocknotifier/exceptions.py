# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier Exceptions - Custom exceptions for the stocknotifier package.

Per-record failures (DecodeError, TransientSourceError, TransientSinkError)
are contained by the notifier loop. EndOfStream and Cancelled are the only
conditions that end a run.
"""


class StockNotifierError(Exception):
    """Base exception for all stock notifier errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(StockNotifierError):
    """Raised when configuration is invalid."""

    pass


class DecodeError(StockNotifierError):
    """Raised when an inbound CDC record cannot be parsed or is invalid."""

    pass


class TransientSourceError(StockNotifierError):
    """Raised when the update source fails for a reason other than decoding."""

    pass


class TransientSinkError(StockNotifierError):
    """Raised when the notification sink fails to accept a notification."""

    pass


class EndOfStream(StockNotifierError):
    """Raised by an update source once it has no more records."""

    def __init__(self, message: str = "end of stream", details: dict | None = None):
        super().__init__(message, details)


class Cancelled(StockNotifierError):
    """Raised when the controlling stop event is set."""

    def __init__(self, message: str = "notifier cancelled", details: dict | None = None):
        super().__init__(message, details)


class SourceStepError(StockNotifierError):
    """Wraps a failure raised by the update source during a single step."""

    pass


class SinkStepError(StockNotifierError):
    """Wraps a failure raised by the notification sink during a single step."""

    pass
