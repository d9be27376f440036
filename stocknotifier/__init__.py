# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Notifier - Domain stock events from inventory change-data-capture.

Reads Debezium change events for the products_on_hand table, classifies
each one, and publishes "BackInStock" / "OutOfStock" notifications for the
transitions that matter. Package name: stocknotifier.
"""

__version__ = "0.1.0"

# Configuration creation (user-facing API)
from stocknotifier.builder import create_config
from stocknotifier.env import create_config_from_env

# Domain model
from stocknotifier.stock import Notification, Update, UpdateType, classify

# Core functions
from stocknotifier.core import (
    create_notifier_state,
    get_metrics,
    process_next_update,
    run_notifier,
)

__all__ = [
    # Version
    "__version__",
    # Configuration creation
    "create_config",
    "create_config_from_env",
    # Domain model
    "Notification",
    "Update",
    "UpdateType",
    "classify",
    # Core orchestration functions
    "create_notifier_state",
    "get_metrics",
    "process_next_update",
    "run_notifier",
]
