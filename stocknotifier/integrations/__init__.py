# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Framework Integrations - FastAPI plugin and other framework integrations.
"""

from stocknotifier.integrations.fastapi import (
    get_notifier_state,
    get_notifier_transport,
    notifier_lifespan,
    register_notifier_routes,
)

__all__ = [
    "get_notifier_state",
    "get_notifier_transport",
    "notifier_lifespan",
    "register_notifier_routes",
]
