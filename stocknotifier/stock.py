# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Stock Model - Inventory updates, their classification, and notifications.

An Update describes one row-level change to a product's on-hand quantity.
A missing old quantity means the product was just created; a missing new
quantity means it was deleted. Zero is a real quantity and is never used
to mean "missing".

A tombstone record never becomes an Update. It is represented by the
absence of one (None), which classifies as TOMBSTONE.
"""

from dataclasses import dataclass
from enum import Enum


class UpdateType(str, Enum):
    """Classification of a single inventory update."""

    UNCATEGORIZED = "Uncategorized"
    BACK_IN_STOCK = "BackInStock"
    OUT_OF_STOCK = "OutOfStock"
    TOMBSTONE = "Tombstone"

    def __str__(self) -> str:
        return self.value


# Classifications that produce an outbound notification
NOTIFIABLE_TYPES = frozenset({UpdateType.BACK_IN_STOCK, UpdateType.OUT_OF_STOCK})


@dataclass(frozen=True)
class Update:
    """A change in a product's quantity."""

    product_id: int
    old_quantity: int | None = None
    new_quantity: int | None = None

    @property
    def type(self) -> UpdateType:
        return classify(self)


def classify(update: Update | None) -> UpdateType:
    """
    Classify an update (or its absence).

    Only a transition between zero and non-zero, with both sides known,
    counts as a stock change. Everything else is UNCATEGORIZED.

    Args:
        update: The update to classify, or None for a tombstone

    Returns:
        The UpdateType for this update
    """
    if update is None:
        return UpdateType.TOMBSTONE

    old, new = update.old_quantity, update.new_quantity
    if old is not None and new is not None:
        if old == 0 and new > 0:
            return UpdateType.BACK_IN_STOCK
        if old > 0 and new == 0:
            return UpdateType.OUT_OF_STOCK

    return UpdateType.UNCATEGORIZED


@dataclass(frozen=True)
class Notification:
    """Something interesting happened to a product, e.g. it went out of stock."""

    type: UpdateType
    product_id: int
    quantity: int

    def __post_init__(self) -> None:
        if self.type not in NOTIFIABLE_TYPES:
            raise ValueError(f"{self.type} updates do not produce notifications")


def notification_for(update: Update | None) -> Notification | None:
    """
    Build the notification for an update, if it qualifies for one.

    The notification carries the quantity after the change.
    """
    update_type = classify(update)
    if update_type not in NOTIFIABLE_TYPES:
        return None

    # Both quantities are known for notifiable updates
    return Notification(
        type=update_type,
        product_id=update.product_id,
        quantity=update.new_quantity,
    )
