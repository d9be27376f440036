# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Message Codec - Translate broker records to updates and notifications to records.

Inbound records are Debezium change events for the products_on_hand table.
The key identifies the product:

    {"payload": {"product_id": 123}}

The value carries the row before and after the change:

    {"payload": {"before": {"product_id": 123, "quantity": 10},
                 "after":  {"product_id": 123, "quantity": 0},
                 "op": "u", ...}}

Both may also arrive without the "payload" wrapper when the connector
runs with schemas disabled. A record with an empty value is a tombstone.
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from stocknotifier.exceptions import DecodeError
from stocknotifier.stock import Notification, Update

logger = structlog.get_logger()


class StockState(BaseModel):
    """
    Row image of products_on_hand.

    Integers are strict: booleans, floats and numeric strings are rejected
    rather than coerced.
    """

    model_config = ConfigDict(extra="ignore")

    product_id: StrictInt
    quantity: StrictInt = Field(ge=0)


class ChangePayload(BaseModel):
    """The before/after pair of a change event."""

    model_config = ConfigDict(extra="ignore")

    before: StockState | None = None
    after: StockState | None = None

    def validate_change(self) -> None:
        """
        Check that the payload describes exactly one product.

        Raises:
            DecodeError: If both sides are missing or the product ids differ
        """
        if self.before is None and self.after is None:
            raise DecodeError("payload is empty")
        if (
            self.before is not None
            and self.after is not None
            and self.before.product_id != self.after.product_id
        ):
            raise DecodeError(
                "product ids do not match",
                details={
                    "before": self.before.product_id,
                    "after": self.after.product_id,
                },
            )

    @property
    def product_id(self) -> int:
        side = self.after if self.after is not None else self.before
        return side.product_id


class KeyPayload(BaseModel):
    """Primary key of the changed row."""

    model_config = ConfigDict(extra="ignore")

    product_id: StrictInt


def _load_json(raw: bytes | str, what: str) -> Any:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"{what} is not valid JSON: {e}") from e

    # Debezium wraps the body in {"schema": ..., "payload": ...} when
    # schemas are enabled
    if isinstance(data, dict) and "payload" in data:
        data = data["payload"]
    return data


def is_tombstone(value: bytes | str | None) -> bool:
    """A record without a value body marks the row as deleted."""
    return value is None or len(value) == 0


def decode_key(key: bytes | str | None) -> int | None:
    """
    Extract the product id from a record key.

    Args:
        key: Raw key bytes, or None if the record has no key

    Returns:
        The product id, or None when the record carries no key

    Raises:
        DecodeError: If a key is present but cannot be parsed
    """
    if key is None or len(key) == 0:
        return None

    data = _load_json(key, "key")
    try:
        return KeyPayload.model_validate(data).product_id
    except ValidationError as e:
        raise DecodeError(
            "invalid key",
            details={"errors": e.errors(include_url=False)},
        ) from e


def decode_payload(value: bytes | str) -> ChangePayload:
    """
    Parse and validate a change event value body.

    Raises:
        DecodeError: If the body is malformed or fails validation
    """
    data = _load_json(value, "value")
    if data is None:
        raise DecodeError("payload is empty")

    try:
        payload = ChangePayload.model_validate(data)
    except ValidationError as e:
        raise DecodeError(
            "invalid message",
            details={"errors": e.errors(include_url=False)},
        ) from e

    payload.validate_change()
    return payload


def decode_update(key: bytes | str | None, value: bytes | str | None) -> Update | None:
    """
    Turn a raw broker record into an Update.

    Args:
        key: Raw record key (may be None)
        value: Raw record value (None or empty for tombstones)

    Returns:
        The decoded Update, or None if the record is a tombstone

    Raises:
        DecodeError: If the record is malformed or describes more than one product
    """
    if is_tombstone(value):
        try:
            product_id = decode_key(key)
        except DecodeError as e:
            logger.warning("tombstone_key_unreadable", error=str(e))
            product_id = None
        logger.debug("tombstone_received", product_id=product_id)
        return None

    payload = decode_payload(value)
    key_product_id = decode_key(key)

    if key_product_id is not None and key_product_id != payload.product_id:
        raise DecodeError(
            "key and payload product ids do not match",
            details={"key": key_product_id, "payload": payload.product_id},
        )

    return Update(
        product_id=payload.product_id,
        old_quantity=payload.before.quantity if payload.before is not None else None,
        new_quantity=payload.after.quantity if payload.after is not None else None,
    )


def encode_notification(notification: Notification) -> bytes:
    """
    Serialize a notification for the outgoing topic.

    Field order is fixed: type, product_id, quantity.
    """
    message = {
        "type": notification.type.value,
        "product_id": notification.product_id,
        "quantity": notification.quantity,
    }
    return json.dumps(message).encode("utf-8")


def encode_notification_key(notification: Notification) -> bytes:
    """Key outgoing records by product so each product stays on one partition."""
    return str(notification.product_id).encode("utf-8")
