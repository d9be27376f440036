# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Codec tests: Debezium records in, notification records out.
"""

import json

import pytest

from conftest import debezium_key, debezium_value, stock_row
from stocknotifier.codec import (
    decode_key,
    decode_update,
    encode_notification,
    encode_notification_key,
    is_tombstone,
)
from stocknotifier.exceptions import DecodeError
from stocknotifier.stock import Notification, Update, UpdateType


# ============================================================================
# Keys
# ============================================================================

def test_decode_key_with_schema_wrapper():
    assert decode_key(debezium_key(123)) == 123


def test_decode_key_without_schema_wrapper():
    assert decode_key(b'{"product_id": 42}') == 42


@pytest.mark.parametrize("key", [None, b""])
def test_decode_missing_key(key):
    assert decode_key(key) is None


@pytest.mark.parametrize(
    "key",
    [
        b"not json",
        b'{"payload": {}}',
        b"123",
        b'{"payload": {"product_id": "123"}}',
        b'{"payload": {"product_id": true}}',
        b'{"payload": {"product_id": 123.0}}',
    ],
)
def test_decode_unreadable_key_raises(key):
    with pytest.raises(DecodeError):
        decode_key(key)


# ============================================================================
# Values
# ============================================================================

def test_decode_quantity_change():
    update = decode_update(
        debezium_key(123),
        debezium_value(stock_row(123, 10), stock_row(123, 0)),
    )
    assert update == Update(product_id=123, old_quantity=10, new_quantity=0)
    assert update.type == UpdateType.OUT_OF_STOCK


def test_decode_create_has_no_old_quantity():
    update = decode_update(debezium_key(7), debezium_value(None, stock_row(7, 0), op="c"))
    assert update == Update(product_id=7, old_quantity=None, new_quantity=0)


def test_decode_delete_has_no_new_quantity():
    update = decode_update(debezium_key(7), debezium_value(stock_row(7, 3), None, op="d"))
    assert update == Update(product_id=7, old_quantity=3, new_quantity=None)


def test_decode_zero_quantity_is_not_missing():
    update = decode_update(None, debezium_value(stock_row(5, 0), stock_row(5, 4)))
    assert update.old_quantity == 0
    assert update.type == UpdateType.BACK_IN_STOCK


def test_decode_value_without_schema_wrapper():
    value = json.dumps(
        {"before": stock_row(9, 1), "after": stock_row(9, 0), "op": "u"}
    ).encode()
    assert decode_update(None, value) == Update(product_id=9, old_quantity=1, new_quantity=0)


def test_decode_product_id_taken_from_payload_without_key():
    update = decode_update(None, debezium_value(stock_row(55, 2), None))
    assert update.product_id == 55


@pytest.mark.parametrize("value", [None, b""])
def test_tombstone_decodes_to_nothing(value):
    assert is_tombstone(value)
    assert decode_update(debezium_key(123), value) is None


def test_tombstone_with_unreadable_key_is_still_a_tombstone():
    assert decode_update(b"garbage", None) is None


def test_empty_payload_raises():
    with pytest.raises(DecodeError, match="payload is empty"):
        decode_update(debezium_key(123), debezium_value(None, None))


def test_null_payload_raises():
    with pytest.raises(DecodeError, match="payload is empty"):
        decode_update(None, b'{"schema": {}, "payload": null}')


def test_mismatched_product_ids_raise():
    with pytest.raises(DecodeError, match="product ids do not match") as exc_info:
        decode_update(None, debezium_value(stock_row(1, 5), stock_row(2, 0)))
    assert exc_info.value.details == {"before": 1, "after": 2}


def test_key_and_payload_mismatch_raises():
    with pytest.raises(DecodeError, match="key and payload"):
        decode_update(debezium_key(1), debezium_value(stock_row(2, 5), stock_row(2, 0)))


@pytest.mark.parametrize(
    "value",
    [
        b"{not json",
        b"[]",
        b'{"payload": {"before": {"product_id": 1}}}',
        b'{"payload": {"after": {"product_id": "abc", "quantity": 1}}}',
        b'{"payload": {"after": {"product_id": 1, "quantity": -1}}}',
        b'{"payload": {"after": {"product_id": 1, "quantity": "10"}}}',
        b'{"payload": {"after": {"product_id": 1, "quantity": 10.0}}}',
        b'{"payload": {"after": {"product_id": true, "quantity": 1}}}',
    ],
)
def test_malformed_values_raise(value):
    with pytest.raises(DecodeError):
        decode_update(None, value)


def test_boolean_quantities_are_not_a_stock_transition():
    value = (
        b'{"payload": {"before": {"product_id": 1, "quantity": true},'
        b' "after": {"product_id": 1, "quantity": false}}}'
    )
    with pytest.raises(DecodeError, match="invalid message"):
        decode_update(None, value)


# ============================================================================
# Notifications
# ============================================================================

def test_encode_notification_field_order():
    payload = encode_notification(Notification(UpdateType.OUT_OF_STOCK, 123, 0))
    assert payload == b'{"type": "OutOfStock", "product_id": 123, "quantity": 0}'


def test_encode_back_in_stock():
    payload = json.loads(encode_notification(Notification(UpdateType.BACK_IN_STOCK, 9, 10)))
    assert payload == {"type": "BackInStock", "product_id": 9, "quantity": 10}


def test_encode_notification_key_is_product_id():
    assert encode_notification_key(Notification(UpdateType.BACK_IN_STOCK, 9, 10)) == b"9"
