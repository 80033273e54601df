"""Translation payload shapes are all normalized to one {key: label} map."""

import pytest

from app.application.services.label_payloads import (
    PayloadShape,
    classify_payload,
    normalize_payload,
)

EXPECTED = {"ORDERS_READ": "Xem đơn hàng"}


@pytest.mark.parametrize(
    "payload",
    [
        {"translations": {"ORDERS_READ": "Xem đơn hàng"}},
        [{"key": "ORDERS_READ", "value": "Xem đơn hàng"}],
        [{"code": "ORDERS_READ", "name": "Xem đơn hàng"}],
        {"ORDERS_READ": "Xem đơn hàng"},
        {"data": {"translations": {"ORDERS_READ": "Xem đơn hàng"}}},
        {"data": [{"code": "ORDERS_READ", "name": "Xem đơn hàng"}]},
    ],
    ids=["envelope", "key-value", "code-name", "flat", "wrapped-envelope", "wrapped-pairs"],
)
def test_accepted_shapes(payload) -> None:
    assert normalize_payload(payload) == EXPECTED


def test_classify() -> None:
    assert classify_payload({"translations": {}}) == PayloadShape.ENVELOPE
    assert classify_payload([]) == PayloadShape.PAIRS
    assert classify_payload({"A": "b"}) == PayloadShape.FLAT
    assert classify_payload("nope") == PayloadShape.UNKNOWN
    assert classify_payload(None) == PayloadShape.UNKNOWN


def test_non_string_values_dropped() -> None:
    payload = {"ORDERS_READ": "ok", "meta": {"page": 1}, "count": 3, "EMPTY": ""}
    assert normalize_payload(payload) == {"ORDERS_READ": "ok"}


def test_malformed_pairs_skipped() -> None:
    payload = [{"key": "A"}, "junk", {"code": "B", "name": "Bee"}, {"key": 1, "value": "x"}]
    assert normalize_payload(payload) == {"B": "Bee"}


def test_unknown_shape_yields_empty_map() -> None:
    assert normalize_payload(42) == {}
    assert normalize_payload(None) == {}
