"""Translation payload parsing: one normalizer per accepted wire shape.

The translation endpoint answers with any of:
    {"translations": {"KEY": "label", ...}}
    [{"key": "KEY", "value": "label"}, ...] or [{"code": "KEY", "name": "label"}, ...]
    {"KEY": "label", ...}
optionally wrapped in {"data": ...}. classify_payload tags the shape and
normalize_payload turns it into the canonical {key: label} map.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any


class PayloadShape(str, Enum):
    """Recognised translation payload shapes."""

    ENVELOPE = "envelope"
    PAIRS = "pairs"
    FLAT = "flat"
    UNKNOWN = "unknown"


def unwrap_data(payload: Any) -> Any:
    """Strip a {"data": ...} wrapper when it holds a mapping or list."""
    if (
        isinstance(payload, Mapping)
        and "data" in payload
        and "translations" not in payload
        and isinstance(payload["data"], (Mapping, list))
    ):
        return payload["data"]
    return payload


def classify_payload(payload: Any) -> PayloadShape:
    """Return the shape tag of an (unwrapped) translation payload."""
    if isinstance(payload, Mapping):
        if isinstance(payload.get("translations"), Mapping):
            return PayloadShape.ENVELOPE
        return PayloadShape.FLAT
    if isinstance(payload, list):
        return PayloadShape.PAIRS
    return PayloadShape.UNKNOWN


def _string_items(mapping: Mapping[Any, Any]) -> dict[str, str]:
    """Keep non-empty string values under string keys."""
    return {
        key: value
        for key, value in mapping.items()
        if isinstance(key, str) and key and isinstance(value, str) and value
    }


def _normalize_envelope(payload: Mapping[str, Any]) -> dict[str, str]:
    return _string_items(payload["translations"])


def _normalize_pairs(payload: list[Any]) -> dict[str, str]:
    result: dict[str, str] = {}
    for item in payload:
        if not isinstance(item, Mapping):
            continue
        if item.get("key") and item.get("value"):
            key, value = item["key"], item["value"]
        elif item.get("code") and item.get("name"):
            key, value = item["code"], item["name"]
        else:
            continue
        if isinstance(key, str) and isinstance(value, str):
            result[key] = value
    return result


def _normalize_flat(payload: Mapping[str, Any]) -> dict[str, str]:
    return _string_items(payload)


def _normalize_unknown(payload: Any) -> dict[str, str]:
    return {}


_NORMALIZERS: dict[PayloadShape, Callable[[Any], dict[str, str]]] = {
    PayloadShape.ENVELOPE: _normalize_envelope,
    PayloadShape.PAIRS: _normalize_pairs,
    PayloadShape.FLAT: _normalize_flat,
    PayloadShape.UNKNOWN: _normalize_unknown,
}


def normalize_payload(payload: Any) -> dict[str, str]:
    """Return the canonical {key: label} map for any accepted payload shape."""
    body = unwrap_data(payload)
    return _NORMALIZERS[classify_payload(body)](body)
