"""Customer-info encoding for payment session metadata.

The processor caps every metadata value at 500 characters, so the
customer record is serialized with the first tier that fits:

``full``
    ``{"billing": {...}, "delivery": {...}, "same_as_billing": bool}``
``compact``
    flat object with short keys ``n e p a c z dn da dc dz s``
    (``s`` is ``1``/``0`` for same-as-billing).
``minimal``
    compact without street addresses (``a``, ``da``), every remaining
    string truncated to 40 characters.
``omitted``
    empty payload; the checkout snapshot still holds the full record.

JSON is written without whitespace and with keys in a fixed order, so the
same input always yields the same string.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Tuple

from modules.checkout.constants import (
    BILLING_FIELDS,
    COMPACT_KEYS,
    DELIVERY_FIELDS,
    METADATA_VALUE_MAX_LENGTH,
    MINIMAL_DROPPED_KEYS,
    MINIMAL_TIER_VALUE_LENGTH,
    NOT_AVAILABLE,
    MetadataTier,
)

_FROM_COMPACT = {short: name for name, short in COMPACT_KEYS.items()}


def _dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def flatten_customer_info(info: Mapping[str, Any]) -> Dict[str, Any]:
    """Nested customer info → flat ``{full_name, ..., same_as_billing}``."""
    billing = info.get("billing") or {}
    delivery = info.get("delivery") or {}
    flat: Dict[str, Any] = {name: billing.get(name, "") for name in BILLING_FIELDS}
    flat.update({name: delivery.get(name, "") for name in DELIVERY_FIELDS})
    flat["same_as_billing"] = bool(info.get("same_as_billing", False))
    return flat


def nest_customer_info(flat: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "billing": {name: flat.get(name, "") for name in BILLING_FIELDS},
        "delivery": {name: flat.get(name, "") for name in DELIVERY_FIELDS},
        "same_as_billing": bool(flat.get("same_as_billing", False)),
    }


def placeholder_customer_info() -> Dict[str, Any]:
    """Customer info used when no source has any data."""
    flat = {name: NOT_AVAILABLE for name in BILLING_FIELDS + DELIVERY_FIELDS}
    flat["same_as_billing"] = False
    return nest_customer_info(flat)


def _compact(info: Mapping[str, Any]) -> Dict[str, Any]:
    flat = flatten_customer_info(info)
    compact: Dict[str, Any] = {}
    for name, short in COMPACT_KEYS.items():
        if name == "same_as_billing":
            compact[short] = 1 if flat[name] else 0
        else:
            compact[short] = flat[name]
    return compact


def _minimal(info: Mapping[str, Any]) -> Dict[str, Any]:
    minimal: Dict[str, Any] = {}
    for short, value in _compact(info).items():
        if short in MINIMAL_DROPPED_KEYS:
            continue
        if isinstance(value, str):
            value = value[:MINIMAL_TIER_VALUE_LENGTH]
        minimal[short] = value
    return minimal


def encode_customer_info(
    info: Mapping[str, Any],
    max_length: int = METADATA_VALUE_MAX_LENGTH,
) -> Tuple[str, MetadataTier]:
    """Serialize ``info`` with the first tier that fits ``max_length``."""
    candidates = (
        (MetadataTier.FULL, lambda: _dumps(dict(info))),
        (MetadataTier.COMPACT, lambda: _dumps(_compact(info))),
        (MetadataTier.MINIMAL, lambda: _dumps(_minimal(info))),
    )
    for tier, render in candidates:
        payload = render()
        if len(payload) <= max_length:
            return payload, tier
    return "", MetadataTier.OMITTED


def decode_customer_info(payload: str, tier: str) -> Dict[str, Any]:
    """Inverse of ``encode_customer_info`` (dropped fields come back blank).

    Raises:
        ValueError: ``payload`` is not valid JSON for ``tier``.
    """
    if not payload or tier == MetadataTier.OMITTED.value:
        return {}
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("Customer info payload must be a JSON object.")
    if tier == MetadataTier.FULL.value:
        return nest_customer_info(flatten_customer_info(data))
    flat = {
        _FROM_COMPACT[key]: value for key, value in data.items() if key in _FROM_COMPACT
    }
    flat["same_as_billing"] = bool(flat.get("same_as_billing"))
    return nest_customer_info(flat)
