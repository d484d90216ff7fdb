"""Checkout constants."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

TAX_RATE = Decimal("0.0875")
TAX_MULTIPLIER = Decimal("1") + TAX_RATE
TAX_LINE_NAME = "Sales tax (8.75%)"

# Stripe limits each metadata value to 500 characters.
METADATA_VALUE_MAX_LENGTH = 500
MINIMAL_TIER_VALUE_LENGTH = 40

NOT_AVAILABLE = "No disponible"

BILLING_FIELDS = ("full_name", "email", "phone", "address", "city", "zip_code")
DELIVERY_FIELDS = (
    "delivery_name",
    "delivery_address",
    "delivery_city",
    "delivery_zip_code",
)


class MetadataTier(str, Enum):
    FULL = "full"
    COMPACT = "compact"
    MINIMAL = "minimal"
    OMITTED = "omitted"


# Compact tier short keys, in serialization order.
COMPACT_KEYS = {
    "full_name": "n",
    "email": "e",
    "phone": "p",
    "address": "a",
    "city": "c",
    "zip_code": "z",
    "delivery_name": "dn",
    "delivery_address": "da",
    "delivery_city": "dc",
    "delivery_zip_code": "dz",
    "same_as_billing": "s",
}
MINIMAL_DROPPED_KEYS = frozenset({"a", "da"})
