"""Money helpers.

Amounts are accumulated as unrounded ``Decimal`` values; rounding to
cents happens only when a value is displayed or sent to the payment
processor.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up (display only)."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Convert a currency amount to integer cents (half-up)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int | None) -> Decimal:
    """Convert integer cents back to a 2-decimal amount (``None`` → 0.00)."""
    if not amount:
        return Decimal("0.00")
    return (Decimal(amount) / 100).quantize(CENT)
