"""Checkout domain exceptions."""

from __future__ import annotations

from typing import Iterable


class AuthenticationRequired(Exception):
    """Checkout was attempted without a signed-in user."""


class EmptyCart(Exception):
    """Checkout was attempted with no items in the cart."""


class IncompleteCheckoutFields(Exception):
    """One or more required billing/delivery fields are blank."""

    def __init__(self, missing_fields: Iterable[str]) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__("Please complete all required fields.")
