"""Cart exceptions."""

from __future__ import annotations


class CartItemNotFound(Exception):
    """No line item with the given id is in the cart."""


class InvalidCartItem(Exception):
    """The requested item cannot be added (e.g. electronic out of stock)."""
