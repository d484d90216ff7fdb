"""Order domain exceptions.

Raised by the Service Layer; the API layer (Views) catches these and
translates them into HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The order does not exist or is not visible to the caller."""


class InvalidOrderStatus(Exception):
    """The requested status is not one of the canonical order states."""


class OrderMaterializationFailed(Exception):
    """A paid session could not be recorded as an order.

    Money was taken but no order row exists; needs manual follow-up.
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(
            "Your payment was received but the order could not be recorded. "
            "Please contact support with your payment reference."
        )
