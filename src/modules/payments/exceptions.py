"""Payment collaborator exceptions.

Raised by the gateway and by the order materializer; the API layer turns
them into user-facing messages while the original error is logged.
"""

from __future__ import annotations


class PaymentSessionFailed(Exception):
    """The processor rejected the session request or returned no redirect URL.

    Retryable: the cart is left untouched.
    """


class PaymentVerificationFailed(Exception):
    """The processor could not be reached to re-fetch a session."""


class PaymentNotConfirmed(Exception):
    """The processor reports the session as not paid; no order is created."""

    def __init__(self, message: str, payment_status: str = "") -> None:
        super().__init__(message)
        self.payment_status = payment_status


class InvalidWebhook(Exception):
    """Webhook payload or signature could not be verified."""
