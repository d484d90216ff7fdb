"""Payment gateway contract.

The checkout initiator and the order materializer depend on this
protocol only; ``StripePaymentGateway`` is the production implementation
and tests substitute fakes.
"""

from __future__ import annotations

from typing import Protocol

from modules.payments.dtos import (
    PaymentSession,
    PaymentSessionRequest,
    VerifiedSession,
    WebhookEvent,
)


class IPaymentGateway(Protocol):
    def create_session(self, request: PaymentSessionRequest) -> PaymentSession:
        """Create a hosted payment session.

        Raises:
            PaymentSessionFailed: rejection, network error or missing URL.
        """

    def retrieve_session(self, session_id: str) -> VerifiedSession:
        """Re-fetch a session's status directly from the processor.

        Raises:
            PaymentVerificationFailed: the processor could not be queried.
        """

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify and decode a webhook delivery.

        Raises:
            InvalidWebhook: bad payload or signature.
        """


def build_payment_gateway() -> IPaymentGateway:
    """Production gateway wired from settings."""
    from modules.payments.stripe_gateway import StripePaymentGateway

    return StripePaymentGateway()
