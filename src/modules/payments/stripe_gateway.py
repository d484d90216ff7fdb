"""Stripe Checkout implementation of ``IPaymentGateway``.

Uses hosted Checkout Sessions in ``payment`` mode.  Every Stripe error is
logged with its full detail and re-raised as a domain exception whose
message is safe to show to shoppers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import stripe
import structlog
from django.conf import settings

from modules.payments.dtos import (
    PaymentSession,
    PaymentSessionRequest,
    VerifiedSession,
    WebhookEvent,
)
from modules.payments.exceptions import (
    InvalidWebhook,
    PaymentSessionFailed,
    PaymentVerificationFailed,
)

logger = structlog.get_logger(__name__)


def _as_dict(obj: Any) -> Dict[str, Any]:
    """Plain-dict view of a Stripe object."""
    if obj is None:
        return {}
    if isinstance(obj, stripe.StripeObject):
        return obj.to_dict()
    return dict(obj)


class StripePaymentGateway:
    def __init__(
        self,
        api_key: Optional[str] = None,
        webhook_secret: Optional[str] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self._webhook_secret = (
            webhook_secret
            if webhook_secret is not None
            else settings.STRIPE_WEBHOOK_SECRET
        )

    # ------------------------------------------------------------------
    # Session creation
    # ------------------------------------------------------------------

    def create_session(self, request: PaymentSessionRequest) -> PaymentSession:
        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": self._line_items(request),
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "metadata": dict(request.metadata),
        }

        try:
            customer_id = self._find_customer(request.customer_email)
            if customer_id:
                params["customer"] = customer_id
            else:
                params["customer_creation"] = "always"
                if request.customer_email:
                    params["customer_email"] = request.customer_email

            session = stripe.checkout.Session.create(api_key=self._api_key, **params)
        except stripe.StripeError as exc:
            logger.error(
                "payments.session_create_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                stripe_code=getattr(exc, "code", None),
            )
            raise PaymentSessionFailed(
                "The payment session could not be created. Please try again."
            ) from exc

        data = _as_dict(session)
        if not data.get("url"):
            logger.error("payments.session_missing_url", session_id=data.get("id"))
            raise PaymentSessionFailed(
                "The payment processor did not return a payment page."
            )

        logger.info(
            "payments.session_created",
            session_id=data["id"],
            line_item_count=len(params["line_items"]),
        )
        return PaymentSession(session_id=data["id"], url=data["url"])

    def _line_items(self, request: PaymentSessionRequest) -> List[Dict[str, Any]]:
        items = []
        for item in request.line_items:
            product_data: Dict[str, Any] = {"name": item.name}
            # Stripe rejects an empty description.
            if item.description:
                product_data["description"] = item.description
            items.append(
                {
                    "price_data": {
                        "currency": request.currency,
                        "product_data": product_data,
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": item.quantity,
                }
            )
        return items

    def _find_customer(self, email: Optional[str]) -> Optional[str]:
        if not email:
            return None
        customers = _as_dict(
            stripe.Customer.list(email=email, limit=1, api_key=self._api_key)
        )
        data = customers.get("data") or []
        return data[0]["id"] if data else None

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def retrieve_session(self, session_id: str) -> VerifiedSession:
        try:
            session = stripe.checkout.Session.retrieve(
                session_id, api_key=self._api_key, expand=["line_items"]
            )
        except stripe.StripeError as exc:
            logger.error(
                "payments.session_retrieve_failed",
                session_id=session_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PaymentVerificationFailed(
                "The payment could not be verified. Please try again."
            ) from exc

        data = _as_dict(session)
        line_items = (data.get("line_items") or {}).get("data") or []
        return VerifiedSession(
            session_id=data.get("id") or session_id,
            payment_status=data.get("payment_status") or "",
            metadata={k: str(v) for k, v in (data.get("metadata") or {}).items()},
            amount_total=data.get("amount_total"),
            customer_details=data.get("customer_details") or {},
            line_items=line_items,
        )

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        if not self._webhook_secret:
            raise InvalidWebhook("Webhook secret is not configured.")
        try:
            event = stripe.Webhook.construct_event(
                payload, signature, self._webhook_secret
            )
        except ValueError as exc:
            raise InvalidWebhook("Invalid webhook payload.") from exc
        except stripe.SignatureVerificationError as exc:
            raise InvalidWebhook("Invalid webhook signature.") from exc

        data = _as_dict(event)
        obj = (data.get("data") or {}).get("object") or {}
        session_id = obj.get("id") if obj.get("object") == "checkout.session" else None
        return WebhookEvent(
            event_id=data.get("id") or "",
            event_type=data.get("type") or "",
            session_id=session_id,
        )
