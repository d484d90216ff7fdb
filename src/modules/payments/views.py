"""Payment confirmation endpoints.

- ``POST /api/v1/payments/verify/``: called by the payment-success page.
  Public: the unguessable session id is the credential, and a guest whose
  sign-in expired must still get an order.
- ``POST /api/v1/payments/webhook/``: Stripe delivery, signature-checked,
  materialization handed to Celery.
"""

from __future__ import annotations

import structlog
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.orders.exceptions import OrderMaterializationFailed
from modules.orders.serializers import OrderReceiptSerializer, SessionIdSerializer
from modules.orders.services import build_order_service
from modules.orders.tasks import materialize_paid_session
from modules.payments.exceptions import (
    InvalidWebhook,
    PaymentNotConfirmed,
    PaymentVerificationFailed,
)
from modules.payments.gateway import build_payment_gateway

logger = structlog.get_logger(__name__)

CANCEL_REDIRECT = "/payment-canceled"
MATERIALIZING_EVENTS = frozenset(
    {"checkout.session.completed", "checkout.session.async_payment_succeeded"}
)


class VerifyPaymentView(APIView):
    permission_classes = [AllowAny]
    throttle_scope = "payment_verification"

    def post(self, request: Request) -> Response:
        """POST /api/v1/payments/verify/"""
        serializer = SessionIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session_id = serializer.validated_data["session_id"]

        service = build_order_service(with_gateway=True)
        try:
            order = service.materialize_paid_session(session_id)
        except PaymentNotConfirmed as exc:
            return Response(
                {
                    "detail": str(exc),
                    "payment_status": exc.payment_status,
                    "redirect": CANCEL_REDIRECT,
                },
                status=status.HTTP_402_PAYMENT_REQUIRED,
            )
        except PaymentVerificationFailed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        except OrderMaterializationFailed as exc:
            return Response(
                {"detail": str(exc), "session_id": exc.session_id},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {"success": True, "order": OrderReceiptSerializer(order).data}
        )


class StripeWebhookView(APIView):
    permission_classes = [AllowAny]
    # Stripe posts without cookies or CSRF token.
    authentication_classes: list = []

    def post(self, request: Request) -> Response:
        """POST /api/v1/payments/webhook/"""
        signature = request.headers.get("Stripe-Signature", "")
        try:
            event = build_payment_gateway().parse_webhook(request.body, signature)
        except InvalidWebhook as exc:
            logger.warning("payments.webhook_rejected", error=str(exc))
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        log = logger.bind(event_id=event.event_id, event_type=event.event_type)
        if event.event_type in MATERIALIZING_EVENTS and event.session_id:
            materialize_paid_session.delay(event.session_id)
            log.info("payments.webhook_enqueued", session_id=event.session_id)
        else:
            log.info("payments.webhook_ignored")

        return Response({"received": True})
