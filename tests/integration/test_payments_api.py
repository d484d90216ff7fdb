"""Integration tests for payment verification and the Stripe webhook."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.orders.models import Order

pytestmark = pytest.mark.integration

VERIFY_URL = "/api/v1/payments/verify/"
WEBHOOK_URL = "/api/v1/payments/webhook/"


def _event(event_type="checkout.session.completed", session_id="cs_test_hook"):
    return json.dumps(
        {
            "id": "evt_1",
            "type": event_type,
            "data": {"object": {"object": "checkout.session", "id": session_id}},
        }
    )


# ---------------------------------------------------------------------------
# Verify (payment-success page)
# ---------------------------------------------------------------------------


class TestVerifyPayment:
    def test_paid_session_returns_receipt(self, api_client, patched_gateway, shopper):
        patched_gateway.register(
            "cs_test_ok", amount_total=4670, metadata={"user_id": str(shopper.pk)}
        )

        response = api_client.post(
            VERIFY_URL, {"session_id": "cs_test_ok"}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["order"]["total"] == "46.70"
        assert body["order"]["status"] == "pendiente"
        assert Order.objects.get(stripe_session_id="cs_test_ok").user == shopper

    def test_verifying_twice_creates_one_order(self, api_client, patched_gateway):
        patched_gateway.register("cs_test_twice", amount_total=100)

        first = api_client.post(VERIFY_URL, {"session_id": "cs_test_twice"})
        second = api_client.post(VERIFY_URL, {"session_id": "cs_test_twice"})

        assert first.json()["order"]["id"] == second.json()["order"]["id"]
        assert Order.objects.count() == 1

    def test_unpaid_session_redirects_to_cancel_page(self, api_client, patched_gateway):
        patched_gateway.register(
            "cs_test_unpaid", amount_total=100, payment_status="unpaid"
        )

        response = api_client.post(VERIFY_URL, {"session_id": "cs_test_unpaid"})

        assert response.status_code == 402
        assert response.json()["redirect"] == "/payment-canceled"
        assert response.json()["payment_status"] == "unpaid"
        assert Order.objects.count() == 0

    def test_processor_unreachable(self, api_client, patched_gateway):
        response = api_client.post(VERIFY_URL, {"session_id": "cs_test_unknown"})
        assert response.status_code == 502

    def test_insert_failure_after_payment(self, api_client, patched_gateway):
        patched_gateway.register("cs_test_fail", amount_total=100)

        with patch(
            "modules.orders.repositories.django_repository.OrderDjangoRepository.create",
            side_effect=DatabaseError("disk I/O error"),
        ):
            response = api_client.post(VERIFY_URL, {"session_id": "cs_test_fail"})

        assert response.status_code == 500
        assert response.json()["session_id"] == "cs_test_fail"

    def test_session_id_is_required(self, api_client, patched_gateway):
        response = api_client.post(VERIFY_URL, {}, format="json")
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Webhook
# ---------------------------------------------------------------------------


class TestStripeWebhook:
    def test_completed_event_materializes_order(self, api_client, patched_gateway):
        patched_gateway.register("cs_test_hook", amount_total=2500)

        response = api_client.post(
            WEBHOOK_URL,
            _event(),
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE="t=1,v1=valid",
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert Order.objects.filter(stripe_session_id="cs_test_hook").exists()

    def test_async_payment_event_is_enqueued(self, api_client, patched_gateway):
        with patch(
            "modules.payments.views.materialize_paid_session.delay"
        ) as delay:
            response = api_client.post(
                WEBHOOK_URL,
                _event("checkout.session.async_payment_succeeded", "cs_test_async"),
                content_type="application/json",
                HTTP_STRIPE_SIGNATURE="t=1,v1=valid",
            )

        assert response.status_code == 200
        delay.assert_called_once_with("cs_test_async")

    def test_other_events_are_acknowledged_and_ignored(
        self, api_client, patched_gateway
    ):
        with patch("modules.payments.views.materialize_paid_session.delay") as delay:
            response = api_client.post(
                WEBHOOK_URL,
                _event("checkout.session.expired"),
                content_type="application/json",
                HTTP_STRIPE_SIGNATURE="t=1,v1=valid",
            )

        assert response.status_code == 200
        delay.assert_not_called()

    def test_bad_signature_is_rejected(self, api_client, patched_gateway):
        response = api_client.post(
            WEBHOOK_URL,
            _event(),
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE="t=1,v1=forged",
        )

        assert response.status_code == 400
        assert Order.objects.count() == 0
