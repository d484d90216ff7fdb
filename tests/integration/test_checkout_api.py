"""Integration tests for POST /api/v1/checkout/."""

from __future__ import annotations

import pytest

from modules.checkout.models import CheckoutSession

pytestmark = pytest.mark.integration

CHECKOUT_URL = "/api/v1/checkout/"


@pytest.fixture()
def filled_cart(shopper_client, pack):
    shopper_client.post(
        "/api/v1/cart/items/",
        {"kind": "pack", "pack_id": str(pack.id)},
        format="json",
    )
    return shopper_client


class TestCheckoutApi:
    def test_anonymous_shopper_gets_sign_in_links(
        self, api_client, pack, patched_gateway, checkout_form
    ):
        api_client.post(
            "/api/v1/cart/items/",
            {"kind": "pack", "pack_id": str(pack.id)},
            format="json",
        )

        response = api_client.post(CHECKOUT_URL, checkout_form, format="json")

        assert response.status_code == 401
        body = response.json()
        assert body["login_url"] == "http://testserver/login"
        assert body["register_url"] == "http://testserver/register"
        assert patched_gateway.created == []

    def test_sign_in_links_follow_origin(self, api_client, patched_gateway):
        response = api_client.post(
            CHECKOUT_URL, {}, format="json", HTTP_ORIGIN="https://shop.example.com"
        )

        assert response.status_code == 401
        assert response.json()["login_url"] == "https://shop.example.com/login"

    def test_empty_cart(self, shopper_client, patched_gateway, checkout_form):
        response = shopper_client.post(CHECKOUT_URL, checkout_form, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "Your cart is empty."

    def test_missing_fields(self, filled_cart, patched_gateway):
        response = filled_cart.post(
            CHECKOUT_URL, {"full_name": "Laura Méndez"}, format="json"
        )

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Please complete all required fields."
        assert "email" in body["missing_fields"]
        assert "delivery_zip_code" in body["missing_fields"]
        assert patched_gateway.created == []

    def test_invalid_email_is_rejected(self, filled_cart, patched_gateway, checkout_form):
        response = filled_cart.post(
            CHECKOUT_URL, {**checkout_form, "email": "not-an-email"}, format="json"
        )

        assert response.status_code == 400
        assert "email" in response.json()

    def test_creates_payment_session(self, filled_cart, patched_gateway, checkout_form):
        response = filled_cart.post(CHECKOUT_URL, checkout_form, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["url"] == "https://checkout.stripe.com/c/pay/cs_test_1"
        assert body["redirect_target"] == "_top"
        assert body["subtotal"] == "42.94"
        assert body["total"] == "46.70"
        assert CheckoutSession.objects.filter(stripe_session_id="cs_test_1").exists()

        cart = filled_cart.get("/api/v1/cart/").json()
        assert cart["items"] == []
        assert cart["cleared_by_checkout"] == "cs_test_1"

    def test_gateway_failure_keeps_cart(
        self, filled_cart, patched_gateway, checkout_form
    ):
        patched_gateway.fail_create = True

        response = filled_cart.post(CHECKOUT_URL, checkout_form, format="json")

        assert response.status_code == 502
        assert len(filled_cart.get("/api/v1/cart/").json()["items"]) == 1

    def test_checkout_is_throttled(self, shopper_client, patched_gateway):
        statuses = [
            shopper_client.post(CHECKOUT_URL, {}, format="json").status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [400] * 10
        assert statuses[10] == 429
