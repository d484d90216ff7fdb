"""Unit tests for CheckoutService with an in-memory payment gateway."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from django.contrib.auth.models import AnonymousUser

from modules.cart.domain import Cart, ElectronicItem, SupplyItem
from modules.cart.storage import SessionCartStore
from modules.checkout.constants import TAX_LINE_NAME
from modules.checkout.dtos import CheckoutContextDTO
from modules.checkout.exceptions import (
    AuthenticationRequired,
    EmptyCart,
    IncompleteCheckoutFields,
)
from modules.checkout.models import CheckoutSession
from modules.checkout.repositories.django_repository import (
    CheckoutSessionDjangoRepository,
)
from modules.checkout.services import CheckoutService, calculate_total
from modules.payments.exceptions import PaymentSessionFailed

pytestmark = pytest.mark.unit

BASE_URL = "http://shop.test"


@pytest.fixture()
def session():
    return {}


@pytest.fixture()
def store(session):
    return SessionCartStore(session)


@pytest.fixture()
def service(fake_gateway, store):
    return CheckoutService(
        checkout_repository=CheckoutSessionDjangoRepository(),
        payment_gateway=fake_gateway,
        cart_store=store,
    )


@pytest.fixture()
def cart(store):
    cart = Cart(
        [
            SupplyItem(
                id="supply-p1-3g1",
                name="Lápices #2",
                brand="Ticonderoga",
                unit_price=Decimal("4.99"),
                quantity=2,
                school="Lincoln Elementary",
                grade="3rd Grade",
            ),
            ElectronicItem(
                id="electronic-e1",
                name="Chromebook 11",
                brand="Acer",
                unit_price=Decimal("229.00"),
            ),
        ]
    )
    store.save(cart)
    return cart


@pytest.fixture()
def context(checkout_form):
    return CheckoutContextDTO(**checkout_form)


def test_calculate_total_applies_sales_tax():
    assert calculate_total(Decimal("100")) == Decimal("108.75")


# ---------------------------------------------------------------------------
# Preconditions (no payment call is made)
# ---------------------------------------------------------------------------


class TestPreconditions:
    def test_anonymous_user_is_rejected(self, service, cart, context, fake_gateway):
        with pytest.raises(AuthenticationRequired):
            service.start_checkout(AnonymousUser(), cart, context, BASE_URL)

        assert fake_gateway.created == []

    def test_empty_cart_is_rejected(self, service, shopper, context, fake_gateway):
        with pytest.raises(EmptyCart):
            service.start_checkout(shopper, Cart(), context, BASE_URL)

        assert fake_gateway.created == []

    def test_missing_fields_are_reported_together(
        self, service, shopper, cart, fake_gateway
    ):
        context = CheckoutContextDTO(full_name="Laura Méndez", email="l@example.com")

        with pytest.raises(IncompleteCheckoutFields) as exc_info:
            service.start_checkout(shopper, cart, context, BASE_URL)

        assert "phone" in exc_info.value.missing_fields
        assert "delivery_address" in exc_info.value.missing_fields
        assert str(exc_info.value) == "Please complete all required fields."
        assert fake_gateway.created == []
        assert CheckoutSession.objects.count() == 0


# ---------------------------------------------------------------------------
# Successful checkout
# ---------------------------------------------------------------------------


class TestStartCheckout:
    def test_returns_redirect_to_payment_page(self, service, shopper, cart, context):
        result = service.start_checkout(shopper, cart, context, BASE_URL)

        assert result.session_id == "cs_test_1"
        assert result.url == "https://checkout.stripe.com/c/pay/cs_test_1"
        assert result.redirect_target == "_top"
        assert result.subtotal == Decimal("238.98")
        assert result.total == Decimal("259.89")

    def test_line_items_are_in_cents_with_tax_line(
        self, service, shopper, cart, context, fake_gateway
    ):
        service.start_checkout(shopper, cart, context, BASE_URL)

        request = fake_gateway.created[0]
        amounts = [
            (line.name, line.unit_amount, line.quantity)
            for line in request.line_items
        ]
        assert amounts == [
            ("Lápices #2", 499, 2),
            ("Chromebook 11", 22900, 1),
            (TAX_LINE_NAME, 2091, 1),
        ]
        charged = sum(line.unit_amount * line.quantity for line in request.line_items)
        assert charged == 25989

    def test_urls_and_metadata(self, service, shopper, cart, context, fake_gateway):
        service.start_checkout(shopper, cart, context, BASE_URL + "/")

        request = fake_gateway.created[0]
        assert request.success_url == (
            "http://shop.test/payment-success?session_id={CHECKOUT_SESSION_ID}"
        )
        assert request.cancel_url == "http://shop.test/payment-canceled"
        assert request.customer_email == "laura@example.com"
        assert request.metadata["user_id"] == str(shopper.pk)
        assert request.metadata["school_name"] == "Lincoln Elementary"
        assert request.metadata["grade"] == "3rd Grade"
        assert request.metadata["customer_info_tier"] == "full"
        assert request.metadata["checkout_ref"]
        info = json.loads(request.metadata["customer_info"])
        assert info["billing"]["full_name"] == "Laura Méndez"
        assert info["delivery"]["delivery_address"] == "12 Elm Street"

    def test_snapshot_is_stored(self, service, shopper, cart, context):
        service.start_checkout(shopper, cart, context, BASE_URL)

        snapshot = CheckoutSession.objects.get(stripe_session_id="cs_test_1")
        assert snapshot.user == shopper
        assert len(snapshot.items) == 2
        assert snapshot.items[0]["unit_price"] == "4.99"
        assert snapshot.total == Decimal("259.89")
        assert snapshot.customer_info["same_as_billing"] is True
        assert snapshot.school_name == "Lincoln Elementary"

    def test_cart_is_cleared(self, service, shopper, cart, context, store):
        service.start_checkout(shopper, cart, context, BASE_URL)

        assert cart.is_empty
        assert store.load().is_empty
        assert store.cleared_by_checkout == "cs_test_1"


class TestGatewayFailure:
    def test_cart_is_left_untouched(
        self, service, shopper, cart, context, store, fake_gateway
    ):
        fake_gateway.fail_create = True

        with pytest.raises(PaymentSessionFailed):
            service.start_checkout(shopper, cart, context, BASE_URL)

        assert len(cart) == 2
        assert len(store.load()) == 2
        assert store.cleared_by_checkout is None
        assert CheckoutSession.objects.count() == 0
