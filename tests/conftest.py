import json
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.catalog.models import Electronic, School, SupplyPack
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

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture()
def shopper():
    return User.objects.create_user(
        username="parent", email="parent@example.com", password="testpass123"
    )


@pytest.fixture()
def other_shopper():
    return User.objects.create_user(
        username="neighbour", email="neighbour@example.com", password="testpass123"
    )


@pytest.fixture()
def store_admin():
    return User.objects.create_user(
        username="storeadmin", password="testpass123", is_staff=True
    )


@pytest.fixture()
def shopper_client(shopper):
    client = APIClient()
    client.force_authenticate(user=shopper)
    return client


@pytest.fixture()
def admin_client_api(store_admin):
    client = APIClient()
    client.force_authenticate(user=store_admin)
    return client


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def school():
    return School.objects.create(
        name="Lincoln Elementary",
        address="1200 Oak Street",
        phone="(555) 201-4400",
        principal="Maria Torres",
        grades="Kindergarten, 3rd Grade",
        enrollment=420,
    )


@pytest.fixture()
def pack(school):
    return SupplyPack.objects.create(
        school=school,
        grade="3rd Grade",
        name="Pack - 3rd Grade - Lincoln Elementary",
        description="Lista oficial de útiles de 3rd Grade.",
        price=Decimal("42.94"),
        items=[
            {
                "id": "3g1",
                "name": "Lápices #2",
                "brand": "Ticonderoga",
                "price": "4.99",
                "quantity": 3,
                "category": "Escritura",
            },
            {
                "id": "3g4",
                "name": "Calculadora básica",
                "brand": "Texas Instruments",
                "price": "12.99",
                "quantity": 1,
                "category": "Matemáticas",
            },
        ],
    )


@pytest.fixture()
def electronic():
    return Electronic.objects.create(
        name="Chromebook 11",
        brand="Acer",
        category="Laptops",
        price=Decimal("229.00"),
        original_price=Decimal("279.00"),
        in_stock=True,
    )


@pytest.fixture()
def sold_out_electronic():
    return Electronic.objects.create(
        name="Memoria USB 64GB",
        brand="SanDisk",
        category="Almacenamiento",
        price=Decimal("12.99"),
        in_stock=False,
    )


@pytest.fixture()
def checkout_form():
    return {
        "full_name": "Laura Méndez",
        "email": "laura@example.com",
        "phone": "555-0100",
        "address": "12 Elm Street",
        "city": "Springfield",
        "zip_code": "62704",
        "same_as_billing": True,
    }


# ---------------------------------------------------------------------------
# Payment gateway
# ---------------------------------------------------------------------------


class FakePaymentGateway:
    """In-memory ``IPaymentGateway`` recording every call."""

    def __init__(self) -> None:
        self.created: list[PaymentSessionRequest] = []
        self.sessions: dict[str, VerifiedSession] = {}
        self.retrieved: list[str] = []
        self.fail_create = False

    def create_session(self, request: PaymentSessionRequest) -> PaymentSession:
        if self.fail_create:
            raise PaymentSessionFailed(
                "The payment session could not be created. Please try again."
            )
        self.created.append(request)
        session_id = f"cs_test_{len(self.created)}"
        return PaymentSession(
            session_id=session_id,
            url=f"https://checkout.stripe.com/c/pay/{session_id}",
        )

    def retrieve_session(self, session_id: str) -> VerifiedSession:
        self.retrieved.append(session_id)
        try:
            return self.sessions[session_id]
        except KeyError:
            raise PaymentVerificationFailed(
                "The payment could not be verified. Please try again."
            ) from None

    def parse_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != "t=1,v1=valid":
            raise InvalidWebhook("Invalid webhook signature.")
        data = json.loads(payload)
        obj = data["data"]["object"]
        return WebhookEvent(
            event_id=data["id"], event_type=data["type"], session_id=obj.get("id")
        )

    def register(
        self,
        session_id: str,
        amount_total: int,
        metadata: dict | None = None,
        payment_status: str = "paid",
        customer_details: dict | None = None,
        line_items: list | None = None,
    ) -> VerifiedSession:
        verified = VerifiedSession(
            session_id=session_id,
            payment_status=payment_status,
            metadata=metadata or {},
            amount_total=amount_total,
            customer_details=customer_details or {},
            line_items=line_items or [],
        )
        self.sessions[session_id] = verified
        return verified


@pytest.fixture()
def fake_gateway():
    return FakePaymentGateway()


@pytest.fixture()
def patched_gateway(fake_gateway, monkeypatch):
    """Route every ``build_payment_gateway()`` call to ``fake_gateway``."""
    factory = lambda: fake_gateway  # noqa: E731
    monkeypatch.setattr("modules.payments.gateway.build_payment_gateway", factory)
    monkeypatch.setattr("modules.checkout.views.build_payment_gateway", factory)
    monkeypatch.setattr("modules.payments.views.build_payment_gateway", factory)
    return fake_gateway
