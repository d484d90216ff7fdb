from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.checkout.dtos import CheckoutContextDTO

pytestmark = pytest.mark.unit


BILLING = {
    "full_name": "Laura Méndez",
    "email": "laura@example.com",
    "phone": "555-0100",
    "address": "12 Elm Street",
    "city": "Springfield",
    "zip_code": "62704",
}


class TestCheckoutContextDTO:
    def test_reports_every_missing_field(self):
        context = CheckoutContextDTO(full_name="Laura Méndez")

        assert context.missing_fields() == [
            "email",
            "phone",
            "address",
            "city",
            "zip_code",
            "delivery_name",
            "delivery_address",
            "delivery_city",
            "delivery_zip_code",
        ]

    def test_whitespace_only_counts_as_missing(self):
        context = CheckoutContextDTO(**{**BILLING, "city": "   "}, same_as_billing=True)
        assert context.missing_fields() == ["city"]

    def test_same_as_billing_skips_delivery_fields(self):
        context = CheckoutContextDTO(**BILLING, same_as_billing=True)

        assert context.missing_fields() == []
        assert context.delivery() == {
            "delivery_name": "Laura Méndez",
            "delivery_address": "12 Elm Street",
            "delivery_city": "Springfield",
            "delivery_zip_code": "62704",
        }

    def test_separate_delivery_address(self):
        context = CheckoutContextDTO(
            **BILLING,
            delivery_name="Abuela Rosa",
            delivery_address="9 Pine Road",
            delivery_city="Shelbyville",
            delivery_zip_code="62565",
        )

        info = context.to_customer_info()

        assert context.missing_fields() == []
        assert info["billing"] == BILLING
        assert info["delivery"]["delivery_name"] == "Abuela Rosa"
        assert info["same_as_billing"] is False

    def test_is_immutable(self):
        context = CheckoutContextDTO(**BILLING)
        with pytest.raises(ValidationError):
            context.city = "Capital City"
