"""Checkout DTOs (Pydantic v2, immutable).

- ``CheckoutContextDTO``: billing/delivery form submitted by the shopper.
- ``CheckoutResultDTO``: what the client needs to leave for the payment page.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict

from modules.checkout.constants import BILLING_FIELDS, DELIVERY_FIELDS


class CheckoutContextDTO(BaseModel):
    """Billing and delivery details for one checkout attempt.

    Fields default to blank so that ``missing_fields`` can report every
    gap at once instead of failing on the first one.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    delivery_name: str = ""
    delivery_address: str = ""
    delivery_city: str = ""
    delivery_zip_code: str = ""
    same_as_billing: bool = False

    def missing_fields(self) -> List[str]:
        required = list(BILLING_FIELDS)
        if not self.same_as_billing:
            required.extend(DELIVERY_FIELDS)
        return [name for name in required if not getattr(self, name)]

    def billing(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in BILLING_FIELDS}

    def delivery(self) -> Dict[str, str]:
        """Delivery address, mirrored from billing when ``same_as_billing``."""
        if self.same_as_billing:
            return {
                "delivery_name": self.full_name,
                "delivery_address": self.address,
                "delivery_city": self.city,
                "delivery_zip_code": self.zip_code,
            }
        return {name: getattr(self, name) for name in DELIVERY_FIELDS}

    def to_customer_info(self) -> Dict[str, Any]:
        """Nested representation stored with the checkout and the order."""
        return {
            "billing": self.billing(),
            "delivery": self.delivery(),
            "same_as_billing": self.same_as_billing,
        }


class CheckoutResultDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    session_id: str
    # The payment page refuses to render inside frames.
    redirect_target: str = "_top"
    subtotal: Decimal
    total: Decimal
