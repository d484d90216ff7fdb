"""Payment collaborator DTOs (Pydantic v2, immutable).

- ``PaymentLineItem`` / ``PaymentSessionRequest``: what checkout sends.
- ``PaymentSession``: redirect URL + session id returned by the processor.
- ``VerifiedSession``: the processor's authoritative view of a session.
- ``WebhookEvent``: verified webhook notification.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    unit_amount: int = Field(ge=0, description="Unit price in minor currency units.")
    quantity: int = Field(ge=1)
    description: str = ""


class PaymentSessionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_items: List[PaymentLineItem]
    metadata: Dict[str, str]
    success_url: str
    cancel_url: str
    customer_email: Optional[str] = None
    currency: str = "usd"

    @field_validator("line_items")
    @classmethod
    def line_items_must_not_be_empty(
        cls, v: List[PaymentLineItem]
    ) -> List[PaymentLineItem]:
        if not v:
            raise ValueError("A payment session needs at least one line item.")
        return v


class PaymentSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    url: str


class VerifiedSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    payment_status: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    amount_total: Optional[int] = None
    customer_details: Dict[str, Any] = Field(default_factory=dict)
    line_items: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"


class WebhookEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: str
    event_type: str
    session_id: Optional[str] = None
