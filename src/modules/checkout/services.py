"""Checkout service layer.

``CheckoutService.start_checkout`` turns the session cart into a hosted
payment session:

1. signed-in user and non-empty cart are hard preconditions;
2. billing/delivery fields are validated locally, before any network call;
3. school and grade are extracted from the cart lines;
4. ``total = subtotal * 1.0875``;
5. customer info is encoded into processor metadata (size-bounded tiers);
6. the payment gateway is asked for a session;
7. on success the snapshot is stored and the cart cleared.

A gateway failure leaves the cart as it was so the shopper can retry.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, List

import structlog
import uuid6
from django.db import transaction

from modules.cart.domain import dump_line_items
from modules.checkout.constants import TAX_LINE_NAME, TAX_MULTIPLIER
from modules.checkout.dtos import CheckoutContextDTO, CheckoutResultDTO
from modules.checkout.exceptions import (
    AuthenticationRequired,
    EmptyCart,
    IncompleteCheckoutFields,
)
from modules.checkout.extraction import extract_school_and_grade
from modules.checkout.metadata import encode_customer_info
from modules.payments.dtos import PaymentLineItem, PaymentSessionRequest
from shared.domain.money import round_money, to_minor_units

if TYPE_CHECKING:
    from modules.cart.domain import Cart, CartLineItemBase
    from modules.cart.storage import SessionCartStore
    from modules.checkout.repositories.interfaces import (
        ICheckoutSessionRepository,
    )
    from modules.payments.gateway import IPaymentGateway

logger = structlog.get_logger(__name__)

SUCCESS_PATH = "/payment-success?session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/payment-canceled"


def calculate_total(subtotal: Decimal) -> Decimal:
    """Tax-inclusive total, unrounded."""
    return subtotal * TAX_MULTIPLIER


def _line_description(item: CartLineItemBase) -> str:
    parts = [getattr(item, "brand", ""), item.school, item.grade]
    return " - ".join(part for part in parts if part)


class CheckoutService:
    """Application service for starting a checkout.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        checkout_repository: ICheckoutSessionRepository,
        payment_gateway: IPaymentGateway,
        cart_store: SessionCartStore,
        currency: str = "usd",
    ) -> None:
        self._checkout_repo = checkout_repository
        self._gateway = payment_gateway
        self._cart_store = cart_store
        self._currency = currency

    def start_checkout(
        self,
        user: Any,
        cart: Cart,
        context: CheckoutContextDTO,
        base_url: str,
    ) -> CheckoutResultDTO:
        """Request a payment session for ``cart``.

        Raises:
            AuthenticationRequired: anonymous user.
            EmptyCart: nothing to pay for.
            IncompleteCheckoutFields: required billing/delivery fields blank.
            PaymentSessionFailed: the gateway rejected the request.
        """
        if user is None or not user.is_authenticated:
            raise AuthenticationRequired("Sign in or register to check out.")
        if cart.is_empty:
            raise EmptyCart("Your cart is empty.")

        missing = context.missing_fields()
        if missing:
            logger.info("checkout.validation_failed", missing_fields=missing)
            raise IncompleteCheckoutFields(missing)

        log = logger.bind(user_id=str(user.pk))
        items = cart.items
        school, grade = extract_school_and_grade(items)
        subtotal = cart.get_subtotal()
        total = calculate_total(subtotal)
        customer_info = context.to_customer_info()
        checkout_ref = str(uuid6.uuid7())

        encoded_info, tier = encode_customer_info(customer_info)
        metadata = {
            "user_id": str(user.pk),
            "school_name": school,
            "grade": grade,
            "checkout_ref": checkout_ref,
            "customer_info": encoded_info,
            "customer_info_tier": tier.value,
        }
        log.info(
            "checkout.started",
            checkout_ref=checkout_ref,
            line_count=len(items),
            customer_info_tier=tier.value,
        )

        request = PaymentSessionRequest(
            line_items=self._payment_line_items(items, total),
            metadata=metadata,
            success_url=base_url.rstrip("/") + SUCCESS_PATH,
            cancel_url=base_url.rstrip("/") + CANCEL_PATH,
            customer_email=context.email,
            currency=self._currency,
        )
        session = self._gateway.create_session(request)

        with transaction.atomic():
            self._checkout_repo.create(
                {
                    "stripe_session_id": session.session_id,
                    "user": user,
                    "items": dump_line_items(items),
                    "customer_info": customer_info,
                    "subtotal": round_money(subtotal),
                    "total": round_money(total),
                    "school_name": school,
                    "grade": grade,
                }
            )

        self._cart_store.clear(checkout_session_id=session.session_id)
        cart.clear()

        log.info(
            "checkout.session_created",
            session_id=session.session_id,
            checkout_ref=checkout_ref,
            total=str(round_money(total)),
        )
        return CheckoutResultDTO(
            url=session.url,
            session_id=session.session_id,
            subtotal=round_money(subtotal),
            total=round_money(total),
        )

    def _payment_line_items(
        self, items: List[CartLineItemBase], total: Decimal
    ) -> List[PaymentLineItem]:
        """Cart lines in cents plus one tax line covering the difference."""
        line_items = [
            PaymentLineItem(
                name=item.name,
                unit_amount=to_minor_units(item.unit_price),
                quantity=item.quantity,
                description=_line_description(item),
            )
            for item in items
        ]
        charged = sum(line.unit_amount * line.quantity for line in line_items)
        tax_cents = to_minor_units(total) - charged
        if tax_cents > 0:
            line_items.append(
                PaymentLineItem(name=TAX_LINE_NAME, unit_amount=tax_cents, quantity=1)
            )
        return line_items

