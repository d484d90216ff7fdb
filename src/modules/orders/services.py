"""Order service layer (Use Cases).

Two write paths touch orders:

- **Materialization** (``materialize_paid_session``): turns a paid payment
  session into exactly one order.  Idempotent on ``stripe_session_id``;
  the unique constraint settles races between the webhook worker and the
  success page.
- **Status machine** (``confirm_payment``, ``update_status``): moves an
  order between ``pendiente``, ``procesando``, ``completada`` and
  ``cancelada``.  Admins may set any state; the success page may only
  complete its own pending order.

Every status change records an ``OrderStatusHistory`` row (signals) and
publishes ``OrderStatusChanged``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction

from modules.checkout.constants import NOT_AVAILABLE
from modules.checkout.extraction import extract_school_and_grade
from modules.checkout.metadata import (
    decode_customer_info,
    flatten_customer_info,
    nest_customer_info,
    placeholder_customer_info,
)
from modules.core.permissions import is_store_admin
from modules.orders.constants import OrderStatus, normalize_status
from modules.orders.events import OrderStatusChanged
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderMaterializationFailed,
    OrderNotFound,
)
from modules.payments.exceptions import PaymentNotConfirmed
from shared.domain.money import from_minor_units

if TYPE_CHECKING:
    from modules.checkout.models import CheckoutSession
    from modules.checkout.repositories.interfaces import (
        ICheckoutSessionRepository,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.dtos import VerifiedSession
    from modules.payments.gateway import IPaymentGateway

logger = structlog.get_logger(__name__)


def resolve_user(user_id: Optional[str]) -> Any:
    """Active user for ``user_id``; ``None`` when it cannot be resolved."""
    if not user_id:
        return None
    try:
        return get_user_model().objects.filter(pk=user_id, is_active=True).first()
    except (ValueError, TypeError):
        return None


def enrich_item(
    item: Dict[str, Any], customer_info: Dict[str, Any]
) -> Dict[str, Any]:
    """Order line: cart line + nested customer info + flattened fields."""
    enriched = dict(item)
    enriched["customer_info"] = customer_info
    enriched.update(flatten_customer_info(customer_info))
    return enriched


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the payment gateway via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        checkout_repository: Optional[ICheckoutSessionRepository] = None,
        payment_gateway: Optional[IPaymentGateway] = None,
        user_resolver: Callable[[Optional[str]], Any] = resolve_user,
    ) -> None:
        self._order_repo = order_repository
        self._checkout_repo = checkout_repository
        self._gateway = payment_gateway
        self._resolve_user = user_resolver

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    def materialize_paid_session(self, session_id: str) -> Order:
        """Create (or return) the order for a paid payment session.

        Raises:
            PaymentNotConfirmed: the processor does not report the session paid.
            PaymentVerificationFailed: the processor could not be queried.
            OrderMaterializationFailed: payment confirmed but the insert failed.
        """
        log = logger.bind(session_id=session_id)

        existing = self._order_repo.get_by_session_id(session_id)
        if existing:
            log.info("order.idempotency_hit", order_id=str(existing.id))
            return existing

        verified = self._require_gateway().retrieve_session(session_id)
        if not verified.paid:
            log.info(
                "order.payment_not_confirmed",
                payment_status=verified.payment_status,
            )
            raise PaymentNotConfirmed(
                "The payment has not been completed.",
                payment_status=verified.payment_status,
            )

        snapshot = self._snapshot(session_id)
        data = self._order_data(verified, snapshot)

        try:
            with transaction.atomic():
                order = self._order_repo.create(data)
        except IntegrityError as exc:
            winner = self._order_repo.get_by_session_id(session_id)
            if winner:
                log.info(
                    "order.concurrent_materialization", order_id=str(winner.id)
                )
                return winner
            log.critical(
                "order.materialization_failed_after_payment", error=str(exc)
            )
            raise OrderMaterializationFailed(session_id) from exc
        except DatabaseError as exc:
            log.critical(
                "order.materialization_failed_after_payment", error=str(exc)
            )
            raise OrderMaterializationFailed(session_id) from exc

        log.info(
            "order.materialized",
            order_id=str(order.id),
            user_id=str(order.user_id) if order.user_id else None,
            total=str(order.total),
            item_count=len(order.items),
        )
        return order

    def _order_data(
        self, verified: VerifiedSession, snapshot: Optional[CheckoutSession]
    ) -> Dict[str, Any]:
        metadata = verified.metadata
        user = self._resolve_user(metadata.get("user_id"))
        customer_info = self._customer_info(verified, snapshot)

        if snapshot and snapshot.items:
            raw_items = list(snapshot.items)
        else:
            raw_items = self._processor_items(verified.line_items)
        items = [enrich_item(item, customer_info) for item in raw_items]

        school = metadata.get("school_name") or (
            snapshot.school_name if snapshot else ""
        )
        grade = metadata.get("grade") or (snapshot.grade if snapshot else "")
        if not school or not grade:
            extracted = extract_school_and_grade(raw_items)
            school = school or extracted.school
            grade = grade or extracted.grade

        total = from_minor_units(verified.amount_total)
        return {
            "user": user,
            "items": items,
            "total": total,
            "status": OrderStatus.PENDING,
            "school_name": school,
            "grade": grade,
            "stripe_session_id": verified.session_id,
        }

    def _snapshot(self, session_id: str) -> Optional[CheckoutSession]:
        if self._checkout_repo is None:
            return None
        return self._checkout_repo.get_by_session_id(session_id)

    def _customer_info(
        self, verified: VerifiedSession, snapshot: Optional[CheckoutSession]
    ) -> Dict[str, Any]:
        """First available source: snapshot, metadata, processor, placeholders."""
        if snapshot and snapshot.customer_info:
            return _fill_placeholders(snapshot.customer_info)

        payload = verified.metadata.get("customer_info", "")
        tier = verified.metadata.get("customer_info_tier", "")
        try:
            decoded = decode_customer_info(payload, tier)
        except ValueError as exc:
            logger.warning(
                "order.customer_info_undecodable",
                session_id=verified.session_id,
                tier=tier,
                error=str(exc),
            )
            decoded = {}
        if decoded:
            return _fill_placeholders(decoded)

        details = verified.customer_details
        if details:
            address = details.get("address") or {}
            flat = {
                "full_name": details.get("name") or "",
                "email": details.get("email") or "",
                "phone": details.get("phone") or "",
                "address": address.get("line1") or "",
                "city": address.get("city") or "",
                "zip_code": address.get("postal_code") or "",
                "same_as_billing": True,
            }
            flat.update(
                {
                    "delivery_name": flat["full_name"],
                    "delivery_address": flat["address"],
                    "delivery_city": flat["city"],
                    "delivery_zip_code": flat["zip_code"],
                }
            )
            return _fill_placeholders(nest_customer_info(flat))

        return placeholder_customer_info()

    @staticmethod
    def _processor_items(line_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        items = []
        for line in line_items:
            price = line.get("price") or {}
            items.append(
                {
                    "id": line.get("id") or "",
                    "name": line.get("description") or "",
                    "unit_price": str(from_minor_units(price.get("unit_amount"))),
                    "quantity": line.get("quantity") or 1,
                }
            )
        return items

    def _require_gateway(self) -> IPaymentGateway:
        if self._gateway is None:
            raise RuntimeError("OrderService was built without a payment gateway.")
        return self._gateway

    # ------------------------------------------------------------------
    # Status machine
    # ------------------------------------------------------------------

    @transaction.atomic
    def confirm_payment(self, session_id: str, user: Any) -> Order:
        """Success-page completion: ``pendiente`` → ``completada``.

        Only the owner may confirm; other states are returned unchanged.

        Raises:
            OrderNotFound: no order for the session, or not owned by ``user``.
        """
        order = self._order_repo.get_by_session_id_for_update(session_id)
        if (
            order is None
            or order.user_id is None
            or not getattr(user, "is_authenticated", False)
            or order.user_id != user.pk
        ):
            raise OrderNotFound(f"Order for session {session_id} not found.")

        if order.status != OrderStatus.PENDING:
            logger.info(
                "order.confirm_payment_noop",
                order_id=str(order.id),
                status=order.status,
            )
            return order

        return self._transition(
            order, OrderStatus.COMPLETED, actor=user, notes="Payment confirmed"
        )

    @transaction.atomic
    def update_status(
        self,
        order_id: str,
        new_status: str,
        actor: Any = None,
        notes: str = "",
    ) -> Order:
        """Admin override: set any of the four states.

        Raises:
            InvalidOrderStatus: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
        """
        canonical = normalize_status(new_status)
        if canonical is None:
            raise InvalidOrderStatus(f"Invalid order status: {new_status!r}.")

        order = self._order_repo.get_for_update(str(order_id))
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")

        if order.status == canonical:
            return order
        return self._transition(order, canonical, actor=actor, notes=notes)

    def _transition(
        self, order: Order, new_status: str, actor: Any, notes: str
    ) -> Order:
        old_status = order.status
        changed_by = actor if getattr(actor, "is_authenticated", False) else None

        order.status = new_status
        # Read by the history signal handler.
        order._status_changed_by = changed_by
        order._status_change_notes = notes
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=new_status,
                changed_by=str(changed_by.pk) if changed_by else None,
            )
        )
        self._order_repo.save(order, update_fields=["status"])

        logger.info(
            "order.status_updated",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
            changed_by=str(changed_by.pk) if changed_by else None,
        )
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_order_for(self, order_id: str, user: Any) -> Order:
        """Order visible to ``user`` (admins see all, others their own).

        Raises:
            OrderNotFound: missing, or owned by someone else.
        """
        order = self.get_order(order_id)
        if is_store_admin(user):
            return order
        if order.user_id is None or order.user_id != getattr(user, "pk", None):
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_user_orders(self, user: Any) -> List[Order]:
        if not getattr(user, "is_authenticated", False):
            return []
        return self._order_repo.list_for_user(user.pk)

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    def order_stats(self) -> Dict[str, Any]:
        return self._order_repo.stats()


def _fill_placeholders(info: Dict[str, Any]) -> Dict[str, Any]:
    flat = flatten_customer_info(info)
    for key, value in flat.items():
        if isinstance(value, str) and not value.strip():
            flat[key] = NOT_AVAILABLE
    return nest_customer_info(flat)


def build_order_service(with_gateway: bool = False) -> OrderService:
    """Service wired with the Django repositories (and Stripe if asked)."""
    from modules.checkout.repositories.django_repository import (
        CheckoutSessionDjangoRepository,
    )
    from modules.orders.repositories.django_repository import OrderDjangoRepository
    from modules.payments.gateway import build_payment_gateway

    return OrderService(
        order_repository=OrderDjangoRepository(),
        checkout_repository=CheckoutSessionDjangoRepository(),
        payment_gateway=build_payment_gateway() if with_gateway else None,
    )
