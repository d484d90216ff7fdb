"""Django ORM implementation of the Order repository.

Domain events collected on the aggregate are published on the in-process
event bus once the surrounding transaction commits.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet, Sum

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.money import round_money
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                stripe_session_id=order.stripe_session_id,
                user_id=str(order.user_id) if order.user_id else None,
                total=str(order.total),
            )
        )
        return self.save(order)

    def save(self, entity: Order, update_fields: Optional[List[str]] = None) -> Order:
        """Persist the order and publish its pending domain events on commit."""
        entity.save(update_fields=update_fields)

        events = entity.pull_domain_events()
        for event in events:
            transaction.on_commit(lambda event=event: event_bus.publish(event))

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed ids."""
        try:
            return (
                Order.objects.select_related("user")
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_session_id(self, stripe_session_id: str) -> Optional[Order]:
        return (
            Order.objects.select_related("user")
            .filter(stripe_session_id=stripe_session_id)
            .first()
        )

    def get_by_session_id_for_update(
        self, stripe_session_id: str
    ) -> Optional[Order]:
        return (
            Order.objects.select_for_update()
            .filter(stripe_session_id=stripe_session_id)
            .first()
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_user(self, user_id: Any) -> List[Order]:
        if user_id is None:
            return []
        return list(self.queryset().filter(user_id=user_id))

    def queryset(self) -> QuerySet:
        return Order.objects.select_related("user").all()

    def stats(self) -> Dict[str, Any]:
        rows = Order.objects.order_by().values("status").annotate(
            count=Count("id"), amount=Sum("total")
        )
        counts = {status: 0 for status in OrderStatus.values}
        revenue = Decimal("0.00")
        for row in rows:
            counts[row["status"]] = row["count"]
            if row["status"] != OrderStatus.CANCELLED:
                revenue += row["amount"] or Decimal("0.00")
        return {
            "total_orders": sum(counts.values()),
            "by_status": counts,
            "revenue": round_money(revenue),
        }
