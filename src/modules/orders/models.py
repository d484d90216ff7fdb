"""Order and OrderStatusHistory models.

- ``stripe_session_id`` is unique: one order per paid payment session.
  The constraint is what makes materialization idempotent under
  concurrent webhook and success-page delivery.
- ``user`` is nullable; ``None`` is a guest order (visible to admins only).
- ``items`` is an immutable JSON snapshot of the purchased cart, each line
  carrying the customer record used at checkout.
- ``school_name`` / ``grade`` are denormalized for admin filtering.
- Every status change appends an ``OrderStatusHistory`` row (see signals).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import TERMINAL_STATES, OrderStatus
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root."""

    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    items: models.JSONField = models.JSONField(default=list)
    total: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    school_name: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    grade: models.CharField = models.CharField(max_length=50, blank=True, default="")
    stripe_session_id: models.CharField = models.CharField(max_length=255)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["stripe_session_id"],
                name="orders_stripe_session_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="orders_total_not_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(
                fields=["school_name", "grade"],
                name="orders_school_grade_idx",
            ),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``changed_by`` is nullable: ``None`` means the change was made by the
    system (materialization, webhook).
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.old_status} -> {self.new_status}"
