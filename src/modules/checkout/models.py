"""Server-side record of a payment session request.

A ``CheckoutSession`` row is written when the processor hands back a
session id.  It keeps the full cart snapshot and customer record so the
order materializer does not depend on size-limited processor metadata.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class CheckoutSession(BaseModel):
    stripe_session_id: models.CharField = models.CharField(max_length=255, unique=True)
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checkout_sessions",
    )
    items: models.JSONField = models.JSONField(default=list)
    customer_info: models.JSONField = models.JSONField(default=dict)
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    school_name: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    grade: models.CharField = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        db_table = "checkout_sessions"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"CheckoutSession {self.stripe_session_id}"
