"""Catalog models: schools, grade supply packs and electronics.

The storefront only reads these tables; they are maintained through the
admin back-office.

Business rules implemented:
- Inactive schools are hidden from public listings (``is_active``).
- A supply pack belongs to one school and one grade; its ``items`` JSON
  holds the individual supplies (``id``, ``name``, ``brand``, ``price``,
  ``quantity``, ``category``).
- Prices are never negative.
- Out-of-stock electronics stay listed but cannot be added to a cart.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class School(BaseModel):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    phone = models.CharField(max_length=30)
    principal = models.CharField(max_length=255, blank=True, default="")
    website = models.URLField(blank=True, default="")
    grades = models.CharField(max_length=255, blank=True, default="")
    enrollment = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "schools"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="schools_active_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class SupplyPack(BaseModel):
    """A grade-specific bundle of supplies sold as one unit."""

    school = models.ForeignKey(
        "catalog.School",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="packs",
    )
    grade = models.CharField(max_length=50)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    items = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "supply_packs"
        ordering = ["grade"]
        indexes = [
            models.Index(fields=["school", "grade"], name="packs_school_grade_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="supply_packs_price_not_negative",
            ),
        ]

    def get_supply(self, supply_id: str) -> Optional[dict[str, Any]]:
        """Return the supply entry with ``supply_id`` from ``items``."""
        for supply in self.items or []:
            if str(supply.get("id")) == str(supply_id):
                return supply
        return None

    def __str__(self) -> str:
        return f"{self.name} ({self.grade})"


class Electronic(BaseModel):
    name = models.CharField(max_length=255)
    brand = models.CharField(max_length=100)
    category = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    original_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    features = models.JSONField(default=list, blank=True)
    image = models.URLField(blank=True, default="")
    in_stock = models.BooleanField(default=True)
    rating = models.DecimalField(max_digits=2, decimal_places=1, null=True, blank=True)
    reviews = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "electronics"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="electronics_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="electronics_price_not_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.brand} {self.name}"
