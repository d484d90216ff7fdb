import decimal

import django.core.validators
import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="School",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=255)),
                ("phone", models.CharField(max_length=30)),
                ("principal", models.CharField(blank=True, default="", max_length=255)),
                ("website", models.URLField(blank=True, default="")),
                ("grades", models.CharField(blank=True, default="", max_length=255)),
                ("enrollment", models.PositiveIntegerField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "schools",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["is_active"], name="schools_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Electronic",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("brand", models.CharField(max_length=100)),
                ("category", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(
                                decimal.Decimal("0.00")
                            )
                        ],
                    ),
                ),
                (
                    "original_price",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=10, null=True
                    ),
                ),
                ("features", models.JSONField(blank=True, default=list)),
                ("image", models.URLField(blank=True, default="")),
                ("in_stock", models.BooleanField(default=True)),
                (
                    "rating",
                    models.DecimalField(
                        blank=True, decimal_places=1, max_digits=2, null=True
                    ),
                ),
                ("reviews", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "electronics",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["category"], name="electronics_category_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="electronics_price_not_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SupplyPack",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("grade", models.CharField(max_length=50)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(
                                decimal.Decimal("0.00")
                            )
                        ],
                    ),
                ),
                ("items", models.JSONField(blank=True, default=list)),
                (
                    "school",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="packs",
                        to="catalog.school",
                    ),
                ),
            ],
            options={
                "db_table": "supply_packs",
                "ordering": ["grade"],
                "indexes": [
                    models.Index(
                        fields=["school", "grade"], name="packs_school_grade_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="supply_packs_price_not_negative",
                    ),
                ],
            },
        ),
    ]
