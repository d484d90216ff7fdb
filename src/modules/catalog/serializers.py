"""Catalog DRF serializers (read only)."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import Electronic, School, SupplyPack


class SchoolSerializer(serializers.ModelSerializer):
    class Meta:
        model = School
        fields = [
            "id",
            "name",
            "address",
            "phone",
            "principal",
            "website",
            "grades",
            "enrollment",
        ]
        read_only_fields = fields


class SupplySerializer(serializers.Serializer):
    """One entry of ``SupplyPack.items``."""

    id = serializers.CharField()
    name = serializers.CharField()
    brand = serializers.CharField(required=False, default="")
    category = serializers.CharField(required=False, default="")
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, default=None
    )
    quantity = serializers.IntegerField(required=False, default=1)


class SupplyPackSerializer(serializers.ModelSerializer):
    school_id = serializers.UUIDField(read_only=True)
    school_name = serializers.CharField(
        source="school.name", read_only=True, default=""
    )
    items = SupplySerializer(many=True, read_only=True)

    class Meta:
        model = SupplyPack
        fields = [
            "id",
            "school_id",
            "school_name",
            "grade",
            "name",
            "description",
            "price",
            "items",
        ]
        read_only_fields = fields


class ElectronicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Electronic
        fields = [
            "id",
            "name",
            "brand",
            "category",
            "description",
            "price",
            "original_price",
            "features",
            "image",
            "in_stock",
            "rating",
            "reviews",
        ]
        read_only_fields = fields
