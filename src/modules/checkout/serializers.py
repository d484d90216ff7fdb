"""Checkout DRF serializers."""

from __future__ import annotations

from rest_framework import serializers


class CheckoutSerializer(serializers.Serializer):
    """Billing/delivery form.

    Blank values pass here; ``CheckoutContextDTO.missing_fields`` reports
    every incomplete field together.
    """

    full_name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    zip_code = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_name = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    delivery_address = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    delivery_city = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    delivery_zip_code = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
    same_as_billing = serializers.BooleanField(required=False, default=False)


class CheckoutResultSerializer(serializers.Serializer):
    url = serializers.URLField()
    session_id = serializers.CharField()
    redirect_target = serializers.CharField()
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
