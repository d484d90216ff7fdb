"""Order DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class UpdateOrderStatusSerializer(serializers.Serializer):
    # Normalized by the service so English aliases are accepted.
    status = serializers.CharField()
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class SessionIdSerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "changed_by_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer with item snapshot and status history."""

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    is_terminal = serializers.BooleanField(read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "status",
            "status_display",
            "is_terminal",
            "total",
            "school_name",
            "grade",
            "stripe_session_id",
            "items",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no history)."""

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    customer_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "customer_name",
            "status",
            "status_display",
            "total",
            "school_name",
            "grade",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer_name(self, order: Order) -> str:
        for item in order.items or []:
            if isinstance(item, dict) and item.get("full_name"):
                return item["full_name"]
        return ""


class OrderStatsSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    by_status = serializers.DictField(child=serializers.IntegerField())
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)


class OrderReceiptSerializer(serializers.ModelSerializer):
    """Public view of an order for the payment-success page."""

    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "total",
            "school_name",
            "grade",
            "item_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_item_count(self, order: Order) -> int:
        return sum(int(item.get("quantity", 1)) for item in order.items or [])
