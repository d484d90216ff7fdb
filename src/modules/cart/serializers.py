"""Cart DRF serializers."""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from modules.cart.domain import Cart, dump_line_items


class AddCartItemSerializer(serializers.Serializer):
    """Validates a cart addition: which catalog entry, how many."""

    kind = serializers.ChoiceField(choices=["pack", "supply", "electronic"])
    pack_id = serializers.UUIDField(required=False)
    supply_id = serializers.CharField(required=False)
    electronic_id = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(required=False, default=1, min_value=1)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        kind = attrs["kind"]
        required = {
            "pack": ("pack_id",),
            "supply": ("pack_id", "supply_id"),
            "electronic": ("electronic_id",),
        }[kind]
        missing = [field for field in required if not attrs.get(field)]
        if missing:
            raise serializers.ValidationError(
                {field: f"Required when kind is '{kind}'." for field in missing}
            )
        return attrs


class UpdateCartItemSerializer(serializers.Serializer):
    # No lower bound here: the cart clamps to 1 itself.
    quantity = serializers.IntegerField()


def serialize_cart(cart: Cart) -> Dict[str, Any]:
    return {
        "items": dump_line_items(cart.items),
        "item_count": cart.item_count,
        "subtotal": str(cart.display_amount()),
    }
