"""Cart API views.

The cart belongs to the browser session, so every endpoint is public.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.cart.exceptions import CartItemNotFound, InvalidCartItem
from modules.cart.serializers import (
    AddCartItemSerializer,
    UpdateCartItemSerializer,
    serialize_cart,
)
from modules.cart.services import CartService
from modules.cart.storage import SessionCartStore
from modules.catalog.exceptions import (
    ElectronicNotFound,
    SupplyNotFound,
    SupplyPackNotFound,
)
from modules.catalog.services import build_catalog_service


def _cart_service(request: Request) -> CartService:
    return CartService(
        catalog_service=build_catalog_service(),
        store=SessionCartStore(request.session),
    )


class CartView(APIView):
    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        store = SessionCartStore(request.session)
        data = serialize_cart(store.load())
        data["cleared_by_checkout"] = store.cleared_by_checkout
        return Response(data)

    def delete(self, request: Request) -> Response:
        """DELETE /api/v1/cart/"""
        _cart_service(request).clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartItemsView(APIView):
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        """POST /api/v1/cart/items/"""
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cart = _cart_service(request).add(serializer.validated_data)
        except (SupplyPackNotFound, SupplyNotFound, ElectronicNotFound) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidCartItem as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(serialize_cart(cart), status=status.HTTP_201_CREATED)


class CartItemDetailView(APIView):
    permission_classes = [AllowAny]

    def patch(self, request: Request, item_id: str) -> Response:
        """PATCH /api/v1/cart/items/{item_id}/"""
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cart = _cart_service(request).update_quantity(
                item_id, serializer.validated_data["quantity"]
            )
        except CartItemNotFound:
            return Response(
                {"detail": "Cart item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(serialize_cart(cart))

    def delete(self, request: Request, item_id: str) -> Response:
        """DELETE /api/v1/cart/items/{item_id}/"""
        try:
            cart = _cart_service(request).remove(item_id)
        except CartItemNotFound:
            return Response(
                {"detail": "Cart item not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(serialize_cart(cart))
