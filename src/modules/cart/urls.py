"""Cart URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.cart.views import CartItemDetailView, CartItemsView, CartView

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/items/", CartItemsView.as_view(), name="cart_items"),
    path(
        "cart/items/<str:item_id>/",
        CartItemDetailView.as_view(),
        name="cart_item_detail",
    ),
]
