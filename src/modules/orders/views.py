"""Order API views.

Exposes ``OrderService`` via a DRF ViewSet.  Domain exceptions are
caught and translated into HTTP status codes; admin-only actions are
guarded server side by ``IsStoreAdmin``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsStoreAdmin
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderListSerializer,
    OrderSerializer,
    OrderStatsSerializer,
    SessionIdSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import build_order_service

ADMIN_ACTIONS = {"list", "partial_update", "stats"}


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: writes go through the service
    layer so history and events are always recorded.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    search_fields = ["school_name", "grade", "stripe_session_id"]
    ordering_fields = ["created_at", "updated_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_permissions(self) -> list[BasePermission]:
        if self.action in ADMIN_ACTIONS:
            return [IsStoreAdmin()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        if self.action in {"list", "retrieve", "mine"}:
            self.throttle_scope = "order_listing"
        else:
            self.throttle_scope = None
        return super().get_throttles()

    def get_queryset(self):
        return OrderDjangoRepository().queryset()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (admin)

        Filtering is handled by ``OrderFilter``; ordering by
        ``OrderingFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/orders/mine/"""
        orders = self._service.list_user_orders(request.user)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/ (admin or owner)"""
        try:
            order = self._service.get_order_for(str(pk), request.user)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/ (admin)"""
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=str(pk),
                new_status=serializer.validated_data["status"],
                actor=request.user,
                notes=serializer.validated_data["notes"],
            )
        except InvalidOrderStatus as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        order = self._service.get_order(str(order.id))
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["post"], url_path="confirm-payment")
    def confirm_payment(self, request: Request) -> Response:
        """POST /api/v1/orders/confirm-payment/

        Called by the payment-success page for the signed-in buyer.
        """
        serializer = SessionIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.confirm_payment(
                serializer.validated_data["session_id"], request.user
            )
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        order = self._service.get_order(str(order.id))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def stats(self, request: Request) -> Response:
        """GET /api/v1/orders/stats/ (admin)"""
        return Response(OrderStatsSerializer(self._service.order_stats()).data)
