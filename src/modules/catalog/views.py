"""Catalog API views (public, read only).

Domain exceptions from ``CatalogService`` are translated into 404s.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.exceptions import (
    ElectronicNotFound,
    SchoolNotFound,
    SupplyPackNotFound,
)
from modules.catalog.filters import ElectronicFilter
from modules.catalog.models import Electronic, School
from modules.catalog.serializers import (
    ElectronicSerializer,
    SchoolSerializer,
    SupplyPackSerializer,
)
from modules.catalog.services import build_catalog_service


class SchoolViewSet(ListModelMixin, GenericViewSet):
    """Active schools and their grade packs."""

    permission_classes = [AllowAny]
    serializer_class = SchoolSerializer
    queryset = School.objects.filter(is_active=True)
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["name", "address"]
    ordering_fields = ["name"]
    ordering = ["name"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_catalog_service()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/schools/{pk}/"""
        try:
            school = self._service.get_school(str(pk))
        except SchoolNotFound:
            return Response(
                {"detail": "School not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(SchoolSerializer(school).data)

    @action(detail=True, methods=["get"])
    def packs(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/schools/{pk}/packs/?grade=<grade>"""
        grade = request.query_params.get("grade") or None
        try:
            packs = self._service.list_packs_for_school(str(pk), grade)
        except SchoolNotFound:
            return Response(
                {"detail": "School not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(SupplyPackSerializer(packs, many=True).data)


class SupplyPackViewSet(GenericViewSet):
    permission_classes = [AllowAny]
    serializer_class = SupplyPackSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_catalog_service()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/packs/{pk}/"""
        try:
            pack = self._service.get_pack(str(pk))
        except SupplyPackNotFound:
            return Response(
                {"detail": "Supply pack not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(SupplyPackSerializer(pack).data)


class ElectronicViewSet(ListModelMixin, GenericViewSet):
    permission_classes = [AllowAny]
    serializer_class = ElectronicSerializer
    queryset = Electronic.objects.all()
    filterset_class = ElectronicFilter
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    search_fields = ["name", "brand", "description"]
    ordering_fields = ["name", "price", "rating"]
    ordering = ["name"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_catalog_service()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/electronics/{pk}/"""
        try:
            electronic = self._service.get_electronic(str(pk))
        except ElectronicNotFound:
            return Response(
                {"detail": "Electronic not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ElectronicSerializer(electronic).data)
