"""Django ORM implementations of the catalog repositories."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError

from modules.catalog.models import Electronic, School, SupplyPack
from modules.catalog.repositories.interfaces import (
    IElectronicRepository,
    ISchoolRepository,
    ISupplyPackRepository,
)


class SchoolDjangoRepository(ISchoolRepository):
    def get_by_id(self, id: str) -> Optional[School]:
        """Return ``None`` for non-existent or malformed IDs."""
        try:
            return School.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[School]:
        queryset = School.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_active(self) -> List[School]:
        return list(School.objects.filter(is_active=True).order_by("name"))


class SupplyPackDjangoRepository(ISupplyPackRepository):
    def get_by_id(self, id: str) -> Optional[SupplyPack]:
        try:
            return SupplyPack.objects.select_related("school").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[SupplyPack]:
        queryset = SupplyPack.objects.select_related("school")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_school(
        self, school_id: str, grade: str | None = None
    ) -> List[SupplyPack]:
        try:
            queryset = SupplyPack.objects.select_related("school").filter(
                school_id=school_id
            )
            if grade:
                queryset = queryset.filter(grade__iexact=grade)
            return list(queryset)
        except (ValueError, ValidationError):
            return []


class ElectronicDjangoRepository(IElectronicRepository):
    def get_by_id(self, id: str) -> Optional[Electronic]:
        try:
            return Electronic.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Electronic]:
        queryset = Electronic.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)
