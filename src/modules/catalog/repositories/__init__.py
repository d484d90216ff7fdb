"""Catalog repositories package."""

from modules.catalog.repositories.django_repository import (
    ElectronicDjangoRepository,
    SchoolDjangoRepository,
    SupplyPackDjangoRepository,
)
from modules.catalog.repositories.interfaces import (
    IElectronicRepository,
    ISchoolRepository,
    ISupplyPackRepository,
)

__all__ = [
    "ElectronicDjangoRepository",
    "IElectronicRepository",
    "ISchoolRepository",
    "ISupplyPackRepository",
    "SchoolDjangoRepository",
    "SupplyPackDjangoRepository",
]
