"""Catalog service layer.

Read-only use cases over schools, supply packs and electronics.  The cart
API resolves every line item through this service so prices always come
from the catalog, never from the client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog

from modules.catalog.exceptions import (
    ElectronicNotFound,
    SchoolNotFound,
    SupplyNotFound,
    SupplyPackNotFound,
)

if TYPE_CHECKING:
    from modules.catalog.models import Electronic, School, SupplyPack
    from modules.catalog.repositories.interfaces import (
        IElectronicRepository,
        ISchoolRepository,
        ISupplyPackRepository,
    )

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for catalog queries.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        school_repository: ISchoolRepository,
        pack_repository: ISupplyPackRepository,
        electronic_repository: IElectronicRepository,
    ) -> None:
        self._school_repo = school_repository
        self._pack_repo = pack_repository
        self._electronic_repo = electronic_repository

    # ------------------------------------------------------------------
    # Schools
    # ------------------------------------------------------------------

    def list_schools(self) -> List[School]:
        """Active schools only (public listing)."""
        return self._school_repo.list_active()

    def get_school(self, school_id: str) -> School:
        """Raises:
            SchoolNotFound: unknown id or inactive school.
        """
        school = self._school_repo.get_by_id(school_id)
        if not school or not school.is_active:
            raise SchoolNotFound(f"School {school_id} not found.")
        return school

    # ------------------------------------------------------------------
    # Supply packs
    # ------------------------------------------------------------------

    def list_packs_for_school(
        self, school_id: str, grade: Optional[str] = None
    ) -> List[SupplyPack]:
        school = self.get_school(school_id)
        return self._pack_repo.list_for_school(str(school.id), grade)

    def get_pack(self, pack_id: str) -> SupplyPack:
        pack = self._pack_repo.get_by_id(pack_id)
        if not pack:
            raise SupplyPackNotFound(f"Supply pack {pack_id} not found.")
        return pack

    def get_supply(
        self, pack_id: str, supply_id: str
    ) -> tuple[SupplyPack, Dict[str, Any]]:
        """Return the pack and one of its supplies.

        Raises:
            SupplyPackNotFound: unknown pack.
            SupplyNotFound: the pack has no such supply.
        """
        pack = self.get_pack(pack_id)
        supply = pack.get_supply(supply_id)
        if supply is None:
            logger.info(
                "catalog.supply_missing", pack_id=str(pack_id), supply_id=supply_id
            )
            raise SupplyNotFound(f"Supply {supply_id} not found in pack {pack_id}.")
        return pack, supply

    # ------------------------------------------------------------------
    # Electronics
    # ------------------------------------------------------------------

    def list_electronics(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Electronic]:
        return self._electronic_repo.list(filters)

    def get_electronic(self, electronic_id: str) -> Electronic:
        electronic = self._electronic_repo.get_by_id(electronic_id)
        if not electronic:
            raise ElectronicNotFound(f"Electronic {electronic_id} not found.")
        return electronic


def build_catalog_service() -> CatalogService:
    """Wire the service with the Django ORM repositories."""
    from modules.catalog.repositories.django_repository import (
        ElectronicDjangoRepository,
        SchoolDjangoRepository,
        SupplyPackDjangoRepository,
    )

    return CatalogService(
        school_repository=SchoolDjangoRepository(),
        pack_repository=SupplyPackDjangoRepository(),
        electronic_repository=ElectronicDjangoRepository(),
    )
