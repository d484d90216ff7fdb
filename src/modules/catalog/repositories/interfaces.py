"""Catalog repository interfaces.

The catalog is a leaf data provider: read-only contracts only.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List

from modules.core.repositories.interfaces import IReadRepository

if TYPE_CHECKING:
    from modules.catalog.models import Electronic, School, SupplyPack


class ISchoolRepository(IReadRepository["School"]):
    @abstractmethod
    def list_active(self) -> List[School]:
        """Active schools ordered by name."""


class ISupplyPackRepository(IReadRepository["SupplyPack"]):
    @abstractmethod
    def list_for_school(
        self, school_id: str, grade: str | None = None
    ) -> List[SupplyPack]:
        """Packs of one school, optionally restricted to a grade."""


class IElectronicRepository(IReadRepository["Electronic"]):
    pass
