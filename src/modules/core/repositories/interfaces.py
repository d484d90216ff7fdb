"""Generic repository interfaces (Dependency Inversion Principle).

Two contracts:

- ``IReadRepository[T]``: look-ups only.  The catalog (schools, packs,
  electronics) is read-only from the storefront's point of view.
- ``IRepository[T]``: adds persistence; used by aggregates the
  storefront writes (orders, checkout sessions).

Service-layer code depends on these abstractions, never on Django ORM
directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IReadRepository(ABC, Generic[T]):
    """Read-only repository contract.

    Type parameter ``T`` represents the entity managed by the repository
    (e.g. ``School``, ``Order``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key (``None`` if absent)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities with optional ORM-style filters."""


class IRepository(IReadRepository[T]):
    """Read/write repository contract."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
