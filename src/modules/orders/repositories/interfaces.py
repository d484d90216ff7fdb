"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups the order lifecycle
needs: by payment session (idempotency key), locked reads for status
updates, per-user listings and admin statistics.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert a new order.

        Raises:
            IntegrityError: an order for ``stripe_session_id`` already exists.
        """

    @abstractmethod
    def get_by_session_id(self, stripe_session_id: str) -> Optional[Order]:
        """Order materialized from a payment session (``None`` if absent)."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Order by id with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def get_by_session_id_for_update(
        self, stripe_session_id: str
    ) -> Optional[Order]:
        """Order by payment session with a row-level lock."""

    @abstractmethod
    def list_for_user(self, user_id: Any) -> List[Order]:
        """Orders owned by ``user_id``; guest orders never match."""

    @abstractmethod
    def queryset(self) -> QuerySet:
        """Base queryset for filtered, paginated admin listings."""

    @abstractmethod
    def stats(self) -> Dict[str, Any]:
        """Order counts per status and revenue."""
