"""Checkout repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.checkout.models import CheckoutSession


class ICheckoutSessionRepository(IRepository["CheckoutSession"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> CheckoutSession:
        """Persist a new checkout snapshot."""

    @abstractmethod
    def get_by_session_id(self, stripe_session_id: str) -> Optional[CheckoutSession]:
        """Look up the snapshot for a payment session (``None`` if absent)."""
