"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when a paid session is materialized into an order."""

    stripe_session_id: str
    user_id: Optional[str]
    total: str


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every status transition."""

    old_status: Optional[str]
    new_status: str
    changed_by: Optional[str] = None
