"""Django ORM implementation of the checkout session repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from modules.checkout.models import CheckoutSession
from modules.checkout.repositories.interfaces import ICheckoutSessionRepository


class CheckoutSessionDjangoRepository(ICheckoutSessionRepository):
    def get_by_id(self, id: str) -> Optional[CheckoutSession]:
        return CheckoutSession.objects.filter(id=id).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CheckoutSession]:
        qs = CheckoutSession.objects.all()
        if filters:
            qs = qs.filter(**filters)
        return list(qs)

    def save(self, entity: CheckoutSession) -> CheckoutSession:
        entity.save()
        return entity

    def create(self, data: Dict[str, Any]) -> CheckoutSession:
        return CheckoutSession.objects.create(**data)

    def get_by_session_id(self, stripe_session_id: str) -> Optional[CheckoutSession]:
        return CheckoutSession.objects.filter(
            stripe_session_id=stripe_session_id
        ).first()
