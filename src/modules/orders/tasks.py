"""Asynchronous order tasks.

The payment webhook only verifies the delivery and enqueues
``orders.materialize_paid_session``; the order is written here.
"""

import structlog
from celery import shared_task

from modules.orders.exceptions import OrderMaterializationFailed
from modules.payments.exceptions import PaymentNotConfirmed, PaymentVerificationFailed

logger = structlog.get_logger(__name__)


@shared_task(
    name="orders.materialize_paid_session",
    autoretry_for=(PaymentVerificationFailed, OrderMaterializationFailed),
    retry_backoff=True,
    max_retries=5,
)
def materialize_paid_session(session_id: str) -> dict:
    """Create the order for a paid session (idempotent)."""
    from modules.orders.services import build_order_service

    service = build_order_service(with_gateway=True)
    try:
        order = service.materialize_paid_session(session_id)
    except PaymentNotConfirmed as exc:
        logger.warning(
            "order.task_payment_not_confirmed",
            session_id=session_id,
            payment_status=exc.payment_status,
        )
        return {"session_id": session_id, "status": "not_paid"}

    return {"session_id": session_id, "order_id": str(order.id), "status": order.status}
