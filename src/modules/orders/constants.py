"""Order domain constants.

Canonical status tokens are the only values stored.  English and
upper-case spellings found in older data are accepted on input and
mapped onto them by ``normalize_status``.
"""

from __future__ import annotations

from typing import Optional

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pendiente", "Pendiente"
    PROCESSING = "procesando", "Procesando"
    COMPLETED = "completada", "Completada"
    CANCELLED = "cancelada", "Cancelada"


# Terminal by convention only; admins may still move an order out of them.
TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

STATUS_ALIASES: dict[str, str] = {
    "pending": OrderStatus.PENDING,
    "processing": OrderStatus.PROCESSING,
    "completed": OrderStatus.COMPLETED,
    "complete": OrderStatus.COMPLETED,
    "cancelled": OrderStatus.CANCELLED,
    "canceled": OrderStatus.CANCELLED,
}


def normalize_status(value: object) -> Optional[str]:
    """Canonical token for ``value``, or ``None`` if it is not a status."""
    if not isinstance(value, str):
        return None
    token = value.strip().lower()
    if token in OrderStatus.values:
        return token
    alias = STATUS_ALIASES.get(token)
    return str(alias) if alias else None
