"""Signals for Order status history and the realtime change feed."""

from __future__ import annotations

from typing import Any, Optional, Protocol, cast

from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from modules.orders.models import Order, OrderStatusHistory
from modules.orders.realtime import ChangeType, OrderChange, order_change_feed


class _OrderStatusAware(Protocol):
    _previous_status: str | None
    _status_change_notes: str | None
    _status_changed_by: Any


@receiver(pre_save, sender=Order)
def _capture_previous_status(sender, instance: Order, **kwargs) -> None:
    status_instance = cast(_OrderStatusAware, instance)
    if instance._state.adding:
        status_instance._previous_status = None
        return
    previous_status = (
        sender.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    )
    status_instance._previous_status = previous_status


@receiver(post_save, sender=Order)
def _create_status_history(sender, instance: Order, created: bool, **kwargs) -> None:
    status_instance = cast(_OrderStatusAware, instance)
    previous_status: Optional[str] = getattr(status_instance, "_previous_status", None)
    notes = getattr(status_instance, "_status_change_notes", None)
    changed_by = getattr(status_instance, "_status_changed_by", None)

    if created or previous_status != instance.status:
        if created and notes is None:
            notes = "Order created"
        OrderStatusHistory.objects.create(
            order=instance,
            old_status=previous_status,
            new_status=instance.status,
            changed_by=changed_by,
            notes=notes or "",
        )

    _clear_transient_status_attrs(instance)


@receiver(post_save, sender=Order)
def _publish_order_saved(sender, instance: Order, created: bool, **kwargs) -> None:
    change = _change_for(instance, ChangeType.INSERT if created else ChangeType.UPDATE)
    transaction.on_commit(lambda: order_change_feed.publish(change))


@receiver(post_delete, sender=Order)
def _publish_order_deleted(sender, instance: Order, **kwargs) -> None:
    change = _change_for(instance, ChangeType.DELETE)
    transaction.on_commit(lambda: order_change_feed.publish(change))


def _change_for(instance: Order, event_type: ChangeType) -> OrderChange:
    return OrderChange(
        event_type=event_type,
        order_id=str(instance.pk),
        user_id=str(instance.user_id) if instance.user_id else None,
        status=instance.status,
    )


def _clear_transient_status_attrs(instance: Order) -> None:
    for attr in ("_previous_status", "_status_change_notes", "_status_changed_by"):
        if hasattr(instance, attr):
            delattr(instance, attr)
