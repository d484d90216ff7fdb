"""Unit tests for order status transitions (admin override and success page)."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.orders.constants import OrderStatus
from modules.orders.events import OrderStatusChanged
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService(order_repository=OrderDjangoRepository())


@pytest.fixture()
def order(shopper):
    return Order.objects.create(
        user=shopper,
        stripe_session_id="cs_test_status",
        total="54.38",
        items=[{"name": "Pack - 3rd Grade - Lincoln Elementary", "quantity": 1}],
    )


@pytest.fixture()
def status_events():
    received = []

    class Recorder:
        def handle(self, event):
            received.append(event)

    recorder = Recorder()
    event_bus.subscribe(OrderStatusChanged, recorder)
    yield received
    event_bus.unsubscribe(OrderStatusChanged, recorder)


# ---------------------------------------------------------------------------
# Admin override
# ---------------------------------------------------------------------------


class TestUpdateStatus:
    def test_transition_records_history_and_actor(self, service, order, store_admin):
        updated = service.update_status(
            order.id, "procesando", actor=store_admin, notes="Packed"
        )

        assert updated.status == OrderStatus.PROCESSING
        latest = OrderStatusHistory.objects.get(
            order=order, new_status=OrderStatus.PROCESSING
        )
        assert latest.old_status == OrderStatus.PENDING
        assert latest.new_status == OrderStatus.PROCESSING
        assert latest.changed_by == store_admin
        assert latest.notes == "Packed"

    def test_updated_at_moves_forward(self, service, order, store_admin):
        before = Order.objects.get(pk=order.pk).updated_at

        with freeze_time(timezone.now() + timedelta(minutes=5)):
            service.update_status(order.id, "completada", actor=store_admin)

        after = Order.objects.get(pk=order.pk).updated_at
        assert after > before

    def test_english_alias_is_accepted(self, service, order):
        updated = service.update_status(order.id, "Cancelled")
        assert updated.status == OrderStatus.CANCELLED

    def test_terminal_states_can_be_left(self, service, order):
        service.update_status(order.id, "completada")
        updated = service.update_status(order.id, "pendiente")

        assert updated.status == OrderStatus.PENDING
        assert OrderStatusHistory.objects.filter(order=order).count() == 3

    def test_same_status_is_a_no_op(self, service, order):
        service.update_status(order.id, "pendiente")
        assert OrderStatusHistory.objects.filter(order=order).count() == 1

    def test_unknown_status(self, service, order):
        with pytest.raises(InvalidOrderStatus):
            service.update_status(order.id, "shipped")

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_status(uuid4(), "procesando")

    def test_malformed_order_id(self, service):
        with pytest.raises(OrderNotFound):
            service.update_status("not-a-uuid", "procesando")

    def test_event_is_published_on_commit(
        self,
        service,
        order,
        store_admin,
        status_events,
        django_capture_on_commit_callbacks,
    ):
        with django_capture_on_commit_callbacks(execute=True):
            service.update_status(order.id, "procesando", actor=store_admin)

        assert len(status_events) == 1
        event = status_events[0]
        assert event.aggregate_id == order.id
        assert event.old_status == OrderStatus.PENDING
        assert event.new_status == OrderStatus.PROCESSING
        assert event.changed_by == str(store_admin.pk)


# ---------------------------------------------------------------------------
# Success-page confirmation
# ---------------------------------------------------------------------------


class TestConfirmPayment:
    def test_owner_completes_pending_order(self, service, order, shopper):
        confirmed = service.confirm_payment("cs_test_status", shopper)

        assert confirmed.status == OrderStatus.COMPLETED
        latest = OrderStatusHistory.objects.filter(
            order=order, new_status=OrderStatus.COMPLETED
        ).get()
        assert latest.notes == "Payment confirmed"
        assert latest.changed_by == shopper

    def test_other_user_cannot_confirm(self, service, order, other_shopper):
        with pytest.raises(OrderNotFound):
            service.confirm_payment("cs_test_status", other_shopper)

        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_guest_order_cannot_be_confirmed(self, service, shopper):
        Order.objects.create(stripe_session_id="cs_test_guest", total="1.00")

        with pytest.raises(OrderNotFound):
            service.confirm_payment("cs_test_guest", shopper)

    def test_unknown_session(self, service, shopper):
        with pytest.raises(OrderNotFound):
            service.confirm_payment("cs_test_missing", shopper)

    def test_non_pending_order_is_left_alone(self, service, order, shopper):
        service.update_status(order.id, "cancelada")

        result = service.confirm_payment("cs_test_status", shopper)

        assert result.status == OrderStatus.CANCELLED


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_order_for_owner_and_admin(self, service, order, shopper, store_admin):
        assert service.get_order_for(str(order.id), shopper).id == order.id
        assert service.get_order_for(str(order.id), store_admin).id == order.id

    def test_get_order_for_other_user(self, service, order, other_shopper):
        with pytest.raises(OrderNotFound):
            service.get_order_for(str(order.id), other_shopper)

    def test_list_user_orders(self, service, order, shopper, other_shopper):
        assert [o.id for o in service.list_user_orders(shopper)] == [order.id]
        assert service.list_user_orders(other_shopper) == []

    def test_stats_exclude_cancelled_revenue(self, service, order, shopper):
        Order.objects.create(
            user=shopper,
            stripe_session_id="cs_test_cancelled",
            total="100.00",
            status=OrderStatus.CANCELLED,
        )

        stats = service.order_stats()

        assert stats["total_orders"] == 2
        assert stats["by_status"] == {
            "pendiente": 1,
            "procesando": 0,
            "completada": 0,
            "cancelada": 1,
        }
        assert str(stats["revenue"]) == "54.38"
