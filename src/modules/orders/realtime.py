"""In-process change feed for order rows.

Subscribers register a callback and receive an ``OrderChange`` for every
committed INSERT, UPDATE or DELETE on ``orders``.  Admin subscribers
(``user_id=None``) see every change; user subscribers only their own
orders.  A failing callback is logged and the remaining subscribers
still run.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class OrderChange:
    event_type: ChangeType
    order_id: str
    user_id: Optional[str]
    status: str


OrderChangeCallback = Callable[[OrderChange], None]


@dataclass(frozen=True, eq=False)
class _Subscription:
    callback: OrderChangeCallback
    user_id: Optional[str]

    def wants(self, change: OrderChange) -> bool:
        return self.user_id is None or self.user_id == change.user_id


class OrderChangeFeed:
    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []
        self._lock = threading.Lock()

    def subscribe(
        self, callback: OrderChangeCallback, user_id: Optional[str] = None
    ) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        subscription = _Subscription(
            callback=callback, user_id=str(user_id) if user_id is not None else None
        )
        with self._lock:
            self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, change: OrderChange) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            if not subscription.wants(change):
                continue
            try:
                subscription.callback(change)
            except Exception as exc:
                logger.error(
                    "order.change_feed_subscriber_failed",
                    order_id=change.order_id,
                    event_type=change.event_type.value,
                    error=str(exc),
                )

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)


order_change_feed = OrderChangeFeed()
