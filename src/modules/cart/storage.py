"""Session persistence for the cart.

The cart is ephemeral client state: it lives in the Django session and is
never written to a table of its own.
"""

from __future__ import annotations

from typing import Any, MutableMapping, Optional

import structlog
from pydantic import ValidationError

from modules.cart.domain import Cart, dump_line_items, parse_line_items

logger = structlog.get_logger(__name__)

CART_SESSION_KEY = "cart"
# Set when a checkout cleared the cart; other tabs of the same session read
# it to drop stale items instead of re-submitting them.
CART_CLEARED_SESSION_KEY = "cart_cleared_by_checkout"


class SessionCartStore:
    """Load/save a ``Cart`` from a Django session mapping."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def load(self) -> Cart:
        raw = self._session.get(CART_SESSION_KEY) or []
        try:
            return Cart(parse_line_items(raw))
        except ValidationError as exc:
            logger.warning("cart.session_payload_invalid", error=str(exc))
            return Cart()

    def save(self, cart: Cart) -> None:
        self._session[CART_SESSION_KEY] = dump_line_items(cart.items)
        self._session.pop(CART_CLEARED_SESSION_KEY, None)
        self._mark_modified()

    def clear(self, checkout_session_id: Optional[str] = None) -> None:
        self._session[CART_SESSION_KEY] = []
        if checkout_session_id:
            self._session[CART_CLEARED_SESSION_KEY] = checkout_session_id
        self._mark_modified()

    @property
    def cleared_by_checkout(self) -> Optional[str]:
        return self._session.get(CART_CLEARED_SESSION_KEY)

    def _mark_modified(self) -> None:
        if hasattr(self._session, "modified"):
            self._session.modified = True
