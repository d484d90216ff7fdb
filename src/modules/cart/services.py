"""Cart service layer.

Resolves cart additions against the catalog (prices and school/grade
context always come from the catalog) and applies the accumulator
operations on the session cart.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict

import structlog

from modules.cart.domain import (
    Cart,
    CartLineItemBase,
    ElectronicItem,
    PackItem,
    SupplyItem,
)
from modules.cart.exceptions import InvalidCartItem

if TYPE_CHECKING:
    from modules.cart.storage import SessionCartStore
    from modules.catalog.services import CatalogService

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(
        self, catalog_service: CatalogService, store: SessionCartStore
    ) -> None:
        self._catalog = catalog_service
        self._store = store

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart(self) -> Cart:
        return self._store.load()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(self, data: Dict[str, Any]) -> Cart:
        """Resolve ``data`` (``kind`` + catalog ids) and append it.

        Raises:
            SupplyPackNotFound / SupplyNotFound / ElectronicNotFound
            InvalidCartItem: out-of-stock electronic or unknown kind.
        """
        item = self.build_line_item(data)
        cart = self._store.load()
        cart.add_item(item)
        self._store.save(cart)
        logger.info(
            "cart.item_added",
            item_id=item.id,
            kind=item.kind,  # type: ignore[attr-defined]
            quantity=item.quantity,
        )
        return cart

    def update_quantity(self, item_id: str, quantity: int) -> Cart:
        cart = self._store.load()
        cart.update_quantity(item_id, quantity)
        self._store.save(cart)
        return cart

    def remove(self, item_id: str) -> Cart:
        cart = self._store.load()
        cart.remove_item(item_id)
        self._store.save(cart)
        logger.info("cart.item_removed", item_id=item_id)
        return cart

    def clear(self) -> None:
        self._store.clear()

    # ------------------------------------------------------------------
    # Catalog resolution
    # ------------------------------------------------------------------

    def build_line_item(self, data: Dict[str, Any]) -> CartLineItemBase:
        kind = data.get("kind")
        quantity = max(1, int(data.get("quantity") or 1))

        if kind == "pack":
            pack = self._catalog.get_pack(str(data["pack_id"]))
            return PackItem(
                id=f"pack-{pack.id}",
                name=pack.name,
                unit_price=pack.price,
                quantity=quantity,
                school=pack.school.name if pack.school else "",
                grade=pack.grade,
                supplies=list(pack.items or []),
            )

        if kind == "supply":
            pack, supply = self._catalog.get_supply(
                str(data["pack_id"]), str(data["supply_id"])
            )
            return SupplyItem(
                id=f"supply-{pack.id}-{supply['id']}",
                name=supply.get("name", ""),
                brand=supply.get("brand") or "",
                category=supply.get("category") or "",
                unit_price=Decimal(str(supply.get("price") or 0)),
                quantity=quantity,
                school=pack.school.name if pack.school else "",
                grade=pack.grade,
            )

        if kind == "electronic":
            electronic = self._catalog.get_electronic(str(data["electronic_id"]))
            if not electronic.in_stock:
                raise InvalidCartItem(f"{electronic.name} is out of stock.")
            return ElectronicItem(
                id=f"electronic-{electronic.id}",
                name=electronic.name,
                brand=electronic.brand,
                category=electronic.category,
                unit_price=electronic.price,
                quantity=quantity,
            )

        raise InvalidCartItem(f"Unknown cart item kind: {kind!r}.")
