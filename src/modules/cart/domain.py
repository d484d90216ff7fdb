"""Cart line items and the session-scoped cart accumulator.

Line items are a tagged union on ``kind``:

- ``SupplyItem``     (``"supply"``)     one supply taken from a pack list.
- ``PackItem``       (``"pack"``)       a complete grade pack, ``supplies`` nested.
- ``ElectronicItem`` (``"electronic"``) an electronics product.

All variants share ``id``, ``name``, ``unit_price`` and ``quantity``, and
may carry ``school``/``grade`` context used by checkout.

Invariants:
- ``quantity >= 1``: ``update_quantity`` clamps lower values to 1; removing
  an item is an explicit ``remove_item`` call.
- Re-adding an item with an ``id`` already in the cart appends a second
  line; lines are never merged.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from modules.cart.exceptions import CartItemNotFound
from shared.domain.money import round_money


class CartLineItemBase(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    school: str = ""
    grade: str = ""
    # Lines restored from older payloads may carry the checkout form here.
    customer_info: Optional[Dict[str, Any]] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class SupplyItem(CartLineItemBase):
    kind: Literal["supply"] = "supply"
    brand: str = ""
    category: str = ""


class PackItem(CartLineItemBase):
    kind: Literal["pack"] = "pack"
    supplies: List[Dict[str, Any]] = Field(default_factory=list)


class ElectronicItem(CartLineItemBase):
    kind: Literal["electronic"] = "electronic"
    brand: str = ""
    category: str = ""


CartLineItem = Annotated[
    Union[SupplyItem, PackItem, ElectronicItem], Field(discriminator="kind")
]

_line_items_adapter = TypeAdapter(List[CartLineItem])


def parse_line_items(data: Iterable[Dict[str, Any]]) -> List[CartLineItem]:
    """Validate raw dicts (session / JSON) into typed line items."""
    return _line_items_adapter.validate_python(list(data))


def dump_line_items(items: Iterable[CartLineItemBase]) -> List[Dict[str, Any]]:
    """JSON-safe representation (Decimals become strings)."""
    return [item.model_dump(mode="json") for item in items]


class Cart:
    """In-memory collection of line items with quantity and total operations."""

    def __init__(self, items: Optional[Iterable[CartLineItemBase]] = None) -> None:
        self._items: List[CartLineItemBase] = list(items or [])

    @property
    def items(self) -> List[CartLineItemBase]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add_item(self, item: CartLineItemBase) -> CartLineItemBase:
        self._items.append(item)
        return item

    def update_quantity(self, item_id: str, quantity: int) -> CartLineItemBase:
        """Set the quantity of the first line with ``item_id`` (minimum 1).

        Raises:
            CartItemNotFound: no line has that id.
        """
        item = self._find(item_id)
        item.quantity = max(1, int(quantity))
        return item

    def remove_item(self, item_id: str) -> CartLineItemBase:
        """Remove the first line with ``item_id``.

        Raises:
            CartItemNotFound: no line has that id.
        """
        item = self._find(item_id)
        self._items.remove(item)
        return item

    def get_subtotal(self) -> Decimal:
        """Unrounded ``sum(unit_price * quantity)``."""
        return sum((item.line_total for item in self._items), Decimal("0"))

    def display_amount(self) -> Decimal:
        """Subtotal rounded to cents for presentation."""
        return round_money(self.get_subtotal())

    def clear(self) -> None:
        self._items.clear()

    def _find(self, item_id: str) -> CartLineItemBase:
        for item in self._items:
            if item.id == item_id:
                return item
        raise CartItemNotFound(f"Cart item {item_id} not found.")
