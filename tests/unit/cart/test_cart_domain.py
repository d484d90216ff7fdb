"""Unit tests for the cart accumulator and its session persistence."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.cart.domain import (
    Cart,
    ElectronicItem,
    PackItem,
    SupplyItem,
    dump_line_items,
    parse_line_items,
)
from modules.cart.exceptions import CartItemNotFound
from modules.cart.storage import (
    CART_CLEARED_SESSION_KEY,
    CART_SESSION_KEY,
    SessionCartStore,
)

pytestmark = pytest.mark.unit


def _pencils(quantity: int = 1) -> SupplyItem:
    return SupplyItem(
        id="supply-p1-3g1",
        name="Lápices #2",
        brand="Ticonderoga",
        unit_price=Decimal("4.99"),
        quantity=quantity,
        school="Lincoln Elementary",
        grade="3rd Grade",
    )


def _laptop() -> ElectronicItem:
    return ElectronicItem(
        id="electronic-e1",
        name="Chromebook 11",
        brand="Acer",
        unit_price=Decimal("229.00"),
    )


class FakeSession(dict):
    modified = False


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


class TestCart:
    def test_new_cart_is_empty(self):
        cart = Cart()
        assert cart.is_empty
        assert cart.get_subtotal() == Decimal("0")
        assert cart.item_count == 0

    def test_adding_same_id_twice_keeps_two_lines(self):
        cart = Cart()
        cart.add_item(_pencils())
        cart.add_item(_pencils())

        assert len(cart) == 2
        assert cart.item_count == 2

    def test_update_quantity_clamps_to_one(self):
        cart = Cart([_pencils(quantity=3)])

        item = cart.update_quantity("supply-p1-3g1", 0)
        assert item.quantity == 1

        item = cart.update_quantity("supply-p1-3g1", -5)
        assert item.quantity == 1

    def test_update_quantity_touches_first_matching_line_only(self):
        cart = Cart([_pencils(), _pencils()])

        cart.update_quantity("supply-p1-3g1", 4)

        assert [item.quantity for item in cart.items] == [4, 1]

    def test_update_unknown_item_raises(self):
        with pytest.raises(CartItemNotFound):
            Cart().update_quantity("nope", 2)

    def test_remove_item(self):
        cart = Cart([_pencils(), _laptop()])

        cart.remove_item("supply-p1-3g1")

        assert [item.id for item in cart.items] == ["electronic-e1"]

    def test_remove_unknown_item_raises(self):
        with pytest.raises(CartItemNotFound):
            Cart([_laptop()]).remove_item("supply-x")

    def test_subtotal_is_unrounded_and_display_amount_rounds(self):
        cart = Cart(
            [
                SupplyItem(id="a", name="Folder", unit_price=Decimal("0.125")),
                SupplyItem(id="b", name="Clip", unit_price=Decimal("0.01"), quantity=2),
            ]
        )

        assert cart.get_subtotal() == Decimal("0.145")
        assert cart.display_amount() == Decimal("0.15")

    def test_quantity_below_one_is_rejected_on_construction(self):
        with pytest.raises(ValidationError):
            _pencils(quantity=0)

    def test_items_returns_a_copy(self):
        cart = Cart([_laptop()])
        cart.items.clear()
        assert len(cart) == 1


class TestLineItemParsing:
    def test_kind_selects_the_variant(self):
        pack = PackItem(
            id="pack-p1",
            name="Pack - 3rd Grade - Lincoln Elementary",
            unit_price=Decimal("42.94"),
            supplies=[{"id": "3g1", "name": "Lápices #2"}],
        )
        parsed = parse_line_items(dump_line_items([pack, _pencils(), _laptop()]))

        assert [type(item) for item in parsed] == [PackItem, SupplyItem, ElectronicItem]
        assert parsed[0].supplies == [{"id": "3g1", "name": "Lápices #2"}]
        assert parsed[1].unit_price == Decimal("4.99")

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_line_items(
                [{"kind": "gift", "id": "x", "name": "x", "unit_price": "1"}]
            )


# ---------------------------------------------------------------------------
# Session store
# ---------------------------------------------------------------------------


class TestSessionCartStore:
    def test_load_from_empty_session(self):
        assert SessionCartStore(FakeSession()).load().is_empty

    def test_save_and_load(self):
        session = FakeSession()
        store = SessionCartStore(session)
        store.save(Cart([_pencils(quantity=2)]))

        assert session.modified is True
        loaded = store.load()
        assert loaded.items[0].quantity == 2
        assert loaded.get_subtotal() == Decimal("9.98")

    def test_corrupt_payload_loads_as_empty_cart(self):
        session = FakeSession({CART_SESSION_KEY: [{"kind": "supply", "id": "x"}]})
        assert SessionCartStore(session).load().is_empty

    def test_clear_after_checkout_leaves_marker(self):
        session = FakeSession()
        store = SessionCartStore(session)
        store.save(Cart([_laptop()]))

        store.clear(checkout_session_id="cs_test_123")

        assert store.load().is_empty
        assert store.cleared_by_checkout == "cs_test_123"

    def test_save_drops_the_checkout_marker(self):
        session = FakeSession({CART_CLEARED_SESSION_KEY: "cs_test_old"})
        store = SessionCartStore(session)

        store.save(Cart([_laptop()]))

        assert store.cleared_by_checkout is None
