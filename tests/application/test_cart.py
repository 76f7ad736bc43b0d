"""Integration tests for the cart use cases.

Uses in-memory fake repositories, no file I/O.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from shopcore.application.add_to_cart import AddToCartHandler
from shopcore.application.remove_from_cart import ClearCartHandler, RemoveFromCartHandler
from shopcore.application.show_cart import ShowCartHandler
from shopcore.application.update_cart_line import UpdateCartLineHandler
from shopcore.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money
from tests.fakes import Shop


def _setup() -> Shop:
    return Shop(
        products=[
            Product(id="1", name="Widget", price=Money.of("15.00")),
            Product(id="2", name="Gadget", price=Money.of("25.00")),
        ],
        stock={"1": 10, "2": 3},
    )


def _add(shop: Shop) -> AddToCartHandler:
    return AddToCartHandler(shop.cart_repo, shop.product_repo, shop.ledger, shop.user_locks)


def _update(shop: Shop) -> UpdateCartLineHandler:
    return UpdateCartLineHandler(shop.cart_repo, shop.product_repo, shop.ledger, shop.user_locks)


class TestAddToCart:

    def test_creates_line(self):
        shop = _setup()
        dto = _add(shop).handle("alice", "1", 2)
        assert dto.quantity == 2
        assert dto.line_total == "$30.00"
        assert len(shop.cart_repo.list_by_user("alice")) == 1

    def test_same_product_merges_into_one_line(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 2)
        dto = _add(shop).handle("alice", "1", 3)

        lines = shop.cart_repo.list_by_user("alice")
        assert len(lines) == 1
        assert lines[0].quantity == 5
        assert dto.quantity == 5

    def test_carts_are_per_user(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 2)
        _add(shop).handle("bob", "1", 2)
        assert len(shop.cart_repo.list_by_user("alice")) == 1
        assert len(shop.cart_repo.list_by_user("bob")) == 1

    def test_merged_quantity_checked_against_stock(self):
        shop = _setup()
        _add(shop).handle("alice", "2", 2)
        with pytest.raises(InsufficientStockError) as exc_info:
            _add(shop).handle("alice", "2", 2)
        assert exc_info.value.requested == 4
        assert exc_info.value.available == 3
        assert shop.cart_repo.list_by_user("alice")[0].quantity == 2

    def test_adding_does_not_reserve_stock(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 4)
        assert shop.available("1") == 10

    def test_zero_quantity_rejected(self):
        shop = _setup()
        with pytest.raises(ValidationError, match="at least 1"):
            _add(shop).handle("alice", "1", 0)

    def test_unknown_product_rejected(self):
        shop = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            _add(shop).handle("alice", "404", 1)

    def test_concurrent_adds_from_same_user_do_not_lose_updates(self):
        shop = _setup()
        handler = _add(shop)

        with ThreadPoolExecutor(max_workers=5) as pool:
            list(pool.map(lambda _: handler.handle("alice", "1", 1), range(10)))

        lines = shop.cart_repo.list_by_user("alice")
        assert len(lines) == 1
        assert lines[0].quantity == 10


class TestUpdateCartLine:

    def test_set_quantity(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        dto = _update(shop).set_quantity("alice", line.id, 4)
        assert dto.quantity == 4

    def test_set_zero_removes_line(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        assert _update(shop).set_quantity("alice", line.id, 0) is None
        assert shop.cart_repo.list_by_user("alice") == []

    def test_set_negative_removes_line(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        assert _update(shop).set_quantity("alice", line.id, -2) is None
        assert shop.cart_repo.get_by_id(line.id) is None

    def test_set_above_stock_rejected(self):
        shop = _setup()
        line = _add(shop).handle("alice", "2", 1)
        with pytest.raises(InsufficientStockError):
            _update(shop).set_quantity("alice", line.id, 4)
        assert shop.cart_repo.get_by_id(line.id).quantity == 1

    def test_increment_and_decrement(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 2)
        assert _update(shop).increment("alice", line.id).quantity == 3
        assert _update(shop).decrement("alice", line.id).quantity == 2

    def test_increment_past_stock_rejected(self):
        shop = _setup()
        line = _add(shop).handle("alice", "2", 3)
        with pytest.raises(InsufficientStockError):
            _update(shop).increment("alice", line.id)

    def test_decrement_at_one_removes_line(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        assert _update(shop).decrement("alice", line.id) is None
        assert shop.cart_repo.list_by_user("alice") == []

    def test_other_users_line_is_not_found(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        with pytest.raises(EntityNotFoundError, match=f"Cart item #{line.id}"):
            _update(shop).set_quantity("mallory", line.id, 5)

    def test_missing_line_is_not_found(self):
        shop = _setup()
        with pytest.raises(EntityNotFoundError):
            _update(shop).increment("alice", 99)


class TestRemoveAndClear:

    def test_remove_line(self):
        shop = _setup()
        line = _add(shop).handle("alice", "1", 1)
        RemoveFromCartHandler(shop.cart_repo, shop.user_locks).handle("alice", line.id)
        assert shop.cart_repo.list_by_user("alice") == []

    def test_remove_product(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 1)
        _add(shop).handle("alice", "2", 1)
        RemoveFromCartHandler(shop.cart_repo, shop.user_locks).remove_product("alice", "1")
        assert [l.product_id for l in shop.cart_repo.list_by_user("alice")] == ["2"]

    def test_remove_product_not_in_cart(self):
        shop = _setup()
        with pytest.raises(EntityNotFoundError, match="not in the cart"):
            RemoveFromCartHandler(shop.cart_repo, shop.user_locks).remove_product("alice", "1")

    def test_clear_only_affects_one_user(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 1)
        _add(shop).handle("bob", "1", 1)
        ClearCartHandler(shop.cart_repo, shop.user_locks).handle("alice")
        assert shop.cart_repo.list_by_user("alice") == []
        assert len(shop.cart_repo.list_by_user("bob")) == 1


class TestShowCart:

    def test_lists_lines_and_total(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 2)
        _add(shop).handle("alice", "2", 1)

        cart = ShowCartHandler(shop.cart_repo, shop.product_repo).handle("alice")

        assert [l.product_name for l in cart.lines] == ["Widget", "Gadget"]
        assert cart.total == "$55.00"
        assert not cart.is_empty

    def test_empty_cart(self):
        shop = _setup()
        cart = ShowCartHandler(shop.cart_repo, shop.product_repo).handle("alice")
        assert cart.is_empty
        assert cart.total == "$0.00"

    def test_total_is_live_reprice(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 2)
        handler = ShowCartHandler(shop.cart_repo, shop.product_repo)
        assert handler.total("alice") == Money.of("30.00")

        shop.product_repo.get_by_id("1").update_price(Money.of("20.00"))

        assert handler.total("alice") == Money.of("40.00")

    def test_count_and_contains(self):
        shop = _setup()
        _add(shop).handle("alice", "1", 2)
        handler = ShowCartHandler(shop.cart_repo, shop.product_repo)
        assert handler.count("alice") == 1
        assert handler.contains("alice", "1")
        assert not handler.contains("alice", "2")
