"""Integration tests for the Checkout use case."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from shopcore.application.add_to_cart import AddToCartHandler
from shopcore.application.checkout import CheckoutHandler
from shopcore.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    InsufficientStockError,
)
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money
from tests.fakes import FailingOrderRepository, Shop


def _setup(stock: dict[str, int] | None = None, order_repo=None) -> Shop:
    return Shop(
        products=[
            Product(id="1", name="Widget", price=Money.of("15.00")),
            Product(id="2", name="Gadget", price=Money.of("25.00")),
            Product(id="3", name="Sprocket", price=Money.of("2.50")),
        ],
        stock=stock if stock is not None else {"1": 10, "2": 5, "3": 100},
        order_repo=order_repo,
    )


def _checkout(shop: Shop) -> CheckoutHandler:
    return CheckoutHandler(
        shop.cart_repo, shop.product_repo, shop.order_repo, shop.ledger, shop.user_locks
    )


def _fill_cart(shop: Shop, user_id: str, items: dict[str, int]) -> None:
    """Put lines straight into the cart, bypassing the advisory stock check."""
    for product_id, qty in items.items():
        shop.cart_repo.save(CartLine(id=None, user_id=user_id, product_id=product_id, quantity=qty))


class TestCheckoutHappyPath:

    def test_creates_pending_order_with_correct_total(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 3, "2": 2})

        dto = _checkout(shop).handle("alice")

        assert dto.status == "PENDING"
        assert dto.user_id == "alice"
        assert dto.total == "$95.00"
        assert len(dto.items) == 2

    def test_reserves_stock(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 3, "2": 2})
        _checkout(shop).handle("alice")
        assert shop.available("1") == 7
        assert shop.available("2") == 3

    def test_empties_cart(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 1})
        _checkout(shop).handle("alice")
        assert shop.cart_repo.list_by_user("alice") == []

    def test_persists_order(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 1})
        dto = _checkout(shop).handle("alice")
        saved = shop.order_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.status == OrderStatus.PENDING
        assert saved.verify_total()

    def test_items_in_product_order(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"3": 1, "1": 1, "2": 1})
        dto = _checkout(shop).handle("alice")
        assert [i.product_id for i in dto.items] == ["1", "2", "3"]

    def test_other_users_cart_untouched(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 1})
        _fill_cart(shop, "bob", {"2": 1})
        _checkout(shop).handle("alice")
        assert len(shop.cart_repo.list_by_user("bob")) == 1


class TestCheckoutPriceSnapshot:

    def test_total_keeps_checkout_prices(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 2})
        dto = _checkout(shop).handle("alice")

        shop.product_repo.get_by_id("1").update_price(Money.of("99.99"))

        saved = shop.order_repo.get_by_id(dto.id)
        assert saved.total_amount == Money.of("30.00")
        assert saved.items[0].unit_price == Money.of("15.00")
        assert saved.verify_total()


class TestCheckoutFailures:

    def test_empty_cart_rejected(self):
        shop = _setup()
        with pytest.raises(EmptyCartError, match="Cart is empty"):
            _checkout(shop).handle("alice")

    def test_out_of_stock_line_rolls_back_everything(self):
        """A in stock, B short: checkout fails, A untouched, cart intact."""
        shop = _setup(stock={"1": 10, "2": 1, "3": 100})
        _fill_cart(shop, "alice", {"1": 4, "2": 3})

        with pytest.raises(InsufficientStockError) as exc_info:
            _checkout(shop).handle("alice")

        assert exc_info.value.product_id == "2"
        assert exc_info.value.shortfall == 2
        assert shop.available("1") == 10
        assert shop.available("2") == 1
        assert len(shop.cart_repo.list_by_user("alice")) == 2
        assert shop.order_repo.list_all() == []

    def test_first_failing_product_is_named(self):
        shop = _setup(stock={"1": 0, "2": 0, "3": 100})
        _fill_cart(shop, "alice", {"2": 1, "1": 1})
        with pytest.raises(InsufficientStockError, match="Widget"):
            _checkout(shop).handle("alice")

    def test_missing_product_rolls_back(self):
        shop = _setup()
        _fill_cart(shop, "alice", {"1": 2, "9": 1})
        with pytest.raises(EntityNotFoundError):
            _checkout(shop).handle("alice")
        assert shop.available("1") == 10
        assert len(shop.cart_repo.list_by_user("alice")) == 2

    def test_failed_save_releases_reservations(self):
        shop = _setup(order_repo=FailingOrderRepository())
        _fill_cart(shop, "alice", {"1": 2, "2": 1})

        with pytest.raises(OSError, match="disk full"):
            _checkout(shop).handle("alice")

        assert shop.available("1") == 10
        assert shop.available("2") == 5
        assert len(shop.cart_repo.list_by_user("alice")) == 2

    def test_stock_taken_after_adding_to_cart_is_caught(self):
        shop = _setup(stock={"1": 5, "2": 5, "3": 5})
        AddToCartHandler(shop.cart_repo, shop.product_repo, shop.ledger, shop.user_locks).handle("alice", "1", 5)
        shop.ledger.reserve("1", 1)  # someone else checked out meanwhile

        with pytest.raises(InsufficientStockError):
            _checkout(shop).handle("alice")
        assert shop.available("1") == 4


class TestConcurrentCheckouts:

    def test_no_oversell(self):
        shop = _setup(stock={"1": 7, "2": 5, "3": 100})
        users = [f"user{i}" for i in range(10)]
        for user in users:
            _fill_cart(shop, user, {"1": 1, "3": 1})
        handler = _checkout(shop)
        start = threading.Barrier(len(users))

        def attempt(user: str) -> bool:
            start.wait()
            try:
                handler.handle(user)
            except InsufficientStockError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=len(users)) as pool:
            results = list(pool.map(attempt, users))

        assert results.count(True) == 7
        assert shop.available("1") == 0
        # Losers released their Sprocket reservations.
        assert shop.available("3") == 93
        assert len(shop.order_repo.list_all()) == 7

    def test_overlapping_carts_do_not_deadlock(self):
        shop = _setup(stock={"1": 100, "2": 100, "3": 100})
        users = [f"user{i}" for i in range(12)]
        for i, user in enumerate(users):
            items = {"1": 1, "2": 1, "3": 1} if i % 2 else {"3": 1, "2": 1, "1": 1}
            _fill_cart(shop, user, items)
        handler = _checkout(shop)

        with ThreadPoolExecutor(max_workers=6) as pool:
            orders = list(pool.map(handler.handle, users))

        assert len(orders) == 12
        assert shop.available("1") == 88
        assert shop.available("2") == 88
        assert shop.available("3") == 88
