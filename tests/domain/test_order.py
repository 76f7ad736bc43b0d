"""Unit tests for the Order aggregate and its status transitions."""

import pytest

from shopcore.domain.exceptions import InvalidTransitionError, ValidationError
from shopcore.domain.model.order import (
    ALLOWED_TRANSITIONS,
    Order,
    OrderItem,
    OrderStatus,
)
from shopcore.domain.model.value_objects import Money, Quantity


def _make_item(pid: str = "1", name: str = "Widget", qty: int = 1, price: str = "15.00") -> OrderItem:
    """Helper to build a valid order item."""
    return OrderItem(
        product_id=pid,
        product_name=name,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _order_in(status: OrderStatus) -> Order:
    order = Order.create("alice", [_make_item()])
    order.status = status
    return order


class TestOrderCreation:

    def test_happy_path(self):
        order = Order.create(user_id="alice", items=[_make_item(qty=2, price="10.00")])
        assert order.user_id == "alice"
        assert order.status == OrderStatus.PENDING
        assert len(order.items) == 1
        assert order.total_amount == Money.of("20.00")

    def test_id_is_none_for_new_orders(self):
        order = Order.create("alice", [_make_item()])
        assert order.id is None  # assigned by repository

    def test_total_is_sum_of_items(self):
        items = [
            _make_item("1", "Widget", qty=3, price="15.00"),
            _make_item("2", "Gadget", qty=5, price="25.00"),
        ]
        order = Order.create("bob", items)
        assert order.total_amount == Money.of("170.00")
        assert order.verify_total()
        assert order.item_count == 8

    def test_zero_priced_items_allowed(self):
        order = Order.create("bob", [_make_item(price="0.00")])
        assert order.total_amount == Money.zero()

    def test_items_are_an_immutable_snapshot(self):
        items = [_make_item()]
        order = Order.create("alice", items)
        items.append(_make_item("2", "Gadget"))
        assert len(order.items) == 1
        assert isinstance(order.items, tuple)


class TestOrderValidation:

    def test_empty_user_rejected(self):
        with pytest.raises(ValidationError, match="belong to a user"):
            Order.create("", [_make_item()])

    def test_whitespace_user_rejected(self):
        with pytest.raises(ValidationError, match="belong to a user"):
            Order.create("   ", [_make_item()])

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("alice", [])


class TestOrderItem:

    def test_line_total_calculation(self):
        item = _make_item(qty=3, price="15.00")
        assert item.line_total == Money.of("45.00")

    def test_item_is_frozen(self):
        item = _make_item()
        with pytest.raises(AttributeError):
            item.unit_price = Money.of("1.00")


class TestConfirm:

    def test_pending_to_confirmed(self):
        order = _order_in(OrderStatus.PENDING)
        order.confirm()
        assert order.status == OrderStatus.CONFIRMED
        assert order.updated_at is not None

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    )
    def test_only_pending_can_be_confirmed(self, status):
        order = _order_in(status)
        with pytest.raises(InvalidTransitionError, match="only PENDING"):
            order.confirm()
        assert order.status == status


class TestCancel:

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED])
    def test_cancellable_states(self, status):
        order = _order_in(status)
        order.cancel()
        assert order.status == OrderStatus.CANCELLED

    @pytest.mark.parametrize(
        "status", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED]
    )
    def test_not_cancellable_states(self, status):
        order = _order_in(status)
        with pytest.raises(InvalidTransitionError):
            order.cancel()
        assert order.status == status


class TestTransitionTo:

    def test_forward_moves_allowed(self):
        order = _order_in(OrderStatus.CONFIRMED)
        order.transition_to(OrderStatus.SHIPPED)
        order.transition_to(OrderStatus.DELIVERED)
        assert order.status == OrderStatus.DELIVERED

    def test_operator_may_skip_steps(self):
        order = _order_in(OrderStatus.PENDING)
        order.transition_to(OrderStatus.SHIPPED)
        assert order.status == OrderStatus.SHIPPED

    def test_backward_move_rejected(self):
        order = _order_in(OrderStatus.SHIPPED)
        with pytest.raises(InvalidTransitionError, match="SHIPPED to CONFIRMED"):
            order.transition_to(OrderStatus.CONFIRMED)

    def test_terminal_states_are_final(self):
        order = _order_in(OrderStatus.DELIVERED)
        with pytest.raises(InvalidTransitionError, match="is final"):
            order.transition_to(OrderStatus.SHIPPED)

    def test_cancel_must_go_through_cancel(self):
        order = _order_in(OrderStatus.PENDING)
        with pytest.raises(InvalidTransitionError, match="use cancel"):
            order.transition_to(OrderStatus.CANCELLED)
        assert order.status == OrderStatus.PENDING

    def test_same_status_rejected(self):
        order = _order_in(OrderStatus.CONFIRMED)
        with pytest.raises(InvalidTransitionError):
            order.transition_to(OrderStatus.CONFIRMED)

    def test_terminal_states_have_no_exits(self):
        assert ALLOWED_TRANSITIONS[OrderStatus.DELIVERED] == frozenset()
        assert ALLOWED_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()
