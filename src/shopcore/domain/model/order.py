"""Order aggregate — the durable result of a checkout.

The Order is an aggregate root that owns its items.  Items and the total
are an immutable snapshot taken at checkout; only ``status`` changes
afterwards, and only along the transition table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shopcore.domain.exceptions import (
    InvalidTransitionError,
    ValidationError,
)
from shopcore.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @property
    def is_cancellable(self) -> bool:
        return self in (OrderStatus.PENDING, OrderStatus.CONFIRMED)


# Forward moves only; an operator may skip steps (e.g. PENDING -> SHIPPED).
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.CONFIRMED,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at checkout time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at checkout

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.create()`` factory for new orders; it computes the
    total once.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: tuple[OrderItem, ...]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(user_id: str, items: list[OrderItem]) -> Order:
        """Create a PENDING order and fix its total."""
        if not user_id or not str(user_id).strip():
            raise ValidationError("Order must belong to a user")
        if not items:
            raise ValidationError("Order must contain at least one item")

        snapshot = tuple(items)
        return Order(
            id=None,
            user_id=str(user_id).strip(),
            items=snapshot,
            total_amount=_sum_lines(snapshot),
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: OrderStatus) -> None:
        """Move to ``new_status`` if the transition table allows it.

        Cancellation has stock side effects and must go through
        ``cancel()`` after the caller has released inventory.
        """
        if new_status == OrderStatus.CANCELLED:
            raise InvalidTransitionError(
                self.status.value,
                new_status.value,
                "use cancel() so reserved stock is released",
            )
        self._check_transition(new_status)
        self._set_status(new_status)

    def confirm(self) -> None:
        """Transition PENDING -> CONFIRMED.  Stock was reserved at checkout."""
        if self.status != OrderStatus.PENDING:
            raise InvalidTransitionError(
                self.status.value,
                OrderStatus.CONFIRMED.value,
                "only PENDING orders can be confirmed",
            )
        self._set_status(OrderStatus.CONFIRMED)

    def cancel(self) -> None:
        """Transition PENDING|CONFIRMED -> CANCELLED.

        Inventory release must happen *before* calling this (coordinated
        by the application handler through the InventoryLedger).
        """
        if not self.status.is_cancellable:
            raise InvalidTransitionError(
                self.status.value,
                OrderStatus.CANCELLED.value,
                "order has already shipped or is closed",
            )
        self._set_status(OrderStatus.CANCELLED)

    # --- Computed properties --------------------------------------------------

    def verify_total(self) -> bool:
        """True if the stored total still equals the sum of the items."""
        return self.total_amount == _sum_lines(self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    # --- Internal helpers -----------------------------------------------------

    def _check_transition(self, new_status: OrderStatus) -> None:
        if self.status.is_terminal:
            raise InvalidTransitionError(
                self.status.value, new_status.value, f"{self.status.value} is final"
            )
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(self.status.value, new_status.value)

    def _set_status(self, new_status: OrderStatus) -> None:
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)


def _sum_lines(items: tuple[OrderItem, ...]) -> Money:
    currency = items[0].unit_price.currency if items else "USD"
    result = Money.zero(currency)
    for item in items:
        result = result + item.line_total
    return result
