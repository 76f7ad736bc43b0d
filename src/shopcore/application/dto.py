"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the presentation and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.model.order import Order


@dataclass(frozen=True)
class CartLineDTO:
    """Output: one cart line, priced at the product's current price."""

    id: int
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    user_id: str
    lines: list[CartLineDTO]
    total: str

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single order item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    user_id: str
    status: str
    items: list[OrderItemDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class BestSellerDTO:
    product_id: str
    product_name: str
    units_sold: int


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
