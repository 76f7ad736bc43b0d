"""CartLine entity — a user's pending purchase of one product.

Lines are unique per (user, product).  They hold references by ID only;
the price is looked up live whenever the cart is totalled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from shopcore.domain.exceptions import ValidationError


@dataclass
class CartLine:
    """A single line in a user's cart.

    A line never holds a quantity below 1; callers delete the line instead
    of storing zero.
    """

    id: int | None
    user_id: str
    product_id: str
    quantity: int
    added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        _check_positive(self.quantity)

    def change_quantity(self, quantity: int) -> None:
        _check_positive(quantity)
        self.quantity = quantity


def _check_positive(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(
            f"Cart quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity < 1:
        raise ValidationError("Cart quantity must be at least 1")
