"""InventoryItem aggregate — tracks supply and reservations per product.

Each product has one InventoryItem that knows the total supply and how
much of it is bound to orders.  ``available_quantity`` is the figure shown
to shoppers and consumed by checkout.

The methods here are plain read-modify-write steps.  They are only safe
when called through the InventoryLedger, which holds the product's lock
around load, mutate and save.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.exceptions import (
    InsufficientStockError,
    InternalInconsistencyError,
    ValidationError,
)


@dataclass
class InventoryItem:
    """Aggregate root for inventory tracking.

    Invariants:
    - ``reserved_quantity`` can never exceed ``total_quantity``
    - ``available_quantity`` is always >= 0
    """

    product_id: str
    product_name: str
    total_quantity: int
    reserved_quantity: int = 0

    @property
    def available_quantity(self) -> int:
        return self.total_quantity - self.reserved_quantity

    def reserve(self, quantity: int) -> None:
        """Bind stock to an order.

        Raises InsufficientStockError, leaving the record untouched, if
        fewer than ``quantity`` units are available.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise InsufficientStockError(
                product_id=self.product_id,
                product_name=self.product_name,
                requested=quantity,
                available=self.available_quantity,
            )
        self.reserved_quantity += quantity

    def release(self, quantity: int) -> None:
        """Return previously reserved stock (checkout rollback or cancellation)."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved_quantity:
            raise InternalInconsistencyError(
                f"Cannot release {quantity} of {self.product_name} "
                f"(only {self.reserved_quantity} currently reserved)"
            )
        self.reserved_quantity -= quantity

    def restock(self, quantity: int) -> None:
        """Add new supply."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.total_quantity += quantity
