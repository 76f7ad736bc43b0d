"""Product aggregate.

Products are owned by the catalog.  The order-processing core only reads
their name and price; stock lives in the InventoryItem aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    name: str
    price: Money

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at checkout time.  Carts, however, are
        re-priced live.
        """
        self.price = new_price
