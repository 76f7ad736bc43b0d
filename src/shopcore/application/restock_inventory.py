"""Application service: Restock Inventory use case."""

from __future__ import annotations

from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger


class RestockInventoryHandler:

    def __init__(
        self,
        ledger: InventoryLedger,
        product_repo: ProductRepository,
    ) -> None:
        self._ledger = ledger
        self._product_repo = product_repo

    def handle(self, product_id: str, quantity: int) -> int:
        """Add supply for a catalog product.  Returns the new available count."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        item = self._ledger.restock(product.id, quantity, product_name=product.name)
        return item.available_quantity
