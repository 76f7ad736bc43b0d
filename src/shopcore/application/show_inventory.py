"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.service.inventory_ledger import InventoryLedger


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    total: int
    reserved: int
    available: int


class ShowInventoryHandler:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def handle(self) -> list[InventoryLineDTO]:
        return [
            InventoryLineDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                total=item.total_quantity,
                reserved=item.reserved_quantity,
                available=item.available_quantity,
            )
            for item in self._ledger.snapshot()
        ]
