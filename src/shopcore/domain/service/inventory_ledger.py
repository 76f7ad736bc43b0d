"""Domain service: Inventory Ledger.

The ledger is the only writer of stock.  Every mutation is a single
compare-and-update performed while holding the product's lock:

    load record -> check -> mutate -> save

so two checkouts racing for the last units of a product can never both
succeed.  ``peek`` takes no lock and is advisory only; callers must never
treat its answer as a promise that a later ``reserve`` will succeed.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from shopcore.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InternalInconsistencyError,
    ValidationError,
)
from shopcore.domain.model.inventory import InventoryItem
from shopcore.domain.repository.inventory_repository import InventoryRepository
from shopcore.domain.service.locks import KeyedLocks

logger = structlog.get_logger(__name__)


class InventoryLedger:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        locks: KeyedLocks,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._locks = locks

    def reserve(self, product_id: str, quantity: int) -> None:
        """Atomically take ``quantity`` units of a product.

        Raises InsufficientStockError (stock unchanged) if fewer units
        are available.
        """
        with self._locks.hold(product_id):
            item = self._load(product_id)
            item.reserve(quantity)
            self._inventory_repo.save(item)
        logger.debug(
            "Stock reserved",
            product_id=product_id,
            quantity=quantity,
            available=item.available_quantity,
        )

    def release(self, product_id: str, quantity: int) -> None:
        """Atomically give back units taken by an earlier ``reserve``.

        Releasing more than is reserved means the bookkeeping is broken;
        the record is left unchanged and InternalInconsistencyError raised.
        """
        with self._locks.hold(product_id):
            item = self._load(product_id)
            try:
                item.release(quantity)
            except InternalInconsistencyError:
                logger.error(
                    "Release exceeds reserved stock",
                    product_id=product_id,
                    quantity=quantity,
                    reserved=item.reserved_quantity,
                    total=item.total_quantity,
                )
                raise
            self._inventory_repo.save(item)
        logger.debug(
            "Stock released",
            product_id=product_id,
            quantity=quantity,
            available=item.available_quantity,
        )

    def release_all(self, quantities: dict[str, int]) -> None:
        """Release several products as one step.

        Holds every product's lock (in ascending ID order), then uses a
        two-phase approach so a failure leaves all records unchanged:
          Phase 1: load and validate every release.
          Phase 2: mutate and persist.
        """
        with self._locks.hold_all(quantities):
            items: list[tuple[InventoryItem, int]] = []
            for product_id in sorted(quantities):
                item = self._load(product_id)
                qty = quantities[product_id]
                if qty <= 0:
                    raise ValidationError("Release quantity must be positive")
                if qty > item.reserved_quantity:
                    logger.error(
                        "Release exceeds reserved stock",
                        product_id=product_id,
                        quantity=qty,
                        reserved=item.reserved_quantity,
                        total=item.total_quantity,
                    )
                    raise InternalInconsistencyError(
                        f"Cannot release {qty} of {item.product_name} "
                        f"(only {item.reserved_quantity} currently reserved)"
                    )
                items.append((item, qty))

            for item, qty in items:
                item.release(qty)
                self._inventory_repo.save(item)
        logger.debug("Stock released", products=sorted(quantities))

    def reserve_all(self, quantities: dict[str, int]) -> None:
        """Reserve several products as one step.

        Same two-phase approach as ``release_all``: if any product is short,
        InsufficientStockError is raised and no record changes.
        """
        with self._locks.hold_all(quantities):
            items: list[tuple[InventoryItem, int]] = []
            for product_id in sorted(quantities):
                item = self._load(product_id)
                qty = quantities[product_id]
                if qty <= 0:
                    raise ValidationError("Reservation quantity must be positive")
                if qty > item.available_quantity:
                    raise InsufficientStockError(
                        product_id=product_id,
                        product_name=item.product_name,
                        requested=qty,
                        available=item.available_quantity,
                    )
                items.append((item, qty))

            for item, qty in items:
                item.reserve(qty)
                self._inventory_repo.save(item)
        logger.debug("Stock reserved", products=sorted(quantities))

    @contextmanager
    def releasing(self, quantities: dict[str, int]) -> Iterator[None]:
        """Release stock for the duration of a block, undoing it if the block raises.

        Every product's lock is held until the block ends, so the returned
        units cannot be taken by a checkout before the caller has committed
        the change that justifies the release.
        """
        with self._locks.hold_all(quantities):
            self.release_all(quantities)
            try:
                yield
            except Exception:
                self.reserve_all(quantities)
                logger.warning("Stock release undone", products=sorted(quantities))
                raise

    def restock(
        self,
        product_id: str,
        quantity: int,
        product_name: str | None = None,
    ) -> InventoryItem:
        """Add supply, creating the inventory record if the product has none."""
        with self._locks.hold(product_id):
            item = self._inventory_repo.get_by_product_id(product_id)
            if item is None:
                item = InventoryItem(
                    product_id=product_id,
                    product_name=product_name or product_id,
                    total_quantity=0,
                )
            item.restock(quantity)
            self._inventory_repo.save(item)
        logger.info(
            "Stock replenished",
            product_id=product_id,
            quantity=quantity,
            total=item.total_quantity,
        )
        return item

    def peek(self, product_id: str) -> int:
        """Advisory read of available units; 0 for unknown products."""
        item = self._inventory_repo.get_by_product_id(product_id)
        if item is None:
            return 0
        return item.available_quantity

    def snapshot(self) -> list[InventoryItem]:
        return sorted(self._inventory_repo.list_all(), key=lambda i: i.product_id)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, product_id: str) -> InventoryItem:
        item = self._inventory_repo.get_by_product_id(product_id)
        if item is None:
            raise EntityNotFoundError(
                f"No inventory record for product '{product_id}'"
            )
        return item
