"""Application service: Cancel Order use case.

Only PENDING and CONFIRMED orders can be cancelled.  Every item's
quantity goes back to the InventoryLedger before the status changes;
this is the only path that returns reserved stock.  If anything fails,
including saving the order, status and inventory are left as they were.
"""

from __future__ import annotations

from dataclasses import replace

import structlog

from shopcore.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._order_locks = order_locks

    def handle(self, order_id: int) -> None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # Check first so a refused cancel never touches stock.
            if not order.status.is_cancellable:
                raise InvalidTransitionError(
                    order.status.value,
                    OrderStatus.CANCELLED.value,
                    "order has already shipped or is closed",
                )

            quantities: dict[str, int] = {}
            for item in order.items:
                quantities[item.product_id] = (
                    quantities.get(item.product_id, 0) + item.quantity.value
                )
            cancelled = replace(order)
            cancelled.cancel()
            # The release is undone if the cancelled order cannot be stored.
            with self._ledger.releasing(quantities):
                self._order_repo.save(cancelled)

        logger.info(
            "Order cancelled",
            order_id=order_id,
            released=quantities,
        )
