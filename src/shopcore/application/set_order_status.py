"""Application service: Set Order Status use case (operator action).

Every requested status goes through the order's transition table.  A
request for CANCELLED is routed through CancelOrderHandler so that the
order's stock is released.
"""

from __future__ import annotations

import structlog

from shopcore.application.cancel_order import CancelOrderHandler
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks

logger = structlog.get_logger(__name__)


class SetOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._order_locks = order_locks
        self._cancel = CancelOrderHandler(order_repo, ledger, self._order_locks)

    def handle(self, order_id: int, status: OrderStatus | str) -> None:
        new_status = parse_status(status)
        if new_status == OrderStatus.CANCELLED:
            self._cancel.handle(order_id)
            return

        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            order.transition_to(new_status)
            self._order_repo.save(order)

        logger.info(
            "Order status changed",
            order_id=order_id,
            previous=previous.value,
            status=new_status.value,
        )


def parse_status(status: OrderStatus | str) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status.strip().upper())
    except ValueError as exc:
        valid = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(
            f"Unknown order status '{status}' (expected one of {valid})"
        ) from exc
