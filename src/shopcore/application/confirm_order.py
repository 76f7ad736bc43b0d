"""Application service: Confirm Order use case.

PENDING -> CONFIRMED.  Stock was already reserved at checkout, so this
is a pure status change.
"""

from __future__ import annotations

import structlog

from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.service.locks import KeyedLocks

logger = structlog.get_logger(__name__)


class ConfirmOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        order_locks: KeyedLocks,
    ) -> None:
        self._order_repo = order_repo
        self._order_locks = order_locks

    def handle(self, order_id: int) -> None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            order.confirm()
            self._order_repo.save(order)

        logger.info("Order confirmed", order_id=order_id)
