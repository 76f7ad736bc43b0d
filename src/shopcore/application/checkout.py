"""Application service: Checkout use case.

Turns a user's cart into a PENDING order as one all-or-nothing step:

1. Read the cart (EmptyCartError if there is nothing in it).
2. Reserve stock line by line, in ascending product ID order.
3. On any failure, release what this checkout already reserved before
   the error leaves this module.  Cart and inventory end up exactly as
   they were.
4. Snapshot unit prices, fix the total, persist the order.
5. Empty the cart.

The user's cart lock is held throughout, so a concurrent edit from
another tab cannot slip in between reading the cart and clearing it.
"""

from __future__ import annotations

import structlog

from shopcore.application.dto import OrderDTO, order_to_dto
from shopcore.domain.exceptions import (
    DomainException,
    EmptyCartError,
    EntityNotFoundError,
)
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.order import Order, OrderItem
from shopcore.domain.model.value_objects import Quantity
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks

logger = structlog.get_logger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        user_locks: KeyedLocks,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._order_repo = order_repo
        self._ledger = ledger
        self._user_locks = user_locks

    def handle(self, user_id: str) -> OrderDTO:
        with self._user_locks.hold(user_id):
            lines = sorted(
                self._cart_repo.list_by_user(user_id),
                key=lambda line: line.product_id,
            )
            if not lines:
                raise EmptyCartError("Cart is empty")

            reserved: dict[str, int] = {}
            try:
                items = [self._reserve_line(line, reserved) for line in lines]
                order = Order.create(user_id=user_id, items=items)
                self._order_repo.save(order)
            except DomainException as exc:
                self._rollback(user_id, reserved)
                logger.info("Checkout rejected", user_id=user_id, reason=str(exc))
                raise
            except Exception:
                self._rollback(user_id, reserved)
                logger.exception("Checkout failed while saving order", user_id=user_id)
                raise

            self._cart_repo.delete_by_user(user_id)

        logger.info(
            "Checkout completed",
            user_id=user_id,
            order_id=order.id,
            total=str(order.total_amount),
            lines=len(order.items),
        )
        return order_to_dto(order)

    def _reserve_line(self, line: CartLine, reserved: dict[str, int]) -> OrderItem:
        product = self._product_repo.get_by_id(line.product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product with ID '{line.product_id}' not found"
            )

        self._ledger.reserve(product.id, line.quantity)
        reserved[product.id] = reserved.get(product.id, 0) + line.quantity

        return OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=Quantity(line.quantity),
            unit_price=product.price,  # <-- price snapshot
        )

    def _rollback(self, user_id: str, reserved: dict[str, int]) -> None:
        if not reserved:
            return
        self._ledger.release_all(reserved)
        logger.info(
            "Checkout reservations rolled back",
            user_id=user_id,
            products=sorted(reserved),
        )
