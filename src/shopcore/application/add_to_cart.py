"""Application service: Add To Cart use case.

Adding a product the user already has in the cart merges into the
existing line instead of creating a second one.  Stock is only checked
advisorily here; the binding reservation happens at checkout.
"""

from __future__ import annotations

from shopcore.application.dto import CartLineDTO
from shopcore.application.show_cart import line_to_dto
from shopcore.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.product import Product
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        ledger: InventoryLedger,
        user_locks: KeyedLocks,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._ledger = ledger
        self._user_locks = user_locks

    def handle(self, user_id: str, product_id: str, quantity: int) -> CartLineDTO:
        if quantity < 1:
            raise ValidationError("Quantity to add must be at least 1")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        with self._user_locks.hold(user_id):
            line = self._cart_repo.get_by_user_and_product(user_id, product_id)
            new_quantity = quantity if line is None else line.quantity + quantity
            check_advisory_stock(self._ledger, product, new_quantity)

            if line is None:
                line = CartLine(
                    id=None,
                    user_id=user_id,
                    product_id=product_id,
                    quantity=new_quantity,
                )
            else:
                line.change_quantity(new_quantity)
            self._cart_repo.save(line)

        return line_to_dto(line, product)


def check_advisory_stock(ledger: InventoryLedger, product: Product, quantity: int) -> None:
    """Reject quantities that are already known to exceed available stock."""
    available = ledger.peek(product.id)
    if quantity > available:
        raise InsufficientStockError(
            product_id=product.id,
            product_name=product.name,
            requested=quantity,
            available=available,
        )
