"""Application service: Update Cart Line use case.

Setting a line to zero (or below) removes it; a line never holds a
quantity under 1.
"""

from __future__ import annotations

from shopcore.application.add_to_cart import check_advisory_stock
from shopcore.application.dto import CartLineDTO
from shopcore.application.show_cart import line_to_dto
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.product_repository import ProductRepository
from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks


class UpdateCartLineHandler:

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

    def set_quantity(self, user_id: str, line_id: int, quantity: int) -> CartLineDTO | None:
        """Set a line's quantity.  Returns None if the line was removed."""
        with self._user_locks.hold(user_id):
            line = load_owned_line(self._cart_repo, user_id, line_id)
            return self._apply(line, quantity)

    def increment(self, user_id: str, line_id: int) -> CartLineDTO | None:
        with self._user_locks.hold(user_id):
            line = load_owned_line(self._cart_repo, user_id, line_id)
            return self._apply(line, line.quantity + 1)

    def decrement(self, user_id: str, line_id: int) -> CartLineDTO | None:
        """Take one unit off a line; a line at 1 is removed."""
        with self._user_locks.hold(user_id):
            line = load_owned_line(self._cart_repo, user_id, line_id)
            return self._apply(line, line.quantity - 1)

    def _apply(self, line: CartLine, quantity: int) -> CartLineDTO | None:
        if quantity <= 0:
            self._cart_repo.delete(line.id)  # type: ignore[arg-type]
            return None

        product = self._product_repo.get_by_id(line.product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product with ID '{line.product_id}' not found"
            )
        # Only increases can run past the stock a shopper already had.
        if quantity > line.quantity:
            check_advisory_stock(self._ledger, product, quantity)

        line.change_quantity(quantity)
        self._cart_repo.save(line)
        return line_to_dto(line, product)


def load_owned_line(cart_repo: CartRepository, user_id: str, line_id: int) -> CartLine:
    """Fetch a line, treating another user's line as missing."""
    line = cart_repo.get_by_id(line_id)
    if line is None or line.user_id != user_id:
        raise EntityNotFoundError(f"Cart item #{line_id} not found")
    return line
