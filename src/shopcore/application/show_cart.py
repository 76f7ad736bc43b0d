"""Application service: Show Cart use case (query).

The cart total is a live re-price: it uses each product's *current*
price, so it moves when the catalog changes.  Orders, by contrast, keep
the price they were placed at.
"""

from __future__ import annotations

from shopcore.application.dto import CartDTO, CartLineDTO
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.cart import CartLine
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.product_repository import ProductRepository


class ShowCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, user_id: str) -> CartDTO:
        total = Money.zero()
        lines: list[CartLineDTO] = []
        for line in self._cart_repo.list_by_user(user_id):
            product = self._product_for(line)
            total = total + product.price * line.quantity
            lines.append(line_to_dto(line, product))
        return CartDTO(user_id=user_id, lines=lines, total=str(total))

    def total(self, user_id: str) -> Money:
        total = Money.zero()
        for line in self._cart_repo.list_by_user(user_id):
            total = total + self._product_for(line).price * line.quantity
        return total

    def count(self, user_id: str) -> int:
        return len(self._cart_repo.list_by_user(user_id))

    def contains(self, user_id: str, product_id: str) -> bool:
        return self._cart_repo.get_by_user_and_product(user_id, product_id) is not None

    def _product_for(self, line: CartLine) -> Product:
        product = self._product_repo.get_by_id(line.product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product with ID '{line.product_id}' not found"
            )
        return product


def line_to_dto(line: CartLine, product: Product) -> CartLineDTO:
    return CartLineDTO(
        id=line.id,  # type: ignore[arg-type]
        product_id=product.id,
        product_name=product.name,
        quantity=line.quantity,
        unit_price=str(product.price),
        line_total=str(product.price * line.quantity),
    )
