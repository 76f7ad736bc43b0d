"""Application service: Remove From Cart / Clear Cart use cases."""

from __future__ import annotations

from shopcore.application.update_cart_line import load_owned_line
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.service.locks import KeyedLocks


class RemoveFromCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        user_locks: KeyedLocks,
    ) -> None:
        self._cart_repo = cart_repo
        self._user_locks = user_locks

    def handle(self, user_id: str, line_id: int) -> None:
        with self._user_locks.hold(user_id):
            line = load_owned_line(self._cart_repo, user_id, line_id)
            self._cart_repo.delete(line.id)  # type: ignore[arg-type]

    def remove_product(self, user_id: str, product_id: str) -> None:
        with self._user_locks.hold(user_id):
            line = self._cart_repo.get_by_user_and_product(user_id, product_id)
            if line is None:
                raise EntityNotFoundError(
                    f"Product with ID '{product_id}' is not in the cart"
                )
            self._cart_repo.delete(line.id)  # type: ignore[arg-type]


class ClearCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        user_locks: KeyedLocks,
    ) -> None:
        self._cart_repo = cart_repo
        self._user_locks = user_locks

    def handle(self, user_id: str) -> None:
        with self._user_locks.hold(user_id):
            self._cart_repo.delete_by_user(user_id)
