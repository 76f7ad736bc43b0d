"""Abstract repository for CartLine entities.

Lines are owned by a user and looked up either by their own ID or by the
(user, product) pair they are unique on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.model.cart import CartLine


class CartRepository(ABC):

    @abstractmethod
    def get_by_id(self, line_id: int) -> CartLine | None:
        """Return a cart line by its ID, or None."""

    @abstractmethod
    def get_by_user_and_product(self, user_id: str, product_id: str) -> CartLine | None:
        """Return the user's line for a product, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[CartLine]:
        """Return a user's lines in the order they were first added."""

    @abstractmethod
    def save(self, line: CartLine) -> None:
        """Persist a new or updated line.  Assigns ``line.id`` if unset."""

    @abstractmethod
    def delete(self, line_id: int) -> None:
        """Remove a line.  Missing lines are ignored."""

    @abstractmethod
    def delete_by_user(self, user_id: str) -> None:
        """Remove every line belonging to a user."""
