"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from shopcore.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest first."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus) -> list[Order]:
        """Return every order currently in ``status``, newest first."""

    @abstractmethod
    def list_between(self, start: datetime, end: datetime) -> list[Order]:
        """Return orders created between ``start`` and ``end`` inclusive, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.  Assigns ``order.id`` if unset."""
