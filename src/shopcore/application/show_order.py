"""Application service: Show Order use cases (queries)."""

from __future__ import annotations

from datetime import datetime, timezone

from shopcore.application.dto import OrderDTO, order_to_dto
from shopcore.application.set_order_status import parse_status
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)

    def list_by_user(self, user_id: str) -> list[OrderDTO]:
        return [order_to_dto(o) for o in self._order_repo.list_by_user(user_id)]

    def list_all(self) -> list[OrderDTO]:
        return [order_to_dto(o) for o in self._order_repo.list_all()]

    def list_by_status(self, status: OrderStatus | str) -> list[OrderDTO]:
        return [
            order_to_dto(o)
            for o in self._order_repo.list_by_status(parse_status(status))
        ]

    def count_by_user(self, user_id: str) -> int:
        return len(self._order_repo.list_by_user(user_id))

    def list_between(self, start: datetime, end: datetime) -> list[OrderDTO]:
        """Orders created in ``[start, end]``.  Naive datetimes are taken as UTC."""
        start, end = _as_utc(start), _as_utc(end)
        if start > end:
            raise ValidationError("Start of the date range must not be after its end")
        return [order_to_dto(o) for o in self._order_repo.list_between(start, end)]


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
