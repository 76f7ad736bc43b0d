"""Application service: Sales reports (read-only aggregation queries).

Revenue counts CONFIRMED orders only.  Best-sellers sum units across
every order that was not cancelled.
"""

from __future__ import annotations

from collections import defaultdict

from shopcore.application.dto import BestSellerDTO
from shopcore.domain.model.order import Order, OrderStatus
from shopcore.domain.model.value_objects import Money
from shopcore.domain.repository.order_repository import OrderRepository


class SalesReportHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def total_revenue(self) -> Money:
        return _sum_totals(self._order_repo.list_by_status(OrderStatus.CONFIRMED))

    def total_spent_by(self, user_id: str) -> Money:
        return _sum_totals(
            o
            for o in self._order_repo.list_by_user(user_id)
            if o.status == OrderStatus.CONFIRMED
        )

    def best_selling_products(self, limit: int | None = None) -> list[BestSellerDTO]:
        units: dict[str, int] = defaultdict(int)
        names: dict[str, str] = {}
        for order in self._order_repo.list_all():
            if order.status == OrderStatus.CANCELLED:
                continue
            for item in order.items:
                units[item.product_id] += item.quantity.value
                names.setdefault(item.product_id, item.product_name)

        ranked = sorted(units.items(), key=lambda kv: (-kv[1], kv[0]))
        if limit is not None:
            ranked = ranked[:limit]
        return [
            BestSellerDTO(product_id=pid, product_name=names[pid], units_sold=qty)
            for pid, qty in ranked
        ]

    def product_sales_count(self, product_id: str) -> int:
        """Number of order lines (not units) that included the product."""
        return sum(
            1
            for order in self._order_repo.list_all()
            for item in order.items
            if item.product_id == product_id
        )


def _sum_totals(orders) -> Money:
    total = Money.zero()
    for order in orders:
        total = total + order.total_amount
    return total
