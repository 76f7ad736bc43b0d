"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from shopcore.domain.model.order import Order, OrderItem, OrderStatus
from shopcore.domain.model.value_objects import Money, Quantity
from shopcore.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_lock = threading.RLock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return _newest_first(self._to_domain(raw) for raw in self._load_raw())

    def list_by_user(self, user_id: str) -> list[Order]:
        return _newest_first(
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["user_id"] == user_id
        )

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        return _newest_first(
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["status"] == status.value
        )

    def list_between(self, start: datetime, end: datetime) -> list[Order]:
        return _newest_first(
            order
            for order in (self._to_domain(raw) for raw in self._load_raw())
            if start <= order.created_at <= end
        )

    def save(self, order: Order) -> None:
        with self._file_lock:
            orders = self._load_raw()

            if order.id is None:
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    replaced = True
                    break
            if not replaced:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),
            "currency": order.total_amount.currency,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat() if order.updated_at else None,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = tuple(
            OrderItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
            )
            for i in raw["items"]
        )
        updated_at = raw.get("updated_at")
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            items=items,
            total_amount=Money(
                Decimal(raw["total_amount"]), raw.get("currency", "USD")
            ),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._file_lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _newest_first(orders) -> list[Order]:
    return sorted(orders, key=lambda o: (o.created_at, o.id or 0), reverse=True)
