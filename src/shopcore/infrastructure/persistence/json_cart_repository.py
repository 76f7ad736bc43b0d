"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path

from shopcore.domain.model.cart import CartLine
from shopcore.domain.repository.cart_repository import CartRepository


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_lock = threading.RLock()
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def get_by_id(self, line_id: int) -> CartLine | None:
        for raw in self._load_raw()["lines"]:
            if raw["id"] == line_id:
                return self._to_domain(raw)
        return None

    def get_by_user_and_product(self, user_id: str, product_id: str) -> CartLine | None:
        for raw in self._load_raw()["lines"]:
            if raw["user_id"] == user_id and raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_by_user(self, user_id: str) -> list[CartLine]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()["lines"]
            if raw["user_id"] == user_id
        ]

    def save(self, line: CartLine) -> None:
        with self._file_lock:
            data = self._load_raw()
            if line.id is None:
                line.id = data["next_id"]
                data["next_id"] += 1

            lines = data["lines"]
            for i, raw in enumerate(lines):
                if raw["id"] == line.id:
                    lines[i] = self._to_raw(line)
                    break
            else:
                lines.append(self._to_raw(line))
            self._persist_raw(data)

    def delete(self, line_id: int) -> None:
        with self._file_lock:
            data = self._load_raw()
            data["lines"] = [raw for raw in data["lines"] if raw["id"] != line_id]
            self._persist_raw(data)

    def delete_by_user(self, user_id: str) -> None:
        with self._file_lock:
            data = self._load_raw()
            data["lines"] = [raw for raw in data["lines"] if raw["user_id"] != user_id]
            self._persist_raw(data)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "id": line.id,
            "user_id": line.user_id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "added_at": line.added_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine(
            id=raw["id"],
            user_id=raw["user_id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            added_at=datetime.fromisoformat(raw["added_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        with self._file_lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, data: dict) -> None:
        self._file_path.write_text(
            json.dumps(data, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps({"next_id": 1, "lines": []}), encoding="utf-8"
            )
