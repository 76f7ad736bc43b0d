"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Repositories, the ledger and the lock registries are built once per data
directory so that every handler in the process shares the same locks.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from shopcore.domain.service.inventory_ledger import InventoryLedger
from shopcore.domain.service.locks import KeyedLocks
from shopcore.infrastructure.config import load_settings
from shopcore.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from shopcore.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from shopcore.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from shopcore.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def _data_dir() -> Path:
    return load_settings().data_dir


def product_repository() -> JsonProductRepository:
    return _product_repository(_data_dir())


def inventory_repository() -> JsonInventoryRepository:
    return _inventory_repository(_data_dir())


def order_repository() -> JsonOrderRepository:
    return _order_repository(_data_dir())


def cart_repository() -> JsonCartRepository:
    return _cart_repository(_data_dir())


def inventory_ledger() -> InventoryLedger:
    return _inventory_ledger(_data_dir())


def user_locks() -> KeyedLocks:
    return _user_locks(_data_dir())


def order_locks() -> KeyedLocks:
    return _order_locks(_data_dir())


def reset() -> None:
    """Forget every cached component (used when the data directory changes)."""
    for factory in (
        _product_repository,
        _inventory_repository,
        _order_repository,
        _cart_repository,
        _inventory_ledger,
        _user_locks,
        _order_locks,
    ):
        factory.cache_clear()


@lru_cache(maxsize=None)
def _product_repository(data_dir: Path) -> JsonProductRepository:
    return JsonProductRepository(data_dir / "products.json")


@lru_cache(maxsize=None)
def _inventory_repository(data_dir: Path) -> JsonInventoryRepository:
    return JsonInventoryRepository(data_dir / "inventory.json")


@lru_cache(maxsize=None)
def _order_repository(data_dir: Path) -> JsonOrderRepository:
    return JsonOrderRepository(data_dir / "orders.json")


@lru_cache(maxsize=None)
def _cart_repository(data_dir: Path) -> JsonCartRepository:
    return JsonCartRepository(data_dir / "carts.json")


@lru_cache(maxsize=None)
def _inventory_ledger(data_dir: Path) -> InventoryLedger:
    return InventoryLedger(_inventory_repository(data_dir), KeyedLocks())


@lru_cache(maxsize=None)
def _user_locks(data_dir: Path) -> KeyedLocks:
    return KeyedLocks()


@lru_cache(maxsize=None)
def _order_locks(data_dir: Path) -> KeyedLocks:
    return KeyedLocks()
