"""Per-key mutual exclusion.

A ``KeyedLocks`` hands out one lock per key (product ID, user ID, order ID)
so that unrelated keys never contend with each other.

Locks only exclude callers that share the same registry.  Handlers take
the registry as a required argument; the composition root builds one per
kind of key and passes it to every handler.

Entries are weakly held: a key's lock lives while someone holds it, and is
dropped from the registry afterwards.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Hashable, Iterable, Iterator
from contextlib import ExitStack, contextmanager


class KeyedLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        """Number of keys whose lock is currently alive."""
        with self._guard:
            return len(self._locks)

    def lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self.lock_for(key):
            yield

    @contextmanager
    def hold_all(self, keys: Iterable[Hashable]) -> Iterator[None]:
        """Acquire several keys in sorted order so callers cannot deadlock."""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.lock_for(key))
            yield
