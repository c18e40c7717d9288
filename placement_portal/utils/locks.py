"""
Keyed locks - one mutex per entity id.

Writers to the same slot (or drive) are serialized while writers to
unrelated entities proceed independently. A key's lock only lives while
some thread holds or waits for it.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, List


class KeyedLock:

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of threads holding or waiting]
        self._locks: Dict[Hashable, List] = {}

    def _acquire_entry(self, key: Hashable) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: Hashable):
        with self._guard:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable):
        """
        Usage:
            with locks.hold(("slot", slot_id)):
                ...
        """
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)
