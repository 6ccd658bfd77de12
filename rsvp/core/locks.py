"""
Per-group critical sections for read-modify-write roster operations
"""

import threading
import weakref
from contextlib import contextmanager
from typing import Hashable, Iterator


class GroupLockRegistry:
    """Hands out one mutex per group id.

    Locks live only while someone holds a reference, so the registry does
    not grow with the number of groups ever touched.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[Hashable, threading.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, group_id: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(group_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[group_id] = lock
            return lock

    @contextmanager
    def hold(self, group_id: Hashable) -> Iterator[None]:
        lock = self._lock_for(group_id)
        with lock:
            yield


group_locks = GroupLockRegistry()
