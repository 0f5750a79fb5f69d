"""In-process advisory locks for development and tests."""

import threading
from contextlib import contextmanager

from pickup.locks.port import AdvisoryLocks


class InMemoryLocks(AdvisoryLocks):
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self.acquisitions: list[str] = []

    def _lock_for(self, name: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(name, threading.Lock())

    def is_held(self, name: str) -> bool:
        return self._lock_for(name).locked()

    @contextmanager
    def hold(self, name: str):
        lock = self._lock_for(name)
        acquired = lock.acquire(blocking=False)
        if acquired:
            self.acquisitions.append(name)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()
