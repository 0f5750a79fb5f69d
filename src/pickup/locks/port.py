"""Advisory lock port: named, cooperative, non-blocking locks."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager


class AdvisoryLocks(ABC):
    @abstractmethod
    def hold(self, name: str) -> AbstractContextManager[bool]:
        """Try to take ``name`` without waiting.

        Yields True when this caller holds the lock and False when someone
        else does. A lock taken here is released when the block exits,
        whether it returns or raises.
        """
        ...
