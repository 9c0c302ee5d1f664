"""Single-slot, time-boxed cache for the latest transaction snapshot"""

import time
from typing import Callable, Generic, List, Optional, TypeVar

from budget_notifier.config import settings

T = TypeVar("T")


class TransactionCache(Generic[T]):
    """Holds one snapshot; it is served until ttl_seconds have passed"""

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = settings.transaction_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._data: Optional[List[T]] = None
        self._stored_at = 0.0

    def get(self) -> Optional[List[T]]:
        """Cached snapshot, or None when empty or stale"""
        if self._data is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._data

    def put(self, data: List[T]) -> None:
        self._data = list(data)
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._data = None
