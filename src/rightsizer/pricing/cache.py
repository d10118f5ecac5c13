"""Thread-safe TTL cache for pricing lookups."""

import threading
import time
from datetime import timedelta
from typing import Callable, Dict, Optional, Tuple, Union

from rightsizer.models.recommendation import CostInfo


class PriceCache:
    """Keeps CostInfo entries for a fixed time-to-live."""

    def __init__(self, ttl: Union[float, timedelta] = timedelta(hours=24),
                 clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        self._clock = clock
        self._data: Dict[str, Tuple[CostInfo, float]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[CostInfo]:
        """Return a live entry or None; an expired entry is evicted."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None

            cost_info, expires_at = entry
            if self._clock() > expires_at:
                del self._data[key]
                return None

            return cost_info

    def set(self, key: str, cost_info: CostInfo) -> None:
        with self._lock:
            self._data[key] = (cost_info, self._clock() + self.ttl)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
