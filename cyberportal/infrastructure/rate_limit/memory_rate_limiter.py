import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding-window limiter for a single process."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._clock = clock

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        now = self._clock()
        window_start = now - window_seconds
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= max_requests:
                return False
            hits.append(now)
            return True
