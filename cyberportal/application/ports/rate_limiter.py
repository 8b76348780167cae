from typing import Protocol


class RateLimiter(Protocol):
    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """Record a hit for ``key``; False once it exceeds ``max_requests`` inside the window."""
        ...
