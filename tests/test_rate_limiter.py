from cyberportal.infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter


class Ticker:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_memory_rate_limiter_allows_then_blocks():
    rl = InMemoryRateLimiter()
    key = "k1"
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is True
    assert rl.allow(key, max_requests=2, window_seconds=60) is False
    assert rl.allow("k2", max_requests=2, window_seconds=60) is True


def test_memory_rate_limiter_window_slides():
    ticker = Ticker()
    rl = InMemoryRateLimiter(clock=ticker)
    assert rl.allow("ip", 1, 60) is True
    ticker.now += 30
    assert rl.allow("ip", 1, 60) is False
    ticker.now += 31
    assert rl.allow("ip", 1, 60) is True
