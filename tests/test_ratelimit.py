import pytest

from errors import RateLimited
from ratelimit import FixedWindowLimiter


class FakeClock:
    def __init__(self, now: float = 1_000_020.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeRequest:
    def __init__(self, host: str) -> None:
        self.client = type("Client", (), {"host": host})()


def test_allows_up_to_limit_then_rejects():
    limiter = FixedWindowLimiter(3, 60, clock=FakeClock())

    assert [limiter.hit("10.0.0.1") for _ in range(4)] == [True, True, True, False]


def test_clients_are_counted_separately():
    limiter = FixedWindowLimiter(1, 60, clock=FakeClock())

    assert limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.2")
    assert not limiter.hit("10.0.0.1")


def test_count_resets_on_window_boundary():
    clock = FakeClock(now=119.0)
    limiter = FixedWindowLimiter(1, 60, clock=clock)
    assert limiter.hit("a")
    assert not limiter.hit("a")

    clock.now = 120.0

    assert limiter.hit("a")


def test_reset_clears_counts():
    limiter = FixedWindowLimiter(1, 60, clock=FakeClock())
    limiter.hit("a")

    limiter.reset()

    assert limiter.hit("a")


def test_dependency_raises_with_configured_message():
    limiter = FixedWindowLimiter(1, 60, message="Slow down", clock=FakeClock())
    request = FakeRequest("10.0.0.9")
    limiter(request)

    with pytest.raises(RateLimited) as excinfo:
        limiter(request)

    assert excinfo.value.status_code == 429
    assert excinfo.value.message == "Slow down"
