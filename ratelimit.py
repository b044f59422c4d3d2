import time
from typing import Callable, Dict, Tuple

from fastapi import Request

from errors import RateLimited


class FixedWindowLimiter:
    """Per-client request counter over fixed wall-clock windows.

    Windows start at multiples of ``window_seconds`` since the epoch, so every
    client's count resets at the same instant.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: int = 60,
        message: str = "Too many requests, try again later.",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self.clock = clock
        self._counts: Dict[str, Tuple[int, int]] = {}

    def hit(self, key: str) -> bool:
        window = int(self.clock() // self.window_seconds)
        current, count = self._counts.get(key, (window, 0))
        if current != window:
            count = 0
        count += 1
        self._counts[key] = (window, count)
        if len(self._counts) > 10_000:
            self._counts = {k: v for k, v in self._counts.items() if v[0] == window}
        return count <= self.limit

    def reset(self) -> None:
        self._counts.clear()

    def __call__(self, request: Request) -> None:
        key = request.client.host if request.client else "unknown"
        if not self.hit(key):
            raise RateLimited(self.message)
