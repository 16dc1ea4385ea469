"""Clock and throttling helpers. All engine times are milliseconds."""

import time
from typing import Callable

Clock = Callable[[], float]

DEFAULT_THROTTLE_MS = 16


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Throttle:
    """
    Leading-edge throttle with a remembered trailing call.

    ready() says whether work may run now; a refused call is recorded as
    pending so the caller can flush it later (for example on drop).
    """

    def __init__(self, interval_ms: float = DEFAULT_THROTTLE_MS):
        self.interval_ms = interval_ms
        self._last_run = None
        self.pending = False

    def ready(self, now: float) -> bool:
        if self._last_run is None or now - self._last_run >= self.interval_ms:
            self._last_run = now
            self.pending = False
            return True
        self.pending = True
        return False

    def mark_run(self, now: float) -> None:
        self._last_run = now
        self.pending = False

    def reset(self) -> None:
        self._last_run = None
        self.pending = False
