"""
Viewport primitives: container size, pointer points, device class and the
debounced resize sensor feeding the projector.
"""

import logging
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

DEFAULT_MOBILE_BREAKPOINT = 768
DEFAULT_RESIZE_DEBOUNCE_MS = 300


class ContainerSize(NamedTuple):
    width: float
    height: float


class Point(NamedTuple):
    """Container-relative pixel position."""

    x: float
    y: float


def is_mobile_width(width: float, breakpoint: int = DEFAULT_MOBILE_BREAKPOINT) -> bool:
    """Device class used by the projector: narrower than the breakpoint is mobile."""
    return width < breakpoint


class ResizeDebouncer:
    """
    Trailing-edge debounce for container size reports.

    Reports arriving within delay_ms of each other collapse into one; the
    last reported size becomes current once the container has been quiet
    for delay_ms.

    Args:
        initial: Size in effect before any report
        delay_ms: Quiet period before a reported size is applied
    """

    def __init__(self, initial: ContainerSize,
                 delay_ms: float = DEFAULT_RESIZE_DEBOUNCE_MS):
        self.delay_ms = delay_ms
        self._current = ContainerSize(*initial)
        self._pending: Optional[ContainerSize] = None
        self._pending_at = 0.0

    def report(self, size: ContainerSize, now: float) -> None:
        self._pending = ContainerSize(*size)
        self._pending_at = now

    def poll(self, now: float) -> Optional[ContainerSize]:
        """
        Apply a pending size whose quiet period has elapsed.

        Returns:
            The newly applied size, or None if nothing changed
        """
        if self._pending is None or now - self._pending_at < self.delay_ms:
            return None
        applied, self._pending = self._pending, None
        if applied == self._current:
            return None
        logger.debug(f'[ZoneMap] container resized to {applied.width}x{applied.height}')
        self._current = applied
        return applied

    @property
    def current(self) -> ContainerSize:
        return self._current

    @property
    def has_pending(self) -> bool:
        return self._pending is not None
