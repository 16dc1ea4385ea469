"""
User feedback collaborators: notifications (toasts) and haptic pulses.

The defaults only log; a UI host passes its own objects with the same
methods.
"""

import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

# Vibration patterns in ms (on, off, on, ...)
HAPTIC_PATTERNS: Dict[str, Tuple[int, ...]] = {
    'tap': (10,),
    'success': (10, 50, 10),
    'error': (50, 100, 50),
}


class Notifier:
    """Recoverable, user-visible messages."""

    def error(self, message: str) -> None:
        logger.warning(f'[ZoneMap] {message}')

    def success(self, message: str) -> None:
        logger.info(f'[ZoneMap] {message}')


class Haptics:
    """Short vibration pulses on touch devices."""

    def pulse(self, pattern: str) -> None:
        if pattern not in HAPTIC_PATTERNS:
            raise ValueError(f'Unknown haptic pattern: {pattern}')
        logger.debug(f'[ZoneMap] haptic {pattern} {HAPTIC_PATTERNS[pattern]}')


class RecordingNotifier(Notifier):
    """Keeps messages in memory; used by headless hosts and tests."""

    def __init__(self):
        self.errors: List[str] = []
        self.successes: List[str] = []

    def error(self, message: str) -> None:
        super().error(message)
        self.errors.append(message)

    def success(self, message: str) -> None:
        super().success(message)
        self.successes.append(message)


class RecordingHaptics(Haptics):

    def __init__(self):
        self.pulses: List[str] = []

    def pulse(self, pattern: str) -> None:
        super().pulse(pattern)
        self.pulses.append(pattern)
