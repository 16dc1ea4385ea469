"""
Zone map engine exceptions.

All engine errors derive from EngineError so callers can catch the whole
family. None of them is fatal to a map view: the controller turns them into
a refused gesture, a blocked drop or a rollback plus notification.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for zone map engine errors."""


class LayoutError(EngineError, ValueError):
    """A zone layout descriptor is inconsistent."""


class UnknownZoneError(EngineError, KeyError):
    """No layout is registered for the requested zone."""

    def __init__(self, zone: str):
        super().__init__(zone)
        self.zone = zone

    def __str__(self) -> str:
        return f'Unknown zone: {self.zone}'


class InvalidTargetError(EngineError, ValueError):
    """Candidate cell is masked, out of bounds or the entity's own cell."""


class ConcurrentOperationError(EngineError):
    """Gesture start or commit refused while another operation is live."""


class NetworkError(EngineError):
    """
    Commit failed on the wire or was rejected by the remote store.

    Args:
        message: Human readable description
        status: HTTP status code when a response was received
        reason: Machine-readable reason code from the response body
    """

    def __init__(self, message: str, status: Optional[int] = None,
                 reason: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.reason = reason


class CommitTimeoutError(NetworkError):
    """Commit exceeded the hard upper bound, whatever its eventual outcome."""

    def __init__(self, message: str = 'Commit timed out'):
        super().__init__(message, status=None, reason='timeout')
