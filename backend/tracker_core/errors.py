"""Exception hierarchy for the tracker engine."""
from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all tracker engine errors."""


class ValidationError(TrackerError):
    """Invalid input for object creation (e.g. blank name)."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class ProviderUnavailable(TrackerError):
    """Location provider could not produce a position fix."""


class ProviderTimeout(ProviderUnavailable):
    """Location provider did not answer within the configured timeout."""


class CameraInitFailure(TrackerError):
    """Scan capability failed to start (e.g. camera permission denied)."""
