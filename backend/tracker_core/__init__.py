# Tracker core: object registry, QR codec, location simulator, scan correlator
from tracker_core.errors import CameraInitFailure, ProviderTimeout, ProviderUnavailable, TrackerError, ValidationError
from tracker_core.location_simulator import LocationSimulator
from tracker_core.registry import ObjectRegistry
from tracker_core.scan_correlator import Found, UnstructuredScan, ValidNotFound, correlate
from tracker_core.tracked_object import Location, LocationUpdate, ObjectStatus, Position, TrackedObject

__all__ = [
    "CameraInitFailure",
    "Found",
    "Location",
    "LocationSimulator",
    "LocationUpdate",
    "ObjectRegistry",
    "ObjectStatus",
    "Position",
    "ProviderTimeout",
    "ProviderUnavailable",
    "TrackedObject",
    "TrackerError",
    "UnstructuredScan",
    "ValidNotFound",
    "ValidationError",
    "correlate",
]
