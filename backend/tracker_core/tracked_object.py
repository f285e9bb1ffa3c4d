"""Tracked object model: identity, QR payload, current location and status."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ObjectStatus(str, Enum):
    """Lifecycle status shown for a tracked object."""
    active = "active"
    inactive = "inactive"  # no transition produces this yet; reserved for admin actions
    moving = "moving"


@dataclass(frozen=True)
class Position:
    """Bare coordinate fix as returned by a location provider."""
    lat: float
    lng: float


@dataclass(frozen=True)
class Location:
    """Best-known position of an object with a display address."""
    lat: float
    lng: float
    address: str

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "address": self.address}


@dataclass(frozen=True)
class LocationUpdate:
    """Single simulated GPS fix kept in an object's history."""
    lat: float
    lng: float
    address: str
    timestamp: datetime

    @property
    def location(self) -> Location:
        return Location(lat=self.lat, lng=self.lng, address=self.address)


class TrackedObject:
    """
    Registered physical object. Owned by ObjectRegistry; only the registry mutates
    location, last_update, status and is_tracking.
    """

    __slots__ = (
        "id",
        "name",
        "description",
        "qr_payload",
        "location",
        "created_at",
        "last_update",
        "status",
        "is_tracking",
    )

    def __init__(
        self,
        id: str,
        name: str,
        location: Location,
        created_at: datetime,
        description: str = "",
        qr_payload: str = "",
        status: ObjectStatus = ObjectStatus.active,
    ) -> None:
        self.id = id
        self.name = name
        self.description = description or ""
        self.qr_payload = qr_payload
        self.location = location
        self.created_at = created_at
        self.last_update = created_at
        self.status = status
        self.is_tracking = False

    def matches(self, term: Optional[str]) -> bool:
        """Case-insensitive substring match over name and description. Blank term matches all."""
        if not term:
            return True
        needle = term.lower()
        return needle in self.name.lower() or needle in self.description.lower()

    def __repr__(self) -> str:
        return f"TrackedObject(id={self.id!r}, name={self.name!r}, status={self.status.value!r})"
