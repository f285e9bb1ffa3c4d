"""In-memory object registry: single source of truth for tracked objects, tracking flags and history."""
from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from tracker_core import qr_codec
from tracker_core.errors import ValidationError
from tracker_core.tracked_object import Location, LocationUpdate, ObjectStatus, TrackedObject
from utils.config import HISTORY_LIMIT

LOG = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class RegistryStats:
    """Dashboard counters."""
    total: int
    active: int  # active or moving
    moving: int
    qr_codes: int


class ObjectRegistry:
    """
    Ordered collection of TrackedObject keyed by id (insertion order kept for listing).
    Per-object history is a FIFO bounded to history_limit entries; oldest entries drop first.
    All mutation methods are synchronous so a caller never observes a half-applied change.
    """

    def __init__(
        self,
        *,
        history_limit: int = HISTORY_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be >= 1")
        self._history_limit = history_limit
        self._clock = clock
        self._id_factory = id_factory
        self._objects: dict[str, TrackedObject] = {}
        self._history: dict[str, deque[LocationUpdate]] = {}
        # Every id handed out in this process, so ids are never reused.
        self._issued_ids: set[str] = set()

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._objects

    def _next_id(self) -> str:
        object_id = self._id_factory()
        while object_id in self._issued_ids:
            object_id = self._id_factory()
        self._issued_ids.add(object_id)
        return object_id

    def create(
        self,
        name: str,
        description: Optional[str],
        initial_location: Location,
    ) -> TrackedObject:
        """
        Register a new object: fresh id, status active, not tracking, QR payload encoded from
        the creation-time state. Raises ValidationError on a blank name; nothing is stored then.
        """
        if name is None or not str(name).strip():
            raise ValidationError("name must not be empty", field="name")
        obj = TrackedObject(
            id=self._next_id(),
            name=name,
            description=description or "",
            location=initial_location,
            created_at=self._clock(),
        )
        obj.qr_payload = qr_codec.encode(obj)
        self._objects[obj.id] = obj
        self._history[obj.id] = deque(maxlen=self._history_limit)
        LOG.info("Registered object %s (%s) at %s", obj.id, obj.name, initial_location.address)
        return obj

    def get(self, object_id: str) -> Optional[TrackedObject]:
        """Get object by id or None."""
        return self._objects.get(object_id)

    def list_objects(self, filter_text: Optional[str] = None) -> list[TrackedObject]:
        """All objects in insertion order, optionally filtered by name/description substring."""
        return [obj for obj in self._objects.values() if obj.matches(filter_text)]

    def tracked_objects(self) -> list[TrackedObject]:
        """Objects whose tracking flag is on, in insertion order."""
        return [obj for obj in self._objects.values() if obj.is_tracking]

    def update_location(self, object_id: str, location: Location, timestamp: datetime) -> bool:
        """Move object to location and mark it moving. Returns False (no-op) for unknown id."""
        obj = self._objects.get(object_id)
        if obj is None:
            return False
        obj.location = location
        obj.last_update = timestamp
        obj.status = ObjectStatus.moving
        return True

    def set_tracking(self, object_id: str, enabled: bool) -> bool:
        """Set tracking flag. Status is left alone. Returns False for unknown id."""
        obj = self._objects.get(object_id)
        if obj is None:
            return False
        if obj.is_tracking != bool(enabled):
            LOG.info("Tracking %s for object %s", "enabled" if enabled else "disabled", object_id)
        obj.is_tracking = bool(enabled)
        return True

    def toggle_tracking(self, object_id: str) -> Optional[bool]:
        """Flip tracking flag; returns the new value or None for unknown id."""
        obj = self._objects.get(object_id)
        if obj is None:
            return None
        self.set_tracking(object_id, not obj.is_tracking)
        return obj.is_tracking

    def stop_all_tracking(self) -> int:
        """Turn tracking off for every object. Returns how many were tracking."""
        stopped = 0
        for obj in self._objects.values():
            if obj.is_tracking:
                obj.is_tracking = False
                stopped += 1
        if stopped:
            LOG.info("Stopped tracking for %d object(s)", stopped)
        return stopped

    def append_history(self, object_id: str, update: LocationUpdate) -> bool:
        """Append a fix to the object's history, evicting the oldest at capacity."""
        history = self._history.get(object_id)
        if history is None:
            return False
        history.append(update)
        return True

    def history(self, object_id: str) -> list[LocationUpdate]:
        """Copy of the object's history, oldest first. Empty for unknown id."""
        return list(self._history.get(object_id, ()))

    def stats(self) -> RegistryStats:
        objects = list(self._objects.values())
        return RegistryStats(
            total=len(objects),
            active=sum(1 for o in objects if o.status in (ObjectStatus.active, ObjectStatus.moving)),
            moving=sum(1 for o in objects if o.status == ObjectStatus.moving),
            qr_codes=sum(1 for o in objects if o.qr_payload),
        )
