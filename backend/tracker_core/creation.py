"""Object creation flow: validate, resolve initial location, register."""
from __future__ import annotations

import random
from typing import Optional

from tracker_core.errors import ValidationError
from tracker_core.geolocation import LocationProvider, resolve_initial_location
from tracker_core.registry import ObjectRegistry
from tracker_core.tracked_object import TrackedObject
from utils.config import GEOLOCATION_TIMEOUT_S


async def create_tracked_object(
    registry: ObjectRegistry,
    name: str,
    description: Optional[str] = "",
    provider: Optional[LocationProvider] = None,
    *,
    timeout_s: float = GEOLOCATION_TIMEOUT_S,
    rng: Optional[random.Random] = None,
) -> TrackedObject:
    """
    Create and register an object. The name is checked before awaiting the provider so an
    invalid request never waits on it; registration itself is one synchronous step after the
    await, so a concurrent simulator tick sees either the whole object or nothing.
    """
    if name is None or not name.strip():
        raise ValidationError("name must not be empty", field="name")
    location = await resolve_initial_location(provider, timeout_s=timeout_s, rng=rng)
    return registry.create(name, description, location)
