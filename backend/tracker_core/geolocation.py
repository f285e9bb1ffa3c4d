"""Initial location for new objects: one-shot provider fix with timeout, else a simulated fallback."""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

from tracker_core.errors import ProviderTimeout, ProviderUnavailable
from tracker_core.tracked_object import Location, Position
from utils.config import GEOLOCATION_TIMEOUT_S

LOG = logging.getLogger(__name__)

# Fallback region: São Paulo city centre, jittered per object.
FALLBACK_LAT = -23.5505
FALLBACK_LNG = -46.6333
FALLBACK_JITTER_DEG = 0.05
FALLBACK_ADDRESS = "São Paulo, SP, Brasil"

LocationProvider = Callable[[], Awaitable[Position]]


def fixed_position(position: Position) -> LocationProvider:
    """Provider that answers with a fix already known (e.g. sent by the client device)."""
    async def provider() -> Position:
        return position
    return provider


def fallback_location(rng: random.Random) -> Location:
    """Random point within the fallback region."""
    return Location(
        lat=FALLBACK_LAT + rng.uniform(-FALLBACK_JITTER_DEG, FALLBACK_JITTER_DEG),
        lng=FALLBACK_LNG + rng.uniform(-FALLBACK_JITTER_DEG, FALLBACK_JITTER_DEG),
        address=FALLBACK_ADDRESS,
    )


def gps_location(position: Position) -> Location:
    return Location(
        lat=position.lat,
        lng=position.lng,
        address=f"GPS: {position.lat:.6f}, {position.lng:.6f}",
    )


async def fetch_position(provider: LocationProvider, timeout_s: float) -> Position:
    """Await provider for at most timeout_s. Raises ProviderTimeout / ProviderUnavailable."""
    try:
        return await asyncio.wait_for(provider(), timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise ProviderTimeout(f"no position fix within {timeout_s}s") from exc
    except ProviderUnavailable:
        raise
    except Exception as exc:
        raise ProviderUnavailable(str(exc) or exc.__class__.__name__) from exc


async def resolve_initial_location(
    provider: Optional[LocationProvider],
    *,
    timeout_s: float = GEOLOCATION_TIMEOUT_S,
    rng: Optional[random.Random] = None,
) -> Location:
    """Location for a new object. Never raises for provider problems; falls back instead."""
    rng = rng if rng is not None else random.Random()
    if provider is None:
        LOG.info("GPS not available, using simulated location")
        return fallback_location(rng)
    try:
        position = await fetch_position(provider, timeout_s)
    except ProviderUnavailable as exc:
        LOG.info("GPS not available (%s), using simulated location", exc)
        return fallback_location(rng)
    return gps_location(position)
