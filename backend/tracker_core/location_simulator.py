"""Location simulator: fixed-cadence asyncio loop that random-walks tracked objects (GPS simulation)."""
from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional

from tracker_core.registry import ObjectRegistry
from tracker_core.tracked_object import Location, LocationUpdate, TrackedObject
from utils.config import TICK_INTERVAL_S

LOG = logging.getLogger(__name__)

# Max per-axis step in degrees; each tick moves lat and lng by uniform(-STEP, +STEP).
MAX_STEP_DEG = 0.0005


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_address(lat: float, lng: float) -> str:
    """Display address for simulated coordinates (no geocoding)."""
    return f"Lat: {lat:.6f}, Lng: {lng:.6f}"


def perturb(location: Location, rng: random.Random, max_step: float = MAX_STEP_DEG) -> Location:
    """Independent symmetric random step on each axis."""
    lat = location.lat + rng.uniform(-max_step, max_step)
    lng = location.lng + rng.uniform(-max_step, max_step)
    return Location(lat=lat, lng=lng, address=format_address(lat, lng))


class LocationSimulator:
    """
    Moves every object with tracking enabled once per interval and records the fix in its
    history. tick() is synchronous, so one tick's updates land as a single batch between
    other coroutines. start()/stop() manage one background task; stop() is idempotent.
    """

    def __init__(
        self,
        registry: ObjectRegistry,
        *,
        interval_s: float = TICK_INTERVAL_S,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        max_step: float = MAX_STEP_DEG,
    ) -> None:
        self.registry = registry
        self.interval_s = interval_s
        self.max_step = max_step
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self.tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _advance(self, obj: TrackedObject, now: datetime) -> None:
        location = perturb(obj.location, self._rng, self.max_step)
        # History timestamps never go backwards even if the wall clock does.
        timestamp = max(now, obj.last_update)
        self.registry.update_location(obj.id, location, timestamp)
        self.registry.append_history(
            obj.id,
            LocationUpdate(lat=location.lat, lng=location.lng, address=location.address, timestamp=timestamp),
        )

    def tick(self) -> int:
        """Advance all tracked objects once. Returns the number of objects updated."""
        now = self._clock()
        updated = 0
        for obj in self.registry.tracked_objects():
            try:
                self._advance(obj, now)
                updated += 1
            except Exception:
                LOG.exception("Simulator: skipping object %s on this tick", obj.id)
        self.tick_count += 1
        return updated

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_s)
            except asyncio.TimeoutError:
                pass
            if stop_event.is_set():
                break
            self.tick()

    def start(self) -> asyncio.Task:
        """Schedule the tick loop on the running event loop (no-op if already running)."""
        if self.is_running:
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event))
        LOG.info("Location simulator started (interval %.1fs)", self.interval_s)
        return self._task

    def stop(self) -> None:
        """Cancel the tick loop; no tick fires after this returns. Safe when not running."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
                LOG.info("Location simulator stopped")
            self._task = None
        self._stop_event = None
