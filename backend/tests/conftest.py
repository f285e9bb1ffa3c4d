"""Shared fixtures: fresh registry, deterministic clock and random source, API client."""
from datetime import datetime, timedelta, timezone
import random

import pytest
from fastapi.testclient import TestClient

from app_state import get_registry, get_simulator
from main import app
from tracker_core.location_simulator import LocationSimulator
from tracker_core.registry import ObjectRegistry
from tracker_core.tracked_object import Location


class FakeClock:
    """Deterministic clock: each call returns a time one step after the previous one."""

    def __init__(self, start: datetime | None = None, step_s: float = 3.0) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = timedelta(seconds=step_s)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    """Seeded random source so simulated movement is reproducible."""
    return random.Random(1234)


@pytest.fixture
def registry(clock):
    """Fresh registry per test."""
    return ObjectRegistry(clock=clock)


@pytest.fixture
def sample_location():
    return Location(lat=-23.55, lng=-46.63, address="GPS: -23.550000, -46.630000")


@pytest.fixture
def simulator(registry, rng, clock):
    """Simulator bound to the test registry; long interval so ticks only happen when a test calls tick()."""
    return LocationSimulator(registry, interval_s=3600.0, rng=rng, clock=clock)


@pytest.fixture
def client(registry, simulator):
    """API test client bound to the test registry and simulator; overrides cleared on teardown."""
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_simulator] = lambda: simulator
    try:
        with TestClient(app) as c:
            yield c
            c.portal.call(simulator.stop)
    finally:
        app.dependency_overrides.clear()
