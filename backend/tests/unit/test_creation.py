"""Unit tests: object creation flow."""
import asyncio
import random

import pytest

from tracker_core import qr_codec
from tracker_core.creation import create_tracked_object
from tracker_core.errors import ValidationError
from tracker_core.geolocation import FALLBACK_ADDRESS, fixed_position
from tracker_core.qr_codec import StructuredMatch
from tracker_core.tracked_object import ObjectStatus, Position

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_create_forklift(registry):
    """New object is active and its payload decodes to its name."""
    obj = await create_tracked_object(registry, "Forklift-1", "Dock 3", fixed_position(Position(lat=1.0, lng=2.0)))
    assert obj.status == ObjectStatus.active
    decoded = qr_codec.decode(obj.qr_payload)
    assert isinstance(decoded, StructuredMatch)
    assert decoded.name == "Forklift-1"
    assert decoded.fields["location"]["address"] == "GPS: 1.000000, 2.000000"


@pytest.mark.asyncio
async def test_provider_timeout_still_creates(registry):
    """A provider that never answers yields a fallback location and an active object."""
    async def never():
        await asyncio.sleep(10)
        return Position(lat=0.0, lng=0.0)

    obj = await create_tracked_object(registry, "Forklift-1", "", never, timeout_s=0.01, rng=random.Random(2))
    assert obj.status == ObjectStatus.active
    assert obj.location.address == FALLBACK_ADDRESS
    assert registry.get(obj.id) is obj


@pytest.mark.asyncio
async def test_blank_name_rejected_before_provider(registry):
    called = []

    async def provider():
        called.append(True)
        return Position(lat=0.0, lng=0.0)

    with pytest.raises(ValidationError):
        await create_tracked_object(registry, "  ", "", provider)
    assert called == []
    assert len(registry) == 0
