"""Pydantic schemas for tracked object API."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PositionIn(BaseModel):
    """Device position fix sent with a create request."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class ObjectCreate(BaseModel):
    """Payload for creating a tracked object. Blank names are rejected by the registry."""

    name: str
    description: str = ""
    position: PositionIn | None = None


class LocationOut(BaseModel):
    lat: float
    lng: float
    address: str


class ObjectResponse(BaseModel):
    """Tracked object in list/detail responses."""

    id: str
    name: str
    description: str
    qr_payload: str
    location: LocationOut
    last_update: datetime
    status: Literal["active", "inactive", "moving"]
    is_tracking: bool = False
    history_count: int = 0


class LocationUpdateOut(BaseModel):
    lat: float
    lng: float
    address: str
    timestamp: datetime


class TrackingUpdate(BaseModel):
    """Payload for setting the tracking flag."""

    enabled: bool


class TrackingResponse(BaseModel):
    id: str
    is_tracking: bool


class StopAllTrackingResponse(BaseModel):
    stopped: int


class StatsResponse(BaseModel):
    """Dashboard counters."""

    total: int
    active: int
    moving: int
    qr_codes: int
