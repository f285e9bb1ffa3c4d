"""Tracked object API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app_state import get_registry, get_simulator
from schemas.objects import (
    LocationOut,
    LocationUpdateOut,
    ObjectCreate,
    ObjectResponse,
    StatsResponse,
    StopAllTrackingResponse,
    TrackingResponse,
    TrackingUpdate,
)
from tracker_core import qr_codec
from tracker_core.creation import create_tracked_object
from tracker_core.errors import ValidationError
from tracker_core.geolocation import fixed_position
from tracker_core.location_simulator import LocationSimulator
from tracker_core.registry import ObjectRegistry
from tracker_core.tracked_object import Position, TrackedObject

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["objects"])


def object_to_response(obj: TrackedObject, registry: ObjectRegistry) -> ObjectResponse:
    """Build ObjectResponse from a registry object."""
    return ObjectResponse(
        id=obj.id,
        name=obj.name,
        description=obj.description,
        qr_payload=obj.qr_payload,
        location=LocationOut(lat=obj.location.lat, lng=obj.location.lng, address=obj.location.address),
        last_update=obj.last_update,
        status=obj.status.value,
        is_tracking=obj.is_tracking,
        history_count=len(registry.history(obj.id)),
    )


def _get_or_404(registry: ObjectRegistry, object_id: str) -> TrackedObject:
    obj = registry.get(object_id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Object not found")
    return obj


@router.get("/objects", response_model=list[ObjectResponse])
def list_objects(q: str | None = None, registry: ObjectRegistry = Depends(get_registry)) -> list[ObjectResponse]:
    """List objects in creation order; q filters by name/description (case-insensitive)."""
    return [object_to_response(o, registry) for o in registry.list_objects(q)]


@router.post("/objects", response_model=ObjectResponse, status_code=status.HTTP_201_CREATED)
async def create_object(
    body: ObjectCreate,
    registry: ObjectRegistry = Depends(get_registry),
) -> ObjectResponse:
    """Create an object and its QR payload. Without a device position a simulated one is used."""
    provider = None
    if body.position is not None:
        provider = fixed_position(Position(lat=body.position.lat, lng=body.position.lng))
    try:
        obj = await create_tracked_object(registry, body.name, body.description, provider)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return object_to_response(obj, registry)


@router.get("/objects/{object_id}", response_model=ObjectResponse)
def get_object(object_id: str, registry: ObjectRegistry = Depends(get_registry)) -> ObjectResponse:
    """Get one object by id."""
    return object_to_response(_get_or_404(registry, object_id), registry)


@router.get("/objects/{object_id}/history", response_model=list[LocationUpdateOut])
def get_history(object_id: str, registry: ObjectRegistry = Depends(get_registry)) -> list[LocationUpdateOut]:
    """Recent simulated fixes for an object, oldest first."""
    _get_or_404(registry, object_id)
    return [
        LocationUpdateOut(lat=u.lat, lng=u.lng, address=u.address, timestamp=u.timestamp)
        for u in registry.history(object_id)
    ]


@router.post("/objects/tracking/stop-all", response_model=StopAllTrackingResponse)
async def stop_all_tracking(
    registry: ObjectRegistry = Depends(get_registry),
    simulator: LocationSimulator = Depends(get_simulator),
) -> StopAllTrackingResponse:
    """Turn tracking off for every object and cancel the tick loop until tracking is enabled again."""
    stopped = registry.stop_all_tracking()
    simulator.stop()
    return StopAllTrackingResponse(stopped=stopped)


@router.post("/objects/{object_id}/tracking", response_model=TrackingResponse)
async def set_tracking(
    object_id: str,
    body: TrackingUpdate,
    registry: ObjectRegistry = Depends(get_registry),
    simulator: LocationSimulator = Depends(get_simulator),
) -> TrackingResponse:
    """Enable or disable simulated GPS movement for an object."""
    if not registry.set_tracking(object_id, body.enabled):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Object not found")
    if body.enabled:
        simulator.start()
    return TrackingResponse(id=object_id, is_tracking=body.enabled)


@router.post("/objects/{object_id}/tracking/toggle", response_model=TrackingResponse)
async def toggle_tracking(
    object_id: str,
    registry: ObjectRegistry = Depends(get_registry),
    simulator: LocationSimulator = Depends(get_simulator),
) -> TrackingResponse:
    """Flip the tracking flag."""
    enabled = registry.toggle_tracking(object_id)
    if enabled is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Object not found")
    if enabled:
        simulator.start()
    return TrackingResponse(id=object_id, is_tracking=enabled)


@router.get(
    "/objects/{object_id}/qr.png",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
def download_qr(object_id: str, registry: ObjectRegistry = Depends(get_registry)) -> Response:
    """PNG of the QR payload stored on the object, as a file download."""
    obj = _get_or_404(registry, object_id)
    png = qr_codec.render_png(obj.qr_payload)
    filename = qr_codec.export_filename(obj.name)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stats", response_model=StatsResponse)
def get_stats(registry: ObjectRegistry = Depends(get_registry)) -> StatsResponse:
    """Counters for the dashboard cards."""
    s = registry.stats()
    return StatsResponse(total=s.total, active=s.active, moving=s.moving, qr_codes=s.qr_codes)
