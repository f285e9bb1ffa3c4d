"""Scan API routes: correlate text decoded by the client-side scanner."""
import logging

from fastapi import APIRouter, Depends

from api.objects import object_to_response
from app_state import get_registry
from schemas.scans import ScanDecodeRequest, ScanResultResponse
from tracker_core import qr_codec
from tracker_core.registry import ObjectRegistry
from tracker_core.scan_correlator import Found, correlate

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/scans", tags=["scans"])


@router.post("/decode", response_model=ScanResultResponse)
def decode_scan(body: ScanDecodeRequest, registry: ObjectRegistry = Depends(get_registry)) -> ScanResultResponse:
    """Classify scanned text and resolve it to a registered object when possible."""
    result = correlate(qr_codec.decode(body.text), registry)
    LOG.info("Scan correlated: %s", result.kind)
    return ScanResultResponse(
        kind=result.kind,
        raw_text=result.raw_text,
        message=result.message,
        object=object_to_response(result.object, registry) if isinstance(result, Found) else None,
    )
