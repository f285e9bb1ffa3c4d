# Schemas package
from .health import HealthResponse
from .objects import ObjectCreate, ObjectResponse, StatsResponse
from .scans import ScanDecodeRequest, ScanResultResponse

__all__ = [
    "HealthResponse",
    "ObjectCreate",
    "ObjectResponse",
    "ScanDecodeRequest",
    "ScanResultResponse",
    "StatsResponse",
]
