"""Pydantic schemas for scan correlation API."""
from typing import Literal

from pydantic import BaseModel

from .objects import ObjectResponse


class ScanDecodeRequest(BaseModel):
    """Text produced by the client-side QR scanner."""

    text: str


class ScanResultResponse(BaseModel):
    kind: Literal["found", "valid_not_found", "unstructured"]
    raw_text: str
    message: str
    object: ObjectResponse | None = None
