"""Resolve decoded QR text against the registry. Pure: never mutates the registry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tracker_core.qr_codec import DecodeResult, StructuredMatch
from tracker_core.registry import ObjectRegistry
from tracker_core.tracked_object import TrackedObject


@dataclass(frozen=True)
class Found:
    object: TrackedObject
    raw_text: str

    kind = "found"

    @property
    def message(self) -> str:
        return f"Object found: {self.object.name}"


@dataclass(frozen=True)
class ValidNotFound:
    """Well-formed payload whose id is not registered (e.g. generated by another process)."""
    raw_text: str
    object_id: str

    kind = "valid_not_found"

    @property
    def message(self) -> str:
        return "Valid QR code, but object not found in the system"


@dataclass(frozen=True)
class UnstructuredScan:
    raw_text: str

    kind = "unstructured"

    @property
    def message(self) -> str:
        return f"QR code read: {self.raw_text}"


CorrelationResult = Union[Found, ValidNotFound, UnstructuredScan]


def correlate(decoded: DecodeResult, registry: ObjectRegistry) -> CorrelationResult:
    """Map a decode result to Found / ValidNotFound / UnstructuredScan. Lookup is by id only."""
    if not isinstance(decoded, StructuredMatch):
        return UnstructuredScan(raw_text=decoded.raw_text)
    obj = registry.get(decoded.id)
    if obj is None:
        return ValidNotFound(raw_text=decoded.raw_text, object_id=decoded.id)
    return Found(object=obj, raw_text=decoded.raw_text)
