"""QR payload codec: object identity + creation-time location to/from a JSON transport string.

Payload shape::

    {
      "id": "<object id>",
      "name": "<display name>",
      "trackingUrl": "<TRACKING_BASE_URL>/<object id>",
      "location": {"lat": <float>, "lng": <float>, "address": "<text>"},
      "timestamp": "<ISO-8601 UTC, millisecond precision, Z suffix>"
    }

``decode`` never raises: anything that is not a JSON object whose ``id`` and ``name`` are
non-empty strings or non-zero numbers degrades into a result that only carries the raw text.
"""
from __future__ import annotations

import io
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from tracker_core.tracked_object import TrackedObject
from utils.config import TRACKING_BASE_URL

# Rendering parameters for the exported image.
QR_BOX_SIZE = 6
QR_BORDER = 2
QR_DARK = "#1e40af"
QR_LIGHT = "#ffffff"

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class StructuredMatch:
    """Payload parsed and carries both id and name."""
    id: str
    name: str
    raw_text: str
    fields: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def tracking_url(self) -> str | None:
        value = self.fields.get("trackingUrl")
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class StructuredButIncomplete:
    """Text parsed as JSON but id or name is missing or empty."""
    raw_text: str


@dataclass(frozen=True)
class Unstructured:
    """Text is not JSON at all."""
    raw_text: str


DecodeFailure = Union[StructuredButIncomplete, Unstructured]
DecodeResult = Union[StructuredMatch, StructuredButIncomplete, Unstructured]


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def tracking_reference(object_id: str, base_url: str = TRACKING_BASE_URL) -> str:
    """Stable display URL for an object id."""
    return f"{base_url.rstrip('/')}/{object_id}"


def build_payload(obj: TrackedObject, base_url: str = TRACKING_BASE_URL) -> dict[str, Any]:
    """Payload dict for obj using its creation-time state."""
    return {
        "id": obj.id,
        "name": obj.name,
        "trackingUrl": tracking_reference(obj.id, base_url),
        "location": obj.location.to_dict(),
        "timestamp": format_timestamp(obj.created_at),
    }


def encode(obj: TrackedObject, base_url: str = TRACKING_BASE_URL) -> str:
    """Encode obj into its transport string. Same object state always yields the same string."""
    return json.dumps(build_payload(obj, base_url), ensure_ascii=False, separators=(",", ":"))


def _identity_field(value: Any) -> str | None:
    """Non-empty string or non-zero number as text; anything else counts as missing."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value == 0 or value != value:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def decode(raw: str) -> DecodeResult:
    """Classify raw scanned text as StructuredMatch, StructuredButIncomplete or Unstructured."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return Unstructured(raw_text=raw)
    if not isinstance(data, dict):
        return StructuredButIncomplete(raw_text=raw)
    object_id = _identity_field(data.get("id"))
    name = _identity_field(data.get("name"))
    if object_id is None or name is None:
        return StructuredButIncomplete(raw_text=raw)
    return StructuredMatch(id=object_id, name=name, raw_text=raw, fields=data)


def render_png(payload: str) -> bytes:
    """Render payload as a PNG QR image (the downloadable artifact)."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=QR_BOX_SIZE, border=QR_BORDER)
    qr.add_data(payload)
    qr.make(fit=True)
    image = qr.make_image(fill_color=QR_DARK, back_color=QR_LIGHT)
    buf = io.BytesIO()
    image.save(buf)
    return buf.getvalue()


def export_filename(name: str) -> str:
    """Download file name for an object's QR image, e.g. 'Forklift 1' -> 'qr-forklift-1.png'."""
    return f"qr-{_WHITESPACE.sub('-', name).lower()}.png"
