"""Scan session: wraps a callback-based camera capability as a cancelable subscription.

The capability keeps trying to decode frames and calls ``on_decoded`` for each success and
``on_error`` for each frame it cannot read. A session handles at most one decode per
``start`` cycle: the first decoded text is classified and correlated, the capability is
stopped, and later callbacks from the same cycle are ignored.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from tracker_core import qr_codec
from tracker_core.errors import CameraInitFailure
from tracker_core.registry import ObjectRegistry
from tracker_core.scan_correlator import CorrelationResult, correlate

LOG = logging.getLogger(__name__)

CAMERA_INIT_MESSAGE = "Failed to initialize camera. Check the permissions."

ScanHandler = Callable[[CorrelationResult], None]


class ScanCapability(Protocol):
    def start(self, on_decoded: Callable[[str], None], on_error: Callable[[Exception], None]) -> None: ...

    def stop(self) -> None: ...


class ScanState(str, Enum):
    idle = "idle"
    scanning = "scanning"
    completed = "completed"
    error = "error"


class ScanSubscription:
    """Handle for one start cycle. cancel() releases the capability; calling it again is a no-op."""

    __slots__ = ("_session", "_cycle", "_cancelled")

    def __init__(self, session: "ScanSession", cycle: int) -> None:
        self._session = session
        self._cycle = cycle
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled and self._session.state == ScanState.scanning and self._session.cycle == self._cycle

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._session.cycle == self._cycle:
            self._session.stop()


class ScanSession:
    """One scanner surface bound to a registry. Restartable after completion, cancel or error."""

    def __init__(self, capability: ScanCapability, registry: ObjectRegistry) -> None:
        self._capability = capability
        self._registry = registry
        self._handler: Optional[ScanHandler] = None
        self._capability_running = False
        self.state = ScanState.idle
        self.cycle = 0
        self.result: Optional[CorrelationResult] = None
        self.error: Optional[CameraInitFailure] = None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    def start(self, handler: Optional[ScanHandler] = None) -> ScanSubscription:
        """Begin a new cycle (stopping any previous one) and return its subscription."""
        self.stop()
        self.cycle += 1
        self._handler = handler
        self.result = None
        self.error = None
        self.state = ScanState.scanning
        subscription = ScanSubscription(self, self.cycle)
        cycle = self.cycle
        # Held from before start(): a capability may decode synchronously inside start().
        self._capability_running = True
        try:
            self._capability.start(
                lambda text: self._on_decoded(cycle, text),
                lambda err: self._on_frame_error(cycle, err),
            )
        except Exception as exc:
            LOG.warning("Scan: camera failed to start: %s", exc)
            self.error = CameraInitFailure(CAMERA_INIT_MESSAGE)
            self.error.__cause__ = exc
            self._capability_running = False
            self.state = ScanState.error
            self._handler = None
            return subscription
        if self.state == ScanState.scanning:
            LOG.info("Scan session started (cycle %d)", cycle)
        return subscription

    def stop(self) -> None:
        """Release the capability if held. Safe to call in any state."""
        if self._capability_running:
            self._capability_running = False
            try:
                self._capability.stop()
            except Exception:
                LOG.exception("Scan: error while stopping capability")
            LOG.info("Scan session stopped (cycle %d)", self.cycle)
        if self.state == ScanState.scanning:
            self.state = ScanState.idle
        self._handler = None

    def _on_decoded(self, cycle: int, text: str) -> None:
        if cycle != self.cycle or self.state != ScanState.scanning:
            return
        result = correlate(qr_codec.decode(text), self._registry)
        LOG.info("Scan: %s", result.kind)
        handler = self._handler
        self.result = result
        self.stop()
        self.state = ScanState.completed
        if handler is not None:
            handler(result)

    def _on_frame_error(self, cycle: int, err: Exception) -> None:
        # Unreadable frames are normal while the camera searches for a code.
        if cycle == self.cycle:
            LOG.debug("Scan: frame not decoded: %s", err)
