"""Unit tests: scan session (subscription lifecycle, one decode per cycle, camera failure)."""
import pytest

from tracker_core.errors import CameraInitFailure
from tracker_core.scan_correlator import Found, UnstructuredScan
from tracker_core.scan_session import CAMERA_INIT_MESSAGE, ScanSession, ScanState

pytestmark = pytest.mark.unit


class FakeCapability:
    """Camera stand-in: records callbacks so tests can push frames."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.fail_with = fail_with
        self.on_decoded = None
        self.on_error = None
        self.starts = 0
        self.stops = 0

    def start(self, on_decoded, on_error) -> None:
        self.starts += 1
        if self.fail_with is not None:
            raise self.fail_with
        self.on_decoded = on_decoded
        self.on_error = on_error

    def stop(self) -> None:
        self.stops += 1


@pytest.fixture
def capability():
    return FakeCapability()


@pytest.fixture
def session(capability, registry):
    return ScanSession(capability, registry)


def test_decode_found_then_capability_released(session, capability, registry, sample_location):
    obj = registry.create("Forklift-1", "", sample_location)
    results = []
    sub = session.start(results.append)
    assert session.state == ScanState.scanning
    assert sub.active

    capability.on_decoded(obj.qr_payload)

    assert len(results) == 1 and isinstance(results[0], Found)
    assert results[0].object is obj
    assert session.result is results[0]
    assert session.state == ScanState.completed
    assert capability.stops == 1
    assert not sub.active


def test_only_first_decode_per_cycle(session, capability):
    results = []
    session.start(results.append)
    capability.on_decoded("first")
    capability.on_decoded("second")
    assert results == [UnstructuredScan(raw_text="first")]


def test_frame_errors_are_ignored(session, capability):
    results = []
    session.start(results.append)
    capability.on_error(ValueError("No QR code found"))
    assert session.state == ScanState.scanning
    assert results == []


def test_cancel_is_idempotent(session, capability):
    sub = session.start()
    sub.cancel()
    sub.cancel()
    session.stop()
    assert capability.stops == 1
    assert session.state == ScanState.idle


def test_late_callback_after_cancel_ignored(session, capability):
    results = []
    sub = session.start(results.append)
    on_decoded = capability.on_decoded
    sub.cancel()
    on_decoded("late")
    assert results == []
    assert session.result is None


def test_old_subscription_cancel_does_not_stop_new_cycle(session, capability):
    old = session.start()
    stale_callback = capability.on_decoded
    new = session.start()
    old.cancel()
    assert new.active
    stale_callback("stale")
    assert session.result is None
    assert capability.starts == 2


def test_stop_when_never_started(session, capability):
    session.stop()
    assert capability.stops == 0
    assert session.state == ScanState.idle


def test_camera_init_failure_then_restart(registry):
    cam = FakeCapability(fail_with=PermissionError("denied"))
    session = ScanSession(cam, registry)
    sub = session.start()
    assert session.state == ScanState.error
    assert isinstance(session.error, CameraInitFailure)
    assert session.error_message == CAMERA_INIT_MESSAGE
    assert not sub.active
    sub.cancel()
    assert cam.stops == 0

    cam.fail_with = None
    results = []
    session.start(results.append)
    assert session.state == ScanState.scanning
    assert session.error is None
    cam.on_decoded("hello")
    assert results == [UnstructuredScan(raw_text="hello")]


class ImmediateCapability(FakeCapability):
    """Camera that already has a code in view and decodes inside start()."""

    def __init__(self, text: str) -> None:
        super().__init__()
        self.text = text

    def start(self, on_decoded, on_error) -> None:
        super().start(on_decoded, on_error)
        on_decoded(self.text)


def test_decode_during_start_releases_capability(registry):
    cam = ImmediateCapability("hello")
    session = ScanSession(cam, registry)
    results = []
    sub = session.start(results.append)
    assert results == [UnstructuredScan(raw_text="hello")]
    assert session.state == ScanState.completed
    assert cam.stops == 1
    assert not sub.active
    sub.cancel()
    session.stop()
    assert cam.stops == 1
