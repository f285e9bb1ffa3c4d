"""API tests: scan correlation endpoint."""
import json

import pytest

pytestmark = pytest.mark.api


def test_scan_found(client):
    created = client.post("/api/objects", json={"name": "Forklift-1"}).json()
    r = client.post("/api/scans/decode", json={"text": created["qr_payload"]})
    assert r.status_code == 200
    data = r.json()
    assert data["kind"] == "found"
    assert data["object"]["id"] == created["id"]
    assert data["message"] == "Object found: Forklift-1"


def test_scan_valid_not_found(client):
    text = json.dumps({"id": "unknown-id", "name": "Elsewhere"})
    data = client.post("/api/scans/decode", json={"text": text}).json()
    assert data["kind"] == "valid_not_found"
    assert data["object"] is None
    assert data["raw_text"] == text


def test_scan_unstructured_keeps_raw_text(client):
    data = client.post("/api/scans/decode", json={"text": "not a qr code"}).json()
    assert data["kind"] == "unstructured"
    assert data["raw_text"] == "not a qr code"
    assert data["message"] == "QR code read: not a qr code"
    assert data["object"] is None


def test_scan_incomplete_is_unstructured(client):
    data = client.post("/api/scans/decode", json={"text": '{"id": "abc"}'}).json()
    assert data["kind"] == "unstructured"


def test_scan_does_not_mutate_registry(client, registry):
    created = client.post("/api/objects", json={"name": "A"}).json()
    before = client.get(f"/api/objects/{created['id']}").json()
    client.post("/api/scans/decode", json={"text": created["qr_payload"]})
    client.post("/api/scans/decode", json={"text": created["qr_payload"]})
    assert client.get(f"/api/objects/{created['id']}").json() == before
    assert len(registry) == 1
