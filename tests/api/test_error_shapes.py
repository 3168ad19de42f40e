# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

from fastapi.testclient import TestClient


def test_array_payload_is_validation_error(client: TestClient):
    resp = client.post("/app/vendors", json=[])

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "validation_error"


def test_missing_body_lists_fields(client: TestClient):
    resp = client.post("/app/vendors")

    body = resp.json()
    assert resp.status_code == 400
    assert body["detail"]["error"] == "validation_error"
    assert body["detail"].get("fields")


def test_missing_required_fields_are_named(client: TestClient):
    resp = client.post("/app/vendors", json={"name": "Only a name"})

    fields = resp.json()["detail"]["fields"]
    assert set(fields) == {"category", "email"}


def test_unknown_vendor_envelope(client: TestClient):
    resp = client.put(
        "/app/vendors/nope",
        json={"name": "A", "category": "B", "email": "a@b.co"},
    )

    assert resp.status_code == 404
    assert resp.json() == {
        "detail": {"error": "vendor_not_found", "message": "vendor 'nope' not found", "fields": None}
    }
