# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import itertools

import pytest
from fastapi.testclient import TestClient

from vendorcore.contracts.vendor import Vendor
from vendorcore.storage import MemoryKeyValueStorage
from vendorcore.store import VendorStore


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"v-{next(counter)}"


@pytest.fixture()
def storage():
    return MemoryKeyValueStorage()


@pytest.fixture()
def store(storage, id_factory):
    return VendorStore(storage, id_factory=id_factory)


@pytest.fixture()
def make_vendor():
    def _make(**fields) -> Vendor:
        base = {
            "name": "Acme Supplies",
            "category": "Hardware",
            "phone": "+1 (555) 010-2000",
            "email": "sales@acme.example",
            "price": 100,
            "rating": 4,
        }
        base.update(fields)
        return Vendor(**base)

    return _make


@pytest.fixture()
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("VENDORDESK_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("VENDORDESK_STORAGE", "memory")
    from vendordesk.settings import Settings

    return Settings(_env_file=None)


@pytest.fixture()
def client(settings, store):
    from vendordesk.http import create_app

    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
