from __future__ import annotations

import asyncio

import pytest

from vendorcore.contracts.vendor import RiskLevel, Vendor, VendorStatus
from vendorcore.errors import CsvImportError
from vendorcore.merge import import_csv_file, import_csv_text, merge_rows, vendor_from_row
from vendorcore.storage import MemoryKeyValueStorage


class _CountingStorage(MemoryKeyValueStorage):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, key, payload):
        self.writes += 1
        super().write(key, payload)


def test_vendor_from_row_defaults_missing_fields():
    vendor = vendor_from_row({"name": "Bare"})

    assert vendor.name == "Bare"
    assert vendor.category == vendor.phone == vendor.email == vendor.notes == ""
    assert vendor.price == 0 and vendor.rating == 0
    assert vendor.status is VendorStatus.ACTIVE
    assert (vendor.gst, vendor.license, vendor.agreement) == (False, False, False)
    assert vendor.contract_start is None and vendor.contract_end is None
    assert vendor.performance_score == 0
    assert vendor.risk_level is RiskLevel.HIGH


def test_vendor_from_row_discards_imported_score_and_keeps_unknown_columns():
    row = {"name": "X", "rating": 5, "price": "", "performanceScore": 0.1, "riskLevel": "high", "region": "EU"}

    vendor = vendor_from_row(row)

    assert vendor.performance_score == 10
    assert vendor.risk_level is RiskLevel.LOW
    assert vendor.extra == {"region": "EU"}


def test_merge_later_row_overwrites_earlier_row_on_phone():
    rows = [
        {"name": "First", "phone": "555-010-2000", "email": "first@x.io"},
        {"name": "Second", "phone": "(555) 0102000", "email": "second@x.io"},
    ]

    outcome = merge_rows([], rows, id_factory=iter(["v-new", "v-unused"]).__next__)

    assert len(outcome.vendors) == 1
    assert outcome.vendors[0].name == "Second"
    assert outcome.vendors[0].id == "v-new"
    assert (outcome.created, outcome.updated) == (1, 1)


def test_merge_keeps_existing_id_and_position():
    existing = [
        Vendor(id="v-1", name="Keep", email="keep@x.io"),
        Vendor(id="v-2", name="Old", phone="5550102000"),
    ]
    rows = [
        {"name": "New A", "phone": "555 010 2000", "email": "a@x.io"},
        {"name": "New B", "phone": "555 010 2000", "email": "b@x.io"},
        {"name": "Fresh", "email": "fresh@x.io"},
    ]

    outcome = merge_rows(existing, rows, id_factory=lambda: "v-3")

    assert [(v.id, v.name) for v in outcome.vendors] == [("v-1", "Keep"), ("v-2", "New B"), ("v-3", "Fresh")]
    assert existing[1].name == "Old"


def test_import_text_saves_once(id_factory):
    from vendorcore.store import VendorStore

    storage = _CountingStorage()
    store = VendorStore(storage, id_factory=id_factory)
    text = "name,email,phone,price,rating,gst\r\nA,a@x.io,,10,5,true\r\nB,b@x.io,,,2,0\r\nA again,A@X.IO,,,1,\r\n"

    outcome = import_csv_text(store, text)

    assert storage.writes == 1
    assert outcome.summary() == {"ok": True, "created": 2, "updated": 1, "total": 2}
    names = [(v.id, v.name, v.performance_score) for v in store.load_vendors()]
    assert names == [("v-1", "A again", 2), ("v-2", "B", 4)]


def test_import_file_reads_utf8_with_bom(tmp_path, store):
    path = tmp_path / "vendors.csv"
    path.write_bytes("\ufeffname,email\r\nCafé Ltd,cafe@x.io\r\n".encode("utf-8"))

    outcome = asyncio.run(import_csv_file(store, path))

    assert outcome.created == 1
    assert store.load_vendors()[0].name == "Café Ltd"


def test_import_file_read_failure_writes_nothing(tmp_path):
    from vendorcore.store import VendorStore

    storage = _CountingStorage()
    store = VendorStore(storage)

    with pytest.raises(CsvImportError, match="Failed reading file"):
        asyncio.run(import_csv_file(store, tmp_path / "missing.csv"))
    assert storage.writes == 0


def test_import_overflowing_price_scores_as_zero_price(store):
    outcome = import_csv_text(store, "name,email,price,rating\r\nBig,big@x.io,1e400,3\r\n")

    assert outcome.created == 1
    vendor = store.load_vendors()[0]
    assert vendor.price == 0
    assert vendor.performance_score == 6
    assert vendor.risk_level is RiskLevel.LOW


def test_import_file_replaces_invalid_utf8(tmp_path, store):
    path = tmp_path / "latin1.csv"
    path.write_bytes("name,email\r\nCaf\xe9,cafe@x.io\r\n".encode("latin-1"))

    outcome = asyncio.run(import_csv_file(store, path))

    assert outcome.created == 1
    assert store.load_vendors()[0].name == "Caf\ufffd"
