# SPDX-License-Identifier: AGPL-3.0-or-later
"""CSV import: normalize decoded rows and merge them into the store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union

from vendorcore.contracts.vendor import Vendor, VendorStatus
from vendorcore.csv_codec import HEADERS, decode_csv
from vendorcore.errors import CsvImportError
from vendorcore.scoring import as_number, with_derived_fields
from vendorcore.store import IdFactory, VendorStore, find_match_index, new_vendor_id, unique_id

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "category", "phone", "email", "notes")


@dataclass
class MergeOutcome:
    vendors: List[Vendor] = field(default_factory=list)
    created: int = 0
    updated: int = 0

    @property
    def processed(self) -> int:
        return self.created + self.updated

    def summary(self) -> dict:
        return {
            "ok": True,
            "created": self.created,
            "updated": self.updated,
            "total": len(self.vendors),
        }


def _text(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None or value == "":
        return ""
    return str(value)


def _numeric(row: Mapping[str, Any], key: str) -> Union[int, float]:
    number = as_number(row.get(key))
    return int(number) if number.is_integer() else number


def vendor_from_row(row: Mapping[str, Any]) -> Vendor:
    """Normalize one decoded row; score columns in the row are ignored."""

    vendor = Vendor(
        price=_numeric(row, "price"),
        rating=_numeric(row, "rating"),
        status=_text(row, "status") or VendorStatus.ACTIVE,
        gst=row.get("gst") is True,
        license=row.get("license") is True,
        agreement=row.get("agreement") is True,
        contract_start=_text(row, "contractStart") or None,
        contract_end=_text(row, "contractEnd") or None,
        extra={k: v for k, v in row.items() if k not in HEADERS},
        **{name: _text(row, name) for name in _TEXT_FIELDS},
    )
    return with_derived_fields(vendor)


def merge_rows(
    existing: Iterable[Vendor],
    rows: Iterable[Mapping[str, Any]],
    id_factory: IdFactory = new_vendor_id,
) -> MergeOutcome:
    """Apply rows in order against a snapshot that includes earlier rows."""

    outcome = MergeOutcome(vendors=list(existing))
    for row in rows:
        candidate = vendor_from_row(row)
        idx = find_match_index(outcome.vendors, candidate)
        if idx >= 0:
            outcome.vendors[idx] = candidate.copy(id=outcome.vendors[idx].id)
            outcome.updated += 1
        else:
            outcome.vendors.append(candidate.copy(id=unique_id(outcome.vendors, id_factory)))
            outcome.created += 1
    return outcome


def import_csv_text(store: VendorStore, text: str) -> MergeOutcome:
    rows = decode_csv(text)
    outcome = merge_rows(store.load_vendors(), rows, id_factory=store.id_factory)
    store.save_vendors(outcome.vendors)
    logger.info(
        "Imported %d CSV rows (%d created, %d updated)",
        outcome.processed,
        outcome.created,
        outcome.updated,
    )
    return outcome


def decode_upload(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="replace")


async def import_csv_file(store: VendorStore, path: Union[str, Path]) -> MergeOutcome:
    """Read ``path`` off the event loop, then decode and merge synchronously.

    A read failure aborts the import before anything is written.
    """

    source = Path(path)
    try:
        data = await asyncio.to_thread(source.read_bytes)
    except OSError as exc:
        raise CsvImportError(f"Failed reading file {source}: {exc}") from exc
    return import_csv_text(store, decode_upload(data))


__all__ = [
    "MergeOutcome",
    "decode_upload",
    "import_csv_file",
    "import_csv_text",
    "merge_rows",
    "vendor_from_row",
]
