# SPDX-License-Identifier: AGPL-3.0-or-later
"""Vendor store: CRUD over one persisted, ordered collection of vendors.

Records carry an opaque ``id`` but are deduplicated by their natural key:
the lower-cased email or the digits of the phone number.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence
from uuid import uuid4

from vendorcore.contracts.vendor import Vendor
from vendorcore.errors import DuplicateVendor, VendorNotFound
from vendorcore.scoring import with_derived_fields
from vendorcore.storage import DEFAULT_STORAGE_KEY, KeyValueStorage

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def new_vendor_id() -> str:
    return f"v-{uuid4().hex[:12]}"


class LoadStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    CORRUPT = "corrupt"


@dataclass
class LoadResult:
    vendors: List[Vendor] = field(default_factory=list)
    status: LoadStatus = LoadStatus.EMPTY
    error: Optional[str] = None


def matches_natural_key(candidate: Vendor, existing: Vendor) -> bool:
    email = candidate.email_key
    if email and email == existing.email_key:
        return True
    phone = candidate.phone_key
    return bool(phone) and phone == existing.phone_key


def find_match_index(vendors: Sequence[Vendor], candidate: Vendor, skip_id: Optional[str] = None) -> int:
    """Index of the first record sharing ``candidate``'s email or phone, else -1."""

    for idx, existing in enumerate(vendors):
        if skip_id is not None and existing.id == skip_id:
            continue
        if matches_natural_key(candidate, existing):
            return idx
    return -1


def unique_id(vendors: Iterable[Vendor], id_factory: IdFactory) -> str:
    taken = {v.id for v in vendors}
    vendor_id = id_factory()
    while vendor_id in taken:
        vendor_id = id_factory()
    return vendor_id


class VendorStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: IdFactory = new_vendor_id,
    ) -> None:
        self.storage = storage
        self.key = key
        self.id_factory = id_factory

    # ---- persistence -----------------------------------------------------

    def load_result(self) -> LoadResult:
        """Read the collection, telling "nothing stored" apart from "discarded"."""

        try:
            raw = self.storage.read(self.key)
        except Exception as exc:
            logger.exception("Failed to read vendors from storage key %r", self.key)
            return LoadResult(status=LoadStatus.CORRUPT, error=f"read_failed: {exc}")
        if not raw:
            return LoadResult()
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
                raise ValueError("vendor payload must be a JSON array of objects")
            vendors = [Vendor.from_dict(item) for item in payload]
        except (ValueError, TypeError) as exc:
            logger.exception("Failed to load vendors: discarding corrupt payload")
            return LoadResult(status=LoadStatus.CORRUPT, error=str(exc))
        return LoadResult(vendors=vendors, status=LoadStatus.OK)

    def load_vendors(self) -> List[Vendor]:
        return self.load_result().vendors

    def save_vendors(self, vendors: Iterable[Vendor]) -> bool:
        """Replace the whole collection. Failures are logged, never raised."""

        scored = [with_derived_fields(v) for v in vendors]
        try:
            payload = json.dumps([v.to_dict() for v in scored], ensure_ascii=False)
            self.storage.write(self.key, payload)
        except Exception:
            logger.exception("Failed to save %d vendors", len(scored))
            return False
        logger.info("Saved %d vendors", len(scored))
        return True

    def clear(self) -> None:
        try:
            self.storage.remove(self.key)
        except Exception:
            logger.exception("Failed to clear vendors")
            return
        logger.info("Cleared all vendors")

    # ---- CRUD ------------------------------------------------------------

    def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        for vendor in self.load_vendors():
            if vendor.id == vendor_id:
                return vendor
        return None

    def upsert_vendor(self, vendor: Vendor) -> Vendor:
        """Insert, or fully replace the first record sharing email or phone.

        A replaced record keeps its id; a new record always gets a fresh one.
        """

        vendors = self.load_vendors()
        idx = find_match_index(vendors, vendor)
        if idx >= 0:
            stored = with_derived_fields(vendor.copy(id=vendors[idx].id))
            vendors[idx] = stored
        else:
            stored = with_derived_fields(vendor.copy(id=unique_id(vendors, self.id_factory)))
            vendors.append(stored)
        self.save_vendors(vendors)
        return stored

    def update_vendor(self, vendor_id: str, vendor: Vendor) -> Vendor:
        vendors = self.load_vendors()
        idx = next((i for i, v in enumerate(vendors) if v.id == vendor_id), -1)
        if idx < 0:
            raise VendorNotFound(vendor_id)
        clash = find_match_index(vendors, vendor, skip_id=vendor_id)
        if clash >= 0:
            raise DuplicateVendor(vendor_id, vendors[clash].id)
        stored = with_derived_fields(vendor.copy(id=vendor_id))
        vendors[idx] = stored
        self.save_vendors(vendors)
        return stored

    def delete_vendor_by_id(self, vendor_id: str) -> bool:
        vendors = self.load_vendors()
        remaining = [v for v in vendors if v.id != vendor_id]
        if len(remaining) == len(vendors):
            return False
        self.save_vendors(remaining)
        return True

    def delete_vendors(self, vendor_ids: Iterable[str]) -> int:
        doomed = set(vendor_ids)
        vendors = self.load_vendors()
        remaining = [v for v in vendors if v.id not in doomed]
        removed = len(vendors) - len(remaining)
        if removed:
            self.save_vendors(remaining)
        return removed


__all__ = [
    "LoadResult",
    "LoadStatus",
    "VendorStore",
    "find_match_index",
    "matches_natural_key",
    "new_vendor_id",
    "unique_id",
]
