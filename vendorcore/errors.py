# SPDX-License-Identifier: AGPL-3.0-or-later
"""Domain exceptions raised by the vendor engine."""

from __future__ import annotations


class VendorError(Exception):
    """Base class for vendor engine errors."""

    code = "vendor_error"


class VendorNotFound(VendorError):
    code = "vendor_not_found"

    def __init__(self, vendor_id: str) -> None:
        super().__init__(f"vendor {vendor_id!r} not found")
        self.vendor_id = vendor_id


class DuplicateVendor(VendorError):
    """An edit would give a record the email or phone of another record."""

    code = "duplicate_vendor"

    def __init__(self, vendor_id: str, other_id: str) -> None:
        super().__init__(f"vendor {vendor_id!r} collides with {other_id!r} on email or phone")
        self.vendor_id = vendor_id
        self.other_id = other_id


class CsvImportError(VendorError):
    code = "import_failed"


__all__ = ["CsvImportError", "DuplicateVendor", "VendorError", "VendorNotFound"]
