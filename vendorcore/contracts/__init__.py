# SPDX-License-Identifier: AGPL-3.0-or-later
from .vendor import RiskLevel, Vendor, VendorStatus, normalize_email, normalize_phone, parse_date

__all__ = ["RiskLevel", "Vendor", "VendorStatus", "normalize_email", "normalize_phone", "parse_date"]
