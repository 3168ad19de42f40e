# SPDX-License-Identifier: AGPL-3.0-or-later
"""Vendor record contract shared by the store, codec and API."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")

Number = Union[int, float]


class VendorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLACKLISTED = "blacklisted"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def normalize_email(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def normalize_phone(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def parse_date(value: Any) -> Optional[date]:
    """Return a calendar date for ISO-ish input, ``None`` when absent or unreadable."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.warning("Ignoring unreadable date %r", text)
        return None


def parse_status(value: Any) -> VendorStatus:
    if isinstance(value, VendorStatus):
        return value
    text = str(value or "").strip().lower()
    if not text:
        return VendorStatus.ACTIVE
    try:
        return VendorStatus(text)
    except ValueError:
        logger.warning("Unknown vendor status %r; using 'active'", value)
        return VendorStatus.ACTIVE


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class Vendor:
    """Serializable vendor record.

    ``performance_score`` and ``risk_level`` are derived; see
    :func:`vendorcore.scoring.with_derived_fields`.
    """

    id: str = ""
    name: str = ""
    category: str = ""
    phone: str = ""
    email: str = ""
    price: Number = 0
    rating: Number = 0
    status: VendorStatus = VendorStatus.ACTIVE
    gst: bool = False
    license: bool = False
    agreement: bool = False
    contract_start: Optional[date] = None
    contract_end: Optional[date] = None
    notes: str = ""
    performance_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.status = parse_status(self.status)
        self.contract_start = parse_date(self.contract_start)
        self.contract_end = parse_date(self.contract_end)
        if self.risk_level is not None and not isinstance(self.risk_level, RiskLevel):
            try:
                self.risk_level = RiskLevel(str(self.risk_level))
            except ValueError:
                self.risk_level = None
        for attr in ("id", "name", "category", "phone", "email", "notes"):
            value = getattr(self, attr)
            if value is None:
                setattr(self, attr, "")
            elif not isinstance(value, str):
                setattr(self, attr, str(value))

    @property
    def email_key(self) -> str:
        return normalize_email(self.email)

    @property
    def phone_key(self) -> str:
        return normalize_phone(self.phone)

    def copy(self, **changes: Any) -> "Vendor":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Persisted shape: camelCase keys, ISO dates, enum values; unknown keys ride along."""

        data = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "phone": self.phone,
            "email": self.email,
            "price": self.price,
            "rating": self.rating,
            "status": self.status.value,
            "gst": self.gst,
            "license": self.license,
            "agreement": self.agreement,
            "performanceScore": self.performance_score,
            "riskLevel": self.risk_level.value if self.risk_level is not None else None,
            "contractStart": _iso(self.contract_start),
            "contractEnd": _iso(self.contract_end),
            "notes": self.notes,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vendor":
        known = {
            "id", "name", "category", "phone", "email", "price", "rating", "status",
            "gst", "license", "agreement", "performanceScore", "riskLevel",
            "contractStart", "contractEnd", "notes",
        }
        score = data.get("performanceScore")
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            category=data.get("category") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            price=data.get("price") or 0,
            rating=data.get("rating") or 0,
            status=data.get("status") or VendorStatus.ACTIVE,
            gst=bool(data.get("gst")),
            license=bool(data.get("license")),
            agreement=bool(data.get("agreement")),
            contract_start=data.get("contractStart"),
            contract_end=data.get("contractEnd"),
            notes=data.get("notes") or "",
            performance_score=score if isinstance(score, (int, float)) and not isinstance(score, bool) else None,
            risk_level=data.get("riskLevel"),
            extra={k: v for k, v in data.items() if k not in known},
        )


__all__ = [
    "RiskLevel",
    "Vendor",
    "VendorStatus",
    "normalize_email",
    "normalize_phone",
    "parse_date",
    "parse_status",
]
