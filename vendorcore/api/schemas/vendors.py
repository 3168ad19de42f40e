# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vendorcore.contract_monitor import ContractState
from vendorcore.contracts.vendor import RiskLevel, Vendor, VendorStatus, normalize_phone

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


class VendorIn(BaseModel):
    """Add/edit payload. CSV imports do not pass through this model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    category: str
    email: str
    phone: str = ""
    price: float = Field(default=0, ge=0, allow_inf_nan=False)
    rating: int = 0
    status: VendorStatus = VendorStatus.ACTIVE
    gst: bool = False
    license: bool = False
    agreement: bool = False
    contract_start: Optional[date] = Field(default=None, alias="contractStart")
    contract_end: Optional[date] = Field(default=None, alias="contractEnd")
    notes: str = ""

    @field_validator("name", "category", "email", "phone", "notes", mode="before")
    @classmethod
    def _strip_text(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("contract_start", "contract_end", mode="before")
    @classmethod
    def _blank_date(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("name", "category", "email")
    @classmethod
    def _required(cls, v: str) -> str:
        if not v:
            raise ValueError("is required")
        return v

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Email format invalid")
        return v

    @field_validator("phone")
    @classmethod
    def _phone_digits(cls, v: str) -> str:
        if v:
            digits = len(normalize_phone(v))
            if digits < PHONE_MIN_DIGITS or digits > PHONE_MAX_DIGITS:
                raise ValueError(f"Phone must be {PHONE_MIN_DIGITS}-{PHONE_MAX_DIGITS} digits")
        return v

    @field_validator("rating")
    @classmethod
    def _rating_range(cls, v: int) -> int:
        if v and not 1 <= v <= 5:
            raise ValueError("Rating must be integer 1-5")
        return v

    @model_validator(mode="after")
    def _contract_order(self) -> "VendorIn":
        if self.contract_start and self.contract_end and self.contract_start > self.contract_end:
            raise ValueError("Contract start must be before contract end")
        return self

    def to_vendor(self) -> Vendor:
        price = int(self.price) if float(self.price).is_integer() else self.price
        return Vendor(
            name=self.name,
            category=self.category,
            phone=self.phone,
            email=self.email,
            price=price,
            rating=self.rating,
            status=self.status,
            gst=self.gst,
            license=self.license,
            agreement=self.agreement,
            contract_start=self.contract_start,
            contract_end=self.contract_end,
            notes=self.notes,
        )


class ContractOut(BaseModel):
    status: str
    days_left: Optional[int] = Field(default=None, serialization_alias="daysLeft")


class VendorOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    category: str
    phone: str
    email: str
    price: float
    rating: float
    status: VendorStatus
    gst: bool
    license: bool
    agreement: bool
    performance_score: Optional[float] = Field(default=None, alias="performanceScore")
    risk_level: Optional[RiskLevel] = Field(default=None, alias="riskLevel")
    contract_start: Optional[date] = Field(default=None, alias="contractStart")
    contract_end: Optional[date] = Field(default=None, alias="contractEnd")
    notes: str
    contract: Optional[ContractOut] = None

    @classmethod
    def from_vendor(cls, vendor: Vendor, contract: Optional[ContractState] = None) -> "VendorOut":
        out = cls.model_validate(vendor.to_dict())
        if contract is not None:
            data = contract.to_dict()
            out.contract = ContractOut(status=data["status"], days_left=data["daysLeft"])
        return out


class BulkDeleteBody(BaseModel):
    ids: List[str]


class ImportSummary(BaseModel):
    ok: bool = True
    created: int
    updated: int
    total: int
