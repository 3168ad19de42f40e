# SPDX-License-Identifier: AGPL-3.0-or-later
"""Contract end-date classification and alert messages."""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

from vendorcore.contracts.vendor import Vendor

EXPIRING_SOON_DAYS = 7


class ContractStatus(str, Enum):
    VALID = "valid"
    EXPIRING_SOON = "expiringSoon"
    EXPIRED = "expired"


class ContractState(NamedTuple):
    status: ContractStatus
    days_left: float

    def to_dict(self) -> dict:
        days = None if math.isinf(self.days_left) else int(self.days_left)
        return {"status": self.status.value, "daysLeft": days}


def check_contract_expiry(
    vendor: Vendor,
    today: Optional[date] = None,
    window_days: int = EXPIRING_SOON_DAYS,
) -> ContractState:
    """Classify ``vendor.contract_end`` against ``today`` (local date by default).

    ``days_left`` is the signed whole-day difference; it is ``+inf`` when the
    vendor has no contract end date.
    """

    if vendor.contract_end is None:
        return ContractState(ContractStatus.VALID, math.inf)
    today = today or date.today()
    days_left = (vendor.contract_end - today).days
    if days_left < 0:
        return ContractState(ContractStatus.EXPIRED, days_left)
    if days_left <= window_days:
        return ContractState(ContractStatus.EXPIRING_SOON, days_left)
    return ContractState(ContractStatus.VALID, days_left)


def contract_alerts(
    vendors: Iterable[Vendor],
    today: Optional[date] = None,
    window_days: int = EXPIRING_SOON_DAYS,
) -> List[str]:
    alerts: List[str] = []
    for vendor in vendors:
        state = check_contract_expiry(vendor, today=today, window_days=window_days)
        if state.status is ContractStatus.EXPIRED:
            alerts.append(f"Contract expired: {vendor.name} (ended {abs(int(state.days_left))} days ago)")
        elif state.status is ContractStatus.EXPIRING_SOON:
            alerts.append(f"Contract expiring soon: {vendor.name} (in {int(state.days_left)} days)")
    return alerts


__all__ = [
    "EXPIRING_SOON_DAYS",
    "ContractState",
    "ContractStatus",
    "check_contract_expiry",
    "contract_alerts",
]
