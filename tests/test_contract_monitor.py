from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from vendorcore.contract_monitor import ContractStatus, check_contract_expiry, contract_alerts
from vendorcore.contracts.vendor import Vendor

TODAY = date(2026, 3, 10)


def _ending_in(days: int, **fields) -> Vendor:
    return Vendor(contract_end=TODAY + timedelta(days=days), **fields)


def test_no_contract_end_is_valid_forever():
    state = check_contract_expiry(Vendor(), today=TODAY)

    assert state.status is ContractStatus.VALID
    assert math.isinf(state.days_left) and state.days_left > 0
    assert state.to_dict() == {"status": "valid", "daysLeft": None}


@pytest.mark.parametrize(
    "days, expected",
    [
        (-1, ContractStatus.EXPIRED),
        (0, ContractStatus.EXPIRING_SOON),
        (7, ContractStatus.EXPIRING_SOON),
        (8, ContractStatus.VALID),
    ],
)
def test_boundaries(days, expected):
    state = check_contract_expiry(_ending_in(days), today=TODAY)

    assert state.status is expected
    assert state.days_left == days


def test_time_of_day_is_ignored():
    vendor = Vendor(contract_end="2026-03-11T23:59:00+05:00")

    assert check_contract_expiry(vendor, today=TODAY).days_left == 1


def test_custom_window():
    state = check_contract_expiry(_ending_in(10), today=TODAY, window_days=14)

    assert state.status is ContractStatus.EXPIRING_SOON


def test_contract_alert_messages():
    vendors = [
        _ending_in(-3, name="Old Co"),
        _ending_in(2, name="Soon Co"),
        _ending_in(30, name="Fine Co"),
        Vendor(name="Open Co"),
    ]

    assert contract_alerts(vendors, today=TODAY) == [
        "Contract expired: Old Co (ended 3 days ago)",
        "Contract expiring soon: Soon Co (in 2 days)",
    ]
