from __future__ import annotations

import math

import pytest

from vendorcore.contracts.vendor import RiskLevel, Vendor
from vendorcore.scoring import as_number, compute_performance_score, compute_risk_level, round_score, with_derived_fields


def test_score_formula_with_full_compliance():
    vendor = Vendor(rating=5, price=100, gst=True, license=True, agreement=True)

    assert compute_performance_score(vendor) == 10.5


def test_score_treats_missing_or_junk_numbers_as_zero():
    assert compute_performance_score(Vendor(rating="", price="abc")) == 0
    assert compute_performance_score(Vendor(rating=None, price=None, gst=True)) == 0.5


def test_score_has_no_floor_or_ceiling():
    assert compute_performance_score(Vendor(rating=1, price=1000)) == -8.0
    assert compute_performance_score(Vendor(rating=5, price=0, gst=True, license=True, agreement=True)) == 11.5
    assert compute_performance_score(Vendor(rating=10)) == 20


def test_score_rounds_to_two_decimals():
    assert compute_performance_score(Vendor(rating=3, price=12.345)) == 5.88
    assert compute_performance_score(Vendor(rating=2, price=37.5)) == 3.63


@pytest.mark.parametrize(
    "score, expected",
    [
        (3.0, RiskLevel.LOW),
        (10.5, RiskLevel.LOW),
        (2.999, RiskLevel.MEDIUM),
        (1, RiskLevel.MEDIUM),
        (0.999, RiskLevel.HIGH),
        (-4, RiskLevel.HIGH),
    ],
)
def test_risk_thresholds(score, expected):
    assert compute_risk_level(Vendor(performance_score=score)) is expected


def test_risk_defaults_to_medium_without_a_numeric_score():
    assert compute_risk_level(Vendor()) is RiskLevel.MEDIUM
    assert compute_risk_level(Vendor(performance_score=math.nan)) is RiskLevel.MEDIUM


def test_risk_reads_stored_score_without_recomputing():
    # rating 5 would score "low" if recomputed
    vendor = Vendor(rating=5, performance_score=0.2)

    assert compute_risk_level(vendor) is RiskLevel.HIGH


def test_with_derived_fields_overrides_supplied_values():
    vendor = Vendor(rating=0, price=500, performance_score=99.0, risk_level="low")

    scored = with_derived_fields(vendor)

    assert scored.performance_score == -5.0
    assert scored.risk_level is RiskLevel.HIGH
    assert vendor.performance_score == 99.0


def test_as_number():
    assert as_number("  2.5 ") == 2.5
    assert as_number("") == 0
    assert as_number("n/a") == 0
    assert as_number(True) == 1


def test_exact_halves_round_toward_positive_infinity():
    # 0 - 0.125
    assert compute_performance_score(Vendor(rating=0, price=12.5)) == -0.12
    assert round_score(-0.125) == -0.12
    assert round_score(0.125) == 0.13
    assert round_score(-0.126) == -0.13
    assert round_score(-0.004) == 0.0
    assert math.copysign(1, round_score(-0.004)) == 1


def test_non_finite_numbers_count_as_zero():
    assert as_number(math.inf) == 0
    assert as_number("-inf") == 0
    assert as_number("1e400") == 0
    assert as_number(10**400) == 0
    assert compute_performance_score(Vendor(rating=3, price="1e400")) == 6


def test_huge_finite_price_does_not_break_rounding():
    assert compute_performance_score(Vendor(rating=0, price=1e300)) == -(1e300 * 0.01)
