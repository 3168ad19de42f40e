# SPDX-License-Identifier: AGPL-3.0-or-later
"""Derived quality metrics: performance score and risk tier."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Any

from vendorcore.contracts.vendor import RiskLevel, Vendor

COMPLIANCE_BONUS = 0.5
PRICE_PENALTY_RATE = 0.01
LOW_RISK_MIN_SCORE = 3
MEDIUM_RISK_MIN_SCORE = 1

_CENT = Decimal("0.01")
# floats this large carry no hundredths to round
_ROUNDING_LIMIT = 1e15


def as_number(value: Any) -> float:
    """Numeric value of ``value``; missing, blank, non-numeric or non-finite input is 0."""

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value or "").strip()
        if not text:
            return 0.0
        number = text
    try:
        number = float(number)
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def round_score(value: float) -> float:
    """Round to 2 places with exact halves going toward +infinity.

    ``-0.125`` gives ``-0.12`` and ``0.125`` gives ``0.13``. Works on the
    shortest decimal form of the float, so ``2.675`` gives ``2.68``.
    """

    if not math.isfinite(value) or abs(value) >= _ROUNDING_LIMIT:
        return value
    if value < 0:
        quantized = -Decimal(str(-value)).quantize(_CENT, rounding=ROUND_HALF_DOWN)
    else:
        quantized = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    # drop the sign of a negative zero
    return float(quantized) + 0.0


def compute_performance_score(vendor: Vendor) -> float:
    """rating * 2 + 0.5 per compliance flag - 1% of price, rounded to 2 places.

    No floor or ceiling is applied.
    """

    base = as_number(vendor.rating) * 2
    compliance_bonus = sum(COMPLIANCE_BONUS for flag in (vendor.gst, vendor.license, vendor.agreement) if flag)
    price_penalty = as_number(vendor.price) * PRICE_PENALTY_RATE
    return round_score(base + compliance_bonus - price_penalty)


def compute_risk_level(vendor: Vendor) -> RiskLevel:
    """Classify the vendor's *stored* score; this does not recompute it."""

    score = vendor.performance_score
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
        return RiskLevel.MEDIUM
    if score >= LOW_RISK_MIN_SCORE:
        return RiskLevel.LOW
    if score >= MEDIUM_RISK_MIN_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def with_derived_fields(vendor: Vendor) -> Vendor:
    """Copy of ``vendor`` with score and risk recomputed from its other fields."""

    scored = vendor.copy(performance_score=compute_performance_score(vendor))
    scored.risk_level = compute_risk_level(scored)
    return scored


__all__ = [
    "as_number",
    "compute_performance_score",
    "compute_risk_level",
    "round_score",
    "with_derived_fields",
]
