# SPDX-License-Identifier: AGPL-3.0-or-later
"""Directory report: best, cheapest, high-risk and per-category summary."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from vendorcore.contracts.vendor import RiskLevel, Vendor
from vendorcore.csv_codec import LINE_SEP, join_row
from vendorcore.scoring import as_number, compute_risk_level

REPORT_FILENAME = "vendor_report.csv"
UNCATEGORIZED = "Uncategorized"


@dataclass
class CategorySummary:
    category: str
    count: int = 0
    total_rating: float = 0.0
    total_price: float = 0.0

    @property
    def avg_rating(self) -> float:
        return self.total_rating / self.count if self.count else 0.0

    @property
    def avg_price(self) -> float:
        return self.total_price / self.count if self.count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "count": self.count,
            "avgRating": round(self.avg_rating, 2),
            "avgPrice": round(self.avg_price, 2),
        }


@dataclass
class VendorReport:
    generated_at: str
    best: Optional[Vendor] = None
    cheapest: Optional[Vendor] = None
    high_risk: List[Vendor] = field(default_factory=list)
    categories: List[CategorySummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "best": self.best.to_dict() if self.best else None,
            "cheapest": self.cheapest.to_dict() if self.cheapest else None,
            "highRisk": [v.to_dict() for v in self.high_risk],
            "categories": [c.to_dict() for c in self.categories],
        }


def compute_best_vendor(vendors: Sequence[Vendor]) -> Optional[Vendor]:
    best: Optional[Vendor] = None
    for vendor in vendors:
        if best is None or as_number(vendor.performance_score) > as_number(best.performance_score):
            best = vendor
    return best


def _price_or_inf(vendor: Vendor) -> float:
    # zero means "no price on file"
    return as_number(vendor.price) or math.inf


def compute_cheapest_vendor(vendors: Sequence[Vendor]) -> Optional[Vendor]:
    cheapest: Optional[Vendor] = None
    for vendor in vendors:
        if cheapest is None or _price_or_inf(vendor) < _price_or_inf(cheapest):
            cheapest = vendor
    return cheapest


def compute_high_risk_vendors(vendors: Sequence[Vendor]) -> List[Vendor]:
    return [v for v in vendors if compute_risk_level(v) is RiskLevel.HIGH]


def compute_category_summary(vendors: Sequence[Vendor]) -> List[CategorySummary]:
    summaries: Dict[str, CategorySummary] = {}
    for vendor in vendors:
        name = vendor.category or UNCATEGORIZED
        summary = summaries.setdefault(name, CategorySummary(category=name))
        summary.count += 1
        summary.total_rating += as_number(vendor.rating)
        summary.total_price += as_number(vendor.price)
    return list(summaries.values())


def generate_report(vendors: Sequence[Vendor], now: Optional[datetime] = None) -> VendorReport:
    now = now or datetime.now(timezone.utc)
    return VendorReport(
        generated_at=now.isoformat(),
        best=compute_best_vendor(vendors),
        cheapest=compute_cheapest_vendor(vendors),
        high_risk=compute_high_risk_vendors(vendors),
        categories=compute_category_summary(vendors),
    )


def report_to_csv(report: VendorReport) -> str:
    """Multi-section CSV; sections are separated by an empty line."""

    lines = [join_row(["Generated", report.generated_at]), ""]

    lines.append("Best Vendor,Name,Email,Score,Price")
    if report.best is not None:
        best = report.best
        lines.append(join_row(["Best", best.name, best.email, best.performance_score, best.price]))
    lines.append("")

    lines.append("Cheapest Vendor,Name,Email,Price")
    if report.cheapest is not None:
        cheap = report.cheapest
        lines.append(join_row(["Cheapest", cheap.name, cheap.email, cheap.price]))
    lines.append("")

    lines.append("High Risk Vendors,Name,Email,Phone")
    for vendor in report.high_risk:
        lines.append(join_row(["", vendor.name, vendor.email, vendor.phone]))
    lines.append("")

    lines.append("Category Summary,Category,Count,AvgRating,AvgPrice")
    for summary in report.categories:
        lines.append(
            join_row(
                ["", summary.category, summary.count, f"{summary.avg_rating:.2f}", f"{summary.avg_price:.2f}"]
            )
        )
    return LINE_SEP.join(lines)


__all__ = [
    "REPORT_FILENAME",
    "CategorySummary",
    "VendorReport",
    "compute_best_vendor",
    "compute_category_summary",
    "compute_cheapest_vendor",
    "compute_high_risk_vendors",
    "generate_report",
    "report_to_csv",
]
