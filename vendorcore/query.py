# SPDX-License-Identifier: AGPL-3.0-or-later
"""Listing helpers: search, filter, sort and side-by-side comparison."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from vendorcore.contracts.vendor import Vendor, VendorStatus
from vendorcore.scoring import as_number

_SORT_KEYS: Dict[str, Tuple[Callable[[Vendor], float], bool]] = {
    "priceAsc": (lambda v: as_number(v.price), False),
    "priceDesc": (lambda v: as_number(v.price), True),
    "ratingAsc": (lambda v: as_number(v.rating), False),
    "ratingDesc": (lambda v: as_number(v.rating), True),
    "scoreAsc": (lambda v: as_number(v.performance_score), False),
    "scoreDesc": (lambda v: as_number(v.performance_score), True),
}
SORT_KEYS = tuple(_SORT_KEYS)

COMPARE_FIELDS = (
    "category",
    "price",
    "rating",
    "performanceScore",
    "riskLevel",
    "status",
    "gst",
    "license",
    "agreement",
    "contractEnd",
)


def filter_vendors(
    vendors: Sequence[Vendor],
    q: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[VendorStatus] = None,
    min_rating: Optional[float] = None,
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
) -> List[Vendor]:
    result = list(vendors)
    needle = (q or "").strip().lower()
    if needle:
        result = [v for v in result if needle in v.name.lower() or needle in v.email.lower()]
    if category:
        result = [v for v in result if v.category == category]
    if status:
        result = [v for v in result if v.status == status]
    if min_rating:
        result = [v for v in result if as_number(v.rating) >= min_rating]
    if price_min:
        result = [v for v in result if as_number(v.price) >= price_min]
    if price_max:
        result = [v for v in result if as_number(v.price) <= price_max]
    return result


def sort_vendors(vendors: Sequence[Vendor], sort_key: Optional[str]) -> List[Vendor]:
    if not sort_key or sort_key not in _SORT_KEYS:
        return list(vendors)
    key, reverse = _SORT_KEYS[sort_key]
    return sorted(vendors, key=key, reverse=reverse)


def list_categories(vendors: Sequence[Vendor]) -> List[str]:
    return list(dict.fromkeys(v.category for v in vendors if v.category))


def compare_vendors(first: Vendor, second: Vendor) -> Dict[str, Any]:
    left, right = first.to_dict(), second.to_dict()
    return {
        "vendors": [
            {"id": first.id, "name": first.name},
            {"id": second.id, "name": second.name},
        ],
        "fields": [
            {"field": name, "values": [left.get(name), right.get(name)], "same": left.get(name) == right.get(name)}
            for name in COMPARE_FIELDS
        ],
    }


__all__ = ["SORT_KEYS", "compare_vendors", "filter_vendors", "list_categories", "sort_vendors"]
