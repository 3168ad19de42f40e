# SPDX-License-Identifier: AGPL-3.0-or-later
"""CSV encode/decode for the vendor directory.

Decoding is a hand-rolled scanner rather than :mod:`csv` because malformed
input (an unterminated quote, stray quotes mid-field) must degrade the same
way exported files have always been read back.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence, Union

from vendorcore.contracts.vendor import Vendor

HEADERS = (
    "id",
    "name",
    "category",
    "phone",
    "email",
    "price",
    "rating",
    "status",
    "gst",
    "license",
    "agreement",
    "performanceScore",
    "riskLevel",
    "contractStart",
    "contractEnd",
    "notes",
)
NUMERIC_FIELDS = frozenset({"price", "rating", "performanceScore"})
BOOLEAN_FIELDS = frozenset({"gst", "license", "agreement"})
LINE_SEP = "\r\n"
CSV_MEDIA_TYPE = "text/csv"
EXPORT_FILENAME = "vendors_export.csv"

CellValue = Union[str, int, float, bool]


class _State(Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"


def format_cell(value: Any) -> str:
    """Stringify a cell the way exports render it (unquoted)."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_csv(value: Any) -> str:
    text = format_cell(value)
    if '"' in text or "," in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def join_row(values: Iterable[Any]) -> str:
    return ",".join(escape_csv(v) for v in values)


def encode_vendors(vendors: Iterable[Vendor]) -> str:
    """Header plus one row per vendor in :data:`HEADERS` order, CRLF-joined."""

    lines = [",".join(HEADERS)]
    for vendor in vendors:
        record = vendor.to_dict()
        lines.append(join_row(record.get(h) for h in HEADERS))
    return LINE_SEP.join(lines)


def parse_csv_text(text: str) -> List[List[str]]:
    """Split raw CSV text into rows of raw (untrimmed) cells.

    Blank lines are dropped. An unterminated quote swallows the rest of the
    input into the current cell instead of raising.
    """

    rows: List[List[str]] = []
    row: List[str] = []
    cell: List[str] = []
    state = _State.UNQUOTED
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == '"':
            if state is _State.QUOTED and i + 1 < length and text[i + 1] == '"':
                cell.append('"')
                i += 2
                continue
            state = _State.UNQUOTED if state is _State.QUOTED else _State.QUOTED
        elif state is _State.UNQUOTED and ch == ",":
            row.append("".join(cell))
            cell = []
        elif state is _State.UNQUOTED and ch in "\r\n":
            if cell or row:
                row.append("".join(cell))
                rows.append(row)
                row = []
                cell = []
        else:
            cell.append(ch)
        i += 1
    if cell or row:
        row.append("".join(cell))
        rows.append(row)
    return rows


def _coerce_number(value: str) -> Union[str, int, float]:
    if value == "":
        return ""
    try:
        number = float(value)
    except ValueError:
        return math.nan
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _coerce_bool(value: str) -> bool:
    lowered = value.strip().lower()
    return lowered == "true" or lowered == "1"


def decode_rows(rows: Sequence[Sequence[str]]) -> List[Dict[str, CellValue]]:
    """Map scanned rows to dicts keyed by the (trimmed) header row."""

    if not rows:
        return []
    headers = [h.strip() for h in rows[0]]
    parsed: List[Dict[str, CellValue]] = []
    for row in rows[1:]:
        if len(row) == 1 and row[0] == "":
            continue
        record: Dict[str, CellValue] = {}
        for idx, header in enumerate(headers):
            key = header or f"col{idx}"
            raw = row[idx].strip() if idx < len(row) else ""
            if key in NUMERIC_FIELDS:
                record[key] = _coerce_number(raw)
            elif key in BOOLEAN_FIELDS:
                record[key] = _coerce_bool(raw)
            else:
                record[key] = raw
        parsed.append(record)
    return parsed


def decode_csv(text: str) -> List[Dict[str, CellValue]]:
    return decode_rows(parse_csv_text(text))


__all__ = [
    "BOOLEAN_FIELDS",
    "CSV_MEDIA_TYPE",
    "EXPORT_FILENAME",
    "HEADERS",
    "LINE_SEP",
    "NUMERIC_FIELDS",
    "decode_csv",
    "decode_rows",
    "encode_vendors",
    "escape_csv",
    "format_cell",
    "join_row",
    "parse_csv_text",
]
