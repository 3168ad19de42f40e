"""Vendor Desk command-line entrypoints."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from vendorcore.api.schemas.vendors import VendorIn
from vendorcore.contract_monitor import contract_alerts
from vendorcore.csv_codec import EXPORT_FILENAME, encode_vendors
from vendorcore.errors import CsvImportError
from vendorcore.merge import import_csv_file
from vendorcore.query import SORT_KEYS, filter_vendors, sort_vendors
from vendorcore.reports import generate_report, report_to_csv
from vendordesk.settings import Settings
from vendordesk.state import AppState, init_state

logger = logging.getLogger(__name__)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the CRLF row separators untouched on every platform
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def serve_cmd(args, state: AppState) -> int:
    import uvicorn

    from vendordesk.http import create_app

    settings = state.settings
    port = int(getattr(args, "port", None) or settings.port)
    app = create_app(settings, store=state.store)
    print(f"Serving on http://{settings.host}:{port}")
    uvicorn.run(app, host=settings.host, port=port, log_level="warning")
    return 0


def list_cmd(args, state: AppState) -> int:
    vendors = filter_vendors(state.store.load_vendors(), q=args.q, category=args.category, status=args.status)
    vendors = sort_vendors(vendors, args.sort)
    if args.json:
        print(json.dumps([v.to_dict() for v in vendors], indent=2, ensure_ascii=False))
        return 0
    if not vendors:
        print("No vendors.")
        return 0
    for v in vendors:
        risk = v.risk_level.value if v.risk_level else "-"
        print(f"{v.id}\t{v.name}\t{v.category}\t{v.email or v.phone}\tscore={v.performance_score}\trisk={risk}")
    return 0


def add_cmd(args, state: AppState) -> int:
    raw = {
        "name": args.name,
        "category": args.category,
        "email": args.email,
        "phone": args.phone,
        "price": args.price,
        "rating": args.rating,
        "status": args.status,
        "gst": args.gst,
        "license": args.license,
        "agreement": args.agreement,
        "contractStart": args.contract_start,
        "contractEnd": args.contract_end,
        "notes": args.notes,
    }
    try:
        payload = VendorIn.model_validate(raw)
    except ValidationError as exc:
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ())) or "vendor"
            print(f"Validation: {loc}: {err.get('msg')}")
        return 2
    stored = state.store.upsert_vendor(payload.to_vendor())
    print(f"Saved {stored.id} ({stored.name}) score={stored.performance_score} risk={stored.risk_level.value}")
    return 0


def delete_cmd(args, state: AppState) -> int:
    removed = state.store.delete_vendors(args.ids)
    print(f"Deleted {removed} vendor(s).")
    return 0


def import_cmd(args, state: AppState) -> int:
    try:
        outcome = asyncio.run(import_csv_file(state.store, args.path))
    except CsvImportError as exc:
        print(f"Import failed: {exc}")
        return 1
    print(f"Imported: {outcome.created} created, {outcome.updated} updated, {len(outcome.vendors)} total.")
    return 0


def export_cmd(args, state: AppState) -> int:
    target = Path(args.path or EXPORT_FILENAME)
    vendors = state.store.load_vendors()
    _write_text(target, encode_vendors(vendors))
    print(f"Exported {len(vendors)} vendor(s) to {target}")
    return 0


def report_cmd(args, state: AppState) -> int:
    report = generate_report(state.store.load_vendors())
    if args.csv:
        _write_text(Path(args.csv), report_to_csv(report))
        print(f"Report written to {args.csv}")
        return 0
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    return 0


def alerts_cmd(args, state: AppState) -> int:
    alerts = contract_alerts(state.store.load_vendors(), window_days=state.settings.expiring_soon_days)
    for alert in alerts:
        print(alert)
    if not alerts:
        print("No contract alerts.")
    return 0


def clear_cmd(args, state: AppState) -> int:
    if not args.yes:
        print("Refusing to clear all vendors without --yes.")
        return 1
    state.store.clear()
    print("All vendors removed.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vendordesk", description="Vendor directory with CSV exchange")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Start the HTTP API on localhost")
    p.add_argument("--port", type=int, default=None)
    p.set_defaults(func=serve_cmd)

    p = sub.add_parser("list", help="List vendors")
    p.add_argument("--q", default=None, help="Search name or email")
    p.add_argument("--category", default=None)
    p.add_argument("--status", default=None, choices=["active", "inactive", "blacklisted"])
    p.add_argument("--sort", default=None, choices=SORT_KEYS)
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=list_cmd)

    p = sub.add_parser("add", help="Add a vendor (or replace the one sharing its email/phone)")
    p.add_argument("--name", required=True)
    p.add_argument("--category", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--phone", default="")
    p.add_argument("--price", type=float, default=0)
    p.add_argument("--rating", type=int, default=0)
    p.add_argument("--status", default="active")
    p.add_argument("--gst", action="store_true")
    p.add_argument("--license", action="store_true")
    p.add_argument("--agreement", action="store_true")
    p.add_argument("--contract-start", default=None)
    p.add_argument("--contract-end", default=None)
    p.add_argument("--notes", default="")
    p.set_defaults(func=add_cmd)

    p = sub.add_parser("delete", help="Delete vendors by id")
    p.add_argument("ids", nargs="+")
    p.set_defaults(func=delete_cmd)

    p = sub.add_parser("import", help="Merge a CSV file into the directory")
    p.add_argument("path")
    p.set_defaults(func=import_cmd)

    p = sub.add_parser("export", help="Export the directory as CSV")
    p.add_argument("path", nargs="?", default=None)
    p.set_defaults(func=export_cmd)

    p = sub.add_parser("report", help="Print the vendor report")
    p.add_argument("--csv", default=None, help="Write the report CSV to this path instead")
    p.set_defaults(func=report_cmd)

    p = sub.add_parser("alerts", help="Show expired and expiring contracts")
    p.set_defaults(func=alerts_cmd)

    p = sub.add_parser("clear", help="Remove every vendor")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(func=clear_cmd)
    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    state = init_state(settings or Settings())
    try:
        return int(args.func(args, state) or 0)
    finally:
        state.close()


if __name__ == "__main__":
    raise SystemExit(main())
