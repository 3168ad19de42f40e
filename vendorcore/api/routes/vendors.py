# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from vendorcore.api.schemas.vendors import BulkDeleteBody, ImportSummary, VendorIn, VendorOut
from vendorcore.contract_monitor import check_contract_expiry
from vendorcore.contracts.vendor import Vendor, VendorStatus
from vendorcore.csv_codec import CSV_MEDIA_TYPE, EXPORT_FILENAME, encode_vendors
from vendorcore.errors import CsvImportError, VendorNotFound
from vendorcore.merge import decode_upload, import_csv_text
from vendorcore.query import compare_vendors, filter_vendors, list_categories, sort_vendors
from vendorcore.store import VendorStore
from vendordesk.state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendors", tags=["vendors"])


def get_store(state: AppState = Depends(get_state)) -> VendorStore:
    return state.store


def _out(vendor: Vendor, state: AppState) -> VendorOut:
    contract = check_contract_expiry(vendor, window_days=state.settings.expiring_soon_days)
    return VendorOut.from_vendor(vendor, contract)


def csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=f"{CSV_MEDIA_TYPE}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=List[VendorOut])
def list_vendors(
    q: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[VendorStatus] = None,
    min_rating: Optional[float] = Query(None, ge=0),
    price_min: Optional[float] = Query(None, ge=0),
    price_max: Optional[float] = Query(None, ge=0),
    sort: Optional[str] = Query(None, description="priceAsc|priceDesc|ratingAsc|ratingDesc|scoreAsc|scoreDesc"),
    state: AppState = Depends(get_state),
):
    vendors = filter_vendors(
        state.store.load_vendors(),
        q=q,
        category=category,
        status=status,
        min_rating=min_rating,
        price_min=price_min,
        price_max=price_max,
    )
    return [_out(v, state) for v in sort_vendors(vendors, sort)]


@router.post("", response_model=VendorOut, status_code=201)
def create_vendor(payload: VendorIn, state: AppState = Depends(get_state)):
    stored = state.store.upsert_vendor(payload.to_vendor())
    return _out(stored, state)


@router.delete("", status_code=204)
def clear_vendors(store: VendorStore = Depends(get_store)):
    store.clear()
    return Response(status_code=204)


@router.get("/categories", response_model=List[str])
def get_categories(store: VendorStore = Depends(get_store)):
    return list_categories(store.load_vendors())


@router.get("/compare")
def compare(ids: List[str] = Query(...), store: VendorStore = Depends(get_store)):
    if len(ids) != 2:
        raise HTTPException(status_code=400, detail={"error": "compare_needs_two_ids"})
    vendors = {v.id: v for v in store.load_vendors()}
    for vendor_id in ids:
        if vendor_id not in vendors:
            raise VendorNotFound(vendor_id)
    return compare_vendors(vendors[ids[0]], vendors[ids[1]])


@router.post("/bulk_delete")
def bulk_delete(body: BulkDeleteBody, store: VendorStore = Depends(get_store)) -> dict:
    deleted = store.delete_vendors(body.ids)
    return {"ok": True, "deleted": deleted}


@router.post("/import", response_model=ImportSummary)
async def import_vendors(file: UploadFile = File(...), store: VendorStore = Depends(get_store)):
    try:
        data = await file.read()
    except OSError as exc:
        raise CsvImportError(f"Failed reading file {file.filename or ''}: {exc}") from exc
    if not data:
        raise HTTPException(status_code=400, detail={"error": "empty_file"})
    outcome = await asyncio.to_thread(import_csv_text, store, decode_upload(data))
    logger.info("CSV upload %s merged", file.filename or "<unnamed>")
    return ImportSummary(**outcome.summary())


@router.get("/export.csv")
def export_vendors(store: VendorStore = Depends(get_store)):
    return csv_attachment(encode_vendors(store.load_vendors()), EXPORT_FILENAME)


@router.get("/{vendor_id}", response_model=VendorOut)
def get_vendor(vendor_id: str, state: AppState = Depends(get_state)):
    vendor = state.store.get_vendor(vendor_id)
    if vendor is None:
        raise VendorNotFound(vendor_id)
    return _out(vendor, state)


@router.put("/{vendor_id}", response_model=VendorOut)
def update_vendor(vendor_id: str, payload: VendorIn, state: AppState = Depends(get_state)):
    stored = state.store.update_vendor(vendor_id, payload.to_vendor())
    return _out(stored, state)


@router.delete("/{vendor_id}", status_code=204)
def delete_vendor(vendor_id: str, store: VendorStore = Depends(get_store)):
    store.delete_vendor_by_id(vendor_id)
    return Response(status_code=204)
