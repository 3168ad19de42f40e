# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

from fastapi import APIRouter, Depends

from vendorcore.api.routes.vendors import csv_attachment
from vendorcore.contract_monitor import contract_alerts
from vendorcore.reports import REPORT_FILENAME, generate_report, report_to_csv
from vendordesk.state import AppState, get_state

router = APIRouter(tags=["reports"])


@router.get("/contracts/alerts")
def get_contract_alerts(state: AppState = Depends(get_state)) -> dict:
    alerts = contract_alerts(state.store.load_vendors(), window_days=state.settings.expiring_soon_days)
    return {"alerts": alerts}


@router.get("/reports/vendors")
def get_report(state: AppState = Depends(get_state)) -> dict:
    return generate_report(state.store.load_vendors()).to_dict()


@router.get("/reports/vendors.csv")
def export_report(state: AppState = Depends(get_state)):
    report = generate_report(state.store.load_vendors())
    return csv_attachment(report_to_csv(report), REPORT_FILENAME)
