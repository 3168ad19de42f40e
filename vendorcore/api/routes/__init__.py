# SPDX-License-Identifier: AGPL-3.0-or-later
from fastapi import APIRouter

from .reports import router as reports_router
from .vendors import router as vendors_router

app_router = APIRouter(prefix="/app")
app_router.include_router(vendors_router)
app_router.include_router(reports_router)

__all__ = ["app_router"]
