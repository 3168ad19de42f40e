# SPDX-License-Identifier: AGPL-3.0-or-later
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vendorcore.errors import CsvImportError, DuplicateVendor, VendorError, VendorNotFound

_STATUS_BY_ERROR = {
    VendorNotFound: 404,
    DuplicateVendor: 409,
    CsvImportError: 400,
}


class ErrorBody(BaseModel):
    error: str = Field(...)
    message: str | None = None
    fields: dict | list | None = None


def error_envelope(code: str, message: str | None = None, fields: dict | list | None = None) -> dict:
    return {"detail": ErrorBody(error=code, message=message, fields=fields).model_dump()}


def normalize_validation_err(err) -> dict:
    field_map: dict[str, str] = {}
    for entry in err.errors():
        loc = ".".join(str(part) for part in entry.get("loc", []) if part != "body")
        field_map[loc or "__root__"] = entry.get("msg", "invalid")
    return error_envelope("validation_error", fields=field_map)


async def _validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=normalize_validation_err(exc))


async def _vendor_error_handler(request: Request, exc: VendorError) -> JSONResponse:
    status = _STATUS_BY_ERROR.get(type(exc), 400)
    return JSONResponse(status_code=status, content=error_envelope(exc.code, str(exc)))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(VendorError, _vendor_error_handler)
