from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vendorcore.api.errors import install_error_handlers
from vendorcore.api.routes import app_router
from vendorcore.store import VendorStore
from vendordesk import get_version
from vendordesk.settings import Settings
from vendordesk.state import AppState, get_state, init_state


def create_app(settings: Optional[Settings] = None, store: Optional[VendorStore] = None) -> FastAPI:
    """Build the API app; ``store`` overrides the configured storage backend."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            state = getattr(app.state, "app_state", None)
            if state is not None:
                state.close()

    app = FastAPI(title="Vendor Desk", version=get_version(), lifespan=lifespan)
    app.state.app_state = init_state(settings or Settings(), store=store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://127.0.0.1", "http://localhost"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    app.include_router(app_router)

    @app.get("/health")
    def health(state: AppState = Depends(get_state)) -> dict:
        loaded = state.store.load_result()
        return {
            "ok": True,
            "server": "vendordesk",
            "storage": loaded.status.value,
            "vendors": len(loaded.vendors),
            "ts": datetime.now(timezone.utc).isoformat(),
        }

    return app


__all__ = ["create_app"]
