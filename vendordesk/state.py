from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from vendorcore.storage import KeyValueStorage, MemoryKeyValueStorage, SqliteKeyValueStorage
from vendorcore.store import VendorStore
from vendordesk.logging_setup import setup_logging
from vendordesk.settings import Settings


@dataclass
class AppState:
    settings: Settings
    store: VendorStore
    logger: logging.Logger

    def close(self) -> None:
        close = getattr(self.store.storage, "close", None)
        if callable(close):
            close()


def build_storage(settings: Settings) -> KeyValueStorage:
    if settings.storage == "memory":
        return MemoryKeyValueStorage()
    return SqliteKeyValueStorage(settings.db_path())


def init_state(settings: Settings, store: Optional[VendorStore] = None) -> AppState:
    logger = setup_logging(settings.log_path(), settings.log_level)
    if store is None:
        store = VendorStore(build_storage(settings), key=settings.storage_key)
    return AppState(settings=settings, store=store, logger=logger)


def get_state(request: Request) -> AppState:
    state = getattr(request.app.state, "app_state", None)
    if state is None:
        raise RuntimeError("AppState not initialized")
    return state
