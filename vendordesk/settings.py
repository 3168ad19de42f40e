from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings
from platformdirs import PlatformDirs


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8766
    home: str | None = Field(default=None, alias="VENDORDESK_HOME")
    storage: Literal["sqlite", "memory"] = "sqlite"
    storage_key: str = "vendors"
    expiring_soon_days: int = Field(default=7, ge=0)
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "VENDORDESK_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def dirs(self) -> PlatformDirs:
        return PlatformDirs(appname="vendordesk", appauthor="vendordesk", ensure_exists=True)

    def resolve_data_dir(self) -> Path:
        base = Path(self.home) if self.home else Path(self.dirs().user_data_path)
        base.mkdir(parents=True, exist_ok=True)
        return base

    def db_path(self) -> Path:
        return self.resolve_data_dir() / "vendordesk.db"

    def log_path(self) -> Path:
        return self.resolve_data_dir() / "vendordesk.log"
