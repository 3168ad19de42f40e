# SPDX-License-Identifier: AGPL-3.0-or-later
"""Key/value persistence backends for the vendor store."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

DEFAULT_STORAGE_KEY = "vendors"


class KeyValueStorage(Protocol):
    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, payload: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, payload: str) -> None:
        self._data[key] = payload

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", String, primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)


def sqlite_url(path: Path) -> str:
    """sqlite+pysqlite URL with exactly three slashes before the path."""

    return f"sqlite+pysqlite:///{path.resolve().as_posix()}"


class SqliteKeyValueStorage:
    """One row per key in a local SQLite file; each write is one transaction."""

    def __init__(self, db_path: Optional[Path] = None, engine: Optional[Engine] = None) -> None:
        if engine is None:
            if db_path is None:
                raise ValueError("db_path or engine is required")
            db_path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                sqlite_url(db_path),
                future=True,
                connect_args={"check_same_thread": False},
            )
        self.engine = engine
        metadata.create_all(bind=self.engine)

    def read(self, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            return conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).scalar_one_or_none()

    def write(self, key: str, payload: str) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        stmt = sqlite_insert(kv_store).values(key=key, value=payload, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        with self.engine.begin() as conn:
            conn.execute(stmt)

    def remove(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))

    def close(self) -> None:
        self.engine.dispose()


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "KeyValueStorage",
    "MemoryKeyValueStorage",
    "SqliteKeyValueStorage",
    "kv_store",
    "sqlite_url",
]
