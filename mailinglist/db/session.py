"""Engine helpers for the SQL backend."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from mailinglist.core.config import get_settings

Base = declarative_base()

# Seconds a SQLite writer waits on a locked database before failing.
SQLITE_BUSY_TIMEOUT = 30


def build_engine(url: str) -> Engine:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("A database URL must be configured.")
    connect_args = {}
    if url.startswith("sqlite"):
        # The engine is shared by the JSON and gRPC worker threads.
        connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().database_url)
