"""
Configuration helpers for the mailing-list service.

Settings are read from environment variables once and cached so that routers,
the RPC server and the entry point never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    database_url: str
    bind_json: str
    bind_grpc: str
    grpc_addr: str
    log_level: str
    max_page_size: int
    rpc_workers: int


def _int(value: str | None, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def sqlite_url(path: str) -> str:
    return f"sqlite:///{path}"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    database_url = (os.getenv("DATABASE_URL") or "").strip()
    if not database_url:
        database_url = sqlite_url((os.getenv("MAILINGLIST_DB") or "list.db").strip())

    return Settings(
        database_url=database_url,
        bind_json=os.getenv("MAILINGLIST_BIND_JSON") or ":8000",
        bind_grpc=os.getenv("MAILINGLIST_BIND_GRPC") or ":8001",
        grpc_addr=os.getenv("MAILINGLIST_GRPC_ADDR") or "localhost:8001",
        log_level=(os.getenv("MAILINGLIST_LOG_LEVEL") or "INFO").upper(),
        max_page_size=max(1, _int(os.getenv("MAILINGLIST_MAX_PAGE_SIZE"), 100)),
        rpc_workers=max(1, _int(os.getenv("MAILINGLIST_RPC_WORKERS"), 10)),
    )


def split_bind(bind: str, default_host: str = "0.0.0.0") -> tuple[str, int]:
    """
    Split a ``host:port`` bind address; an empty host (``":8000"``) means
    every interface.
    """
    host, sep, port = (bind or "").strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid bind address: {bind!r}")
    host = host.strip("[]") or default_host
    return host, int(port)
