import logging

from stockroom.config import Settings
from stockroom.repositories.base import ProductRepository, Repository, StockRepository
from stockroom.repositories.memory_store import MemoryStore
from stockroom.repositories.sql_store import SqlStore

log = logging.getLogger(__name__)

__all__ = [
    "MemoryStore",
    "ProductRepository",
    "Repository",
    "SqlStore",
    "StockRepository",
    "build_repository",
    "ensure_repository",
]


def ensure_repository(store) -> Repository:
    """Fail at wiring time, not on the first request, if ``store`` is not a full Repository."""
    if not isinstance(store, Repository):
        raise TypeError(f"{type(store).__name__} does not implement Repository")
    return store


def build_repository(settings: Settings, session_factory=None) -> Repository:
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        store = MemoryStore()
    elif backend == "sql":
        if session_factory is None:
            from stockroom.db import SessionLocal

            session_factory = SessionLocal
        store = SqlStore(
            session_factory,
            lock_dir=settings.STOCK_LOCK_DIR,
            lock_timeout=settings.STOCK_LOCK_TIMEOUT_SECONDS,
        )
    else:
        raise ValueError(f"unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")
    log.info("Using %s repository", type(store).__name__)
    return ensure_repository(store)
