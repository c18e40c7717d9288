"""
Database module - picks the store backend from settings.

Usage as a FastAPI dependency:
    @router.get("/x")
    async def route(store: Store = Depends(get_store)):
        ...
"""

from threading import Lock
from typing import Optional

from loguru import logger

from placement_portal.core.config import Settings, get_settings
from placement_portal.db.repositories import Store

_store: Optional[Store] = None
_store_lock = Lock()


def create_store(settings: Settings) -> Store:
    """Build a fresh store for the configured backend."""
    backend = settings.storage_backend.lower()

    if backend == "memory":
        from placement_portal.db.memory import MemoryStore
        return MemoryStore()

    if backend == "sql":
        from placement_portal.db.sql import SqlStore
        return SqlStore(settings.database_url, echo=settings.sql_echo)

    raise ValueError(f"Unknown storage backend: {settings.storage_backend!r} (expected 'memory' or 'sql')")


def get_store() -> Store:
    """Process-wide store, created on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_store(get_settings())
                logger.info(f"Store initialized (backend={_store.backend})")
    return _store


def close_store() -> None:
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None


__all__ = ["Store", "create_store", "get_store", "close_store"]
