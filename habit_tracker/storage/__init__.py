from typing import Iterator, Optional

from habit_tracker.config import settings
from habit_tracker.storage.base import HabitStore, Record
from habit_tracker.storage.memory import MemoryHabitStore
from habit_tracker.storage.sql import SqlHabitStore
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

_memory_store: Optional[MemoryHabitStore] = None


def get_memory_store() -> MemoryHabitStore:
    """Process-wide in-memory store, created on first use."""
    global _memory_store
    if _memory_store is None:
        logger.warning("Using in-memory storage; data is lost on restart")
        _memory_store = MemoryHabitStore()
    return _memory_store


def get_store() -> Iterator[HabitStore]:
    """
    Storage dependency for FastAPI.

    Yields the configured HabitStore. SQL stores get a fresh session per
    request which is rolled back on error and always closed.
    """
    backend = settings.STORAGE_BACKEND
    if backend == "memory":
        yield get_memory_store()
        return
    if backend != "sql":
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")

    from habit_tracker.database import get_session_local

    SessionLocal = get_session_local()
    store = SqlHabitStore(SessionLocal())
    try:
        yield store
    except Exception:
        store.rollback()
        raise
    finally:
        store.close()


__all__ = ["HabitStore", "Record", "MemoryHabitStore", "SqlHabitStore", "get_store", "get_memory_store"]
