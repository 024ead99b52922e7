"""
Record persistence for the streak tracker and XP ledger

Backends:
- MemoryStore: process-local dict
- FileStore: JSON files under DATA_PATH
- RedisStore: shared Redis database
"""

from pathlib import Path
from typing import Optional

from studytrack.exceptions import ConfigurationError
from studytrack.storage.base import StateStore, SaveResult, STREAK_KEY, GAMIFICATION_KEY
from studytrack.storage.memory_store import MemoryStore
from studytrack.storage.file_store import FileStore
from studytrack.storage.redis_store import RedisStore


def create_store(
    backend: str,
    data_path: Optional[Path] = None,
    redis_url: Optional[str] = None,
    namespace: Optional[str] = None
) -> StateStore:
    """
    Build the store for a configured backend name.

    Raises:
        ConfigurationError: Unknown backend
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return FileStore(data_path) if data_path is not None else FileStore()
    if backend == "redis":
        kwargs = {}
        if redis_url is not None:
            kwargs["redis_url"] = redis_url
        if namespace is not None:
            kwargs["namespace"] = namespace
        return RedisStore(**kwargs)
    raise ConfigurationError(f"Unknown storage backend '{backend}'", config_key="STORAGE_BACKEND")


__all__ = [
    "StateStore",
    "SaveResult",
    "STREAK_KEY",
    "GAMIFICATION_KEY",
    "MemoryStore",
    "FileStore",
    "RedisStore",
    "create_store",
]
