"""
Key -> JSON record persistence

Backends only move strings; decoding, validation of the JSON shape,
error wrapping and metrics live here so every backend behaves the same:

- load(): None when the key is absent, MalformedStateError when the stored
  text is not a JSON object, StorageError when the backend itself fails
- save(): never raises for backend failures, returns a SaveResult instead
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from studytrack.exceptions import MalformedStateError, StorageError, StorageWriteError
from studytrack.monitoring import track_storage_operation

logger = logging.getLogger(__name__)

# Fixed record keys
STREAK_KEY = "studyStreak"
GAMIFICATION_KEY = "studyGamification"


@dataclass
class SaveResult:
    """Outcome of a write; callers decide whether to retry or warn"""
    key: str
    success: bool
    error: Optional[StorageWriteError] = None


class StateStore(ABC):
    """Base class for record stores"""

    backend: str = "base"

    @abstractmethod
    async def _read(self, key: str) -> Optional[str]:
        """Return the raw stored text, or None if the key is absent"""

    @abstractmethod
    async def _write(self, key: str, text: str) -> None:
        """Store raw text under key"""

    @abstractmethod
    async def _delete(self, key: str) -> bool:
        """Remove key; True if something was deleted"""

    async def close(self) -> None:
        """Release backend resources"""

    async def load(self, key: str) -> Optional[dict[str, Any]]:
        """
        Load a JSON record.

        Raises:
            MalformedStateError: Stored text is not UTF-8 or not a JSON object
            StorageError: Backend could not be read
        """
        try:
            raw = await self._read(key)
        except UnicodeDecodeError as e:
            track_storage_operation(self.backend, "load", "malformed")
            raise MalformedStateError(
                f"Stored record '{key}' is not valid UTF-8: {e}",
                key=key,
                operation="load",
                cause=e
            ) from e
        except Exception as e:
            track_storage_operation(self.backend, "load", "error")
            raise StorageError(
                f"Failed to read '{key}' from {self.backend} store: {e}",
                key=key,
                operation="load",
                cause=e
            ) from e

        if raw is None:
            track_storage_operation(self.backend, "load", "miss")
            return None

        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            track_storage_operation(self.backend, "load", "malformed")
            raise MalformedStateError(
                f"Stored record '{key}' is not valid JSON: {e}",
                key=key,
                operation="load",
                cause=e
            ) from e

        if not isinstance(value, dict):
            track_storage_operation(self.backend, "load", "malformed")
            raise MalformedStateError(
                f"Stored record '{key}' is a JSON {type(value).__name__}, expected an object",
                key=key,
                operation="load"
            )

        track_storage_operation(self.backend, "load", "ok")
        return value

    async def save(self, key: str, value: dict[str, Any]) -> SaveResult:
        """Save a JSON record"""
        try:
            text = json.dumps(value)
        except (TypeError, ValueError) as e:
            track_storage_operation(self.backend, "save", "error")
            error = StorageWriteError(
                f"Record '{key}' is not JSON serializable: {e}",
                key=key,
                operation="save",
                cause=e
            )
            return SaveResult(key=key, success=False, error=error)

        try:
            await self._write(key, text)
        except Exception as e:
            track_storage_operation(self.backend, "save", "error")
            error = StorageWriteError(
                f"Failed to write '{key}' to {self.backend} store: {e}",
                key=key,
                operation="save",
                cause=e
            )
            return SaveResult(key=key, success=False, error=error)

        track_storage_operation(self.backend, "save", "ok")
        logger.debug(f"Saved '{key}' to {self.backend} store")
        return SaveResult(key=key, success=True)

    async def delete(self, key: str) -> bool:
        """
        Delete a record.

        Raises:
            StorageError: Backend could not be written
        """
        try:
            deleted = await self._delete(key)
        except Exception as e:
            track_storage_operation(self.backend, "delete", "error")
            raise StorageError(
                f"Failed to delete '{key}' from {self.backend} store: {e}",
                key=key,
                operation="delete",
                cause=e
            ) from e

        track_storage_operation(self.backend, "delete", "ok" if deleted else "miss")
        if deleted:
            logger.info(f"Deleted '{key}' from {self.backend} store")
        return deleted
