"""In-process record store, used for tests and STORAGE_BACKEND=memory"""

import logging
from typing import Optional

from studytrack.storage.base import StateStore

logger = logging.getLogger(__name__)


class MemoryStore(StateStore):
    """Keeps raw JSON text in a dict; nothing survives the process"""

    backend = "memory"

    def __init__(self):
        self._records: dict[str, str] = {}

    async def _read(self, key: str) -> Optional[str]:
        return self._records.get(key)

    async def _write(self, key: str, text: str) -> None:
        self._records[key] = text

    async def _delete(self, key: str) -> bool:
        return self._records.pop(key, None) is not None

    def put_raw(self, key: str, text: str) -> None:
        """Store text as-is, bypassing JSON encoding"""
        self._records[key] = text
        logger.debug(f"Stored raw text for '{key}'")

    def get_raw(self, key: str) -> Optional[str]:
        return self._records.get(key)

    def keys(self) -> list[str]:
        return list(self._records)
