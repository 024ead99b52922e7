"""JSON file record store

One `<key>.json` file per record under DATA_PATH. Writes go to a temp file
in the same directory and are moved into place with os.replace, so a crash
mid-write leaves the previous record intact.
"""
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from studytrack.config import DATA_PATH
from studytrack.storage.base import StateStore

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStore(StateStore):
    """Store records as JSON files"""

    backend = "file"

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def get_path(self, key: str) -> Path:
        """Get the file backing a key"""
        if not _KEY_PATTERN.match(key) or key.startswith("."):
            raise ValueError(f"Invalid record key '{key}'")
        return self.data_path / f"{key}.json"

    async def _read(self, key: str) -> Optional[str]:
        filepath = self.get_path(key)
        if not filepath.exists():
            return None
        return filepath.read_text(encoding="utf-8")

    async def _write(self, key: str, text: str) -> None:
        filepath = self.get_path(key)
        self.data_path.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.data_path, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, filepath)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {filepath}")

    async def _delete(self, key: str) -> bool:
        filepath = self.get_path(key)
        if not filepath.exists():
            return False
        filepath.unlink()
        return True
