"""File-backed store shared by all processes on one host"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from .memory import MemoryStore

DEFAULT_CACHE_FILE = "nextevent_sdk_cache_o8a76bfa0a87.json"


def get_default_cache_path() -> Path:
    """Get the cache file path in the system temp directory"""
    return Path(tempfile.gettempdir()) / DEFAULT_CACHE_FILE


class FileStore(MemoryStore):
    """MemoryStore persisted as JSON

    The file is re-read before every access so that tokens fetched by one
    worker process are reused by the others. Values must be JSON serializable.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        super().__init__()
        self.path = Path(path) if path else get_default_cache_path()

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._read_data()
        super().set(key, value, ttl)
        self._persist_data()

    def get(self, key: str) -> Any:
        self._read_data()
        return super().get(key)

    def has(self, key: str) -> bool:
        self._read_data()
        return super().has(key)

    def delete(self, key: str) -> None:
        self._read_data()
        super().delete(key)
        self._persist_data()

    def expunge(self) -> None:
        self._read_data()
        super().expunge()
        self._persist_data()

    def clear(self) -> None:
        super().clear()
        self.path.unlink(missing_ok=True)

    def _read_data(self) -> None:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            data = {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
            data = {}
        self._store = data if isinstance(data, dict) else {}

    def _persist_data(self) -> None:
        # One temp file per write, other processes replace the same path
        content = json.dumps(self._store)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                dir=self.path.parent,
                prefix=f"{self.path.stem}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.warning(f"Could not write cache file {self.path}: {e}")
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
