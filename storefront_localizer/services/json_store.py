"""JSON file persistence for translation memory and review queue records."""

import asyncio
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional


class AsyncJsonStore:
    """
    Keeps a JSON object of records keyed by id in a single file.

    Records are cached after the first load; every save rewrites the file.
    File access runs in a worker thread so the event loop is never blocked,
    and a lock serializes concurrent saves.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: JSON file to read and write (parent directory is created)
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._cache: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        data: Dict[str, Any] = {}
        if self.path.exists():
            text = self.path.read_text(encoding="utf-8")
            if text.strip():
                data = json.loads(text)
        self._cache = data
        return data

    def _load(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._read())

    def _write(self, key: str, record: Dict[str, Any]) -> None:
        with self._lock:
            data = self._read()
            data[key] = record
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    async def load(self) -> Dict[str, Any]:
        """Return all stored records keyed by id."""
        return await asyncio.to_thread(self._load)

    async def save(self, key: str, record: Dict[str, Any]) -> None:
        """Insert or replace one record."""
        await asyncio.to_thread(self._write, key, record)

    def _delete(self, key: str) -> bool:
        with self._lock:
            data = self._read()
            if key not in data:
                return False
            del data[key]
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            return True

    async def delete(self, key: str) -> bool:
        """Remove one record; returns False when it was not stored."""
        return await asyncio.to_thread(self._delete, key)
