"""JSON file key/value storage backend.

Keeps every key in one JSON object on disk, the way a browser keeps
local storage for an origin. Each write rewrites the whole document.
"""

import asyncio
import json
import os
from pathlib import Path

from .base import KeyValueStorage


class JsonFileStorage(KeyValueStorage):
    """File-backed storage holding a single JSON object of string values.

    Writes go to a sibling temp file that replaces the original, so a crash
    mid-write leaves the previous document intact. Reads of a document that
    is not a JSON object raise ValueError; writes replace it.
    """

    def __init__(self, path: str | Path = "~/.aura/storage.json"):
        self._path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Ensure the parent directory exists."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

    async def disconnect(self) -> None:
        """Nothing to release for file storage."""
        pass

    def _read_document(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        document = json.loads(raw)
        if not isinstance(document, dict):
            raise ValueError(f"Storage file {self._path} does not hold a JSON object")
        return document

    def _read_for_update(self) -> dict[str, str]:
        # An unreadable document is replaced on the next write; readers
        # already report it through get_item.
        try:
            return self._read_document()
        except ValueError:
            return {}

    def _write_document(self, document: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(document), encoding="utf-8")
        os.replace(tmp_path, self._path)

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_document)
        value = document.get(key)
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_for_update)
            document[key] = value
            await asyncio.to_thread(self._write_document, document)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            document = await asyncio.to_thread(self._read_for_update)
            document.pop(key, None)
            await asyncio.to_thread(self._write_document, document)

    @property
    def backend_type(self) -> str:
        return "json"

    @property
    def path(self) -> Path:
        return self._path
