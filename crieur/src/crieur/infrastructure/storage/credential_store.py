"""
Credential storage infrastructure.

Async key/value contract for the persisted access and refresh tokens,
with an in-memory backend and a JSON file backend.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional


class CredentialStore(ABC):
    """
    Abstract credential store.

    Implementations must make delete_many atomic from the point of view
    of other coroutines: readers never observe one key deleted and the
    other still present.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Persist a value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key (no-op if absent)."""

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete several keys as one operation."""

    async def set_many(self, values: Dict[str, str]) -> None:
        """Persist several values."""
        for key, value in values.items():
            await self.set(key, value)


class InMemoryCredentialStore(CredentialStore):
    """Process-local store, used by tests and short-lived sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def delete_many(self, keys: Iterable[str]) -> None:
        # No await between pops: atomic on the event loop
        for key in list(keys):
            self._data.pop(key, None)

    async def set_many(self, values: Dict[str, str]) -> None:
        self._data.update(values)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the stored data."""
        return dict(self._data)


class FileCredentialStore(CredentialStore):
    """
    JSON file store.

    Writes go to a temporary file replaced atomically; the file is created
    with 0600 permissions.

    Attributes:
        path: Credential file path
    """

    def __init__(self, path: str):
        """
        Initialize file store.

        Args:
            path: JSON file path ('~' expanded)
        """
        self.path = Path(os.path.expanduser(path))
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read().strip()
        if not content:
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Credential file {self.path} is not a JSON object")
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._read().get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    async def set_many(self, values: Dict[str, str]) -> None:
        async with self._lock:
            data = self._read()
            data.update(values)
            self._write(data)

    async def delete(self, key: str) -> None:
        await self.delete_many([key])

    async def delete_many(self, keys: Iterable[str]) -> None:
        async with self._lock:
            data = self._read()
            changed = False
            for key in list(keys):
                if key in data:
                    del data[key]
                    changed = True
            if changed:
                self._write(data)
