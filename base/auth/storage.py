"""Persistent key/value storage behind the session store.

The token and the serialised user live under two independent keys, the way a
browser keeps them in localStorage. Readers must treat one key without the
other as "logged out".
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from base import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class StorageUnavailable(Exception):
    """The backing store cannot be read or written right now."""


class SessionStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def set_many(self, values: dict[str, str]) -> None: ...


class MemorySessionStorage:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def set_many(self, values: dict[str, str]) -> None:
        with self._lock:
            self._data.update(values)

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._data)


class FileSessionStorage:
    """JSON file storage, written atomically through a temp file and rename."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Session file {self.path} is corrupt, ignoring it: {e}")
            return {}
        except OSError as e:
            raise StorageUnavailable(str(e)) from e
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not data:
                if self.path.exists():
                    self.path.unlink()
                return

            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".session-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StorageUnavailable(str(e)) from e

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, str]) -> None:
        with self._lock:
            data = self._read()
            data.update(values)
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
