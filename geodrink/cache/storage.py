"""Key/value storage backends used by the spatial cache.

A backend is any object offering ``get_item``, ``set_item``, ``remove_item``
and ``keys``. Values are strings; backends do not interpret them. Failures
are reported as :class:`~geodrink.errors.CacheStorageError`.
"""

from __future__ import annotations

import json
import logging
import threading
from hashlib import sha256
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from ..errors import CacheStorageError

_LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...


class MemoryStorage:
    """Process-local storage backed by a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


class JSONFileStorage:
    """Persistent storage writing one JSON document per key under a directory."""

    def __init__(self, base_dir: PathLike) -> None:
        base = Path(base_dir)
        self._base_dir = base if base.is_absolute() else Path.cwd() / base
        self._lock = threading.Lock()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _file_path(self, key: str) -> Path:
        # sha256 keeps file names filesystem-safe whatever the key contains.
        signature = sha256(key.encode("utf-8")).hexdigest()
        return self._base_dir / signature[0:2] / f"{signature}.json"

    def _read_file(self, path: Path) -> Optional[Dict[str, str]]:
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise CacheStorageError(f"Failed reading cache file {path}: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("value"), str):
            raise CacheStorageError(f"Corrupt cache file {path}")
        return payload

    def _write_file(self, path: Path, payload: Dict[str, str]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(".tmp")
        with temp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=True)
        temp_path.replace(path)

    def get_item(self, key: str) -> Optional[str]:
        payload = self._read_file(self._file_path(key))
        if payload is None:
            return None
        return payload["value"]

    def set_item(self, key: str, value: str) -> None:
        path = self._file_path(key)
        try:
            with self._lock:
                self._write_file(path, {"key": key, "value": value})
        except OSError as exc:
            raise CacheStorageError(f"Failed writing cache file {path}: {exc}") from exc
        _LOGGER.debug("Stored cache item key=%s path=%s", key, path)

    def remove_item(self, key: str) -> None:
        path = self._file_path(key)
        try:
            with self._lock:
                path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheStorageError(f"Failed removing cache file {path}: {exc}") from exc

    def keys(self) -> List[str]:
        if not self._base_dir.exists():
            return []
        found: List[str] = []
        for path in sorted(self._base_dir.glob("*/*.json")):
            try:
                payload = self._read_file(path)
            except CacheStorageError as exc:
                _LOGGER.warning("Ignoring unreadable cache file: %s", exc)
                continue
            if payload is not None and isinstance(payload.get("key"), str):
                found.append(payload["key"])
        return found


__all__ = ["KeyValueStorage", "MemoryStorage", "JSONFileStorage"]
