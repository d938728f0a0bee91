"""Key-value storage backends for persisted stores.

A storage is anything with a synchronous ``get(key) -> str | None`` and
``set(key, value)``. Stores receive one explicitly, or fall back to the
process-wide default (a MemoryStorage unless replaced).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, Protocol

logger = logging.getLogger("statehooks.storage")


class Storage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Lives as long as the instance."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data) if data else {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"MemoryStorage({self._data!r})"


class JsonFileStorage:
    """Storage kept as one JSON object in a file.

    The file is read on first access and rewritten in full on every set().
    A missing file is an empty storage; a malformed one, or one holding a
    non-string value, raises on first access.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is None:
            if self._path.exists():
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise TypeError(f"{self._path} must hold a JSON object")
                for key, value in data.items():
                    if not isinstance(value, str):
                        raise TypeError(
                            f"value for {key!r} in {self._path} must be a string, "
                            f"got {type(value).__name__}"
                        )
                self._data = data
                logger.debug("Loaded %d key(s) from %s", len(self._data), self._path)
            else:
                self._data = {}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")

    def __repr__(self) -> str:
        return f"JsonFileStorage({str(self._path)!r})"


# ─── Process default ────────────────────────────────────────────────────────
_default: Storage = MemoryStorage()


def default_storage() -> Storage:
    return _default


def set_default_storage(storage: Storage) -> None:
    """Replace the storage used by stores constructed without one."""
    global _default
    _default = storage


def resolve(storage: Storage | None) -> Storage:
    return storage if storage is not None else _default
