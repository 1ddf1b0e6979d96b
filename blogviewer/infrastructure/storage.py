"""Durable key/value storage used to persist the tab session."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol


class StorageError(RuntimeError):
    """Raised when the storage backend cannot read or write a value."""


class PersistentKVStore(Protocol):
    """Persistence contract: one string key, one JSON blob value."""

    def read(self, key: str) -> bytes | None: ...

    def write(self, key: str, value: bytes) -> None: ...


def _safe_name(key: str) -> str:
    candidate = "".join(ch if (ch.isalnum() or ch in {"-", "_", "."}) else "-" for ch in key)
    cleaned = candidate.strip("-_.")
    return cleaned or "default"


class FileKVStore:
    """Stores each key as a JSON file under ``root``."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        return self._root / f"{_safe_name(key)}.json"

    def read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc

    def write(self, key: str, value: bytes) -> None:
        target = self.path_for(key)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(suffix=".tmp", prefix="kv_", dir=self._root)
        except OSError as exc:
            raise StorageError(f"cannot write {target}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(value)
            os.replace(temp_path, target)
        except OSError as exc:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"cannot write {target}: {exc}") from exc


class InMemoryKVStore:
    """Process-local store for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._values: dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> bytes | None:
        return self._values.get(key)

    def write(self, key: str, value: bytes) -> None:
        self._values[key] = bytes(value)

    def reset(self) -> None:
        self._values.clear()
