"""Append-only record collections over a pluggable persistence strategy."""
from __future__ import annotations

import abc
import copy
import logging
import threading
from pathlib import Path
from typing import Any, Mapping

from portfolio_api.domain.records import CollectionSchema, normalize_record
from portfolio_api.repositories.json_storage import PersistenceError, load_records, save_records

logger = logging.getLogger(__name__)


class CollectionStore(abc.ABC):
    """Ordered, append-only list of records sharing one schema."""

    backend = ""

    def __init__(self, schema: CollectionSchema, path: Path) -> None:
        self.schema = schema
        self.path = Path(path)
        # guards every read and write of the backing file
        self._lock = threading.Lock()

    @abc.abstractmethod
    def list(self) -> list[dict]:
        """Full sequence in insertion order, as copies the caller may mutate."""

    def append(self, payload: Mapping[str, Any] | None) -> dict:
        """Validate, trim and append ``payload``; returns the stored record."""
        record = normalize_record(self.schema, payload)
        with self._lock:
            self._append_locked(record)
        return dict(record)

    @abc.abstractmethod
    def _append_locked(self, record: dict) -> None:
        """Persist ``record``; called with ``self._lock`` held."""

    def close(self) -> None:
        """Release resources held by the store (nothing to do by default)."""

    def __len__(self) -> int:
        return len(self.list())


class FileCollectionStore(CollectionStore):
    """Every call goes to disk; the JSON file is the single source of truth."""

    backend = "file"

    def list(self) -> list[dict]:
        try:
            with self._lock:
                return load_records(self.path)
        except PersistenceError:
            logger.exception("Could not read %s collection, returning empty list", self.schema.name)
            return []

    def _append_locked(self, record: dict) -> None:
        # unreadable data must not be replaced by a one-item list, so read errors propagate here
        records = load_records(self.path)
        records.append(record)
        save_records(self.path, records)


class MemoryCollectionStore(CollectionStore):
    """Seeded once from disk; later writes only live in the process."""

    backend = "memory"

    def __init__(self, schema: CollectionSchema, path: Path) -> None:
        super().__init__(schema, path)
        try:
            self._records = load_records(self.path)
        except PersistenceError:
            logger.exception("Initial load of %s failed, using empty list", self.schema.name)
            self._records = []

    def list(self) -> list[dict]:
        with self._lock:
            return copy.deepcopy(self._records)

    def _append_locked(self, record: dict) -> None:
        self._records.append(record)

    def close(self) -> None:
        if self._records:
            logger.info(
                "Discarding %d in-memory %s records on shutdown", len(self._records), self.schema.name
            )
        self._records = []


_BACKENDS: dict[str, type[CollectionStore]] = {
    FileCollectionStore.backend: FileCollectionStore,
    MemoryCollectionStore.backend: MemoryCollectionStore,
}


def create_store(schema: CollectionSchema, data_dir: Path, backend: str = "file") -> CollectionStore:
    """Build the store for ``schema`` backed by ``<data_dir>/<name>.json``."""
    try:
        cls = _BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown storage backend: {backend!r}") from None
    return cls(schema, Path(data_dir) / f"{schema.name}.json")
