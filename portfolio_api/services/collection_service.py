"""Use cases over the projects, testimonies and gallery collections."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from portfolio_api.core.config import Settings
from portfolio_api.domain.records import SCHEMAS
from portfolio_api.repositories.collection_store import CollectionStore, create_store

logger = logging.getLogger(__name__)


class UnknownCollectionError(KeyError):
    """Raised when a caller names a collection that is not served."""


class CollectionService:
    """Owns one CollectionStore per collection for the lifetime of the app."""

    def __init__(self, stores: Mapping[str, CollectionStore]) -> None:
        self._stores = dict(stores)

    @classmethod
    def from_settings(cls, settings: Settings, names: Iterable[str] | None = None) -> "CollectionService":
        stores = {}
        for name in names or SCHEMAS:
            store = create_store(SCHEMAS[name], settings.data_dir, settings.storage_backend)
            logger.info(
                "Collection %s ready (%s backend, %d records, %s)",
                name,
                store.backend,
                len(store),
                store.path,
            )
            stores[name] = store
        return cls(stores)

    def names(self) -> list[str]:
        return list(self._stores)

    def store(self, name: str) -> CollectionStore:
        try:
            return self._stores[name]
        except KeyError:
            raise UnknownCollectionError(name) from None

    def list(self, name: str) -> list[dict]:
        return self.store(name).list()

    def append(self, name: str, payload: Mapping[str, Any] | None) -> str:
        """Append a record and return the confirmation message for the caller."""
        store = self.store(name)
        store.append(payload)
        return store.schema.saved_message

    def counts(self) -> dict[str, int]:
        return {name: len(store) for name, store in self._stores.items()}

    def close(self) -> None:
        for store in self._stores.values():
            store.close()
