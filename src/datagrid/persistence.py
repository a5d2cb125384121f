"""
Snapshot persistence for the table model.

The whole table is stored as one JSON document under a single fixed key of a
local key-value store. Every save overwrites the previous snapshot wholesale;
there is no incremental or append persistence.
"""

from __future__ import annotations

import logging

from datagrid.exceptions import CorruptSnapshot
from datagrid.storage.base import KeyValueStore
from datagrid.table.model import Table
from datagrid.utils.serialization import from_json, to_json

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "grid-data"


class SnapshotStore:
    """Saves and loads table snapshots in one slot of a key-value store.

    Attributes:
        store: Backend holding the serialized snapshot
        key: Name of the slot the snapshot lives in
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        if not key:
            raise ValueError("Storage key must be a non-empty string")
        self.store = store
        self.key = key

    def save(self, table: Table) -> None:
        """Serialize ``table`` and overwrite the stored snapshot.

        Raises:
            StorageUnavailable: If the backend cannot store the snapshot
        """
        payload = to_json(table)
        self.store.set_item(self.key, payload)
        logger.info(
            "Saved snapshot %r (%d columns, %d rows)",
            self.key, len(table.columns), len(table.rows),
        )

    def load(self) -> Table | None:
        """Read the stored snapshot.

        Returns:
            The stored Table, or None when no snapshot has been saved

        Raises:
            CorruptSnapshot: If the stored value cannot be decoded into a Table
            StorageUnavailable: If the backend cannot be read
        """
        payload = self.store.get_item(self.key)
        if payload is None:
            logger.debug("No snapshot stored under %r", self.key)
            return None
        try:
            table = from_json(payload)
        except (ValueError, TypeError, KeyError, RecursionError) as exc:
            logger.warning("Snapshot %r is unreadable: %s", self.key, exc)
            raise CorruptSnapshot(f"Snapshot {self.key!r} is unreadable: {exc}") from exc
        logger.info(
            "Loaded snapshot %r (%d columns, %d rows)",
            self.key, len(table.columns), len(table.rows),
        )
        return table

    def clear(self) -> None:
        """Remove the stored snapshot, if any."""
        self.store.remove_item(self.key)
