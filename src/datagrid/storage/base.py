"""
Abstract key-value store interface for snapshot persistence.

The KeyValueStore protocol defines the contract that every backend must
satisfy: read, write and remove text values under string keys.
Concrete implementations include MemoryStore (process-local dictionary)
and FileStore (one file per key inside a directory).
"""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for local text key-value stores.

    Backends raise ``StorageUnavailable`` when they cannot complete a read
    or write; a key that was never written is not an error.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete ``key``. Removing an absent key does nothing."""
        ...
