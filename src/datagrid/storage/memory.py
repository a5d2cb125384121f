"""
In-process key-value store.

Keeps values in a dictionary for the lifetime of the object. An optional
quota, measured in UTF-8 bytes over all stored keys and values, makes
writes fail the way a full browser store does.
"""

from __future__ import annotations

import logging

from datagrid.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


class MemoryStore:
    """Dictionary-backed store with an optional byte quota.

    Usage::

        store = MemoryStore(quota=5_000_000)
        store.set_item("grid-data", payload)
        store.get_item("grid-data")
    """

    def __init__(self, quota: int | None = None) -> None:
        if quota is not None and quota < 0:
            raise ValueError("Storage quota must be a non-negative integer")
        self.quota = quota
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = self._usage(exclude=key)
            try:
                needed = _size(key) + _size(value)
            except UnicodeEncodeError as exc:
                logger.error("Value under %r is not valid UTF-8 text: %s", key, exc)
                raise StorageUnavailable(f"Cannot encode {key!r} for storage: {exc}") from exc
            if used + needed > self.quota:
                logger.warning(
                    "Write of %d bytes under %r exceeds quota (%d of %d bytes used)",
                    needed, key, used, self.quota,
                )
                raise StorageUnavailable(
                    f"Storage quota of {self.quota} bytes exceeded while writing {key!r}"
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def _usage(self, exclude: str | None = None) -> int:
        return sum(
            _size(key) + _size(value)
            for key, value in self._items.items()
            if key != exclude
        )


def _size(text: str) -> int:
    return len(text.encode("utf-8"))
