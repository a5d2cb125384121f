"""
Storage module for datagrid.

This module provides the local key-value stores that hold table snapshots.
``MemoryStore`` keeps values in the current process; ``FileStore`` keeps one
file per key in a directory so snapshots survive restarts.
"""

from datagrid.storage.base import KeyValueStore
from datagrid.storage.file import FileStore
from datagrid.storage.memory import MemoryStore

__all__ = [
    "KeyValueStore",
    "FileStore",
    "MemoryStore",
]
