"""
datagrid - A spreadsheet-like data editor core.

This package holds a user-defined grid of free-text cells, persists it as a
single snapshot in a local key-value store, and exports it as an ``.xlsx``
workbook or a paginated PDF report.

Usage:
    >>> from datagrid import EditorSession
    >>> session = EditorSession.open()
    >>> column = session.add_column("Telefone")
    >>> row = session.add_row()
    >>> session.set_cell(row.id, column.id, "5555-0100")
    >>> notice = session.save()

Key components:
- Table: ordered columns and rows with CRUD operations
- SnapshotStore: saves and loads the table under one storage key
- build_spreadsheet / export_document: the two export formatters
- EditorSession: owns the table and turns failures into notices
"""

from .config import EditorConfig, configure_logging
from .exceptions import *
from .export import build_spreadsheet, export_document, render_document
from .persistence import SnapshotStore
from .session import EditorSession, Notice
from .storage import FileStore, MemoryStore
from .table import Column, Dataset, Row, Table, default_table, project, to_dataframe

# Version
__version__ = "0.1.0"

__all__ = [
    'Column',
    'Row',
    'Table',
    'default_table',
    'Dataset',
    'project',
    'to_dataframe',
    'SnapshotStore',
    'MemoryStore',
    'FileStore',
    'build_spreadsheet',
    'export_document',
    'render_document',
    'EditorConfig',
    'configure_logging',
    'EditorSession',
    'Notice',
    'DataGridError',
    'StorageUnavailable',
    'CorruptSnapshot',
    'ExportFailure',
]
