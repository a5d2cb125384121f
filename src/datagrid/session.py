"""
Editor session: the single owner of the table being edited.

The session is what a user interface talks to. It holds the Table, funnels
every mutation through the Table's CRUD operations, and wraps save, load and
export so that none of them raises: failures come back as ``Notice`` values
the interface shows to the user, and the in-memory table is kept as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from datagrid.config import EditorConfig
from datagrid.exceptions import CorruptSnapshot, ExportFailure, StorageUnavailable
from datagrid.export.document import document_filename, export_document
from datagrid.export.spreadsheet import build_spreadsheet, spreadsheet_filename
from datagrid.persistence import SnapshotStore
from datagrid.storage.base import KeyValueStore
from datagrid.storage.file import FileStore
from datagrid.storage.memory import MemoryStore
from datagrid.table.model import Column, Row, Table, default_table
from datagrid.table.projection import Dataset, project, to_dataframe

logger = logging.getLogger(__name__)

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"

_FORBIDDEN_NAME_CHARACTERS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class Notice:
    """A non-fatal message for the user.

    Attributes:
        level: One of "success", "warning" or "error"
        message: Text to display
        path: File written by the action, when there is one
    """
    level: str
    message: str
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.level == SUCCESS


class EditorSession:
    """Owns a Table and connects it to persistence and export.

    Usage::

        session = EditorSession.open(EditorConfig(data_dir=Path("data")))
        column = session.add_column("Telefone")
        row = session.add_row()
        session.set_cell(row.id, column.id, "5555-0100")
        session.save()
        session.export_document("contatos")
    """

    def __init__(
        self,
        table: Table,
        persistence: SnapshotStore,
        config: Optional[EditorConfig] = None,
    ) -> None:
        self.table = table
        self.persistence = persistence
        self.config = config or EditorConfig()
        self.startup_notice: Optional[Notice] = None

    @classmethod
    def open(
        cls,
        config: Optional[EditorConfig] = None,
        store: Optional[KeyValueStore] = None,
    ) -> "EditorSession":
        """Create a session and restore the saved snapshot if there is one.

        Without a usable snapshot the session starts from ``default_table()``;
        a corrupt or unreadable snapshot is reported in ``startup_notice``.
        """
        config = config or EditorConfig()
        if store is None:
            if config.data_dir is not None:
                store = FileStore(config.data_dir, quota=config.storage_quota)
            else:
                store = MemoryStore(quota=config.storage_quota)
        session = cls(default_table(), SnapshotStore(store, config.storage_key), config)
        session.startup_notice = session.reload()
        return session

    # Table operations

    def add_column(self, name: str) -> Optional[Column]:
        return self.table.add_column(name)

    def rename_column(self, column_id: str, name: str) -> Optional[Column]:
        return self.table.rename_column(column_id, name)

    def delete_column(self, column_id: str) -> None:
        self.table.delete_column(column_id)

    def add_row(self) -> Row:
        return self.table.add_row()

    def delete_row(self, row_id: str) -> None:
        self.table.delete_row(row_id)

    def set_cell(self, row_id: str, column_id: str, value: str) -> None:
        self.table.set_cell(row_id, column_id, value)

    # Persistence

    def save(self) -> Notice:
        """Store the current table, replacing the previous snapshot."""
        try:
            self.persistence.save(self.table)
        except StorageUnavailable as exc:
            logger.error("Save failed: %s", exc)
            return Notice(ERROR, f"Could not save the data: {exc}")
        return Notice(SUCCESS, "Saved")

    def reload(self) -> Optional[Notice]:
        """Replace the table with the stored snapshot.

        Returns:
            None when there is no snapshot (the table is left untouched),
            otherwise a notice describing the outcome
        """
        try:
            table = self.persistence.load()
        except CorruptSnapshot as exc:
            logger.warning("Keeping in-memory table: %s", exc)
            return Notice(WARNING, f"Saved data could not be read and was ignored: {exc}")
        except StorageUnavailable as exc:
            logger.error("Keeping in-memory table: %s", exc)
            return Notice(ERROR, f"Saved data is unavailable: {exc}")
        if table is None:
            return None
        self.table = table
        return Notice(SUCCESS, "Saved data restored")

    # Export

    def dataset(self) -> Dataset:
        """Return the export projection of the current table."""
        return project(self.table)

    def frame(self) -> pd.DataFrame:
        """Return the current table as a DataFrame keyed by column name."""
        return to_dataframe(self.dataset())

    async def export_spreadsheet(self, filename: Optional[str] = None) -> Notice:
        """Build the ``.xlsx`` workbook and write it into the export folder."""
        name = self._export_name(filename)
        if isinstance(name, Notice):
            return name

        dataset = self.dataset()
        path = Path(self.config.export_dir) / spreadsheet_filename(name)
        try:
            data = await build_spreadsheet(
                dataset.columns,
                dataset.rows,
                sheet_name=self.config.sheet_name,
                table_name=self.config.table_name,
            )
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (ExportFailure, OSError, ValueError) as exc:
            logger.error("Spreadsheet export to %s failed: %s", path, exc)
            return Notice(ERROR, f"Export failed: {exc}")
        logger.info("Exported spreadsheet %s", path)
        return Notice(SUCCESS, f"Report saved to {path}", path=path)

    def export_document(self, filename: Optional[str] = None) -> Notice:
        """Render the PDF report into the export folder."""
        name = self._export_name(filename)
        if isinstance(name, Notice):
            return name

        dataset = self.dataset()
        directory = Path(self.config.export_dir)
        try:
            export_document(
                dataset.columns,
                dataset.rows,
                name,
                directory=directory,
                title=self.config.report_title,
            )
        except ExportFailure as exc:
            logger.error("Document export failed: %s", exc)
            return Notice(ERROR, f"Export failed: {exc}")
        path = directory / document_filename(name)
        return Notice(SUCCESS, f"Report saved to {path}", path=path)

    def _export_name(self, filename: Optional[str]) -> Union[str, Notice]:
        """Return the trimmed base name, or a warning notice rejecting it."""
        if filename is None:
            filename = self.config.default_export_name
        name = filename.strip()
        if not name:
            return Notice(WARNING, "Enter a file name to export")
        if any(char in name for char in _FORBIDDEN_NAME_CHARACTERS):
            return Notice(WARNING, "File names cannot contain path separators or NUL characters")
        return name
