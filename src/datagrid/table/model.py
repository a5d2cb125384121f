"""
Tabular data model.

This module defines the in-memory grid edited by the user:
- Column: a display label with a stable identifier
- Row: a mapping from column id to free-text cell value
- Table: the ordered columns and rows, and the CRUD operations over them

Every mutation goes through a Table method so that the two invariants hold
after each call: ids are unique within their collection, and no row carries
a cell for a column that no longer exists.
"""

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def new_id(prefix: str) -> str:
    """Generate a collision-resistant identifier such as ``col-3f2a...``.

    Ids are random tokens rather than timestamps, so two entities created
    within the same clock tick still get distinct ids and a deleted id is
    never handed out again.
    """
    return f"{prefix}-{uuid.uuid4().hex}"


@dataclass
class Column:
    """A single column of the grid.

    Attributes:
        id: Opaque identifier, stable for the column's lifetime
        name: Display label (not required to be unique)
    """
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        """Create from dictionary representation."""
        return cls(id=data["id"], name=data["name"])


@dataclass
class Row:
    """A single row of the grid.

    Attributes:
        id: Opaque identifier, stable for the row's lifetime
        cells: Cell text keyed by column id; absent entries read as ""
    """
    id: str
    cells: Dict[str, str] = field(default_factory=dict)

    def get(self, column_id: str) -> str:
        """Return the cell text for ``column_id`` ("" when unset)."""
        return self.cells.get(column_id, "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"id": self.id, "cells": dict(self.cells)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Row":
        """Create from dictionary representation."""
        return cls(id=data["id"], cells=dict(data.get("cells", {})))


@dataclass
class Table:
    """The grid aggregate: ordered columns and ordered rows.

    Insertion order is display order for both collections. Equality compares
    contents only, so a table loaded from a snapshot equals the table that
    was saved.

    Attributes:
        columns: Ordered list of columns
        rows: Ordered list of rows
    """
    columns: List[Column] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check the table invariants.

        Raises:
            ValueError: If ids are duplicated or a row references a
                column that does not exist
        """
        column_ids = [column.id for column in self.columns]
        if len(set(column_ids)) != len(column_ids):
            raise ValueError("Duplicate column ids in table")

        row_ids = [row.id for row in self.rows]
        if len(set(row_ids)) != len(row_ids):
            raise ValueError("Duplicate row ids in table")

        known = set(column_ids)
        for row in self.rows:
            orphans = set(row.cells) - known
            if orphans:
                raise ValueError(
                    f"Row {row.id!r} has cells for unknown columns: {sorted(orphans)}"
                )

    # Lookups

    def get_column(self, column_id: str) -> Optional[Column]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def get_row(self, row_id: str) -> Optional[Row]:
        for row in self.rows:
            if row.id == row_id:
                return row
        return None

    @property
    def column_ids(self) -> List[str]:
        return [column.id for column in self.columns]

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    # Columns

    def add_column(self, name: str) -> Optional[Column]:
        """Append a new column.

        Args:
            name: Display label for the column

        Returns:
            The created Column, or None if ``name`` is blank
        """
        if not name or not name.strip():
            return None
        column = Column(id=self._unused_id("col", self.column_ids), name=name)
        self.columns.append(column)
        return column

    def rename_column(self, column_id: str, name: str) -> Optional[Column]:
        """Change the display label of a column.

        Returns:
            The renamed Column, or None if the column does not exist or
            ``name`` is blank
        """
        column = self.get_column(column_id)
        if column is None or not name or not name.strip():
            return None
        column.name = name
        return column

    def delete_column(self, column_id: str) -> None:
        """Remove a column and its cell from every row. No-op if absent."""
        if self.get_column(column_id) is None:
            return
        self.columns = [column for column in self.columns if column.id != column_id]
        for row in self.rows:
            row.cells.pop(column_id, None)

    # Rows

    def add_row(self) -> Row:
        """Append a row with an empty cell for every current column."""
        row = Row(
            id=self._unused_id("row", [row.id for row in self.rows]),
            cells={column.id: "" for column in self.columns},
        )
        self.rows.append(row)
        return row

    def delete_row(self, row_id: str) -> None:
        """Remove a row. No-op if absent."""
        self.rows = [row for row in self.rows if row.id != row_id]

    def set_cell(self, row_id: str, column_id: str, value: str) -> None:
        """Set the text of one cell.

        Nothing happens when the row or the column does not exist, so no
        cell is ever stored for a column outside ``columns``.
        """
        row = self.get_row(row_id)
        if row is None or self.get_column(column_id) is None:
            return
        row.cells[column_id] = value

    # Snapshots

    def snapshot(self) -> "Table":
        """Return a deep copy that shares no state with this table."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "columns": [column.to_dict() for column in self.columns],
            "rows": [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        """Create from dictionary representation.

        Raises:
            ValueError: If the rebuilt table violates an invariant
            KeyError: If a column or row lacks its ``id``
        """
        return cls(
            columns=[Column.from_dict(item) for item in data.get("columns", [])],
            rows=[Row.from_dict(item) for item in data.get("rows", [])],
        )

    @staticmethod
    def _unused_id(prefix: str, taken: List[str]) -> str:
        candidate = new_id(prefix)
        while candidate in taken:
            candidate = new_id(prefix)
        return candidate


def default_table() -> Table:
    """Return the seed table shown to a user with no saved snapshot."""
    return Table(
        columns=[Column(id="col-1", name="Nome"), Column(id="col-2", name="Email")],
        rows=[Row(id="row-1", cells={"col-1": "João Silva", "col-2": "joao@exemplo.com"})],
    )
