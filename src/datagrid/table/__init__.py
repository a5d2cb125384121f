"""
Table model module.

This module provides the editable grid (columns, rows and their CRUD
operations) and the read-only projections handed to the export formatters.
"""

from datagrid.table.model import (
    Column,
    Row,
    Table,
    default_table,
    new_id,
)
from datagrid.table.projection import (
    Dataset,
    project,
    row_values,
    to_dataframe,
)

__all__ = [
    "Column",
    "Row",
    "Table",
    "default_table",
    "new_id",
    "Dataset",
    "project",
    "row_values",
    "to_dataframe",
]
