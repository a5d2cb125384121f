"""
Read-only projections of a Table for export.

The export formatters do not know about column ids. They receive the column
display names in order and one mapping per row keyed by those names, which
is what ``project`` builds. ``to_dataframe`` offers the same projection as a
pandas DataFrame for ad-hoc analysis.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from datagrid.table.model import Table


@dataclass(frozen=True)
class Dataset:
    """Column names and name-keyed rows, detached from the source Table.

    Attributes:
        columns: Column display names in display order
        rows: One mapping per row, keyed by column display name
    """
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)


def project(table: Table) -> Dataset:
    """Project a Table onto display names.

    When two columns share a display name, the rightmost column's value
    wins in each row mapping.
    """
    columns = table.column_names
    rows = [
        {column.name: row.get(column.id) for column in table.columns}
        for row in table.rows
    ]
    return Dataset(columns=columns, rows=rows)


def row_values(columns: Sequence[str], row: Mapping[str, Optional[object]]) -> List[str]:
    """Return one text value per column for ``row``, in column order.

    Missing and ``None`` values become "" so exports never show null markers.
    """
    values = []
    for name in columns:
        value = row.get(name)
        values.append("" if value is None else str(value))
    return values


def to_dataframe(dataset: Dataset) -> pd.DataFrame:
    """Return the dataset as a DataFrame of strings with one column per name."""
    records = [row_values(dataset.columns, row) for row in dataset.rows]
    return pd.DataFrame(records, columns=list(dataset.columns), dtype=object)
