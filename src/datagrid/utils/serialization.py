"""
Table serialization utilities.

Provides JSON serialization and deserialization for tables. The serialized
format includes a version key so that stored snapshots can be migrated when
the Column/Row shapes change. Snapshots without a version are read as the
legacy layout, where each row is a flat object holding its ``id`` next to one
key per column id.
"""

import json
from typing import Any, Dict, List

from ..table.model import Table


# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def serialize(table: Table) -> Dict[str, Any]:
    """Serialize a table to a JSON-serializable dictionary.

    The serialized format includes:
    - version: Format version string for forward compatibility
    - columns: List of ``{"id", "name"}`` objects in display order
    - rows: List of ``{"id", "cells"}`` objects in display order

    Args:
        table: The table to serialize

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If table is not a Table instance

    Example:
        >>> table = Table()
        >>> _ = table.add_column("Nome")
        >>> data = serialize(table)
        >>> assert data["version"] == "1.0"
        >>> assert data["columns"][0]["name"] == "Nome"
    """
    if not isinstance(table, Table):
        raise TypeError(f"Expected Table, got {type(table)}")

    data = table.to_dict()
    return {
        "version": SERIALIZATION_VERSION,
        "columns": data["columns"],
        "rows": data["rows"],
    }


def deserialize(data: Dict[str, Any]) -> Table:
    """Deserialize a table from a dictionary.

    Args:
        data: Dictionary containing serialized table data

    Returns:
        Reconstructed Table instance

    Raises:
        ValueError: If data is missing required fields, has an invalid
            structure or declares an unsupported version
        TypeError: If data is not a dictionary
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    if "columns" not in data:
        raise ValueError("Serialized table must have 'columns' field")
    if "rows" not in data:
        raise ValueError("Serialized table must have 'rows' field")

    version = data.get("version")
    if version is None:
        rows = [_migrate_legacy_row(item) for item in _as_list(data["rows"], "rows")]
    elif version == SERIALIZATION_VERSION:
        rows = [_read_row(item) for item in _as_list(data["rows"], "rows")]
    else:
        raise ValueError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    columns = [_read_column(item) for item in _as_list(data["columns"], "columns")]
    return Table.from_dict({"columns": columns, "rows": rows})


def to_json(table: Table, **kwargs) -> str:
    """Serialize a table to a JSON string.

    Args:
        table: The table to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)

    Returns:
        JSON string representation of the table
    """
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(serialize(table), **kwargs)


def from_json(json_str: str) -> Table:
    """Deserialize a table from a JSON string.

    Args:
        json_str: JSON string containing a serialized table

    Returns:
        Reconstructed Table instance

    Raises:
        ValueError: If JSON is invalid or the table structure is invalid
        TypeError: If json_str is not a string or does not hold an object
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    return deserialize(data)


def _as_list(value: Any, field_name: str) -> List[Any]:
    if not isinstance(value, list):
        raise ValueError(f"'{field_name}' must be a list, got {type(value).__name__}")
    return value


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _read_column(item: Any) -> Dict[str, str]:
    if not isinstance(item, dict):
        raise ValueError(f"Column entry must be an object, got {type(item).__name__}")
    try:
        return {
            "id": _require_str(item["id"], "Column id"),
            "name": _require_str(item["name"], "Column name"),
        }
    except KeyError as e:
        raise ValueError(f"Missing required field in column: {e}") from e


def _read_row(item: Any) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise ValueError(f"Row entry must be an object, got {type(item).__name__}")
    if "id" not in item:
        raise ValueError("Missing required field in row: 'id'")
    row_id = _require_str(item["id"], "Row id")
    cells = item.get("cells", {})
    if not isinstance(cells, dict):
        raise ValueError(f"Cells of row {row_id!r} must be an object")
    return {
        "id": row_id,
        "cells": {key: _require_str(value, f"Cell {row_id}/{key}") for key, value in cells.items()},
    }


def _migrate_legacy_row(item: Any) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise ValueError(f"Row entry must be an object, got {type(item).__name__}")
    if "id" not in item:
        raise ValueError("Missing required field in row: 'id'")
    row_id = _require_str(item["id"], "Row id")
    cells = {
        key: _require_str(value, f"Cell {row_id}/{key}")
        for key, value in item.items()
        if key != "id"
    }
    return {"id": row_id, "cells": cells}
