"""
Spreadsheet export backed by openpyxl.

Builds a single-worksheet ``.xlsx`` workbook from column names and name-keyed
rows and returns it as bytes. The formatter has no side effects: writing the
buffer to disk or offering it for download is the caller's job.

Output is byte-for-byte reproducible. openpyxl stamps the document
properties with the save time and the zip members with the local clock, so
both are pinned to fixed values after the workbook is written.
"""

from __future__ import annotations

import asyncio
import datetime
import io
import logging
import zipfile
from typing import Any, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo
from openpyxl.xml.constants import ARC_CORE
from openpyxl.xml.functions import tostring

from datagrid.exceptions import ExportFailure
from datagrid.table.projection import row_values

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSION = ".xlsx"
DEFAULT_SHEET_NAME = "Dados"
DEFAULT_TABLE_NAME = "TabelaDados"
TABLE_STYLE = "TableStyleMedium2"

MIN_COLUMN_WIDTH = 12
COLUMN_PADDING = 2

_PINNED_TIMESTAMP = datetime.datetime(2000, 1, 1)
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def spreadsheet_filename(base: str) -> str:
    """Return ``base`` with the spreadsheet extension appended once."""
    base = base.strip()
    if base.lower().endswith(SPREADSHEET_EXTENSION):
        return base
    return f"{base}{SPREADSHEET_EXTENSION}"


def column_width(name: str, values: Sequence[str]) -> int:
    """Width for a column holding ``name`` as header and ``values`` below it.

    Columns narrower than MIN_COLUMN_WIDTH characters are widened to it;
    wider columns get the longest text length plus COLUMN_PADDING.
    """
    longest = max([len(name)] + [len(value) for value in values])
    if longest < MIN_COLUMN_WIDTH:
        return MIN_COLUMN_WIDTH
    return longest + COLUMN_PADDING


async def build_spreadsheet(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    *,
    sheet_name: str = DEFAULT_SHEET_NAME,
    table_name: str = DEFAULT_TABLE_NAME,
) -> bytes:
    """Render the dataset as an ``.xlsx`` workbook.

    The workbook is composed in a worker thread; await the result before
    handing the bytes on.

    Args:
        columns: Column display names, in order
        rows: One mapping per row keyed by column display name
        sheet_name: Title of the single worksheet
        table_name: Display name of the Excel table region

    Returns:
        The workbook as bytes; identical input yields identical bytes

    Raises:
        ExportFailure: If openpyxl cannot build the workbook
    """
    return await asyncio.to_thread(
        render_spreadsheet, columns, rows, sheet_name=sheet_name, table_name=table_name
    )


def render_spreadsheet(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    *,
    sheet_name: str = DEFAULT_SHEET_NAME,
    table_name: str = DEFAULT_TABLE_NAME,
) -> bytes:
    """Synchronous body of ``build_spreadsheet``."""
    columns = list(columns)
    matrix = [row_values(columns, row) for row in rows]
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name

        for col_idx, name in enumerate(columns, start=1):
            _write_text(ws.cell(row=1, column=col_idx), name)
        for row_idx, values in enumerate(matrix, start=2):
            for col_idx, value in enumerate(values, start=1):
                _write_text(ws.cell(row=row_idx, column=col_idx), value)

        if columns:
            _add_table_region(ws, columns, len(matrix), table_name)
            for col_idx, name in enumerate(columns, start=1):
                letter = get_column_letter(col_idx)
                ws.column_dimensions[letter].width = column_width(
                    name, [values[col_idx - 1] for values in matrix]
                )

        buffer = io.BytesIO()
        wb.save(buffer)
        data = _pin_archive(buffer.getvalue(), wb)
    except Exception as exc:
        logger.error("Spreadsheet export failed: %s", exc)
        raise ExportFailure(f"Failed to build spreadsheet: {exc}") from exc

    logger.debug(
        "Built spreadsheet %r (%d columns, %d rows, %d bytes)",
        sheet_name, len(columns), len(matrix), len(data),
    )
    return data


def _write_text(cell, value: str) -> None:
    """Store ``value`` as literal text.

    openpyxl turns strings starting with "=" into formulas and strings like
    "#N/A" into error values; cell values here are always plain text.
    """
    cell.value = ILLEGAL_CHARACTERS_RE.sub("", value)
    if cell.data_type != "s":
        cell.data_type = "s"


def _add_table_region(ws, columns: list[str], row_count: int, table_name: str) -> None:
    # An Excel table always spans at least one body row.
    last_row = max(row_count, 1) + 1
    ref = f"A1:{get_column_letter(len(columns))}{last_row}"

    if not _valid_table_headers(columns):
        # Excel rejects tables with blank or repeated header names.
        ws.auto_filter.ref = ref
        return

    table = Table(displayName=table_name, ref=ref)
    table.tableStyleInfo = TableStyleInfo(
        name=TABLE_STYLE,
        showFirstColumn=False,
        showLastColumn=False,
        showRowStripes=True,
        showColumnStripes=False,
    )
    ws.add_table(table)


def _valid_table_headers(columns: list[str]) -> bool:
    seen = set()
    for name in columns:
        key = ILLEGAL_CHARACTERS_RE.sub("", name).strip().lower()
        if not key or key in seen:
            return False
        seen.add(key)
    return True


def _pin_archive(raw: bytes, wb: Workbook) -> bytes:
    """Rewrite the saved archive with fixed timestamps."""
    wb.properties.created = _PINNED_TIMESTAMP
    wb.properties.modified = _PINNED_TIMESTAMP
    core = tostring(wb.properties.to_tree())

    output = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(raw)) as source, \
            zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            data = core if info.filename == ARC_CORE else source.read(info.filename)
            member = zipfile.ZipInfo(info.filename, date_time=_ZIP_EPOCH)
            member.compress_type = zipfile.ZIP_DEFLATED
            target.writestr(member, data)
    return output.getvalue()
