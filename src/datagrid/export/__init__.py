"""
Export module for datagrid.

Two formatters turn a dataset (column names plus name-keyed rows) into files:
``build_spreadsheet`` is awaitable and returns ``.xlsx`` bytes without side
effects; ``export_document`` is synchronous and saves a PDF report itself.
"""

from datagrid.export.document import (
    DOCUMENT_EXTENSION,
    REPORT_TITLE,
    document_filename,
    export_document,
    render_document,
    table_data,
)
from datagrid.export.spreadsheet import (
    SPREADSHEET_EXTENSION,
    build_spreadsheet,
    column_width,
    render_spreadsheet,
    spreadsheet_filename,
)

__all__ = [
    "DOCUMENT_EXTENSION",
    "REPORT_TITLE",
    "document_filename",
    "export_document",
    "render_document",
    "table_data",
    "SPREADSHEET_EXTENSION",
    "build_spreadsheet",
    "column_width",
    "render_spreadsheet",
    "spreadsheet_filename",
]
