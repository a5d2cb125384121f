"""
PDF report export backed by reportlab.

Renders a title block and one table spanning as many A4 pages as needed:
- header row repeated at the top of every page
- grid borders and alternating row shading
- cell text wrapped inside equal-width columns, never truncated

``export_document`` saves the report to disk as its outcome and returns
nothing; ``render_document`` produces the same PDF in memory.
"""

from __future__ import annotations

import datetime
import io
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import LongTable, Paragraph, SimpleDocTemplate, Spacer, TableStyle

from datagrid.exceptions import ExportFailure
from datagrid.table.projection import row_values

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSION = ".pdf"
REPORT_TITLE = "Sistema da Denise - Exportação de Dados"
TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"

PAGE_SIZE = A4
PAGE_MARGIN = 14 * mm

NAVY = colors.Color(0, 27 / 255, 61 / 255)
BODY_TEXT = colors.Color(50 / 255, 50 / 255, 50 / 255)
STAMP_TEXT = colors.Color(100 / 255, 100 / 255, 100 / 255)
ALTERNATE_ROW = colors.Color(245 / 255, 245 / 255, 245 / 255)
GRID_LINE = colors.Color(200 / 255, 200 / 255, 200 / 255)
CELL_PADDING = 3

TITLE_STYLE = ParagraphStyle(
    "ReportTitle", fontName="Helvetica", fontSize=18, leading=22, textColor=NAVY,
)
STAMP_STYLE = ParagraphStyle(
    "ReportStamp", fontName="Helvetica", fontSize=10, leading=12, textColor=STAMP_TEXT,
)
HEADER_STYLE = ParagraphStyle(
    "TableHeader", fontName="Helvetica-Bold", fontSize=10, leading=12,
    textColor=colors.white, alignment=TA_CENTER,
)
BODY_STYLE = ParagraphStyle(
    "TableBody", fontName="Helvetica", fontSize=9, leading=11, textColor=BODY_TEXT,
)


def document_filename(base: str) -> str:
    """Return ``base`` with the document extension appended once."""
    base = base.strip()
    if base.lower().endswith(DOCUMENT_EXTENSION):
        return base
    return f"{base}{DOCUMENT_EXTENSION}"


def table_data(columns: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> List[List[str]]:
    """Return the header row followed by one text row per data row."""
    columns = list(columns)
    return [columns] + [row_values(columns, row) for row in rows]


def export_document(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    filename: str,
    *,
    directory: Union[str, Path] = ".",
    title: str = REPORT_TITLE,
    generated_at: Optional[datetime.datetime] = None,
) -> None:
    """Render the report and save it as ``<directory>/<filename>.pdf``.

    Args:
        columns: Column display names, in order
        rows: One mapping per row keyed by column display name
        filename: Base file name; the ``.pdf`` extension is appended
        directory: Folder the document is saved into (created if missing)
        title: Report title shown at the top of page 1
        generated_at: Timestamp shown under the title (defaults to now)

    Raises:
        ExportFailure: If rendering or saving the document fails
    """
    path = Path(directory) / document_filename(filename)
    data = render_document(columns, rows, title=title, generated_at=generated_at)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except (OSError, ValueError) as exc:
        logger.error("Could not save document to %s: %s", path, exc)
        raise ExportFailure(f"Failed to save document {path}: {exc}") from exc
    logger.info("Saved document %s (%d bytes)", path, len(data))


def render_document(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    *,
    title: str = REPORT_TITLE,
    generated_at: Optional[datetime.datetime] = None,
) -> bytes:
    """Render the report to PDF bytes.

    Raises:
        ExportFailure: If reportlab cannot lay out the document
    """
    generated_at = generated_at or datetime.datetime.now()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=PAGE_SIZE,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title,
    )
    try:
        story = [
            Paragraph(_markup(title), TITLE_STYLE),
            Paragraph(_markup(f"Gerado em: {generated_at.strftime(TIMESTAMP_FORMAT)}"), STAMP_STYLE),
            Spacer(1, 4 * mm),
        ]
        if columns:
            story.append(build_table(columns, rows, doc.width))
        doc.build(story)
    except Exception as exc:
        logger.error("Document export failed: %s", exc)
        raise ExportFailure(f"Failed to build document: {exc}") from exc
    return buffer.getvalue()


def build_table(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    width: float,
) -> LongTable:
    """Build the report table flowable, sharing ``width`` equally between columns."""
    data = table_data(columns, rows)
    header, body = data[0], data[1:]
    cells = [[Paragraph(_markup(text), HEADER_STYLE) for text in header]]
    cells += [[Paragraph(_markup(text), BODY_STYLE) for text in values] for values in body]

    col_width = width / len(header)
    table = LongTable(cells, colWidths=[col_width] * len(header), repeatRows=1, splitInRow=1)
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_LINE),
        ("BACKGROUND", (0, 0), (-1, 0), NAVY),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ALTERNATE_ROW]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), CELL_PADDING),
        ("BOTTOMPADDING", (0, 0), (-1, -1), CELL_PADDING),
        ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
        ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
    ]))
    return table


def _markup(text: str) -> str:
    # Paragraph parses a mini-markup; keep user text literal and its line breaks.
    return escape(text).replace("\n", "<br/>")
