"""
Unit tests for the spreadsheet formatter.

Workbooks are built through the awaitable entry point and reopened with
openpyxl to check the sheet, the table region, column widths and cell text.
"""

import datetime
import time
import zipfile
from types import SimpleNamespace

import openpyxl.packaging.core
import pytest

from datagrid.exceptions import ExportFailure
from datagrid.export.spreadsheet import (
    DEFAULT_SHEET_NAME,
    DEFAULT_TABLE_NAME,
    MIN_COLUMN_WIDTH,
    TABLE_STYLE,
    column_width,
    render_spreadsheet,
    spreadsheet_filename,
)
from datagrid.table import project
from tests.helpers.exports import build_xlsx, load_xlsx, sheet_matrix


CONTACT_COLUMNS = ["Nome", "Email"]
CONTACT_ROWS = [{"Nome": "João Silva", "Email": "joao@exemplo.com"}]


class TestWorkbookLayout:
    """The single worksheet and its table region."""

    def test_single_named_worksheet(self):
        wb = load_xlsx(build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS))
        assert wb.sheetnames == [DEFAULT_SHEET_NAME]

    def test_custom_sheet_name(self):
        wb = load_xlsx(build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS, sheet_name="Contatos"))
        assert wb.sheetnames == ["Contatos"]

    def test_header_and_data_rows(self):
        """Scenario: Nome/Email with one row gives one header and one data row."""
        ws = load_xlsx(build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS)).active
        assert sheet_matrix(ws) == [
            ["Nome", "Email"],
            ["João Silva", "joao@exemplo.com"],
        ]

    def test_table_region(self):
        ws = load_xlsx(build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS)).active
        assert DEFAULT_TABLE_NAME in ws.tables
        table = ws.tables[DEFAULT_TABLE_NAME]
        assert table.ref == "A1:B2"
        assert table.tableStyleInfo.name == TABLE_STYLE
        assert table.tableStyleInfo.showRowStripes
        assert [column.name for column in table.tableColumns] == CONTACT_COLUMNS

    def test_widths_have_a_floor(self):
        """Scenario: Nome/Email columns are at least 12 wide."""
        ws = load_xlsx(build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS)).active
        assert ws.column_dimensions["A"].width >= MIN_COLUMN_WIDTH
        assert ws.column_dimensions["B"].width >= MIN_COLUMN_WIDTH
        assert ws.column_dimensions["B"].width == len("joao@exemplo.com") + 2

    def test_header_drives_width(self):
        ws = load_xlsx(build_xlsx(["Observações do cliente"], [{"Observações do cliente": "ok"}])).active
        assert ws.column_dimensions["A"].width == len("Observações do cliente") + 2


class TestCellContents:
    """Every row has one text value per column."""

    def test_zero_rows(self):
        ws = load_xlsx(build_xlsx(CONTACT_COLUMNS, [])).active
        assert sheet_matrix(ws) == [["Nome", "Email"]]
        assert ws.tables[DEFAULT_TABLE_NAME].ref == "A1:B2"

    def test_sparse_rows(self):
        rows = [{"Nome": "Ana"}, {"Email": "b@exemplo.com"}, {"Nome": None, "Email": None}]
        matrix = sheet_matrix(load_xlsx(build_xlsx(CONTACT_COLUMNS, rows)).active)

        assert matrix[0] == CONTACT_COLUMNS
        data = matrix[1:]
        assert data[0] == ["Ana", ""]
        assert data[1] == ["", "b@exemplo.com"]
        assert all(len(row) == len(CONTACT_COLUMNS) for row in data)
        assert "None" not in {value for row in data for value in row}

    def test_full_rows_from_table(self, inventory):
        dataset = project(inventory)
        matrix = sheet_matrix(load_xlsx(build_xlsx(dataset.columns, dataset.rows)).active)
        assert matrix[0] == ["Item", "Quantidade", "Observações"]
        assert len(matrix) == 4
        assert matrix[3] == ["Grampeador", "2", "com grampos extras, verificar estoque mensal"]

    def test_values_are_text_not_formulas(self):
        rows = [{"A": "=SUM(1,2)"}, {"A": "#N/A"}, {"A": "10"}]
        ws = load_xlsx(build_xlsx(["A"], rows)).active
        assert [ws.cell(row=r, column=1).value for r in (2, 3, 4)] == ["=SUM(1,2)", "#N/A", "10"]
        assert all(ws.cell(row=r, column=1).data_type == "s" for r in (2, 3, 4))

    def test_control_characters_are_dropped(self):
        ws = load_xlsx(build_xlsx(["A"], [{"A": "bell\x07"}])).active
        assert ws["A2"].value == "bell"

    def test_header_appears_once_in_order(self):
        columns = ["C", "A", "B"]
        ws = load_xlsx(build_xlsx(columns, [])).active
        header = [cell.value for cell in ws[1]]
        assert header == columns


class TestEdgeCases:

    def test_duplicate_headers_use_plain_filter(self):
        """Repeated names cannot form an Excel table; headers stay verbatim."""
        ws = load_xlsx(build_xlsx(["Nome", "nome"], [{"Nome": "a", "nome": "b"}])).active
        assert len(ws.tables) == 0
        assert ws.auto_filter.ref == "A1:B2"
        assert [cell.value for cell in ws[1]] == ["Nome", "nome"]

    def test_no_columns(self):
        ws = load_xlsx(build_xlsx([], [{}, {}])).active
        assert len(ws.tables) == 0
        assert ws.max_row == 1 and ws["A1"].value is None

    def test_invalid_sheet_name_raises_export_failure(self):
        with pytest.raises(ExportFailure, match="Failed to build spreadsheet"):
            render_spreadsheet(CONTACT_COLUMNS, CONTACT_ROWS, sheet_name="bad/name")


class TestDeterminism:

    def test_identical_input_gives_identical_bytes(self, inventory, monkeypatch):
        """Builds made a day apart are byte-identical."""
        dataset = project(inventory)
        first = build_xlsx(dataset.columns, dataset.rows)

        class NextDay(datetime.datetime):
            @classmethod
            def now(cls, tz=None):
                return datetime.datetime.now(tz) + datetime.timedelta(days=1)

        # Document properties and zip member times are the clock-dependent parts.
        monkeypatch.setattr(
            openpyxl.packaging.core, "datetime",
            SimpleNamespace(datetime=NextDay, timezone=datetime.timezone),
        )
        monkeypatch.setattr(
            zipfile, "time",
            SimpleNamespace(time=lambda: time.time() + 86400, localtime=time.localtime),
        )
        second = build_xlsx(dataset.columns, dataset.rows)
        assert first == second

    def test_different_input_gives_different_bytes(self):
        assert build_xlsx(["A"], [{"A": "1"}]) != build_xlsx(["A"], [{"A": "2"}])

    def test_sync_and_async_paths_agree(self):
        assert render_spreadsheet(CONTACT_COLUMNS, CONTACT_ROWS) == build_xlsx(CONTACT_COLUMNS, CONTACT_ROWS)


class TestHelpers:

    @pytest.mark.parametrize("base, expected", [
        ("meu-relatorio", "meu-relatorio.xlsx"),
        ("  relatorio  ", "relatorio.xlsx"),
        ("dados.xlsx", "dados.xlsx"),
        ("dados.XLSX", "dados.XLSX"),
    ])
    def test_spreadsheet_filename(self, base, expected):
        assert spreadsheet_filename(base) == expected

    def test_column_width(self):
        assert column_width("Nome", ["Ana"]) == MIN_COLUMN_WIDTH
        assert column_width("Nome", []) == MIN_COLUMN_WIDTH
        assert column_width("Nome", ["x" * 11]) == MIN_COLUMN_WIDTH
        assert column_width("Nome", ["x" * 12]) == 14
