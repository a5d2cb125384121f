"""Shared pytest configuration and fixtures for datagrid tests."""

import pytest

from datagrid.storage import MemoryStore
from datagrid.table import Column, Row, Table


@pytest.fixture
def contacts() -> Table:
    return Table(
        columns=[Column(id="col-1", name="Nome"), Column(id="col-2", name="Email")],
        rows=[Row(id="row-1", cells={"col-1": "João Silva", "col-2": "joao@exemplo.com"})],
    )


@pytest.fixture
def inventory() -> Table:
    table = Table()
    item = table.add_column("Item")
    qty = table.add_column("Quantidade")
    notes = table.add_column("Observações")
    for name, amount, note in [
        ("Caneta", "10", ""),
        ("Caderno", "", "capa dura"),
        ("Grampeador", "2", "com grampos extras, verificar estoque mensal"),
    ]:
        row = table.add_row()
        table.set_cell(row.id, item.id, name)
        table.set_cell(row.id, qty.id, amount)
        table.set_cell(row.id, notes.id, note)
    return table


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
