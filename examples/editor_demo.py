"""
Demonstration of a scripted editor session.

Builds a small contact list, saves it to a snapshot directory, reopens it,
and exports it as both an Excel workbook and a PDF report.

Settings come from DATAGRID_* environment variables; by default snapshots go
to ./data and reports to ./exports.
"""

import asyncio
from pathlib import Path

from datagrid import EditorConfig, EditorSession, configure_logging


def main():
    """Walk through the edit, save, reload and export workflow."""

    config = EditorConfig.from_env()
    if config.data_dir is None:
        config.data_dir = Path("data")
    configure_logging(config.log_level)

    print("=" * 70)
    print("datagrid Editor Demo")
    print("=" * 70)
    print()

    session = EditorSession.open(config)
    if session.startup_notice:
        print(f"[{session.startup_notice.level}] {session.startup_notice.message}")

    phone = session.add_column("Telefone")
    for name, email, number in [
        ("Maria Souza", "maria@exemplo.com", "5555-0101"),
        ("Carlos Lima", "carlos@exemplo.com", ""),
    ]:
        row = session.add_row()
        session.set_cell(row.id, "col-1", name)
        session.set_cell(row.id, "col-2", email)
        session.set_cell(row.id, phone.id, number)

    print(session.frame().to_string(index=False))
    print()

    notice = session.save()
    print(f"[{notice.level}] {notice.message}")

    reopened = EditorSession.open(config)
    print(f"Reopened with {len(reopened.table.rows)} rows")

    notice = asyncio.run(reopened.export_spreadsheet("meu-relatorio"))
    print(f"[{notice.level}] {notice.message}")

    notice = reopened.export_document("meu-relatorio")
    print(f"[{notice.level}] {notice.message}")


if __name__ == "__main__":
    main()
