"""Editor configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from datagrid.export.document import REPORT_TITLE
from datagrid.export.spreadsheet import DEFAULT_SHEET_NAME, DEFAULT_TABLE_NAME
from datagrid.persistence import DEFAULT_STORAGE_KEY

DEFAULT_EXPORT_NAME = "meu-relatorio"

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def level_value(level: str | None) -> int:
    """Return the logging level numeric value for ``level``."""

    return _LEVELS.get((level or "info").lower(), logging.INFO)


def configure_logging(level: str | None = "info") -> None:
    """Send datagrid log records to stderr at ``level``; meant for scripts."""

    logging.basicConfig(
        level=level_value(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass
class EditorConfig:
    """Settings for an editor session.

    ``data_dir`` of None keeps snapshots in memory only; otherwise snapshots
    are files under that directory.
    """

    data_dir: Path | None = None
    export_dir: Path = field(default_factory=lambda: Path("exports"))
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_quota: int | None = None
    default_export_name: str = DEFAULT_EXPORT_NAME
    report_title: str = REPORT_TITLE
    sheet_name: str = DEFAULT_SHEET_NAME
    table_name: str = DEFAULT_TABLE_NAME
    log_level: str = "info"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides) -> "EditorConfig":
        """Build a config from ``DATAGRID_*`` environment variables.

        Explicit keyword overrides win, followed by the environment and
        finally the dataclass defaults.
        """

        env = os.environ if env is None else env
        values: dict[str, object] = {}

        if env.get("DATAGRID_DATA_DIR"):
            values["data_dir"] = Path(env["DATAGRID_DATA_DIR"])
        if env.get("DATAGRID_EXPORT_DIR"):
            values["export_dir"] = Path(env["DATAGRID_EXPORT_DIR"])
        if env.get("DATAGRID_STORAGE_KEY"):
            values["storage_key"] = env["DATAGRID_STORAGE_KEY"]
        if env.get("DATAGRID_STORAGE_QUOTA"):
            try:
                values["storage_quota"] = int(env["DATAGRID_STORAGE_QUOTA"])
            except ValueError as exc:
                raise ValueError(
                    f"DATAGRID_STORAGE_QUOTA must be an integer, got {env['DATAGRID_STORAGE_QUOTA']!r}"
                ) from exc
        if env.get("DATAGRID_LOG_LEVEL"):
            values["log_level"] = env["DATAGRID_LOG_LEVEL"]

        values.update(overrides)
        return cls(**values)
