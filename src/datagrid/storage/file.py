"""
Directory-backed key-value store.

Each key is stored as one UTF-8 text file inside ``root``. Keys are
percent-encoded into file names so that any string is a valid key. Writes go
to a temporary file first and are moved into place, so a reader never sees a
half-written value.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote, unquote

from datagrid.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

_SUFFIX = ".kv"


class FileStore:
    """Persistent store keeping one file per key under ``root``.

    Attributes:
        root: Directory holding the stored values (created on first write)
        quota: Optional limit in bytes over all stored values
    """

    def __init__(self, root: Path | str, quota: int | None = None) -> None:
        if quota is not None and quota < 0:
            raise ValueError("Storage quota must be a non-negative integer")
        self.root = Path(root)
        self.quota = quota

    def path_for(self, key: str) -> Path:
        """Return the file that holds ``key``."""
        return self.root / f"{quote(key, safe='')}{_SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise StorageUnavailable(f"Cannot read {key!r} from {self.root}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            logger.error("Value under %r is not valid UTF-8 text: %s", key, exc)
            raise StorageUnavailable(f"Cannot encode {key!r} for storage: {exc}") from exc
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if self.quota is not None:
                used = self._usage(exclude=path)
                if used + len(data) > self.quota:
                    logger.warning(
                        "Write of %d bytes under %r exceeds quota (%d of %d bytes used)",
                        len(data), key, used, self.quota,
                    )
                    raise StorageUnavailable(
                        f"Storage quota of {self.quota} bytes exceeded while writing {key!r}"
                    )
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=_SUFFIX)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise StorageUnavailable(f"Cannot write {key!r} to {self.root}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot remove {key!r} from {self.root}: {exc}") from exc

    def keys(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            unquote(path.name[: -len(_SUFFIX)])
            for path in self.root.iterdir()
            if path.suffix == _SUFFIX and not path.name.startswith(".tmp-")
        )

    def _usage(self, exclude: Path) -> int:
        return sum(
            path.stat().st_size
            for path in self.root.iterdir()
            if path.suffix == _SUFFIX and path != exclude and not path.name.startswith(".tmp-")
        )
