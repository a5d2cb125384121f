"""
Exception classes for datagrid.

These exceptions are raised by the persistence and export layers. The editor
session is the only place that turns them into user-visible notices.
"""


class DataGridError(Exception):
    """Base class for every error raised by datagrid."""
    pass


class StorageUnavailable(DataGridError):
    """Raised when the local key-value store cannot be read or written.

    Common causes include:
        - The storage directory is missing or not writable
        - The configured storage quota would be exceeded by the write
        - The underlying file system reports an I/O error

    The failed operation is never retried automatically; the user has to
    trigger the save again.
    """
    pass


class CorruptSnapshot(DataGridError):
    """Raised when a persisted snapshot cannot be decoded.

    Examples:
        - The stored text is not valid JSON
        - ``columns`` or ``rows`` is missing or has the wrong shape
        - Duplicate column or row ids
        - A row carries a cell for a column that does not exist
        - The snapshot declares an unsupported format version
    """
    pass


class ExportFailure(DataGridError):
    """Raised when a spreadsheet or document export cannot be produced.

    Wraps errors from openpyxl or reportlab during rendering, and file
    system errors while the generated document is being saved.
    """
    pass
