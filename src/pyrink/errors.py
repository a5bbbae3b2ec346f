"""Exceptions raised while synchronizing workbook tables."""

from __future__ import annotations

from typing import Sequence


class WorkbookSyncError(Exception):
    """Base class for every failure surfaced by the sync engine."""


class ConfigurationError(WorkbookSyncError):
    """A required identifier (document location or table name) is missing."""


class SchemaError(WorkbookSyncError):
    """A live table lacks one or more required columns."""

    def __init__(self, table_name: str, missing_columns: Sequence[str]):
        self.table_name = table_name
        self.missing_columns = list(missing_columns)
        super().__init__(
            f"Table {table_name} is missing expected columns: {', '.join(self.missing_columns)}"
        )


class HeaderOrderError(SchemaError):
    """A live table has its required columns, but not in the encoded order."""

    def __init__(self, table_name: str, mismatched_columns: Sequence[str], expected_columns: Sequence[str]):
        self.table_name = table_name
        self.missing_columns = []
        self.mismatched_columns = list(mismatched_columns)
        self.expected_columns = list(expected_columns)
        WorkbookSyncError.__init__(
            self,
            f"Table {table_name} header is out of schema order at: {', '.join(self.mismatched_columns)} "
            f"(expected {', '.join(self.expected_columns)})",
        )


class ResolutionError(WorkbookSyncError):
    """Worksheet identity or column count could not be determined for a table."""


class TransientStoreError(WorkbookSyncError):
    """A call against the remote workbook store failed."""

    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RangeNotFoundError(TransientStoreError):
    """The addressed range does not exist (for example, a table without a data body)."""
