"""Configuration helpers for workbook location and table layouts."""

from .settings import WorkbookSettings
from .tables import TableKind, TableSchema, get_schema, iter_schemas, required_columns

__all__ = [
    "TableKind",
    "TableSchema",
    "WorkbookSettings",
    "get_schema",
    "iter_schemas",
    "required_columns",
]
