"""Read a workbook table into validated, decoded records."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Sequence

from pyrink.config.tables import TableKind, get_schema
from pyrink.errors import SchemaError
from pyrink.workbook.codec import get_codec
from pyrink.workbook.rows import ColumnIndex, RowView, canonical_key
from pyrink.workbook.store import CellValue, WorkbookStore


logger = logging.getLogger(__name__)


async def fetch_column_names(store: WorkbookStore, table: str) -> List[str]:
    return list(await store.list_column_names(table))


async def fetch_table_rows(store: WorkbookStore, table: str) -> List[List[CellValue]]:
    return [list(values) for values in await store.list_row_values(table)]


def ensure_columns(expected: Iterable[str], actual: Iterable[str], table_name: str) -> None:
    """Raise SchemaError naming every expected column absent from ``actual``.

    Comparison ignores case and surrounding whitespace.
    """

    present = {canonical_key(column) for column in actual}
    missing = [column for column in expected if canonical_key(column) not in present]
    if missing:
        raise SchemaError(table_name, missing)


def normalize_row(columns: Sequence[str], values: Sequence[CellValue]) -> RowView:
    """Address one row by column name; prefer :class:`ColumnIndex` for whole tables."""

    return ColumnIndex(columns).row(values)


def has_identifier(record: Any) -> bool:
    identifier = getattr(record, "id", None)
    return bool(identifier and str(identifier).strip())


async def read_table(store: WorkbookStore, table: str, kind: TableKind) -> List[Any]:
    """Fetch, validate and decode one table, dropping rows with a blank identifier.

    Blank-identifier rows are the unused tail of the table's allocated range
    (for example the single placeholder row left after saving nothing).
    """

    schema = get_schema(kind)
    columns, rows = await asyncio.gather(
        fetch_column_names(store, table),
        fetch_table_rows(store, table),
    )
    ensure_columns(schema.columns, columns, table)

    index = ColumnIndex(columns)
    decoded = get_codec(kind).decode(index.row(values) for values in rows)
    records = [record for record in decoded if has_identifier(record)]
    if len(records) != len(decoded):
        logger.debug(
            "Table %s: skipped %s rows without %s", table, len(decoded) - len(records), schema.id_column
        )
    logger.info("Read %s %s records from table %s", len(records), kind.value, table)
    return records
