"""Full-table replacement against a live workbook table.

The writer never deletes and recreates the table. It reuses the table's live
geometry: the header row stays where it is, rows are bulk-appended when the
table must grow, and when it must shrink the surplus rows are overwritten
with blanks so no stale record survives. Everything lands in one range write.

Two consequences follow from writing the *live* header back verbatim:

* any column wider than the resolved column count is blanked, since rows
  are padded (never truncated) to that count;
* the encoded cell order must match the live header order. Before
  committing, :func:`check_header_order` fails fast on a mismatch instead of
  letting values land under the wrong header.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from pyrink.errors import HeaderOrderError, RangeNotFoundError, ResolutionError
from pyrink.workbook.addressing import (
    build_range_address,
    parse_cell_reference,
    quote_sheet_name,
    split_range_address,
)
from pyrink.workbook.rows import canonical_key
from pyrink.workbook.store import CellValue, HeaderRow, WorkbookStore, WorksheetRef


logger = logging.getLogger(__name__)


@dataclass
class ReplacementPlan:
    worksheet: WorksheetRef
    address: str
    column_count: int
    header: List[CellValue]
    rows: List[List[CellValue]]
    appended_rows: int


def pad_row(row: Sequence[CellValue], column_count: int) -> List[CellValue]:
    """Right-pad ``row`` with empty cells up to ``column_count``.

    Rows already at least ``column_count`` wide are returned unchanged.
    """

    if len(row) >= column_count:
        return list(row)
    return list(row) + [""] * (column_count - len(row))


def blank_row(column_count: int) -> List[CellValue]:
    return [""] * column_count


async def resolve_worksheet(store: WorkbookStore, table: str) -> WorksheetRef:
    worksheet = await store.get_worksheet(table)
    if worksheet is None:
        logger.debug("Table %s: worksheet lookup empty; trying range address", table)
        worksheet = await store.find_worksheet_by_range(table)
    if worksheet is None:
        raise ResolutionError(f"Unable to resolve worksheet for table {table}")
    return worksheet


def resolve_column_count(header: HeaderRow, rows: Sequence[Sequence[CellValue]]) -> int:
    """Declared count, else header width, else width of the first row to write."""

    for candidate in (
        header.column_count,
        len(header.cells),
        len(rows[0]) if rows else 0,
    ):
        if candidate and candidate > 0:
            return candidate
    return 0


def reconcile_rows(
    rows: Sequence[Sequence[CellValue]],
    column_count: int,
    current_count: int,
) -> List[List[CellValue]]:
    """Pad rows to the column count and to at least ``current_count`` rows.

    An empty target becomes a single blank row so the table never collapses
    to a header with no body.
    """

    padded = [pad_row(row, column_count) for row in rows]
    if not padded:
        padded.append(blank_row(column_count))
    while len(padded) < current_count:
        padded.append(blank_row(column_count))
    return padded


def check_header_order(header: Sequence[CellValue], expected: Sequence[str], table: str) -> None:
    """Fail when the live header does not start with ``expected`` in order."""

    live = [canonical_key(str(cell or "")) for cell in header[: len(expected)]]
    wanted = [canonical_key(column) for column in expected]
    if live != wanted:
        mismatched = [
            column
            for position, column in enumerate(expected)
            if position >= len(live) or live[position] != canonical_key(column)
        ]
        raise HeaderOrderError(table, mismatched, expected)


def destination_address(
    header: HeaderRow,
    worksheet: WorksheetRef,
    column_count: int,
    row_count: int,
) -> str:
    sheet_name, start_cell, _ = split_range_address(header.address)
    try:
        anchor = parse_cell_reference(start_cell)
    except ValueError as exc:
        raise ResolutionError(f"Unusable header address {header.address!r}") from exc
    return build_range_address(
        quote_sheet_name(sheet_name or worksheet.name),
        anchor.column,
        anchor.row,
        column_count,
        1 + row_count,
    )


async def clear_data_body(store: WorkbookStore, table: str, worksheet: WorksheetRef) -> None:
    address = await store.get_data_body_address(table)
    if not address:
        logger.debug("Table %s has no data body to clear", table)
        return
    try:
        await store.clear_range(worksheet, address)
    except RangeNotFoundError:
        logger.debug("Table %s: data body %s no longer exists; nothing to clear", table, address)


async def replace_table_rows(
    store: WorkbookStore,
    table: str,
    rows: Sequence[Sequence[CellValue]],
    *,
    expected_columns: Optional[Sequence[str]] = None,
) -> ReplacementPlan:
    """Make ``table`` hold exactly ``rows`` beneath its current header.

    ``expected_columns`` is the order ``rows`` were encoded in; when given the
    live header must start with those columns in the same order.
    """

    worksheet = await resolve_worksheet(store, table)

    header = await store.get_header_row(table)
    column_count = resolve_column_count(header, rows)
    if column_count <= 0:
        raise ResolutionError(f"Unable to determine column count for table {table}")
    header_cells = pad_row(header.cells, column_count)
    if expected_columns is not None:
        check_header_order(header_cells, expected_columns, table)

    current_count = await store.get_row_count(table)
    body = reconcile_rows(rows, column_count, current_count)
    address = destination_address(header, worksheet, column_count, len(body))
    appended = max(len(body) - current_count, 0)
    if appended:
        await store.add_rows(table, [blank_row(column_count) for _ in range(appended)])

    await clear_data_body(store, table, worksheet)
    await store.write_range(worksheet, address, [header_cells, *body])

    logger.info(
        "Wrote %s rows (%s records, %s appended) to table %s at %s",
        len(body),
        len(rows),
        appended,
        table,
        address,
    )
    return ReplacementPlan(
        worksheet=worksheet,
        address=address,
        column_count=column_count,
        header=header_cells,
        rows=body,
        appended_rows=appended,
    )
