"""Workbook table synchronization: addressing, codec, reader and writer."""

from .addressing import (
    CellReference,
    build_range_address,
    column_letters_to_number,
    column_number_to_letters,
    parse_cell_reference,
    quote_sheet_name,
)
from .codec import CODECS, RecordCodec, encode_events, encode_games, encode_players, get_codec
from .reader import ensure_columns, fetch_column_names, fetch_table_rows, normalize_row, read_table
from .rows import ColumnIndex, RowView
from .store import HeaderRow, WorkbookStore, WorksheetRef
from .writer import ReplacementPlan, pad_row, replace_table_rows

__all__ = [
    "CODECS",
    "CellReference",
    "ColumnIndex",
    "HeaderRow",
    "RecordCodec",
    "ReplacementPlan",
    "RowView",
    "WorkbookStore",
    "WorksheetRef",
    "build_range_address",
    "column_letters_to_number",
    "column_number_to_letters",
    "encode_events",
    "encode_games",
    "encode_players",
    "ensure_columns",
    "fetch_column_names",
    "fetch_table_rows",
    "get_codec",
    "normalize_row",
    "pad_row",
    "parse_cell_reference",
    "quote_sheet_name",
    "read_table",
    "replace_table_rows",
]
