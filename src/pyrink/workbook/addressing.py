"""Column-letter arithmetic and A1-style range addresses."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple


DEFAULT_SHEET_NAME = "Sheet1"

_CELL_PATTERN = re.compile(r"^\$?([A-Za-z]+)\$?([1-9][0-9]*)$")
_NEEDS_QUOTING = re.compile(r"[\s'!]")


@dataclass(frozen=True)
class CellReference:
    column: str
    row: int

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


def column_letters_to_number(letters: str) -> int:
    """Interpret a bijective base-26 column label (A=1, Z=26, AA=27)."""

    label = letters.strip().upper()
    if not label or not label.isascii() or not label.isalpha():
        raise ValueError(f"Invalid column label {letters!r}")
    number = 0
    for char in label:
        number = number * 26 + (ord(char) - ord("A") + 1)
    return number


def column_number_to_letters(number: int) -> str:
    """Inverse of :func:`column_letters_to_number`; there is no zero digit."""

    if number < 1:
        raise ValueError(f"Column number must be >= 1, got {number}")
    letters = []
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def parse_cell_reference(ref: str) -> CellReference:
    """Split ``"C4"`` (optionally ``"Sheet1!$C$4"``) into column letters and row."""

    _, _, cell = ref.strip().rpartition("!")
    match = _CELL_PATTERN.match(cell)
    if not match:
        raise ValueError(f"Invalid cell reference {ref!r}")
    return CellReference(column=match.group(1).upper(), row=int(match.group(2)))


def quote_sheet_name(name: Optional[str]) -> str:
    if not name:
        return DEFAULT_SHEET_NAME
    if _NEEDS_QUOTING.search(name):
        return "'" + name.replace("'", "''") + "'"
    return name


def unquote_sheet_name(name: str) -> str:
    if len(name) >= 2 and name.startswith("'") and name.endswith("'"):
        return name[1:-1].replace("''", "'")
    return name


def build_range_address(
    sheet_name: str,
    start_column: str,
    start_row: int,
    column_count: int,
    row_count: int,
) -> str:
    """Format ``"<sheet>!<start>:<end>"`` for a block anchored at a start cell.

    ``sheet_name`` is used verbatim; pass it through :func:`quote_sheet_name`
    first when it comes straight from the workbook.
    """

    if column_count < 1 or row_count < 1:
        raise ValueError(f"Range must span at least one cell, got {column_count}x{row_count}")
    start_column = start_column.upper()
    end_column = column_number_to_letters(column_letters_to_number(start_column) + column_count - 1)
    end_row = start_row + row_count - 1
    return f"{sheet_name}!{start_column}{start_row}:{end_column}{end_row}"


def split_range_address(address: str) -> Tuple[Optional[str], str, Optional[str]]:
    """Split ``"'My Sheet'!B2:E9"`` into (sheet name, start cell, end cell).

    The sheet name is returned unquoted, or ``None`` when the address has no
    sheet qualifier. The end cell is ``None`` for single-cell addresses.
    """

    sheet, bang, cells = address.strip().rpartition("!")
    start, _, end = cells.partition(":")
    return (unquote_sheet_name(sheet) if bang else None), start, (end or None)
