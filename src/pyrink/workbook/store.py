"""Contract the sync engine consumes from a remote tabular workbook store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence


CellValue = Any


@dataclass(frozen=True)
class WorksheetRef:
    worksheet_id: str
    name: str


@dataclass
class HeaderRow:
    address: str
    column_count: Optional[int] = None
    values: List[List[CellValue]] = field(default_factory=list)

    @property
    def cells(self) -> List[CellValue]:
        return list(self.values[0]) if self.values else []


class WorkbookStore(Protocol):
    """Range and table primitives offered by the remote workbook.

    Every coroutine raises :class:`pyrink.errors.TransientStoreError` when the
    underlying call fails.
    """

    async def list_column_names(self, table: str) -> List[str]: ...

    async def list_row_values(self, table: str) -> List[List[CellValue]]: ...

    async def get_row_count(self, table: str) -> int: ...

    async def add_rows(self, table: str, rows: Sequence[Sequence[CellValue]]) -> None: ...

    async def get_worksheet(self, table: str) -> Optional[WorksheetRef]: ...

    async def find_worksheet_by_range(self, table: str) -> Optional[WorksheetRef]: ...

    async def get_header_row(self, table: str) -> HeaderRow: ...

    async def get_data_body_address(self, table: str) -> Optional[str]: ...

    async def clear_range(self, worksheet: WorksheetRef, address: str) -> None:
        """Clear cell contents only; raises RangeNotFoundError for a missing range."""
        ...

    async def write_range(
        self,
        worksheet: WorksheetRef,
        address: str,
        values: Sequence[Sequence[CellValue]],
    ) -> None: ...
