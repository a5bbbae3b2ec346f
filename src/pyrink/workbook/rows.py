"""Column-name lookup for raw table rows."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from pyrink.workbook.store import CellValue


def canonical_key(name: str) -> str:
    return name.strip().lower()


class ColumnIndex(Mapping[str, int]):
    """Ordered map from column key to position, built once per table read.

    Exact column names are registered first. Each column's canonical form
    (lowercased, trimmed) is then added as an alias unless that key is
    already present, so an exact-name match always wins over a canonical one.
    """

    def __init__(self, columns: Sequence[str]):
        self.columns = list(columns)
        positions: Dict[str, int] = {}
        for position, column in enumerate(self.columns):
            positions[column] = position
        for position, column in enumerate(self.columns):
            positions.setdefault(canonical_key(column), position)
        self._positions = positions

    def __getitem__(self, key: str) -> int:
        return self._positions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def locate(self, field: str) -> Optional[int]:
        """Position for ``field`` by exact name, falling back to its canonical form."""

        if field in self._positions:
            return self._positions[field]
        return self._positions.get(canonical_key(field))

    def row(self, values: Sequence[CellValue]) -> "RowView":
        return RowView(self, values)


class RowView:
    """A row's cell values addressed by column name through a shared ColumnIndex."""

    __slots__ = ("index", "values")

    def __init__(self, index: ColumnIndex, values: Sequence[CellValue]):
        self.index = index
        self.values: List[CellValue] = list(values)

    def get(self, field: str) -> CellValue:
        position = self.index.locate(field)
        if position is None or position >= len(self.values):
            return None
        return self.values[position]

    def __repr__(self) -> str:
        return f"RowView({dict(zip(self.index.columns, self.values))!r})"
