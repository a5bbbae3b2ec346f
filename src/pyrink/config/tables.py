"""Required column layout for each workbook table kind."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple, Union


class TableKind(str, Enum):
    ROSTER = "roster"
    GAMES = "games"
    EVENTS = "events"


@dataclass(frozen=True)
class TableSchema:
    kind: TableKind
    id_column: str
    columns: Tuple[str, ...]

    @property
    def column_count(self) -> int:
        return len(self.columns)


_TABLE_SCHEMAS: Dict[TableKind, TableSchema] = {
    TableKind.ROSTER: TableSchema(
        kind=TableKind.ROSTER,
        id_column="PlayerId",
        columns=("PlayerId", "number", "name", "position"),
    ),
    TableKind.GAMES: TableSchema(
        kind=TableKind.GAMES,
        id_column="GameId",
        columns=("GameId", "opponent", "date", "status"),
    ),
    TableKind.EVENTS: TableSchema(
        kind=TableKind.EVENTS,
        id_column="EventId",
        columns=(
            "EventId",
            "GameId",
            "createdAt",
            "period",
            "clock",
            "type",
            "strength",
            "goalPlayerId",
            "assistIds",
            "plusPlayerIds",
            "minusPlayerIds",
            "penaltyPlayerId",
            "penaltyInfraction",
            "penaltySeverity",
            "penaltyMinutes",
            "notes",
        ),
    ),
}


def iter_schemas() -> Iterable[TableSchema]:
    """Return an iterator over every registered table schema."""

    return _TABLE_SCHEMAS.values()


def get_schema(kind: Union[TableKind, str]) -> TableSchema:
    """Fetch the schema for a table kind, raising KeyError if unknown."""

    try:
        key = TableKind(kind.lower() if isinstance(kind, str) else kind)
    except ValueError:
        raise KeyError(f"No table schema configured for kind={kind!r}") from None
    return _TABLE_SCHEMAS[key]


def required_columns(kind: Union[TableKind, str]) -> Tuple[str, ...]:
    return get_schema(kind).columns
