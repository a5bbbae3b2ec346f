"""Map stat book records to flat string cells and back."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from pyrink.config.tables import TableKind, get_schema
from pyrink.models import (
    EventType,
    GameEvent,
    GameStatus,
    GameSummary,
    GoalStrength,
    PenaltySeverity,
    Player,
)
from pyrink.workbook.rows import RowView


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
EnumT = TypeVar("EnumT", bound=Enum)


def as_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def encode_array(values: Optional[Sequence[str]]) -> str:
    if not values:
        return ""
    return json.dumps(list(values), separators=(",", ":"))


def cell_text(value: Any) -> Optional[str]:
    """Render a loosely-typed cell as text; ``None`` stays ``None``."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(value: Any) -> Optional[float]:
    """Permissive numeric parse; blank or uncoercible input yields ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except (ValueError, OverflowError):
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    number = parse_number(value)
    return default if number is None else int(number)


def parse_array(value: Any) -> List[str]:
    """Decode a JSON array cell, collapsing any failure to an empty list.

    Partially corrupt cells (truncated JSON, a bare scalar, an object) must
    never break a table read, so every failure mode here ends in ``[]``.
    """

    text = cell_text(value)
    if not text or not text.strip():
        return []
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed array cell %r", text)
        return []
    if not isinstance(parsed, list):
        return []
    return [cell_text(item) or "" for item in parsed if item is not None]


def parse_text(value: Any, default: str = "") -> str:
    text = cell_text(value)
    return default if text is None else text


def parse_optional_text(value: Any) -> Optional[str]:
    text = cell_text(value)
    return text if text else None


def parse_choice(value: Any, choices: Type[EnumT], default: Optional[EnumT]) -> Optional[EnumT]:
    text = (cell_text(value) or "").strip()
    if not text:
        return default
    try:
        return choices(text)
    except ValueError:
        pass
    for member in choices:
        if member.value.lower() == text.lower():
            return member
    logger.debug("Unknown %s value %r; using %s", choices.__name__, text, default)
    return default


def player_to_cells(player: Player) -> List[str]:
    return [
        as_cell(player.id),
        as_cell(player.number),
        as_cell(player.name),
        as_cell(player.position),
    ]


def game_to_cells(game: GameSummary) -> List[str]:
    return [
        as_cell(game.id),
        as_cell(game.opponent),
        as_cell(game.date),
        as_cell(game.status),
    ]


def event_to_cells(event: GameEvent) -> List[str]:
    return [
        as_cell(event.id),
        as_cell(event.game_id),
        as_cell(event.created_at),
        as_cell(event.period),
        as_cell(event.clock),
        as_cell(event.type),
        as_cell(event.strength),
        as_cell(event.goal_player_id),
        encode_array(event.assist_ids),
        encode_array(event.plus_player_ids),
        encode_array(event.minus_player_ids),
        as_cell(event.penalty_player_id),
        as_cell(event.penalty_infraction),
        as_cell(event.penalty_severity),
        as_cell(event.penalty_minutes),
        as_cell(event.notes),
    ]


def decode_player(row: RowView) -> Player:
    return Player(
        id=parse_text(row.get("PlayerId")),
        number=parse_int(row.get("number"), default=0),
        name=parse_text(row.get("name")),
        position=parse_optional_text(row.get("position")),
    )


def decode_game(row: RowView) -> GameSummary:
    return GameSummary(
        id=parse_text(row.get("GameId")),
        opponent=parse_text(row.get("opponent")),
        date=parse_text(row.get("date")),
        status=parse_choice(row.get("status"), GameStatus, GameStatus.SCHEDULED),
    )


def decode_event(row: RowView) -> GameEvent:
    return GameEvent(
        id=parse_text(row.get("EventId")),
        game_id=parse_text(row.get("GameId")),
        created_at=parse_text(row.get("createdAt")),
        period=parse_int(row.get("period"), default=0),
        clock=parse_text(row.get("clock")),
        type=parse_choice(row.get("type"), EventType, EventType.GOAL_FOR),
        strength=parse_choice(row.get("strength"), GoalStrength, GoalStrength.EVEN),
        goal_player_id=parse_optional_text(row.get("goalPlayerId")),
        assist_ids=parse_array(row.get("assistIds")),
        plus_player_ids=parse_array(row.get("plusPlayerIds")),
        minus_player_ids=parse_array(row.get("minusPlayerIds")),
        penalty_player_id=parse_optional_text(row.get("penaltyPlayerId")),
        penalty_infraction=parse_optional_text(row.get("penaltyInfraction")),
        penalty_severity=parse_choice(row.get("penaltySeverity"), PenaltySeverity, None),
        penalty_minutes=parse_int(row.get("penaltyMinutes")),
        notes=parse_text(row.get("notes")),
    )


@dataclass(frozen=True)
class RecordCodec(Generic[RecordT]):
    kind: TableKind
    encode_one: Callable[[RecordT], List[str]]
    decode_one: Callable[[RowView], RecordT]

    @property
    def columns(self) -> Sequence[str]:
        return get_schema(self.kind).columns

    def encode(self, records: Iterable[RecordT]) -> List[List[str]]:
        return [self.encode_one(record) for record in records]

    def decode(self, rows: Iterable[RowView]) -> List[RecordT]:
        return [self.decode_one(row) for row in rows]


CODECS: Dict[TableKind, RecordCodec[Any]] = {
    TableKind.ROSTER: RecordCodec(TableKind.ROSTER, player_to_cells, decode_player),
    TableKind.GAMES: RecordCodec(TableKind.GAMES, game_to_cells, decode_game),
    TableKind.EVENTS: RecordCodec(TableKind.EVENTS, event_to_cells, decode_event),
}


def get_codec(kind: TableKind) -> RecordCodec[Any]:
    return CODECS[kind]


def encode_players(players: Iterable[Player]) -> List[List[str]]:
    return CODECS[TableKind.ROSTER].encode(players)


def encode_games(games: Iterable[GameSummary]) -> List[List[str]]:
    return CODECS[TableKind.GAMES].encode(games)


def encode_events(events: Iterable[GameEvent]) -> List[List[str]]:
    return CODECS[TableKind.EVENTS].encode(events)
