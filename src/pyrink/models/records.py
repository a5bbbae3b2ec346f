"""Canonical stat book records shared by the codec, API and CLI."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class GameStatus(str, Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINAL = "final"


class EventType(str, Enum):
    GOAL_FOR = "goalFor"
    GOAL_AGAINST = "goalAgainst"
    PENALTY = "penalty"


class GoalStrength(str, Enum):
    EVEN = "EVEN"
    PP = "PP"
    SH = "SH"


class PenaltySeverity(str, Enum):
    MINOR = "Minor"
    MAJOR = "Major"
    MISCONDUCT = "Misconduct"


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Player(_Record):
    """A rostered skater or goalie."""

    id: str
    number: int = 0
    name: str = ""
    position: Optional[str] = None


class GameSummary(_Record):
    id: str
    opponent: str = ""
    date: str = ""
    status: GameStatus = GameStatus.SCHEDULED


class GameEvent(_Record):
    """A single logged goal or penalty.

    The penalty fields are only meaningful when ``type`` is ``penalty``.
    """

    id: str
    game_id: str = ""
    created_at: str = ""
    period: int = 0
    clock: str = ""
    type: EventType = EventType.GOAL_FOR
    strength: GoalStrength = GoalStrength.EVEN
    goal_player_id: Optional[str] = None
    assist_ids: List[str] = Field(default_factory=list)
    plus_player_ids: List[str] = Field(default_factory=list)
    minus_player_ids: List[str] = Field(default_factory=list)
    penalty_player_id: Optional[str] = None
    penalty_infraction: Optional[str] = None
    penalty_severity: Optional[PenaltySeverity] = None
    penalty_minutes: Optional[int] = None
    notes: str = ""


class WorkbookSnapshot(_Record):
    """The unified roster, game list and event log held by one workbook."""

    players: List[Player] = Field(default_factory=list)
    games: List[GameSummary] = Field(default_factory=list)
    events: List[GameEvent] = Field(default_factory=list)
