"""Domain models for the stat book."""

from .records import (
    EventType,
    GameEvent,
    GameStatus,
    GameSummary,
    GoalStrength,
    PenaltySeverity,
    Player,
    WorkbookSnapshot,
)

__all__ = [
    "EventType",
    "GameEvent",
    "GameStatus",
    "GameSummary",
    "GoalStrength",
    "PenaltySeverity",
    "Player",
    "WorkbookSnapshot",
]
