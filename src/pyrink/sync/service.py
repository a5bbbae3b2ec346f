"""Load and save the whole stat book across its three workbook tables."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence, Tuple

from pyrink.config.settings import WorkbookSettings
from pyrink.config.tables import TableKind, get_schema
from pyrink.models import WorkbookSnapshot
from pyrink.workbook.codec import encode_events, encode_games, encode_players
from pyrink.workbook.reader import read_table
from pyrink.workbook.store import WorkbookStore
from pyrink.workbook.writer import ReplacementPlan, replace_table_rows


logger = logging.getLogger(__name__)

_TABLE_ORDER: Tuple[TableKind, ...] = (TableKind.ROSTER, TableKind.GAMES, TableKind.EVENTS)


class WorkbookSync:
    """Keep a :class:`WorkbookSnapshot` consistent with the roster, games and events tables.

    Reads and writes fan out over the three tables concurrently. There is no
    envelope across tables: a save can commit some tables and fail others.
    The engine assumes it is the only writer.
    """

    def __init__(self, settings: WorkbookSettings, store: WorkbookStore):
        settings.validate_identifiers()
        self.settings = settings
        self.store = store

    def table_name(self, kind: TableKind) -> str:
        return self.settings.table_name(kind)

    async def load(self) -> WorkbookSnapshot:
        players, games, events = await asyncio.gather(
            *(read_table(self.store, self.table_name(kind), kind) for kind in _TABLE_ORDER)
        )
        logger.info(
            "Loaded workbook snapshot: %s players, %s games, %s events",
            len(players),
            len(games),
            len(events),
        )
        return WorkbookSnapshot(players=players, games=games, events=events)

    async def save(self, snapshot: WorkbookSnapshot) -> List[ReplacementPlan]:
        encoded: Sequence[Tuple[TableKind, List[List[str]]]] = (
            (TableKind.ROSTER, encode_players(snapshot.players)),
            (TableKind.GAMES, encode_games(snapshot.games)),
            (TableKind.EVENTS, encode_events(snapshot.events)),
        )
        outcomes = await asyncio.gather(
            *(
                replace_table_rows(
                    self.store,
                    self.table_name(kind),
                    rows,
                    expected_columns=get_schema(kind).columns,
                )
                for kind, rows in encoded
            ),
            return_exceptions=True,
        )

        plans: List[ReplacementPlan] = []
        failures: List[BaseException] = []
        for (kind, _), outcome in zip(encoded, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Saving table %s failed: %s", self.table_name(kind), outcome)
                failures.append(outcome)
            else:
                plans.append(outcome)
        if failures:
            raise failures[0]
        logger.info(
            "Saved workbook snapshot: %s players, %s games, %s events",
            len(snapshot.players),
            len(snapshot.games),
            len(snapshot.events),
        )
        return plans

    async def load_tables(self) -> WorkbookSnapshot:
        return await self.load()

    async def save_tables(self, snapshot: WorkbookSnapshot) -> None:
        await self.save(snapshot)
