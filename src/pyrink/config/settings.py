"""Workbook location and table identifiers, validated once at startup."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict

from pyrink.config.tables import TableKind
from pyrink.errors import ConfigurationError


DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"

_REQUIRED_ENV = {
    "drive_id": "WORKBOOK_DRIVE_ID",
    "item_id": "WORKBOOK_ITEM_ID",
    "roster_table": "ROSTER_TABLE",
    "games_table": "GAMES_TABLE",
    "events_table": "EVENTS_TABLE",
}

_OPTIONAL_ENV = {
    "tenant_id": "GRAPH_TENANT_ID",
    "client_id": "GRAPH_CLIENT_ID",
    "client_secret": "GRAPH_CLIENT_SECRET",
    "graph_base_url": "GRAPH_BASE_URL",
}


class WorkbookSettings(BaseModel):
    """Identifiers needed to reach the three stat book tables."""

    drive_id: str
    item_id: str
    roster_table: str
    games_table: str
    events_table: str
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WorkbookSettings":
        env = os.environ if environ is None else environ
        missing = [name for name in _REQUIRED_ENV.values() if not (env.get(name) or "").strip()]
        if missing:
            raise ConfigurationError(f"Missing environment variable: {', '.join(missing)}")

        data = {field: env[name].strip() for field, name in _REQUIRED_ENV.items()}
        for field, name in _OPTIONAL_ENV.items():
            value = (env.get(name) or "").strip()
            if value:
                data[field] = value
        settings = cls(**data)
        settings.validate_identifiers()
        return settings

    def validate_identifiers(self) -> None:
        """Raise ConfigurationError if any location or table identifier is blank."""

        blank = [field for field in _REQUIRED_ENV if not str(getattr(self, field) or "").strip()]
        if blank:
            raise ConfigurationError(f"Missing workbook identifiers: {', '.join(blank)}")

    def table_name(self, kind: TableKind) -> str:
        return {
            TableKind.ROSTER: self.roster_table,
            TableKind.GAMES: self.games_table,
            TableKind.EVENTS: self.events_table,
        }[kind]
