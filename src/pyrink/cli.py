"""Command-line interface for pulling and pushing stat book snapshots."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from pyrink.config.settings import WorkbookSettings
from pyrink.errors import WorkbookSyncError
from pyrink.models import WorkbookSnapshot
from pyrink.sync import WorkbookSync
from pyrink.workbook.graph import open_graph_store


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync the hockey stat book with its Excel workbook")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    load = commands.add_parser("load", help="Read all three tables and print or save the snapshot")
    load.add_argument("--output", type=Path, default=None, help="Write snapshot JSON here instead of stdout")

    save = commands.add_parser("save", help="Replace all three tables with a snapshot JSON file")
    save.add_argument("snapshot", type=Path, help="Snapshot JSON (players, games, events)")

    serve = commands.add_parser("serve", help="Run the REST API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind")
    return parser.parse_args(argv)


def read_snapshot(path: Path) -> WorkbookSnapshot:
    data = json.loads(path.read_text(encoding="utf-8"))
    return WorkbookSnapshot.model_validate(data)


async def _load(settings: WorkbookSettings) -> WorkbookSnapshot:
    async with open_graph_store(settings) as store:
        return await WorkbookSync(settings, store).load_tables()


async def _save(settings: WorkbookSettings, snapshot: WorkbookSnapshot) -> None:
    async with open_graph_store(settings) as store:
        await WorkbookSync(settings, store).save_tables(snapshot)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        from pyrink.api import create_app

        uvicorn.run(create_app(), host=args.host, port=args.port)
        return 0

    try:
        settings = WorkbookSettings.from_env()
        if args.command == "load":
            snapshot = asyncio.run(_load(settings))
            payload = snapshot.model_dump_json(by_alias=True, indent=2)
            if args.output:
                args.output.write_text(payload, encoding="utf-8")
                print(f"Snapshot saved to {args.output}")
            else:
                print(payload)
        else:
            snapshot = read_snapshot(args.snapshot)
            asyncio.run(_save(settings, snapshot))
            print(
                f"Saved {len(snapshot.players)} players, {len(snapshot.games)} games, "
                f"{len(snapshot.events)} events"
            )
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 2
    except WorkbookSyncError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
