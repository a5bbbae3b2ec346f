"""Lightweight REST client for the pyrink API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_snapshot(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid snapshot JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SystemExit("Snapshot JSON must be an object with players, games and events")
    return data


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyrink REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--pull", metavar="PATH", type=Path, help="Download the current snapshot to PATH")
    parser.add_argument("--push", metavar="PATH", type=Path, help="Upload the snapshot stored at PATH")
    parser.add_argument("--summary", action="store_true", help="Print record counts after pulling")
    args = parser.parse_args()

    if not args.pull and not args.push:
        raise SystemExit("one of --pull or --push is required")

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        if args.push:
            resp = client.post("/data", json=load_snapshot(args.push))
            if resp.is_error:
                raise SystemExit(f"save failed ({resp.status_code}): {resp.text}")
            print(f"Snapshot {args.push} saved")

        if args.pull:
            resp = client.get("/data")
            if resp.is_error:
                raise SystemExit(f"load failed ({resp.status_code}): {resp.text}")
            payload = resp.json()
            args.pull.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            print(f"Snapshot saved to {args.pull}")
            if args.summary:
                for key in ("players", "games", "events"):
                    print(f"{key}: {len(payload.get(key, []))}")


if __name__ == "__main__":
    main()
