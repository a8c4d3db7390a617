"""Lightweight REST client for the rosterbook API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the rosterbook REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--stats", action="store_true", help="Print only the budget figures")
    parser.add_argument("--player", type=int, metavar="INDEX", help="Fetch the player at a roster row")
    parser.add_argument("--export", action="store_true", help="Download the roster as CSV")
    parser.add_argument("--export-path", type=Path, help="Destination path for exported CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        health = client.get("/health")
        health.raise_for_status()

        if args.player is not None:
            resp = client.get(f"/players/{args.player}")
            if resp.status_code == 404:
                raise SystemExit(f"no player at row {args.player}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.export:
            resp = client.get("/players/export.csv")
            resp.raise_for_status()
            if args.export_path:
                args.export_path.write_text(resp.text, encoding="utf-8")
                print(f"CSV export saved to {args.export_path}")
            else:
                print(resp.text)
            return

        resp = client.get("/players")
        if resp.status_code == 503:
            raise SystemExit(f"roster storage unavailable: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        if args.stats:
            print(json.dumps(payload["stats"], indent=2))
            return
        print(f"Target: {payload['target']}  Roster size: {payload['roster_cap']}")
        print(f"Received {len(payload['players'])} players")
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
