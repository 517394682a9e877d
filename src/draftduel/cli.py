"""Command-line interface for running the draft server and minting sessions."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from pathlib import Path

from draftduel.catalog import load_catalog_csv
from draftduel.settings import Settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="draftduel", description="Head-to-head fantasy draft server")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve.add_argument("--log-level", default="info", help="uvicorn log level")

    token = subparsers.add_parser("token", help="Print a signed session token for a user id")
    token.add_argument("user_id", help="Opaque user identifier")

    catalog = subparsers.add_parser("catalog", help="Summarise a player catalog CSV")
    catalog.add_argument("path", type=Path, help="CSV with name, team and position columns")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = Settings.from_env()

    if args.command == "serve":
        import uvicorn

        from draftduel.api import create_app

        logging.basicConfig(level=args.log_level.upper())
        uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=args.log_level)
        return

    if args.command == "token":
        from draftduel.auth import create_session_token

        print(create_session_token(args.user_id, secret=settings.session_secret))
        return

    catalog = load_catalog_csv(args.path)
    print(f"{len(catalog)} players across {len(catalog.teams())} teams")
    for team in catalog.teams():
        counts = Counter(player.position.value for player in catalog.players_for(team))
        summary = ", ".join(f"{pos}={counts[pos]}" for pos in sorted(counts))
        print(f"  {team}: {summary}")


if __name__ == "__main__":
    main()
