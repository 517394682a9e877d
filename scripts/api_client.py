"""Lightweight REST client for the draftduel API."""

from __future__ import annotations

import argparse
import json
import os

import httpx


def _print_error(resp: httpx.Response) -> None:
    try:
        detail = resp.json().get("detail")
    except ValueError:
        detail = resp.text
    if isinstance(detail, dict):
        hint = " (refresh and retry)" if detail.get("retryable") else ""
        raise SystemExit(f"{resp.status_code} {detail.get('kind')}: {detail.get('message')}{hint}")
    raise SystemExit(f"{resp.status_code}: {detail}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the draftduel REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument(
        "--token",
        default=os.getenv("DRAFTDUEL_TOKEN"),
        help="Session token (see `draftduel token USER_ID`); defaults to $DRAFTDUEL_TOKEN",
    )
    parser.add_argument("--create", action="store_true", help="Create a game and print its invite code")
    parser.add_argument("--join", metavar="CODE", help="Join a game by invite code")
    parser.add_argument("--list", action="store_true", help="List your recent games")
    parser.add_argument("--game", metavar="GAME_ID", help="Game to show, pick in, or skip in")
    parser.add_argument("--pick", nargs=3, metavar=("NAME", "TEAM", "POSITION"), help="Draft a player")
    parser.add_argument("--skip", action="store_true", help="Use your skip")
    parser.add_argument("--expected-version", type=int, default=None, help="Reject if the game moved on")
    args = parser.parse_args()

    if not args.token:
        raise SystemExit("a session token is required (--token or $DRAFTDUEL_TOKEN)")

    headers = {"Authorization": f"Bearer {args.token}"}
    with httpx.Client(base_url=args.base_url, headers=headers) as client:
        if args.create:
            resp = client.post("/games")
        elif args.join:
            resp = client.post("/games/join", json={"invite_code": args.join})
        elif args.list:
            resp = client.get("/games")
        elif args.game and args.pick:
            name, team, position = args.pick
            resp = client.post(
                f"/games/{args.game}/picks",
                json={
                    "player": {"name": name, "team": team, "position": position},
                    "expected_version": args.expected_version,
                },
            )
        elif args.game and args.skip:
            resp = client.post(f"/games/{args.game}/skip", json={"expected_version": args.expected_version})
        elif args.game:
            resp = client.get(f"/games/{args.game}")
        else:
            raise SystemExit("nothing to do; pass --create, --join, --list or --game")

        if resp.is_error:
            _print_error(resp)
        print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
