"""
main.py
───────
CLI entry point: show who holds which power level in a Matrix room, and
what it takes to post a given event type.

  python main.py '!room:example.org' --user @alice:example.org
  python main.py --file power_levels.json --event m.room.topic --state

Credentials are read from config.json ("matrix" section) next to this file;
anything missing is prompted for.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from client import MatrixClient
from decoder import decode
from report import print_report, print_user_answer, print_event_answer

# ── ANSI ──────────────────────────────────────────────────────────────────────
BOLD = "\033[1m"
RESET = "\033[0m"


def prompt(label: str) -> str:
    while True:
        val = input(f"  {label}: ").strip()
        if val:
            return val
        print("  (required)")


def load_config() -> dict:
    path = os.path.join(os.path.dirname(__file__), "config.json")
    if os.path.exists(path):
        with open(path) as f:
            return json.load(f)
    return {}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect Matrix room power levels.")
    parser.add_argument("room_id", nargs="?", help="room to fetch, e.g. !abc:matrix.org")
    parser.add_argument("--file", help="decode a local m.room.power_levels content file instead")
    parser.add_argument("--user", action="append", default=[], help="user ID to look up")
    parser.add_argument("--event", action="append", default=[], help="event type to look up")
    parser.add_argument("--state", action="store_true", help="treat --event types as state events")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser


def read_content_file(path: str) -> dict:
    try:
        with open(path) as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        print(f"  ✘  Could not read {path}: {e}")
        sys.exit(1)


def run(args: argparse.Namespace):
    room_id = args.room_id
    if args.file:
        levels = decode(read_content_file(args.file))
    else:
        client = MatrixClient()
        client.load_config(load_config().get("matrix", {}))
        print(f"\n{BOLD}Matrix credentials:{RESET}")
        client.prompt_credentials()
        if not room_id:
            room_id = prompt("Room ID")
        levels = client.load_power_levels(room_id)

    print_report(levels, room_id)
    for user_id in args.user:
        print_user_answer(levels, user_id)
    for event_type in args.event:
        print_event_answer(levels, event_type, args.state)


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except KeyboardInterrupt:
        print("\n\n  Cancelled.")
        sys.exit(0)


if __name__ == "__main__":
    main()
