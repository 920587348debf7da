"""
report.py
─────────
Prints a decoded power-levels policy for humans.
"""

from __future__ import annotations

from models import PowerLevels, tier_label

# ── ANSI colours ──────────────────────────────────────────────────────────────
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


def _head(msg):
    print(f"\n{BOLD}{msg}{RESET}")


def _row(level: int, name: str):
    print(f"    {level:>4}  ({tier_label(level):<10})  ←  {name}")


def print_report(levels: PowerLevels, room_id: str | None = None):
    _head("═══════════════════ Power Levels ═══════════════════")
    if room_id:
        print(f"\n  Room : {BOLD}{room_id}{RESET}")

    _head("Members")
    print(f"  {DIM}default{RESET} : {levels.users_default} ({tier_label(levels.users_default)})")
    if not levels.users:
        print("  —  No members with an explicit level.")
    for user_id, level in sorted(levels.users.items(), key=lambda x: (-x[1], x[0])):
        _row(level, user_id)

    _head("Actions")
    for action in ("ban", "kick", "redact"):
        print(f"  {action:<8} {GREEN}{getattr(levels, action)}{RESET}")

    _head("Events")
    print(f"  {DIM}events_default{RESET} : {levels.events_default}")
    print(f"  {DIM}state_default{RESET}  : {levels.state_default}")
    if not levels.events:
        print("  —  No event types with an explicit level.")
    for event_type, level in sorted(levels.events.items()):
        _row(level, event_type)
    print()


def print_user_answer(levels: PowerLevels, user_id: str):
    level = levels.level_of(user_id)
    print(f"  {CYAN}{user_id}{RESET} has power level {BOLD}{level}{RESET} ({tier_label(level)})")


def print_event_answer(levels: PowerLevels, event_type: str, is_state_event: bool):
    level = levels.minimum_level_for(event_type, is_state_event)
    kind = "state event" if is_state_event else "event"
    print(f"  {YELLOW}{event_type}{RESET} ({kind}) requires power level {BOLD}{level}{RESET}")
