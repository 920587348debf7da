"""
models.py
─────────
The power-levels policy of a Matrix room.

A PowerLevels instance is the typed form of one m.room.power_levels event
content.  It is frozen: a newer power-levels event produces a new instance,
it never patches an existing one.

Tiers as shown by Element:
  100  Admin  — full control
   50  Mod    — kick, ban, redact, manage state
    0  User   — send messages, read history
"""

from __future__ import annotations
import math
import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

ADMIN = 100
MOD = 50
USER = 0

_DECIMAL = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_level(value: Any) -> int | None:
    """Return value as a non-negative int, or None if it isn't one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        level = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        level = int(value)
    elif isinstance(value, str):
        # Older room versions allowed levels serialised as strings
        text = value.strip()
        if not _DECIMAL.fullmatch(text):
            return None
        level = int(text)
    else:
        return None
    return level if level >= 0 else None


def coerce_level(value: Any) -> int:
    level = parse_level(value)
    return 0 if level is None else level


def tier_label(level: int) -> str:
    """Human-readable tier for a power level."""
    if level >= ADMIN:
        return "Admin"
    if level >= MOD:
        return "Mod"
    if level >= USER:
        return "User"
    return "Restricted"


def _frozen_map(value: Mapping[str, Any] | None) -> Mapping[str, int]:
    if not isinstance(value, Mapping):
        return MappingProxyType({})
    return MappingProxyType(
        {key: coerce_level(level) for key, level in value.items() if isinstance(key, str)}
    )


@dataclass(frozen=True)
class PowerLevels:
    """
    Content of a m.room.power_levels event.

    ``users`` and ``events`` are read-only views over private copies, so the
    dicts handed to the constructor can be reused freely by the caller.
    Every level is normalised on construction the same way ``decoder.decode``
    treats wire content: anything that is not a non-negative integer is 0.
    Build instances with ``decoder.decode`` when the input comes off the wire.
    """

    # ── power levels of room members ──────────────────────────────────────
    users: Mapping[str, int] = field(default_factory=dict, hash=False)
    users_default: int = 0

    # ── minimum power level for actions ───────────────────────────────────
    ban: int = 0
    kick: int = 0
    redact: int = 0

    # ── minimum power level for posting events ────────────────────────────
    events: Mapping[str, int] = field(default_factory=dict, hash=False)
    events_default: int = 0
    state_default: int = 0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("users", "events"):
                object.__setattr__(self, f.name, _frozen_map(value))
            else:
                object.__setattr__(self, f.name, coerce_level(value))

    # ── queries ───────────────────────────────────────────────────────────

    def level_of(self, user_id: str) -> int:
        """Power level of a room member (exact match on the user ID)."""
        return self.users.get(user_id, self.users_default)

    def minimum_level_for(self, event_type: str, is_state_event: bool = False) -> int:
        """
        Minimum power level a member needs to post an event of this type.
        Types without an explicit entry fall back to state_default or
        events_default, depending on whether the event carries a state key.
        """
        if event_type in self.events:
            return self.events[event_type]
        return self.state_default if is_state_event else self.events_default

    # ── derived policies ──────────────────────────────────────────────────

    def with_user_level(self, user_id: str, level: int) -> PowerLevels:
        """Return a new policy with one member's level set; self is untouched."""
        users = dict(self.users)
        users[user_id] = level
        return PowerLevels(
            users=users,
            users_default=self.users_default,
            ban=self.ban,
            kick=self.kick,
            redact=self.redact,
            events=self.events,
            events_default=self.events_default,
            state_default=self.state_default,
        )

    def to_content(self) -> dict:
        """Wire-shaped event content, ready to be sent as a state event."""
        return {
            "users": dict(self.users),
            "users_default": self.users_default,
            "ban": self.ban,
            "kick": self.kick,
            "redact": self.redact,
            "events": dict(self.events),
            "events_default": self.events_default,
            "state_default": self.state_default,
        }
