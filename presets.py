"""
presets.py
──────────
Ready-made power-level policies.
"""

from __future__ import annotations

from models import PowerLevels, ADMIN, MOD, USER


def moderated_room(creator_mxid: str | None = None) -> PowerLevels:
    """
    Moderated room: members talk, moderators manage the room.

    The creator is listed explicitly at ADMIN, otherwise a creator sending
    this as initial state would lock themselves out once state_default is
    raised above 0.
    """
    users = {creator_mxid: ADMIN} if creator_mxid else {}
    return PowerLevels(
        users=users,
        users_default=USER,
        ban=MOD,
        kick=MOD,
        redact=MOD,
        events={
            "m.room.name": MOD,
            "m.room.avatar": MOD,
            "m.room.topic": MOD,
            "m.room.power_levels": ADMIN,
            "m.room.history_visibility": ADMIN,
        },
        events_default=USER,
        state_default=MOD,
    )
