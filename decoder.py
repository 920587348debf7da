"""
decoder.py
──────────
Converts the raw content of a m.room.power_levels event into PowerLevels.

The content comes straight off the wire, so every field is optional and may
hold anything.  Decoding never fails: missing or malformed values fall back
to 0 (or to an empty mapping) so a room always ends up with a usable policy.
Whether to trust that policy is the caller's decision.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping

from models import PowerLevels, parse_level

logger = logging.getLogger(__name__)

_SCALAR_KEYS = (
    "users_default",
    "ban",
    "kick",
    "redact",
    "events_default",
    "state_default",
)
_MAP_KEYS = ("users", "events")


def _coerce_level(value: Any, where: str) -> int:
    level = parse_level(value)
    if level is None:
        logger.debug("Malformed power level %r at %s, using 0", value, where)
        return 0
    return level


def _coerce_map(value: Any, key: str) -> dict[str, int]:
    if not isinstance(value, Mapping):
        if value is not None:
            logger.debug("Expected an object at %s, got %s", key, type(value).__name__)
        return {}
    levels: dict[str, int] = {}
    for name, raw in value.items():
        if not isinstance(name, str):
            logger.debug("Skipping non-string key %r in %s", name, key)
            continue
        levels[name] = _coerce_level(raw, f"{key}[{name!r}]")
    return levels


def decode(record: Mapping[str, Any] | None) -> PowerLevels:
    """
    Decode power-levels event content into a PowerLevels policy.

    Anything that is not a mapping is treated as empty content, which yields
    a policy where every query returns 0.
    """
    if not isinstance(record, Mapping):
        if record is not None:
            logger.debug("Power levels content is %s, not an object", type(record).__name__)
        record = {}

    scalars = {
        key: _coerce_level(record[key], key) if key in record else 0
        for key in _SCALAR_KEYS
    }
    maps = {key: _coerce_map(record.get(key), key) for key in _MAP_KEYS}
    return PowerLevels(**maps, **scalars)
