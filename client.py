"""
client.py
─────────
Minimal Matrix client-server API client for power-levels state.

API:   /_matrix/client/v3/…
Auth:  Bearer access_token

To get your access token in Element:
  Settings → Help & About → Advanced → Access Token
"""

from __future__ import annotations
import datetime
import getpass
import logging
import math
import sys
import time
from urllib.parse import quote

import requests

from decoder import decode
from models import PowerLevels

logger = logging.getLogger(__name__)

API_PREFIX = "/_matrix/client/v3"
POWER_LEVELS_EVENT = "m.room.power_levels"
MAX_ATTEMPTS = 5
DEFAULT_RETRY_MS = 1000
SHORT_WAIT = 5  # seconds; longer waits get a countdown
COUNTDOWN_STEP = 30


def _ask(label: str, secret: bool = False) -> str:
    """Read one required value from the terminal, or give up."""
    raw = getpass.getpass(f"  {label}: ") if secret else input(f"  {label}: ")
    value = raw.strip()
    if not value:
        print(f"  {label} is required.")
        sys.exit(1)
    return value


def _retry_after(r) -> float:
    """Seconds the homeserver asked us to back off; 1s if it didn't say."""
    try:
        body = r.json()
    except ValueError:
        body = None
    retry_ms = body.get("retry_after_ms") if isinstance(body, dict) else None
    if isinstance(retry_ms, bool) or not isinstance(retry_ms, (int, float)):
        retry_ms = DEFAULT_RETRY_MS
    return max(retry_ms, 0) / 1000


def _wait_out(seconds: float) -> None:
    if seconds <= SHORT_WAIT:
        print(f"    ⏳ Matrix rate-limit – waiting {seconds:.1f}s …")
        time.sleep(seconds + 0.1)
        return

    resume_at = datetime.datetime.now() + datetime.timedelta(seconds=seconds)
    print(
        f"\n    ⏳ Matrix rate-limit: {seconds:.0f}s ({seconds / 60:.1f} min)  "
        f"– resuming at {resume_at:%H:%M:%S}  (Ctrl+C to cancel)\n"
    )
    left = seconds
    while left > 0:
        step = min(COUNTDOWN_STEP, left)
        time.sleep(step)
        left -= step
        if left > 0:
            print(f"      … {math.ceil(left)}s remaining …")


class MatrixClient:
    def __init__(self):
        self.homeserver: str = ""
        self.token: str = ""
        self.mxid: str = ""

    # ── credentials ──────────────────────────────────────────────────────

    def load_config(self, cfg: dict) -> None:
        self.homeserver = cfg.get("homeserver", "").rstrip("/")
        self.token = cfg.get("token", "")

    def prompt_credentials(self):
        """Ask for whatever config.json left out, then check the token works."""
        if not (self.homeserver and self.token):
            print("\n  Power levels are read with your Matrix access token.")
            print("  In Element: Settings → Help & About → Advanced → Access Token")
        self.homeserver = self.homeserver or _ask("Homeserver URL (e.g. https://matrix.org)").rstrip("/")
        self.token = self.token or _ask("Access Token", secret=True)

        whoami = self._request("GET", "/account/whoami") or {}
        self.mxid = whoami.get("user_id", "")
        if not self.mxid:
            print("  ✘  Access token rejected (whoami returned no user).")
            sys.exit(1)
        print(f"  ✔  Signed in as {self.mxid}")

    # ── HTTP ──────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict | None:
        url = f"{self.homeserver}{API_PREFIX}{path}"
        headers = {"Authorization": f"Bearer {self.token}", "Content-Type": "application/json"}
        for attempt in range(1, MAX_ATTEMPTS + 1):
            logger.debug("%s %s (attempt %d)", method, path, attempt)
            r = requests.request(method, url, json=payload, headers=headers, timeout=10)
            if r.status_code == 429:
                _wait_out(_retry_after(r))
                continue
            if r.status_code in (401, 403):
                print(f"  ✘  Matrix auth error on {path}: {r.text[:200]}")
                sys.exit(1)
            if r.status_code == 404:
                logger.debug("Not found: %s", path)
                return None
            if not r.ok:
                print(f"  ✘  Matrix {method} {r.status_code} on {path}: {r.text[:200]}")
                return None
            try:
                return r.json()
            except ValueError:
                print(f"  ✘  Matrix {method} on {path} returned a non-JSON body")
                return None
        print(f"  ✘  Too many retries for {path}")
        return None

    @staticmethod
    def _state_path(room_id: str) -> str:
        return f"/rooms/{quote(room_id, safe='')}/state/{POWER_LEVELS_EVENT}"

    # ── power levels ──────────────────────────────────────────────────────

    def fetch_power_levels(self, room_id: str) -> dict | None:
        """
        Raw content of the room's power-levels event, or None if the room
        has none (or it could not be fetched).
        """
        return self._request("GET", self._state_path(room_id))

    def load_power_levels(self, room_id: str) -> PowerLevels:
        """Fetch and decode; a room without the event gets the protocol defaults."""
        content = self.fetch_power_levels(room_id)
        if content is None:
            print("  ℹ️  No power levels event found – the room uses the defaults.")
        return decode(content)

    def put_power_levels(self, room_id: str, levels: PowerLevels) -> str | None:
        """Send a new power-levels event. Returns its event ID."""
        result = self._request("PUT", self._state_path(room_id), levels.to_content())
        return result.get("event_id") if result else None
