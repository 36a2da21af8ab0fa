# pickbook/services/espn_schedule.py

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx

from pickbook.core.errors import UpstreamError, ValidationError
from pickbook.core.times import parse_instant
from pickbook.models.types import WeekWindow

logger = logging.getLogger("pickbook.espn")

HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}

SCOREBOARDS = {
    "nfl": "https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard",
    "cfb": "https://site.api.espn.com/apis/site/v2/sports/football/college-football/scoreboard",
}
FBS_GROUP = 80


# -----------------------------------------------------------
# Shared HTTP helper with retries
# -----------------------------------------------------------
async def _get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    max_tries: int = 2,
) -> Dict[str, Any]:
    last: Optional[Exception] = None

    for attempt in range(1, max_tries + 1):
        try:
            async with httpx.AsyncClient(timeout=10.0, headers=HEADERS) as client:
                r = await client.get(url, params=params)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPError as e:
            last = e
            logger.warning("espn _get_json attempt %s failed: %r", attempt, e)

    logger.error("espn _get_json giving up after %s attempts: %r", max_tries, last)
    raise UpstreamError(f"espn scoreboard unavailable: {last}")


def extract_game(ev: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Flatten an ESPN scoreboard event into a schedule row.
    Returns None for events missing either competitor.
    """
    comp = (ev.get("competitions") or [{}])[0]
    competitors = comp.get("competitors") or []

    home = next((c for c in competitors if c.get("homeAway") == "home"), None)
    away = next((c for c in competitors if c.get("homeAway") == "away"), None)
    if not (ev.get("id") and home and away):
        return None

    home_team = home.get("team") or {}
    away_team = away.get("team") or {}

    return {
        "gameId": str(ev["id"]),
        "homeTeam": home_team.get("displayName") or home_team.get("name"),
        "awayTeam": away_team.get("displayName") or away_team.get("name"),
        "startTime": ev.get("date"),
        "status": ((comp.get("status") or {}).get("type") or {}).get("name"),
    }


def _kicks_off_in(row: Dict[str, Any], window: WeekWindow) -> bool:
    try:
        kickoff = parse_instant(row.get("startTime"))
    except ValidationError:
        return False
    return window.start <= kickoff < window.end


async def get_games_for_window(sport: str, window: WeekWindow) -> List[Dict[str, Any]]:
    """
    Schedule rows kicking off inside `window`, deduplicated by ESPN event id.
    ESPN buckets games by US-local date, so the scan starts a day early.
    """
    url = SCOREBOARDS[sport]
    out: Dict[str, Dict[str, Any]] = {}

    day = window.start.date() - timedelta(days=1)
    last_day = (window.end - timedelta(microseconds=1)).date()
    while day <= last_day:
        params: Dict[str, Any] = {"dates": day.strftime("%Y%m%d"), "limit": 500}
        if sport == "cfb":
            params["groups"] = FBS_GROUP
        data = await _get_json(url, params)
        for ev in data.get("events") or []:
            row = extract_game(ev)
            if row and row["homeTeam"] and row["awayTeam"] and _kicks_off_in(row, window):
                out[row["gameId"]] = row
        day += timedelta(days=1)

    logger.info("espn %s week=%s -> %d games", sport, window.week, len(out))
    return list(out.values())
