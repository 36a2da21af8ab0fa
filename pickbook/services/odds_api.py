# pickbook/services/odds_api.py
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from pickbook.core import config
from pickbook.core.config import MARKETS
from pickbook.core.errors import UpstreamError, ValidationError
from pickbook.core.times import parse_instant
from pickbook.models.types import FeedGame, Market, Outcome, WeekWindow

logger = logging.getLogger("pickbook.odds")

HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}
BASE = "https://api.the-odds-api.com/v4"


async def _get_json(url: str, params: Dict[str, str]) -> Any:
    # keep fast + resilient
    async with httpx.AsyncClient(timeout=8.0, headers=HEADERS) as client:
        last: Optional[Exception] = None
        for i in range(2):
            try:
                r = await client.get(url, params=params)
                r.raise_for_status()
                return r.json()
            except httpx.HTTPStatusError as e:
                # 4xx (bad key, quota) will not fix itself
                if e.response.status_code < 500:
                    raise UpstreamError(f"odds feed {e.response.status_code}: {e.response.text}") from e
                last = e
            except httpx.HTTPError as e:
                last = e
            logger.warning("odds _get_json attempt %s failed: %r", i + 1, last)
            await asyncio.sleep(0.5 * (i + 1))
        raise UpstreamError(f"odds feed unavailable: {last}")


def _outcome(o: Dict[str, Any]) -> Outcome:
    price = o.get("price")
    point = o.get("point")
    return {
        "name": str(o.get("name") or ""),
        "price": int(price) if isinstance(price, (int, float)) else None,
        "point": float(point) if isinstance(point, (int, float)) else None,
    }


def parse_feed_game(ev: Dict[str, Any]) -> Optional[FeedGame]:
    """
    Flatten one Odds API event. Only the first bookmaker's markets are kept.
    Events without teams or with an unparseable commence_time are skipped (None).
    """
    home = ev.get("home_team") or ev.get("home")
    away = ev.get("away_team") or ev.get("away")
    if not (home and away):
        return None
    try:
        commence = parse_instant(ev.get("commence_time"))
    except ValidationError:
        logger.info("skipping feed event %s: bad commence_time %r", ev.get("id"), ev.get("commence_time"))
        return None

    book = (ev.get("bookmakers") or [None])[0] or {}
    markets: List[Market] = [
        {"key": m["key"], "outcomes": [_outcome(o) for o in (m.get("outcomes") or [])]}
        for m in (book.get("markets") or [])
        if m.get("key") in MARKETS
    ]
    return {
        "externalId": str(ev.get("id") or ""),
        "homeTeam": home,
        "awayTeam": away,
        "commenceTime": commence,
        "book": book.get("title") or book.get("key"),
        "markets": markets,
    }


def in_window(game: FeedGame, window: WeekWindow) -> bool:
    t: datetime = game["commenceTime"]
    return window.start <= t < window.end


async def fetch_odds(
    sport_key: str,
    window: Optional[WeekWindow] = None,
    markets: str = ",".join(MARKETS),
) -> List[FeedGame]:
    """
    Odds for every upcoming event of `sport_key`. The endpoint has no date filter,
    so games are filtered to `window` here when one is given.
    """
    if not config.ODDS_API_KEY:
        raise UpstreamError("ODDS_API_KEY missing")
    params = {
        "apiKey": config.ODDS_API_KEY,
        "regions": config.ODDS_REGIONS,
        "markets": markets,
        "oddsFormat": "american",
        "dateFormat": "iso",
    }
    if config.ODDS_BOOKMAKERS:
        params["bookmakers"] = config.ODDS_BOOKMAKERS

    data = await _get_json(f"{BASE}/sports/{sport_key}/odds", params)
    if not isinstance(data, list):
        raise UpstreamError(f"unexpected odds payload: {type(data).__name__}")

    games = [g for g in (parse_feed_game(ev) for ev in data) if g is not None]
    if window is not None:
        games = [g for g in games if in_window(g, window)]
    logger.info("odds %s -> %d games (window=%s)", sport_key, len(games), window.week if window else None)
    return games
