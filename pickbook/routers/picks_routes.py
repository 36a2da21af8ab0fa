# pickbook/routers/picks_routes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pickbook.core.errors import UpstreamError
from pickbook.core.persist import SqlGameLookup, SqlPickStore
from pickbook.core.times import parse_instant
from pickbook.models.schemas import PickIn
from pickbook.models.types import Sport
from pickbook.services.odds_api import fetch_odds
from pickbook.services.picks import record_pick
from pickbook.services.resolver import resolve_game_id, sport_config
from pickbook.services.team_logos import logo_url
from pickbook.services.weeks import calendar_for, current_week, week_window

logger = logging.getLogger("pickbook.picks_routes")
router = APIRouter(tags=["picks"])


def get_game_lookup() -> SqlGameLookup:
    return SqlGameLookup()


def get_pick_store() -> SqlPickStore:
    return SqlPickStore()


# ---------------- Calendar ----------------
@router.get("/weeks")
async def list_weeks(sport: Sport):
    return {
        "sport": sport,
        "weeks": [
            {"week": w.week, "start": w.start.isoformat(), "end": w.end.isoformat()}
            for w in calendar_for(sport)
        ],
    }


@router.get("/current_week")
async def get_current_week(
    sport: Sport,
    at: Optional[str] = Query(None, description="ISO instant; default = now (UTC)"),
):
    when = parse_instant(at) if at else None
    return {"sport": sport, "week": current_week(calendar_for(sport), when)}


# ---------------- Odds board ----------------
@router.get("/odds")
async def odds_board(
    sport: Sport,
    week: Optional[int] = Query(None, ge=1, description="default = current week"),
):
    """Feed games for one week, first bookmaker only, with team logo URLs."""
    cal = calendar_for(sport)
    wk = week or current_week(cal)
    window = week_window(cal, wk)
    games = await fetch_odds(sport_config(sport).odds_key, window)
    rows = [
        {
            **g,
            "commenceTime": g["commenceTime"].isoformat(),
            "homeLogo": logo_url(g["homeTeam"], sport),
            "awayLogo": logo_url(g["awayTeam"], sport),
        }
        for g in games
    ]
    return {"sport": sport, "week": window.week, "rows": rows}


# ---------------- Resolution ----------------
@router.get("/resolve")
async def resolve(
    sport: Sport,
    home: str,
    away: str,
    commence_time: str,
    week: Optional[int] = Query(None, ge=1),
    lookup: SqlGameLookup = Depends(get_game_lookup),
):
    wk = week or current_week(calendar_for(sport), parse_instant(commence_time))
    game_id = await resolve_game_id(lookup, sport, wk, home, away, commence_time)
    if game_id is None:
        raise HTTPException(status_code=404, detail="game_not_synced")
    return {"sport": sport, "week": wk, "gameId": game_id}


# ---------------- Picks ----------------
@router.post("/picks")
async def save_pick(
    sport: Sport,
    body: PickIn,
    lookup: SqlGameLookup = Depends(get_game_lookup),
    store: SqlPickStore = Depends(get_pick_store),
):
    """
    Resolve the feed matchup to a stored game and upsert the user's pick.
    Re-submitting for the same game (and group) replaces the earlier pick.
    """
    wk = body.week or current_week(calendar_for(sport), parse_instant(body.commence_time))
    game_id = await resolve_game_id(lookup, sport, wk, body.home_team, body.away_team, body.commence_time)
    if game_id is None:
        logger.info("pick not saved for %s: %s @ %s not synced", body.user_id, body.away_team, body.home_team)
        raise HTTPException(status_code=404, detail="game_not_synced")

    result = await record_pick(
        store,
        user_id=body.user_id,
        game_id=game_id,
        sport=sport,
        week=wk,
        market=body.market,
        side=body.side,
        line=body.line,
        price=body.price,
        group_id=body.group_id,
    )
    if not result.ok:
        raise UpstreamError(result.error)
    return {"ok": True, "pick": result.pick}


@router.get("/picks")
async def my_picks(
    sport: Sport,
    user_id: str,
    week: Optional[int] = Query(None, ge=1),
    group_id: Optional[str] = None,
    store: SqlPickStore = Depends(get_pick_store),
):
    wk = week or current_week(calendar_for(sport))
    rows = await store.picks_for_week(user_id, sport, wk, group_id)
    return {"sport": sport, "week": wk, "rows": rows}


@router.get("/groups/{group_id}/pick_counts")
async def group_pick_counts(
    sport: Sport,
    group_id: str,
    from_week: int = Query(1, ge=1),
    to_week: Optional[int] = Query(None, ge=1),
    store: SqlPickStore = Depends(get_pick_store),
):
    """Picks made per week in a group; weeks with no picks report 0."""
    counts = await store.weekly_counts(group_id, sport)
    # never past the last calendar week
    hi = min(to_week or max(counts, default=0), len(calendar_for(sport)))
    return {
        "sport": sport,
        "groupId": group_id,
        "rows": [{"week": w, "count": counts.get(w, 0)} for w in range(from_week, hi + 1)],
    }
