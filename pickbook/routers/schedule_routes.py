# pickbook/routers/schedule_routes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query

from pickbook.core.persist import upsert_games
from pickbook.models.types import Sport
from pickbook.services.espn_schedule import get_games_for_window
from pickbook.services.weeks import calendar_for, current_week, week_window

router = APIRouter(tags=["schedule"])
logger = logging.getLogger("pickbook.schedule")


@router.post("/schedule/sync")
async def sync_schedule(
    sport: Sport,
    week: Optional[int] = Query(None, ge=1, description="default = current week"),
):
    """
    Import one week of the ESPN schedule into `games`, tagged with sport and week.
    Games already present are updated in place.
    """
    cal = calendar_for(sport)
    window = week_window(cal, week or current_week(cal))
    games = await get_games_for_window(sport, window)
    n = await upsert_games(games, sport, window.week)
    logger.info("schedule sync %s week=%s -> %d rows", sport, window.week, n)
    return {"sport": sport, "week": window.week, "synced": n}
