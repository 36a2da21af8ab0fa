# pickbook/services/resolver.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, List, Optional, Protocol, Union

from pickbook.core.config import SPORT_CONFIGS, STRATEGY_WEEK, SportConfig
from pickbook.core.errors import ValidationError
from pickbook.core.times import parse_instant
from pickbook.models.types import StoredGame
from pickbook.services.team_names import names_overlap, normalize_team_name

logger = logging.getLogger("pickbook.resolver")


class GameLookup(Protocol):
    async def games_for_week(self, sport: str, week: int) -> List[StoredGame]: ...

    async def games_in_range(self, sport: str, start: datetime, end: datetime) -> List[StoredGame]: ...


def sport_config(sport: str) -> SportConfig:
    cfg = SPORT_CONFIGS.get((sport or "").lower())
    if cfg is None:
        raise ValidationError(f"unknown sport: {sport!r}")
    return cfg


def _match(feed_home: str, feed_away: str, home: str, away: str) -> bool:
    direct = names_overlap(feed_home, home) and names_overlap(feed_away, away)
    swapped = names_overlap(feed_home, away) and names_overlap(feed_away, home)
    return direct or swapped


def pick_best(
    candidates: List[StoredGame],
    sport: str,
    feed_home: str,
    feed_away: str,
    commence: datetime,
    tolerance: timedelta,
) -> Optional[Any]:
    """
    Id of the name-matching candidate closest in time to `commence`, within `tolerance`.
    Feed names must already be normalized. Ties keep the earlier candidate.
    """
    best_id: Optional[Any] = None
    best_delta: Optional[timedelta] = None
    for g in candidates:
        kickoff = g.get("kickoff")
        if kickoff is None:
            continue
        delta = abs(kickoff - commence)
        if delta > tolerance:
            continue
        home = normalize_team_name(g.get("homeTeam"), sport)
        away = normalize_team_name(g.get("awayTeam"), sport)
        if not _match(feed_home, feed_away, home, away):
            continue
        if best_delta is None or delta < best_delta:
            best_id, best_delta = g["id"], delta
    return best_id


async def resolve_game_id(
    lookup: GameLookup,
    sport: str,
    week: Optional[int],
    home_team: str,
    away_team: str,
    commence_time: Union[str, datetime],
) -> Optional[Any]:
    """
    Map a feed matchup onto a stored game id, or None when the schedule has no match.

    The candidate query follows the sport's configured strategy: "week" filters by
    sport+week (`week` is required), "window" takes every game of the sport whose
    kickoff is within the tolerance of `commence_time`.
    """
    cfg = sport_config(sport)
    commence = parse_instant(commence_time)
    feed_home = normalize_team_name(home_team, cfg.sport)
    feed_away = normalize_team_name(away_team, cfg.sport)
    if not feed_home or not feed_away:
        raise ValidationError("home and away team names are required")

    tolerance = cfg.tolerance
    if cfg.strategy == STRATEGY_WEEK:
        if week is None or week < 1:
            raise ValidationError(f"week is required for {cfg.sport} lookups, got {week!r}")
        candidates = await lookup.games_for_week(cfg.sport, week)
    else:
        candidates = await lookup.games_in_range(cfg.sport, commence - tolerance, commence + tolerance)

    game_id = pick_best(candidates, cfg.sport, feed_home, feed_away, commence, tolerance)
    if game_id is None:
        logger.info(
            "unresolved %s matchup: %r @ %r at %s (%d candidates)",
            cfg.sport, away_team, home_team, commence.isoformat(), len(candidates),
        )
    return game_id
