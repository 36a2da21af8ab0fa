# pickbook/core/config.py
from __future__ import annotations

import os
from datetime import datetime, timedelta
from typing import Dict, NamedTuple

from pickbook.core.times import parse_instant

SPORTS = ("nfl", "cfb")
MARKETS = ("spreads", "totals", "h2h")

# candidate query strategies for the game resolver
STRATEGY_WEEK = "week"      # sport+week equality filter
STRATEGY_WINDOW = "window"  # symmetric kickoff range around commence_time

TOLERANCES = {
    STRATEGY_WEEK: timedelta(hours=3),
    STRATEGY_WINDOW: timedelta(hours=48),
}

ODDS_API_KEY = os.getenv("ODDS_API_KEY")
ODDS_REGIONS = os.getenv("ODDS_REGIONS", "us")
ODDS_BOOKMAKERS = os.getenv("ODDS_BOOKMAKERS")  # optional CSV of book keys
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
TEAM_LOGOS = os.getenv("TEAM_LOGOS", "espn")  # "espn" | "off"


class SportConfig(NamedTuple):
    sport: str
    odds_key: str
    season_open: datetime
    weeks: int
    strategy: str

    @property
    def tolerance(self) -> timedelta:
        return TOLERANCES[self.strategy]


def _strategy(env: str, default: str) -> str:
    val = (os.getenv(env) or default).strip().lower()
    if val not in TOLERANCES:
        raise RuntimeError(f"{env} must be one of {sorted(TOLERANCES)}, got {val!r}")
    return val


# Update the season-open instants each season.
NFL = SportConfig(
    sport="nfl",
    odds_key="americanfootball_nfl",
    season_open=parse_instant(os.getenv("NFL_SEASON_OPEN", "2025-09-04T00:00:00Z")),
    weeks=int(os.getenv("NFL_WEEKS", "18")),
    strategy=_strategy("NFL_MATCH_STRATEGY", STRATEGY_WEEK),
)

CFB = SportConfig(
    sport="cfb",
    odds_key="americanfootball_ncaaf",
    season_open=parse_instant(os.getenv("CFB_SEASON_OPEN", "2025-08-26T00:00:00Z")),
    weeks=int(os.getenv("CFB_WEEKS", "15")),
    strategy=_strategy("CFB_MATCH_STRATEGY", STRATEGY_WINDOW),
)

SPORT_CONFIGS: Dict[str, SportConfig] = {"nfl": NFL, "cfb": CFB}
