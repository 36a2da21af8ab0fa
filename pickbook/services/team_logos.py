# pickbook/services/team_logos.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from pickbook.core.config import TEAM_LOGOS
from pickbook.services.team_names import normalize_team_name

logger = logging.getLogger("pickbook.logos")

LogoLookup = Callable[[str, str], Optional[str]]

ESPN_LOGO = "https://a.espncdn.com/i/teamlogos/{league}/500/{code}.png"

# ESPN uses short lowercase codes for NFL logos
NFL_LOGOS: Dict[str, str] = {
    "arizona cardinals": "ari",
    "atlanta falcons": "atl",
    "baltimore ravens": "bal",
    "buffalo bills": "buf",
    "carolina panthers": "car",
    "chicago bears": "chi",
    "cincinnati bengals": "cin",
    "cleveland browns": "cle",
    "dallas cowboys": "dal",
    "denver broncos": "den",
    "detroit lions": "det",
    "green bay packers": "gb",
    "houston texans": "hou",
    "indianapolis colts": "ind",
    "jacksonville jaguars": "jax",
    "kansas city chiefs": "kc",
    "las vegas raiders": "lv",
    "los angeles chargers": "lac",
    "los angeles rams": "lar",
    "miami dolphins": "mia",
    "minnesota vikings": "min",
    "new england patriots": "ne",
    "new orleans saints": "no",
    "new york giants": "nyg",
    "new york jets": "nyj",
    "philadelphia eagles": "phi",
    "pittsburgh steelers": "pit",
    "san francisco 49ers": "sf",
    "seattle seahawks": "sea",
    "tampa bay buccaneers": "tb",
    "tennessee titans": "ten",
    "washington commanders": "wsh",
}

# ...and numeric team ids for college. Extend as teams show up in the feed.
CFB_LOGOS: Dict[str, Union[int, str]] = {
    "alabama crimson tide": 333,
    "auburn tigers": 2,
    "boise state broncos": 68,
    "byu cougars": 252,
    "clemson tigers": 228,
    "colorado buffaloes": 38,
    "florida gators": 57,
    "florida state seminoles": 52,
    "georgia bulldogs": 61,
    "iowa hawkeyes": 2294,
    "kansas state wildcats": 2306,
    "lsu tigers": 99,
    "miami hurricanes": 2390,
    "michigan wolverines": 130,
    "missouri tigers": 142,
    "nebraska cornhuskers": 158,
    "notre dame fighting irish": 87,
    "ohio state buckeyes": 194,
    "oklahoma sooners": 201,
    "ole miss rebels": 145,
    "oregon ducks": 2483,
    "penn state nittany lions": 213,
    "smu mustangs": 2567,
    "tennessee volunteers": 2633,
    "texas a and m aggies": 245,
    "texas longhorns": 251,
    "usc trojans": 30,
    "utah utes": 254,
    "washington huskies": 264,
    "wisconsin badgers": 275,
}

# feed spellings that differ from the keys above (already normalized)
CFB_ALIASES: Dict[str, str] = {
    "miami (fl) hurricanes": "miami hurricanes",
    "mississippi rebels": "ole miss rebels",
    "southern california trojans": "usc trojans",
}


def espn_logo_url(team: str, sport: str) -> Optional[str]:
    key = normalize_team_name(team, sport)
    if sport == "nfl":
        code = NFL_LOGOS.get(key)
        league = "nfl"
    else:
        code = CFB_LOGOS.get(key) or CFB_LOGOS.get(CFB_ALIASES.get(key, ""))
        league = "ncaa"
    if code is None:
        logger.debug("logo not mapped: sport=%s team=%r", sport, team)
        return None
    return ESPN_LOGO.format(league=league, code=code)


def no_logo(team: str, sport: str) -> Optional[str]:
    return None


def resolve_logo_lookup(mode: str) -> LogoLookup:
    """Pick the logo provider once; callers hold on to the returned function."""
    if mode == "off":
        return no_logo
    if mode != "espn":
        logger.warning("unknown TEAM_LOGOS=%r; logos disabled", mode)
        return no_logo
    return espn_logo_url


logo_url: LogoLookup = resolve_logo_lookup(TEAM_LOGOS)
