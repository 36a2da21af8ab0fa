# pickbook/models/types.py
from datetime import datetime
from typing import Any, List, NamedTuple, Optional

from typing_extensions import Literal, TypedDict

Sport = Literal["nfl", "cfb"]
MarketKey = Literal["spreads", "totals", "h2h"]


class WeekWindow(NamedTuple):
    week: int
    start: datetime  # inclusive, UTC
    end: datetime    # exclusive, UTC


class Outcome(TypedDict):
    name: str
    price: Optional[int]
    point: Optional[float]


class Market(TypedDict):
    key: str
    outcomes: List[Outcome]


class FeedGame(TypedDict):
    externalId: str
    homeTeam: str
    awayTeam: str
    commenceTime: datetime
    book: Optional[str]
    markets: List[Market]


class StoredGame(TypedDict):
    id: Any
    homeTeam: str
    awayTeam: str
    kickoff: datetime
    sport: str
    week: int


class Pick(TypedDict):
    user_id: str
    group_id: Optional[str]
    game_id: str
    week: int
    sport: str
    market: str
    side: Optional[str]
    line: Optional[float]
    price: Optional[int]
    created_at: datetime
