# pickbook/models/schemas.py
from typing import Optional

from pydantic import BaseModel, Field

from pickbook.models.types import MarketKey


class PickIn(BaseModel):
    user_id: str = Field(min_length=1)
    group_id: Optional[str] = None
    home_team: str
    away_team: str
    commence_time: str = Field(description="ISO-8601 instant as reported by the odds feed")
    market: MarketKey
    side: Optional[str] = None
    line: Optional[float] = None
    price: Optional[int] = None
    week: Optional[int] = Field(default=None, ge=1, description="defaults to the week containing commence_time")
