from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

import pytest

from pickbook.core.errors import UpstreamError


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def game(id, home, away, kickoff, sport="nfl", week=1) -> Dict[str, Any]:
    return {"id": id, "homeTeam": home, "awayTeam": away, "kickoff": kickoff, "sport": sport, "week": week}


class FakeGameLookup:
    """In-memory `games` table. Rows come back in insertion order."""

    def __init__(self, games: List[Dict[str, Any]] = (), fail: str | None = None):
        self.games = list(games)
        self.fail = fail
        self.calls: List[tuple] = []

    async def games_for_week(self, sport, week):
        self.calls.append(("week", sport, week))
        if self.fail:
            raise UpstreamError(self.fail)
        return [g for g in self.games if g["sport"] == sport and g["week"] == week]

    async def games_in_range(self, sport, start, end):
        self.calls.append(("range", sport, start, end))
        if self.fail:
            raise UpstreamError(self.fail)
        return [g for g in self.games if g["sport"] == sport and start <= g["kickoff"] <= end]


class FakePickStore:
    """Mimics the two partial unique indexes on `picks`."""

    def __init__(self, fail: str | None = None):
        self.rows: List[Dict[str, Any]] = []
        self.fail = fail

    async def upsert_pick(self, row: Dict[str, Any], conflict: Sequence[str]) -> None:
        if self.fail:
            raise UpstreamError(self.fail)
        grouped = "group_id" in conflict
        for i, existing in enumerate(self.rows):
            if (existing["group_id"] is not None) == grouped and all(existing[c] == row[c] for c in conflict):
                self.rows[i] = dict(row)
                return
        self.rows.append(dict(row))

    async def picks_for_week(self, user_id, sport, week, group_id=None):
        return [
            r for r in self.rows
            if r["user_id"] == user_id and r["sport"] == sport and r["week"] == week and r["group_id"] == group_id
        ]

    async def weekly_counts(self, group_id, sport):
        out: Dict[int, int] = {}
        for r in self.rows:
            if r["group_id"] == group_id and r["sport"] == sport:
                out[r["week"]] = out.get(r["week"], 0) + 1
        return out


@pytest.fixture
def pick_store():
    return FakePickStore()
