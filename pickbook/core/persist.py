# pickbook/core/persist.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pickbook.core.db import exec_many, exec_script, exec_sql, fetch_all
from pickbook.core.errors import ValidationError
from pickbook.core.times import parse_instant
from pickbook.models.types import Pick, StoredGame

PICK_COLUMNS = ("user_id", "group_id", "game_id", "week", "sport", "market", "side", "line", "price", "created_at")


def _to_ts(v: Any) -> datetime | None:
    try:
        return parse_instant(v)
    except ValidationError:
        return None


def _stored_game(row: Dict[str, Any]) -> StoredGame:
    # schedule tables in the wild use home/home_team and kickoff/kickoff_at/start_time
    return {
        "id": row["id"],
        "homeTeam": row.get("home_team") or row.get("home") or "",
        "awayTeam": row.get("away_team") or row.get("away") or "",
        "kickoff": _to_ts(row.get("kickoff") or row.get("kickoff_at") or row.get("start_time")),
        "sport": row.get("sport"),
        "week": row.get("week"),
    }


class SqlGameLookup:
    """Read side of the `games` table."""

    async def games_for_week(self, sport: str, week: int) -> List[StoredGame]:
        sql = """
        SELECT id, home_team, away_team, kickoff, sport, week
        FROM games
        WHERE sport = :sport AND week = :week
        ORDER BY kickoff, id;
        """
        rows = await fetch_all(sql, {"sport": sport, "week": week})
        return [_stored_game(r) for r in rows]

    async def games_in_range(self, sport: str, start: datetime, end: datetime) -> List[StoredGame]:
        sql = """
        SELECT id, home_team, away_team, kickoff, sport, week
        FROM games
        WHERE sport = :sport AND kickoff >= :start AND kickoff <= :end
        ORDER BY kickoff, id;
        """
        rows = await fetch_all(sql, {"sport": sport, "start": start, "end": end})
        return [_stored_game(r) for r in rows]


class SqlPickStore:
    """Write side of the `picks` table. Uniqueness comes from two partial indexes (see schema.sql)."""

    async def upsert_pick(self, row: Pick, conflict: Sequence[str]) -> None:
        predicate = "group_id IS NOT NULL" if "group_id" in conflict else "group_id IS NULL"
        updates = ",\n          ".join(
            f"{c} = EXCLUDED.{c}" for c in PICK_COLUMNS if c not in conflict
        )
        sql = f"""
        INSERT INTO picks ({", ".join(PICK_COLUMNS)})
        VALUES ({", ".join(":" + c for c in PICK_COLUMNS)})
        ON CONFLICT ({", ".join(conflict)}) WHERE {predicate} DO UPDATE SET
          {updates};
        """
        await exec_sql(sql, {c: row.get(c) for c in PICK_COLUMNS})

    async def picks_for_week(
        self, user_id: str, sport: str, week: int, group_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        scope = "group_id = :group_id" if group_id else "group_id IS NULL"
        sql = f"""
        SELECT {", ".join(PICK_COLUMNS)}
        FROM picks
        WHERE user_id = :user_id AND sport = :sport AND week = :week AND {scope}
        ORDER BY created_at;
        """
        params: Dict[str, Any] = {"user_id": user_id, "sport": sport, "week": week}
        if group_id:
            params["group_id"] = group_id
        return await fetch_all(sql, params)

    async def weekly_counts(self, group_id: str, sport: str) -> Dict[int, int]:
        sql = """
        SELECT week, COUNT(*) AS n
        FROM picks
        WHERE group_id = :group_id AND sport = :sport
        GROUP BY week;
        """
        rows = await fetch_all(sql, {"group_id": group_id, "sport": sport})
        return {int(r["week"]): int(r["n"]) for r in rows if r.get("week") is not None}


async def upsert_games(rows: Iterable[Dict[str, Any]], sport: str, week: int) -> int:
    sql = """
    INSERT INTO games (id, sport, week, kickoff, status, home_team, away_team)
    VALUES (:id, :sport, :week, :kickoff, :status, :home_team, :away_team)
    ON CONFLICT (id) DO UPDATE SET
      sport = EXCLUDED.sport,
      week = EXCLUDED.week,
      kickoff = EXCLUDED.kickoff,
      status = EXCLUDED.status,
      home_team = EXCLUDED.home_team,
      away_team = EXCLUDED.away_team;
    """
    payload = [
        {
            "id": str(r["gameId"]),
            "sport": sport,
            "week": week,
            "kickoff": _to_ts(r.get("startTime")),
            "status": r.get("status") or "STATUS_SCHEDULED",
            "home_team": r["homeTeam"],
            "away_team": r["awayTeam"],
        }
        for r in rows
    ]
    if payload:
        await exec_many(sql, payload)
    return len(payload)


async def ensure_schema():
    # run schema once at startup
    await exec_script(Path(__file__).with_name("schema.sql").read_text(encoding="utf-8"))
