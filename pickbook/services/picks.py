# pickbook/services/picks.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional, Protocol, Sequence, Tuple

from pickbook.core.config import MARKETS
from pickbook.core.errors import UpstreamError, ValidationError
from pickbook.models.types import Pick
from pickbook.services.resolver import sport_config

logger = logging.getLogger("pickbook.picks")

SOLO_KEY = ("user_id", "game_id")
GROUP_KEY = ("user_id", "group_id", "game_id")


class PickStore(Protocol):
    async def upsert_pick(self, row: Pick, conflict: Sequence[str]) -> None: ...


class PickResult(NamedTuple):
    ok: bool
    pick: Optional[Pick] = None
    error: Optional[str] = None


def conflict_key(group_id: Optional[str]) -> Tuple[str, ...]:
    return GROUP_KEY if group_id else SOLO_KEY


def _opt_float(v: Any, what: str) -> Optional[float]:
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be numeric, got {v!r}") from None


def _opt_int(v: Any, what: str) -> Optional[int]:
    if v is None:
        return None
    if isinstance(v, float) and not v.is_integer():
        raise ValidationError(f"{what} must be an integer, got {v!r}")
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be an integer, got {v!r}") from None


def build_pick_row(
    user_id: str,
    game_id: Any,
    sport: str,
    week: int,
    market: str,
    side: Optional[str],
    line: Any = None,
    price: Any = None,
    group_id: Optional[str] = None,
) -> Pick:
    if not user_id:
        raise ValidationError("user_id is required")
    if game_id is None or game_id == "":
        raise ValidationError("game_id is required")
    cfg = sport_config(sport)
    if market not in MARKETS:
        raise ValidationError(f"unknown market: {market!r}")
    if not isinstance(week, int) or week < 1:
        raise ValidationError(f"week must be a positive integer, got {week!r}")
    return {
        "user_id": str(user_id),
        "group_id": group_id or None,
        "game_id": str(game_id),
        "week": week,
        "sport": cfg.sport,
        "market": market,
        "side": None if side is None else str(side),
        "line": _opt_float(line, "line"),
        "price": _opt_int(price, "price"),
        "created_at": datetime.now(timezone.utc),
    }


async def record_pick(
    store: PickStore,
    user_id: str,
    game_id: Any,
    sport: str,
    week: int,
    market: str,
    side: Optional[str],
    line: Any = None,
    price: Any = None,
    group_id: Optional[str] = None,
) -> PickResult:
    """
    Write a pick, replacing any earlier pick with the same (user, game) or
    (user, group, game) key. Bad input raises ValidationError; store failures
    come back as PickResult(ok=False, error=<store message>) and are not retried.
    """
    row = build_pick_row(user_id, game_id, sport, week, market, side, line, price, group_id)
    try:
        await store.upsert_pick(row, conflict_key(row["group_id"]))
    except UpstreamError as e:
        logger.warning("pick write failed user=%s game=%s: %s", row["user_id"], row["game_id"], e)
        return PickResult(ok=False, error=str(e))
    logger.info(
        "pick saved user=%s group=%s game=%s %s/%s side=%r",
        row["user_id"], row["group_id"], row["game_id"], row["sport"], row["market"], row["side"],
    )
    return PickResult(ok=True, pick=row)
