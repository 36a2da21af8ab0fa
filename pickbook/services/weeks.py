# pickbook/services/weeks.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Sequence, Tuple

from pickbook.core.config import SPORT_CONFIGS
from pickbook.core.errors import ValidationError
from pickbook.models.types import WeekWindow

WEEK = timedelta(days=7)

# Every sport's season is a run of fixed 7-day UTC windows starting at a
# configured season-open instant. Nothing here reads local time.


def _require_utc(at: datetime, what: str) -> datetime:
    if at.tzinfo is None or at.utcoffset() is None:
        raise ValidationError(f"{what} must be timezone-aware")
    return at.astimezone(timezone.utc)


def generate_weeks(season_open: datetime, count: int) -> Tuple[WeekWindow, ...]:
    """Week i spans [season_open + (i-1)*7d, season_open + i*7d)."""
    if count < 1:
        raise ValidationError(f"week count must be >= 1, got {count}")
    start = _require_utc(season_open, "season_open")
    return tuple(
        WeekWindow(week=i, start=start + (i - 1) * WEEK, end=start + i * WEEK)
        for i in range(1, count + 1)
    )


def current_week(windows: Sequence[WeekWindow], at: Optional[datetime] = None) -> int:
    """
    Week whose window contains `at` (now by default).
    Before the first window -> first week; at/after the last end -> last week.
    """
    if not windows:
        raise ValidationError("no week windows")
    t = datetime.now(timezone.utc) if at is None else _require_utc(at, "at")
    for w in windows:
        if w.start <= t < w.end:
            return w.week
    if t < windows[0].start:
        return windows[0].week
    return windows[-1].week


def week_window(windows: Sequence[WeekWindow], week: int) -> WeekWindow:
    """Window for `week`, clamped into the season."""
    if not windows:
        raise ValidationError("no week windows")
    idx = min(max(week, 1), len(windows)) - 1
    return windows[idx]


_CALENDARS: Dict[str, Tuple[WeekWindow, ...]] = {
    sport: generate_weeks(cfg.season_open, cfg.weeks)
    for sport, cfg in SPORT_CONFIGS.items()
}


def calendar_for(sport: str) -> Tuple[WeekWindow, ...]:
    try:
        return _CALENDARS[sport]
    except KeyError:
        raise ValidationError(f"unknown sport: {sport!r}") from None
