from datetime import datetime, timedelta

import pytest

from conftest import utc
from pickbook.core.errors import ValidationError
from pickbook.services.weeks import calendar_for, current_week, generate_weeks, week_window


@pytest.mark.parametrize("season_open,count", [
    (utc(2025, 9, 2), 18),
    (utc(2025, 8, 26), 15),
    (utc(2024, 2, 25, 17, 30), 3),  # crosses Feb 29
    (utc(2025, 3, 1), 1),
])
def test_windows_are_contiguous_seven_day_blocks(season_open, count):
    weeks = generate_weeks(season_open, count)

    assert [w.week for w in weeks] == list(range(1, count + 1))
    assert weeks[0].start == season_open
    for w in weeks:
        assert w.end - w.start == timedelta(days=7)
    for a, b in zip(weeks, weeks[1:]):
        assert a.end == b.start


def test_non_utc_offset_is_converted_to_utc():
    from datetime import timezone
    eastern = timezone(timedelta(hours=-4))
    weeks = generate_weeks(datetime(2025, 9, 1, 20, 0, tzinfo=eastern), 2)
    assert weeks[0].start == utc(2025, 9, 2)
    assert weeks[0].start.utcoffset() == timedelta(0)


def test_naive_season_open_rejected():
    with pytest.raises(ValidationError):
        generate_weeks(datetime(2025, 9, 2), 18)


def test_zero_weeks_rejected():
    with pytest.raises(ValidationError):
        generate_weeks(utc(2025, 9, 2), 0)


def test_windows_are_immutable():
    weeks = generate_weeks(utc(2025, 9, 2), 2)
    assert isinstance(weeks, tuple)
    with pytest.raises(AttributeError):
        weeks[0].week = 5


def test_current_week_example():
    weeks = generate_weeks(utc(2025, 9, 2), 18)
    assert current_week(weeks, utc(2025, 9, 10, 12)) == 2


def test_current_week_boundaries():
    weeks = generate_weeks(utc(2025, 9, 2), 18)
    assert current_week(weeks, utc(2025, 9, 2)) == 1
    assert current_week(weeks, utc(2025, 9, 9)) == 2
    assert current_week(weeks, utc(2025, 9, 8, 23, 59, 59)) == 1


def test_current_week_clamps_out_of_season():
    weeks = generate_weeks(utc(2025, 9, 2), 18)
    assert current_week(weeks, utc(2025, 6, 1)) == 1
    assert current_week(weeks, weeks[-1].end) == 18
    assert current_week(weeks, utc(2026, 2, 8)) == 18


@pytest.mark.parametrize("sport,count", [("nfl", 18), ("cfb", 15)])
def test_current_week_is_total(sport, count):
    weeks = calendar_for(sport)
    assert len(weeks) == count
    t = weeks[0].start - timedelta(days=60)
    while t < weeks[-1].end + timedelta(days=60):
        assert 1 <= current_week(weeks, t) <= count
        t += timedelta(hours=13)


def test_current_week_defaults_to_now():
    weeks = calendar_for("nfl")
    assert 1 <= current_week(weeks) <= 18


def test_current_week_rejects_naive_instant():
    with pytest.raises(ValidationError):
        current_week(calendar_for("nfl"), datetime(2025, 9, 10))


def test_week_window_clamps():
    weeks = generate_weeks(utc(2025, 9, 2), 15)
    assert week_window(weeks, 0).week == 1
    assert week_window(weeks, 7).start == utc(2025, 10, 14)
    assert week_window(weeks, 99).week == 15


def test_calendar_for_unknown_sport():
    with pytest.raises(ValidationError):
        calendar_for("nhl")
