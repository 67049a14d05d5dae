from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from fintrack.bucketing import bucket_key, week_start
from fintrack.functional import parse_timestamp

UTC = timezone.utc


def at(*args, tz=UTC):
    return datetime(*args, tzinfo=tz)


def test_day_bucket_ignores_time_of_day():
    early = bucket_key(at(2025, 1, 5, 0, 0), "day")
    late = bucket_key(at(2025, 1, 5, 23, 59, 59), "day")
    assert early == late
    assert early.key == "2025-01-05"
    assert early.label == "Jan 5"
    assert early.sort_order == at(2025, 1, 5)


def test_week_starts_on_sunday():
    assert week_start(date(2025, 1, 1)) == date(2024, 12, 29)   # Wednesday
    assert week_start(date(2025, 1, 4)) == date(2024, 12, 29)   # Saturday
    assert week_start(date(2025, 1, 5)) == date(2025, 1, 5)     # Sunday
    assert week_start(date(2025, 1, 6)) == date(2025, 1, 5)     # Monday


def test_week_bucket_spans_year_boundary():
    wed = bucket_key(at(2025, 1, 1, 12), "week")
    sat = bucket_key(at(2025, 1, 4, 23, 59), "week")
    assert wed == sat
    assert wed.key == "2024-12-29"
    assert wed.label == "Wk 29 Dec"
    assert wed.sort_order == at(2024, 12, 29)


def test_week_boundary_goes_to_new_week_only():
    before = bucket_key(at(2025, 1, 4, 23, 59, 59, 999999), "week")
    boundary = bucket_key(at(2025, 1, 5, 0, 0), "week")
    assert before.key == "2024-12-29"
    assert boundary.key == "2025-01-05"
    assert boundary.label == "Wk 5 Jan"


def test_month_bucket():
    last = bucket_key(at(2025, 1, 31, 23, 59, 59), "month")
    first = bucket_key(at(2025, 2, 1, 0, 0), "month")
    assert last.key == "2025-01"
    assert last.label == "Jan 25"
    assert first.key == "2025-02"
    assert first.label == "Feb 25"
    assert first.sort_order == at(2025, 2, 1)
    assert last.sort_order < first.sort_order


def test_month_label_pads_two_digit_year():
    assert bucket_key(at(2009, 12, 3), "month").label == "Dec 09"


def test_bucket_follows_reference_timezone():
    kolkata = ZoneInfo("Asia/Kolkata")
    when = parse_timestamp("2025-01-31T23:30:00Z", kolkata).get_or_else(None)
    assert bucket_key(when, "month").key == "2025-02"
    assert bucket_key(when, "day").key == "2025-02-01"

    as_utc = parse_timestamp("2025-01-31T23:30:00Z").get_or_else(None)
    assert bucket_key(as_utc, "month").key == "2025-01"


def test_bucket_key_is_deterministic():
    when = at(2025, 3, 14, 15, 9)
    for granularity in ("day", "week", "month"):
        assert bucket_key(when, granularity) == bucket_key(when, granularity)


def test_unknown_granularity():
    with pytest.raises(ValueError):
        bucket_key(at(2025, 1, 1), "year")
