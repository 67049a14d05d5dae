"""Calendar buckets for the income/expense trend series.

Every timestamp is bucketed on the calendar of its own timezone, so callers
must convert to the reference timezone first (``parse_timestamp`` does).
Weeks start on Sunday. Labels use a fixed English month table so they do not
depend on the process locale.
"""

from datetime import date, datetime, timedelta

from fintrack.domain import DAY, MONTH, WEEK, BucketKey

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# date.weekday() numbering: Monday == 0 ... Sunday == 6
WEEK_STARTS_ON = 6


def week_start(day: date) -> date:
    return day - timedelta(days=(day.weekday() - WEEK_STARTS_ON) % 7)


def _midnight(day: date, when: datetime) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=when.tzinfo)


def day_bucket(when: datetime) -> BucketKey:
    day = when.date()
    return BucketKey(
        key=day.isoformat(),
        label=f"{MONTH_ABBR[day.month - 1]} {day.day}",
        sort_order=_midnight(day, when),
    )


def week_bucket(when: datetime) -> BucketKey:
    start = week_start(when.date())
    return BucketKey(
        key=start.isoformat(),
        label=f"Wk {start.day} {MONTH_ABBR[start.month - 1]}",
        sort_order=_midnight(start, when),
    )


def month_bucket(when: datetime) -> BucketKey:
    first = when.date().replace(day=1)
    return BucketKey(
        key=f"{first.year:04d}-{first.month:02d}",
        label=f"{MONTH_ABBR[first.month - 1]} {first.year % 100:02d}",
        sort_order=_midnight(first, when),
    )


_BUCKETERS = {
    DAY: day_bucket,
    WEEK: week_bucket,
    MONTH: month_bucket,
}


def bucket_key(when: datetime, granularity: str) -> BucketKey:
    try:
        bucketer = _BUCKETERS[granularity]
    except KeyError:
        raise ValueError(
            f"Unknown granularity {granularity!r}, expected one of {', '.join(_BUCKETERS)}"
        ) from None
    return bucketer(when)
