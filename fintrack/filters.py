from datetime import timezone, tzinfo
from typing import Callable

from fintrack.domain import ALL, FilterSet, Transaction
from fintrack.functional import parse_calendar_date, parse_timestamp

Predicate = Callable[[Transaction], bool]


def _any(t: Transaction) -> bool:
    return True


def by_division(division: str) -> Predicate:
    if division == ALL:
        return _any

    def _filter(t: Transaction) -> bool:
        return t.division == division

    return _filter


def by_type(kind: str) -> Predicate:
    if kind == ALL:
        return _any

    def _filter(t: Transaction) -> bool:
        return t.type == kind

    return _filter


def by_category(category: str) -> Predicate:
    if category == ALL:
        return _any

    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_date_range(start: str, end: str, tz: tzinfo = timezone.utc) -> Predicate:
    """Inclusive calendar range in ``tz``; only applied when both bounds are given.

    Bounds are compared as calendar days, so any instant on the end day
    matches, however fine its sub-second part.
    """
    start_day = parse_calendar_date(start)
    end_day = parse_calendar_date(end)
    if start_day.is_none() or end_day.is_none():
        return _any

    first = start_day.get_or_else(None)
    last = end_day.get_or_else(None)

    def _filter(t: Transaction) -> bool:
        return parse_timestamp(t.date, tz).map(lambda when: first <= when.date() <= last).get_or_else(False)

    return _filter


def build_predicate(filter_set: FilterSet, tz: tzinfo = timezone.utc) -> Predicate:
    checks = (
        by_division(filter_set.division),
        by_type(filter_set.type),
        by_category(filter_set.category),
        by_date_range(filter_set.start_date, filter_set.end_date, tz),
    )

    def _filter(t: Transaction) -> bool:
        return all(check(t) for check in checks)

    return _filter


def matches(t: Transaction, filter_set: FilterSet, tz: tzinfo = timezone.utc) -> bool:
    return build_predicate(filter_set, tz)(t)
