"""The dashboard recompute: filter, order, total, bucket and break down.

``aggregate`` is a pure function of its arguments. Transactions whose date
cannot be read still show up in ``filtered`` (after the dated ones, in input
order) unless a date range is active, but they cannot be placed on the
calendar, so summary, series and breakdown only count dated rows. They are
reported at DEBUG level only.
"""

from datetime import timezone, tzinfo
from typing import Iterable, List, Tuple

from fintrack.aggregates import build_series, category_breakdown, summarize
from fintrack.domain import (
    EXPENSE,
    GRANULARITIES,
    MONTH,
    DashboardView,
    FilterSet,
    Transaction,
)
from fintrack.filters import build_predicate
from fintrack.functional import parse_timestamp, pipe
from fintrack.logging_setup import get_logger
from fintrack.ordering import Dated, newest_first

logger = get_logger(__name__)


def with_dates(
    trans: Iterable[Transaction], tz: tzinfo = timezone.utc
) -> Tuple[List[Dated], List[Transaction]]:
    """Split into (timestamp, transaction) pairs and the rows with no usable date."""
    dated: List[Dated] = []
    undated: List[Transaction] = []
    for t in trans:
        when = parse_timestamp(t.date, tz)
        if when.is_some():
            dated.append((when.get_or_else(None), t))
        else:
            undated.append(t)
    if undated:
        logger.debug(
            "%d transaction(s) without a usable date: %s", len(undated), ", ".join(t.id for t in undated)
        )
    return dated, undated


def aggregate(
    transactions: Iterable[Transaction],
    filter_set: FilterSet = FilterSet(),
    granularity: str = MONTH,
    breakdown_type: str = EXPENSE,
    tz: tzinfo = timezone.utc,
) -> DashboardView:
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity {granularity!r}, expected one of {', '.join(GRANULARITIES)}")

    predicate = build_predicate(filter_set, tz)
    dated, undated = pipe(
        transactions,
        lambda trans: [t for t in trans if predicate(t)],
        lambda kept: with_dates(kept, tz),
    )
    dated = newest_first(dated)
    on_calendar = tuple(t for _, t in dated)

    view = DashboardView(
        filtered=on_calendar + tuple(undated),
        summary=summarize(on_calendar),
        series=build_series(dated, granularity),
        category_breakdown=category_breakdown(on_calendar, breakdown_type),
    )
    logger.debug(
        "Aggregated %d transaction(s) into %d %s bucket(s)", len(view.filtered), len(view.series), granularity
    )
    return view
