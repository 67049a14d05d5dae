from datetime import timezone, tzinfo
from functools import lru_cache

from fintrack.domain import EXPENSE, DashboardView, FilterSet, Transaction
from fintrack.pipeline import aggregate


# Callers get a shared DashboardView for equal input tuples; it is frozen.
@lru_cache(maxsize=64)
def cached_aggregate(
    transactions: tuple[Transaction, ...],
    filter_set: FilterSet,
    granularity: str,
    breakdown_type: str = EXPENSE,
    tz: tzinfo = timezone.utc,
) -> DashboardView:
    return aggregate(transactions, filter_set, granularity, breakdown_type, tz)
