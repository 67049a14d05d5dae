from collections import defaultdict
from datetime import datetime
from functools import reduce
from typing import Dict, Iterable, List, Tuple

from fintrack.bucketing import bucket_key
from fintrack.domain import (
    EXPENSE,
    INCOME,
    TYPES,
    Amount,
    Bucket,
    BucketKey,
    CategorySlice,
    Summary,
    Transaction,
    exact_amount,
)
from fintrack.ordering import chronological, largest_first


def summarize(trans: Iterable[Transaction]) -> Summary:
    income, expense = reduce(
        lambda acc, t: (
            acc[0] + exact_amount(t.amount) if t.type == INCOME else acc[0],
            acc[1] + exact_amount(t.amount) if t.type == EXPENSE else acc[1],
        ),
        trans,
        (0, 0),
    )
    return Summary(income=income, expense=expense, balance=income - expense)


def build_series(
    dated: Iterable[Tuple[datetime, Transaction]], granularity: str
) -> Tuple[Bucket, ...]:
    """One bucket per period that has transactions; empty periods are skipped."""
    keys: Dict[str, BucketKey] = {}
    income: Dict[str, Amount] = defaultdict(int)
    expense: Dict[str, Amount] = defaultdict(int)

    for when, t in dated:
        bk = bucket_key(when, granularity)
        keys.setdefault(bk.key, bk)
        if t.type == INCOME:
            income[bk.key] += exact_amount(t.amount)
        elif t.type == EXPENSE:
            expense[bk.key] += exact_amount(t.amount)

    return chronological(
        Bucket(
            key=bk.key,
            label=bk.label,
            sort_order=bk.sort_order,
            income_total=income[bk.key],
            expense_total=expense[bk.key],
        )
        for bk in keys.values()
    )


def category_breakdown(
    trans: Iterable[Transaction], kind: str
) -> Tuple[CategorySlice, ...]:
    if kind not in TYPES:
        raise ValueError(f"Breakdown type must be one of {', '.join(TYPES)}, got {kind!r}")

    totals_by_category: Dict[str, Amount] = {}
    for t in trans:
        if t.type == kind:
            totals_by_category[t.category] = totals_by_category.get(t.category, 0) + exact_amount(t.amount)

    slices: List[CategorySlice] = [
        CategorySlice(category=name, total=total) for name, total in totals_by_category.items()
    ]
    return largest_first(slices)
