from datetime import datetime
from typing import Iterable, List, Tuple

from fintrack.domain import Bucket, CategorySlice, Transaction

Dated = Tuple[datetime, Transaction]


# sorted() is stable with reverse=True as well, so equal keys keep input order.

def newest_first(dated: Iterable[Dated]) -> List[Dated]:
    return sorted(dated, key=lambda pair: pair[0], reverse=True)


def chronological(buckets: Iterable[Bucket]) -> Tuple[Bucket, ...]:
    return tuple(sorted(buckets, key=lambda b: b.sort_order))


def largest_first(slices: Iterable[CategorySlice]) -> Tuple[CategorySlice, ...]:
    return tuple(sorted(slices, key=lambda s: s.total, reverse=True))
