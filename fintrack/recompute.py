import asyncio
from datetime import timezone, tzinfo
from typing import Optional, Tuple

from fintrack.domain import EXPENSE, DashboardView, FilterSet, Transaction
from fintrack.memo import cached_aggregate


class LatestRecompute:
    """Run dashboard recomputes where only the newest submission counts.

    Each submit() takes a generation number before yielding to the loop.
    A recompute that finishes after a newer one was submitted returns None
    and its result is dropped.
    """

    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz
        self._generation = 0
        self.latest: Optional[DashboardView] = None

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(
        self,
        transactions: Tuple[Transaction, ...],
        filter_set: FilterSet,
        granularity: str,
        breakdown_type: str = EXPENSE,
    ) -> Optional[DashboardView]:
        self._generation += 1
        mine = self._generation

        await asyncio.sleep(0)  # let newer submissions in
        if mine != self._generation:
            return None

        view = cached_aggregate(tuple(transactions), filter_set, granularity, breakdown_type, self.tz)
        self.latest = view
        return view
