import asyncio

import pytest

from fintrack.domain import FilterSet, Transaction
from fintrack.recompute import LatestRecompute


def make_tx(id, amount, type, date):
    category = "Salary" if type == "income" else "Food"
    return Transaction(id=id, amount=amount, type=type, category=category, division="Office", date=date)


def make_trans():
    return (
        make_tx("t1", 100, "income", "2025-01-01"),
        make_tx("t2", 40, "expense", "2025-01-02"),
        make_tx("t3", 60, "expense", "2025-02-01"),
    )


@pytest.mark.asyncio
async def test_single_submit_returns_view():
    runner = LatestRecompute()
    view = await runner.submit(make_trans(), FilterSet(), "month")
    assert view is not None
    assert view.summary.balance == 0
    assert runner.latest is view
    assert runner.generation == 1


@pytest.mark.asyncio
async def test_stale_submit_is_discarded():
    runner = LatestRecompute()
    stale, fresh = await asyncio.gather(
        runner.submit(make_trans(), FilterSet(), "month"),
        runner.submit(make_trans(), FilterSet(type="income"), "month"),
    )
    assert stale is None
    assert fresh is not None
    assert [t.id for t in fresh.filtered] == ["t1"]
    assert runner.latest is fresh


@pytest.mark.asyncio
async def test_sequential_submits_all_complete():
    runner = LatestRecompute()
    first = await runner.submit(make_trans(), FilterSet(), "day")
    second = await runner.submit(make_trans(), FilterSet(), "week")
    assert first is not None and second is not None
    assert len(first.series) == 3
    assert len(second.series) == 2
