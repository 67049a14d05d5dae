from fintrack.domain import FilterSet, Transaction
from fintrack.memo import cached_aggregate
from fintrack.pipeline import aggregate


def make_trans():
    return tuple(
        Transaction(str(i), 10 * (i + 1), "expense", "Food", "Personal", f"2025-01-{i + 1:02d}")
        for i in range(20)
    )


def test_cached_aggregate_matches_aggregate():
    cached_aggregate.cache_clear()
    trans = make_trans()
    assert cached_aggregate(trans, FilterSet(), "week") == aggregate(trans, FilterSet(), "week")


def test_equal_inputs_share_one_result():
    cached_aggregate.cache_clear()
    first = cached_aggregate(make_trans(), FilterSet(category="Food"), "day")
    second = cached_aggregate(make_trans(), FilterSet(category="Food"), "day")
    assert first is second
    assert cached_aggregate.cache_info().hits == 1


def test_changed_input_recomputes():
    cached_aggregate.cache_clear()
    trans = make_trans()
    before = cached_aggregate(trans, FilterSet(), "month")
    after = cached_aggregate(trans[:-1], FilterSet(), "month")
    assert before.summary.expense - after.summary.expense == 200
    assert cached_aggregate.cache_info().misses == 2
