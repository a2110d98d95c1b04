from gridsync.models.cell_values import (
    AggregateValue,
    Ordering,
    RealValue,
    SortDirection,
    SortSentinel,
    compare_cell_values,
    is_aggregation,
)


def test_sentinel_codepoints_follow_direction():
    assert SortSentinel(SortDirection.ASC).text == chr(10000)
    assert SortSentinel(SortDirection.DESC).text == chr(0)
    assert SortSentinel(SortDirection.ASC, max_codepoint=0x10FFFF).text == chr(0x10FFFF)


def test_max_sentinel_sorts_after_any_real_text():
    # Real data above the sentinel codepoint must not overtake it.
    beyond = RealValue(chr(0x1F600))
    assert compare_cell_values(SortSentinel(SortDirection.ASC), beyond) == 1
    assert compare_cell_values(beyond, SortSentinel(SortDirection.ASC)) == -1


def test_min_sentinel_sorts_before_any_real_value():
    assert compare_cell_values(SortSentinel(SortDirection.DESC), RealValue(chr(0))) == -1
    assert compare_cell_values(SortSentinel(SortDirection.DESC), RealValue(-1e9)) == -1


def test_equal_sentinels_compare_equal():
    assert compare_cell_values(SortSentinel(SortDirection.ASC), SortSentinel(SortDirection.ASC)) == 0
    assert compare_cell_values(SortSentinel(SortDirection.DESC), SortSentinel(SortDirection.ASC)) == -1


def test_real_values_compare_naturally():
    assert compare_cell_values(RealValue(2), RealValue(10)) == -1
    assert compare_cell_values(RealValue("b"), RealValue("A")) == 1
    assert compare_cell_values(RealValue("abc"), RealValue("ABC")) == 0
    assert compare_cell_values(RealValue(5), RealValue("text")) == -1


def test_ordering_inverted():
    assert Ordering.LESS_THAN.inverted() is Ordering.GREATER_THAN
    assert Ordering.GREATER_THAN.inverted() is Ordering.LESS_THAN
    assert Ordering.NO_OPINION.inverted() is Ordering.NO_OPINION


def test_aggregate_detection():
    assert is_aggregation(AggregateValue(42))
    assert not is_aggregation(42)
    assert str(AggregateValue(42)) == "42"
