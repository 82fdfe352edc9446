from __future__ import annotations

from datetime import date, datetime

from src.institute_analytics.institute_analytics.analytics.aggregation import (
    bucket_by,
    mean,
    month_bucket,
    rate,
    top_n,
    window_filter,
    within_range,
)


def test_rate_of_empty_collection_is_zero():
    assert rate([], lambda r: True) == 0.0
    assert mean([]) == 0.0


def test_rate_keeps_full_precision():
    assert rate([1, 2, 3], lambda r: r == 1) == 100.0 / 3


def test_bucket_by_keeps_first_seen_order():
    buckets = bucket_by(["b1", "a1", "b2", "c1", "a2"], lambda s: s[0])

    assert list(buckets) == ["b", "a", "c"]
    assert buckets["b"] == ["b1", "b2"]


def test_top_n_breaks_ties_by_tie_break_then_truncates():
    items = [("zed", 50), ("amy", 80), ("bob", 50), ("cal", 50)]

    ranked = top_n(items, lambda i: i[1], 3, tie_break=lambda i: i[0])

    assert ranked == [("amy", 80), ("bob", 50), ("cal", 50)]


def test_top_n_ascending_ranks_worst_first():
    ranked = top_n([3, 1, 2], lambda v: v, None, descending=False)

    assert ranked == [1, 2, 3]


def test_within_range_open_bounds_and_inclusive_ends():
    days = [date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)]

    assert within_range(days, lambda d: d) == days
    assert within_range(days, lambda d: d, date(2024, 5, 2), None) == days[1:]
    assert within_range(days, lambda d: d, date(2024, 5, 1), date(2024, 5, 2)) == days[:2]


def test_within_range_accepts_datetimes():
    stamps = [datetime(2024, 5, 31, 23, 59), datetime(2024, 6, 1, 0, 1)]

    assert within_range(stamps, lambda d: d, None, date(2024, 5, 31)) == stamps[:1]


def test_window_filter_is_inclusive_on_both_ends():
    today = date(2024, 5, 31)
    days = [date(2024, 5, 1), date(2024, 4, 30), today, date(2024, 6, 1)]

    kept = window_filter(days, lambda d: d, 30, today=today)

    assert kept == [date(2024, 5, 1), today]


def test_month_bucket_is_ascending_and_keeps_every_month():
    stamps = [datetime(2024, 3, 5), datetime(2023, 12, 1), datetime(2024, 3, 20), datetime(2024, 1, 9)]

    months = [m for m, _ in month_bucket(stamps, lambda d: d)]

    assert months == ["2023-12", "2024-01", "2024-03"]
