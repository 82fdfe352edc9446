"""Grouping, windowing and ranking primitives shared by the report builders.

Every function is a pure transform over an in-memory sequence of records.
Results keep full float precision; rounding happens only when a report is
presented.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Hashable, Iterable, Optional, Sequence, TypeVar

from ..common.datetime_utils import as_day, month_key

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

DateFn = Callable[[T], Optional[date]]


def bucket_by(records: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, list[T]]:
    """Group records by a derived key.

    Buckets keep first-seen order, and records keep input order inside a bucket.
    """

    buckets: dict[K, list[T]] = {}
    for r in records:
        buckets.setdefault(key_fn(r), []).append(r)
    return buckets


def count_where(records: Iterable[T], predicate: Callable[[T], bool]) -> int:
    return sum(1 for r in records if predicate(r))


def rate(records: Sequence[T], predicate: Callable[[T], bool]) -> float:
    """Percentage of records matching predicate; 0 for an empty collection."""

    if not records:
        return 0.0
    return 100.0 * count_where(records, predicate) / len(records)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def top_n(
    items: Iterable[T],
    score_fn: Callable[[T], float],
    n: Optional[int],
    *,
    descending: bool = True,
    tie_break: Optional[Callable[[T], object]] = None,
) -> list[T]:
    """Rank items by score and keep the first n.

    Ties are ordered by `tie_break` ascending when given, otherwise by input
    order. `descending=False` ranks worst-first (e.g. lowest attendance).
    `n=None` keeps every item.
    """

    ranked = list(items)
    if tie_break is not None:
        ranked.sort(key=tie_break)
    # list.sort is stable, so the tie-break order survives the score sort.
    ranked.sort(key=score_fn, reverse=descending)
    return ranked if n is None else ranked[: max(int(n), 0)]


def within_range(
    records: Iterable[T],
    date_fn: DateFn,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[T]:
    """Keep records whose day falls in [start, end]; either bound may be open.

    Records without a date are dropped only when a bound is given.
    """

    if start is None and end is None:
        return list(records)

    out: list[T] = []
    for r in records:
        value = date_fn(r)
        if value is None:
            continue
        day = as_day(value)
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        out.append(r)
    return out


def window_filter(records: Iterable[T], date_fn: DateFn, days: int, *, today: date) -> list[T]:
    """Trailing window: records dated within [today - days, today]."""

    return within_range(records, date_fn, today - timedelta(days=int(days)), today)


def month_bucket(records: Iterable[T], date_fn: Callable[[T], date]) -> list[tuple[str, list[T]]]:
    """Group by calendar month (YYYY-MM), months ascending.

    Every month present in the input is kept; no trailing truncation.
    """

    buckets = bucket_by(records, lambda r: month_key(date_fn(r)))
    return sorted(buckets.items(), key=lambda kv: kv[0])
