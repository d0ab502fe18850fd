"""
Aggregation algorithms: grouping over an immutable record set.

Every function here is pure: it takes a sequence of records plus caller
supplied key/match/value functions and returns new aggregate objects.
Groups come out in first-seen order, so repeated calls on the same input
give identical output. Consumers that need a specific order call
sort_aggregates() with an explicit sort key.

A key function may return None to leave a record out of that one
aggregation (the record still counts in aggregations keyed on other fields).
Excluding sentinel categories is done by the caller with filter_records()
before grouping; the engine itself never drops a key.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from incomedash.dashboard.algorithms.quantiles import FiveNumberSummary, five_number_summary

Record = Any
KeyFn = Callable[[Record], Optional[str]]
MatchFn = Callable[[Record], bool]
ValueFn = Callable[[Record], float]

T = TypeVar("T")


@dataclass(frozen=True)
class CountAggregate:
    """Number of records sharing one key."""
    key: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "count": self.count}


@dataclass(frozen=True)
class RateAggregate:
    """Share of records in a group that match a predicate.

    Attributes:
        key: Group key.
        rate: matched / total, in [0, 1].
        total: Group size, always >= 1.
        matched: Number of records in the group matching the predicate.
    """
    key: str
    rate: float
    total: int
    matched: int

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "rate": self.rate, "total": self.total, "matched": self.matched}


# -----------------------------------------------------------------------------
# Step 1: Pre-filter (caller policy)
# -----------------------------------------------------------------------------


def filter_records(records: Iterable[Record], predicate: Callable[[Record], bool]) -> list[Record]:
    """Keep records for which predicate(record) is True, preserving order."""
    return [r for r in records if predicate(r)]


# -----------------------------------------------------------------------------
# Step 2: Group by key (first-seen order)
# -----------------------------------------------------------------------------


def group_by(records: Iterable[Record], key_of: KeyFn) -> dict[str, list[Record]]:
    """Group records by key_of(record); dict order is first-seen key order."""
    groups: dict[str, list[Record]] = {}
    for r in records:
        key = key_of(r)
        if key is None:
            continue
        groups.setdefault(key, []).append(r)
    return groups


# -----------------------------------------------------------------------------
# Step 3: Aggregate each group
# -----------------------------------------------------------------------------


def count_by(records: Iterable[Record], key_of: KeyFn) -> list[CountAggregate]:
    """One CountAggregate per distinct key, in first-seen order."""
    return [CountAggregate(key=k, count=len(rows)) for k, rows in group_by(records, key_of).items()]


def rate_by(records: Iterable[Record], key_of: KeyFn, match: MatchFn) -> list[RateAggregate]:
    """Per-key share of records matching `match`, in first-seen order.

    Groups are built from observed keys, so total >= 1 and rate is always defined.
    """
    out: list[RateAggregate] = []
    for k, rows in group_by(records, key_of).items():
        total = len(rows)
        matched = sum(1 for r in rows if match(r))
        out.append(RateAggregate(key=k, rate=matched / total, total=total, matched=matched))
    return out


def five_number_by(records: Iterable[Record], key_of: KeyFn, value_of: ValueFn) -> list[FiveNumberSummary]:
    """Five-number summary of value_of(record) per key, in first-seen order.

    NaN values are excluded from each sample. A key whose sample is empty
    after exclusion produces no summary.
    """
    out: list[FiveNumberSummary] = []
    for k, rows in group_by(records, key_of).items():
        values = [value_of(r) for r in rows]
        if all(math.isnan(v) for v in values):
            continue
        out.append(five_number_summary(values, key=k))
    return out


def first_level_by(records: Iterable[Record], key_of: KeyFn, level_of: ValueFn) -> dict[str, float]:
    """First valid numeric level seen for each key (NaN when a key never has one).

    Used to order categories by an associated ordinal, e.g. education by education_num.
    """
    levels: dict[str, float] = {}
    for r in records:
        key = key_of(r)
        if key is None:
            continue
        level = level_of(r)
        if key not in levels or (math.isnan(levels[key]) and not math.isnan(level)):
            levels[key] = level
    return levels


# -----------------------------------------------------------------------------
# Step 4: Deterministic ordering
# -----------------------------------------------------------------------------


def sort_aggregates(
    items: Sequence[T],
    sort_key: Callable[[T], float],
    *,
    descending: bool = False,
) -> list[T]:
    """Sort aggregates by sort_key; ties broken by ascending group key.

    Items whose sort key is NaN go last regardless of direction.
    """
    by_key = sorted(items, key=lambda a: a.key)  # type: ignore[attr-defined]
    ranked = [a for a in by_key if not math.isnan(sort_key(a))]
    unranked = [a for a in by_key if math.isnan(sort_key(a))]
    # sorted() is stable with reverse=True too, so the key order survives ties
    ranked = sorted(ranked, key=sort_key, reverse=descending)
    return ranked + unranked
