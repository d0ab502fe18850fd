"""Hover state and tooltip text for the dashboard charts.

InteractionState is owned by the page and passed explicitly to whatever
needs it. Hovering only looks up an aggregate that was already computed;
it never re-aggregates records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from incomedash.dashboard.algorithms.aggregation import CountAggregate, RateAggregate
from incomedash.dashboard.algorithms.quantiles import FiveNumberSummary
from incomedash.dashboard.dashboard_state import ChartId, DashboardAggregates, chart_aggregates

Aggregate = Union[CountAggregate, RateAggregate, FiveNumberSummary]


def format_count_tooltip(item: CountAggregate, total: int) -> str:
    percent = item.count / total * 100 if total else 0.0
    return f"<b>{item.key}</b><br>{item.count:,} individuals<br>({percent:.1f}%)"


def format_rate_tooltip(item: RateAggregate) -> str:
    return f"<b>{item.key}</b><br>High Income: {item.rate * 100:.1f}%<br>({item.total:,} individuals)"


def format_summary_tooltip(item: FiveNumberSummary) -> str:
    return (
        f"<b>{item.key}</b><br>"
        f"min {item.min:g} | q1 {item.q1:g} | median {item.median:g} | q3 {item.q3:g} | max {item.max:g}"
        f"<br>({item.count:,} individuals)"
    )


def format_tooltip(item: Aggregate, siblings: Sequence[Aggregate] = ()) -> str:
    """Tooltip for any aggregate; counts need their siblings for the percentage."""
    if isinstance(item, CountAggregate):
        total = sum(c.count for c in siblings if isinstance(c, CountAggregate))
        return format_count_tooltip(item, total)
    if isinstance(item, RateAggregate):
        return format_rate_tooltip(item)
    return format_summary_tooltip(item)


def lookup_aggregate(aggregates: DashboardAggregates, chart_id: ChartId, key: str) -> Optional[Aggregate]:
    """Find the aggregate for key in a chart, or None."""
    for item in chart_aggregates(aggregates, chart_id):
        if item.key == key:
            return item
    return None


@dataclass
class InteractionState:
    """What the pointer is currently over (chart and category key)."""
    chart_id: Optional[ChartId] = None
    key: Optional[str] = None

    def hover(self, chart_id: ChartId, key: str) -> None:
        self.chart_id = chart_id
        self.key = key

    def clear(self) -> None:
        self.chart_id = None
        self.key = None

    @property
    def active(self) -> bool:
        return self.chart_id is not None and self.key is not None

    def describe(self, aggregates: Optional[DashboardAggregates]) -> Optional[str]:
        """Tooltip text for the hovered item, or None when nothing is hovered."""
        if not self.active or aggregates is None:
            return None
        item = lookup_aggregate(aggregates, self.chart_id, self.key)
        if item is None:
            return None
        return format_tooltip(item, chart_aggregates(aggregates, self.chart_id))
