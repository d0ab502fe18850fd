"""Dashboard aggregate bundle and dataset lifecycle.

build_dashboard_aggregates() is the one pure function from an immutable
record set to everything the charts need. DatasetController owns the
Unloaded -> Loading -> Ready | Failed lifecycle and calls it exactly once
per new record set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from incomedash.utils.logging import get_logger
from incomedash.dashboard.algorithms.aggregation import (
    CountAggregate,
    RateAggregate,
    count_by,
    filter_records,
    first_level_by,
    five_number_by,
    rate_by,
    sort_aggregates,
)
from incomedash.dashboard.algorithms.quantiles import FiveNumberSummary
from incomedash.dashboard.category_conventions import known_value
from incomedash.dashboard.kpi import KpiSummary, summarize_kpis
from incomedash.dashboard.records import (
    CensusRecord,
    IncomeClass,
    LoadError,
    income_label,
    is_high_income,
)

logger = get_logger(__name__)

# Box plots list income classes low to high; anything else follows.
INCOME_ORDER = (IncomeClass.LE50K.value, IncomeClass.GT50K.value)


class DatasetStatus(Enum):
    """Lifecycle of the loaded dataset."""
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ChartId(Enum):
    """One chart panel of the dashboard."""
    INCOME_DISTRIBUTION = "income_distribution"
    EDUCATION = "education"
    AGE = "age"
    HOURS = "hours"
    OCCUPATION = "occupation"
    SEX = "sex"
    MARITAL_STATUS = "marital_status"


CHART_TITLES: dict[ChartId, str] = {
    ChartId.INCOME_DISTRIBUTION: "Overall Income Distribution",
    ChartId.EDUCATION: "High Income Rate by Education Level",
    ChartId.AGE: "Income Distribution by Age",
    ChartId.HOURS: "Income Distribution by Hours Per Week",
    ChartId.OCCUPATION: "High Income Rate by Occupation",
    ChartId.SEX: "High Income Rate by Sex",
    ChartId.MARITAL_STATUS: "High Income Rate by Marital Status",
}


@dataclass(frozen=True)
class DashboardAggregates:
    """Everything the charts render, derived from one record set.

    Tuples only; no reference back to the records.
    """
    kpis: KpiSummary
    income_counts: tuple[CountAggregate, ...]
    education_rates: tuple[RateAggregate, ...]
    occupation_rates: tuple[RateAggregate, ...]
    sex_rates: tuple[RateAggregate, ...]
    marital_status_rates: tuple[RateAggregate, ...]
    age_by_income: tuple[FiveNumberSummary, ...]
    hours_by_income: tuple[FiveNumberSummary, ...]


def _income_rank(key: str) -> float:
    return float(INCOME_ORDER.index(key)) if key in INCOME_ORDER else float(len(INCOME_ORDER))


def build_dashboard_aggregates(records: Sequence[CensusRecord]) -> DashboardAggregates:
    """Compute all per-chart aggregates and the KPIs for one record set."""
    education_levels = first_level_by(records, lambda r: r.education, lambda r: r.education_num)
    education_rates = sort_aggregates(
        rate_by(records, lambda r: r.education, is_high_income),
        lambda a: education_levels[a.key],
    )

    known_occupations = filter_records(records, known_value(lambda r: r.occupation))
    occupation_rates = sort_aggregates(
        rate_by(known_occupations, lambda r: r.occupation, is_high_income),
        lambda a: a.rate,
        descending=True,
    )
    sex_rates = sort_aggregates(
        rate_by(records, lambda r: r.sex, is_high_income),
        lambda a: a.rate,
        descending=True,
    )
    marital_status_rates = sort_aggregates(
        rate_by(records, lambda r: r.marital_status, is_high_income),
        lambda a: a.rate,
        descending=True,
    )

    age_by_income = sort_aggregates(
        five_number_by(records, income_label, lambda r: r.age),
        lambda s: _income_rank(s.key),
    )
    hours_by_income = sort_aggregates(
        five_number_by(records, income_label, lambda r: r.hours_per_week),
        lambda s: _income_rank(s.key),
    )

    return DashboardAggregates(
        kpis=summarize_kpis(records),
        income_counts=tuple(count_by(records, income_label)),
        education_rates=tuple(education_rates),
        occupation_rates=tuple(occupation_rates),
        sex_rates=tuple(sex_rates),
        marital_status_rates=tuple(marital_status_rates),
        age_by_income=tuple(age_by_income),
        hours_by_income=tuple(hours_by_income),
    )


class DatasetController:
    """Holds the one loaded record set and its derived aggregates.

    A reload either fully succeeds before replacing the current records and
    aggregates, or leaves a previous READY state untouched and records the
    failure in last_error. Aggregates are recomputed only when the record
    set identity changes.

    Typical async use (NiceGUI):
        controller.begin_load()
        try:
            records = await run.io_bound(load_records, path)
        except LoadError as e:
            controller.fail_load(e)
        else:
            controller.finish_load(records)
    """

    def __init__(self) -> None:
        self.status = DatasetStatus.UNLOADED
        self.records: Optional[tuple[CensusRecord, ...]] = None
        self.aggregates: Optional[DashboardAggregates] = None
        self.last_error: Optional[LoadError] = None
        self._status_before_load = DatasetStatus.UNLOADED

    @property
    def is_ready(self) -> bool:
        return self.status == DatasetStatus.READY

    def begin_load(self) -> None:
        """Mark a load as in flight. Current records/aggregates stay readable."""
        if self.status != DatasetStatus.LOADING:
            self._status_before_load = self.status
        self.status = DatasetStatus.LOADING
        logger.debug(f"begin_load: previous status={self._status_before_load.value}")

    def finish_load(self, records: Sequence[CensusRecord]) -> DashboardAggregates:
        """Install a successfully loaded record set and return its aggregates."""
        if self.records is not None and records is self.records and self.aggregates is not None:
            logger.debug("finish_load: same record set, keeping existing aggregates")
            self.status = DatasetStatus.READY
            self.last_error = None
            return self.aggregates

        frozen = tuple(records)
        # Compute before assigning so a failure here cannot leave a half-updated state
        aggregates = build_dashboard_aggregates(frozen)
        self.records = frozen
        self.aggregates = aggregates
        self.status = DatasetStatus.READY
        self.last_error = None
        logger.info(f"Dataset ready: {aggregates.kpis.total_records} records")
        return aggregates

    def fail_load(self, error: LoadError) -> None:
        """Record a failed load; a previous READY state is kept as is."""
        self.last_error = error
        if self._status_before_load == DatasetStatus.READY and self.aggregates is not None:
            self.status = DatasetStatus.READY
            logger.warning(f"Reload failed, keeping previous dataset: {error}")
        else:
            self.status = DatasetStatus.FAILED
            logger.error(f"Dataset load failed: {error}")

    def load(self, loader: Callable[[], Sequence[CensusRecord]]) -> Optional[DashboardAggregates]:
        """Run a synchronous loader through the full lifecycle.

        Returns:
            The new aggregates, or None if the loader raised LoadError.
        """
        self.begin_load()
        try:
            records = loader()
        except LoadError as e:
            self.fail_load(e)
            return None
        return self.finish_load(records)


def chart_aggregates(
    aggregates: DashboardAggregates,
    chart_id: ChartId,
) -> tuple[CountAggregate, ...] | tuple[RateAggregate, ...] | tuple[FiveNumberSummary, ...]:
    """The already-computed aggregates backing one chart.

    Raises:
        ValueError: If chart_id is not a ChartId.
    """
    by_chart = {
        ChartId.INCOME_DISTRIBUTION: aggregates.income_counts,
        ChartId.EDUCATION: aggregates.education_rates,
        ChartId.AGE: aggregates.age_by_income,
        ChartId.HOURS: aggregates.hours_by_income,
        ChartId.OCCUPATION: aggregates.occupation_rates,
        ChartId.SEX: aggregates.sex_rates,
        ChartId.MARITAL_STATUS: aggregates.marital_status_rates,
    }
    if chart_id not in by_chart:
        raise ValueError(f"Unknown chart id {chart_id!r}")
    return by_chart[chart_id]
