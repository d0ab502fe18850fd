"""Unit tests for build_dashboard_aggregates and DatasetController."""

import pytest

from incomedash.dashboard.dashboard_state import (
    ChartId,
    DashboardAggregates,
    DatasetController,
    DatasetStatus,
    build_dashboard_aggregates,
    chart_aggregates,
)
from incomedash.dashboard.kpi import KpiSummary
from incomedash.dashboard.records import LoadError


# -----------------------------------------------------------------------------
# build_dashboard_aggregates
# -----------------------------------------------------------------------------


def test_income_counts_first_seen(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    assert [(c.key, c.count) for c in agg.income_counts] == [("<=50K", 4), (">50K", 2)]
    assert sum(c.count for c in agg.income_counts) == len(sample_records)


def test_education_ordered_by_education_num(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    assert [a.key for a in agg.education_rates] == ["HS-grad", "Some-college", "Bachelors", "Masters"]
    rates = {a.key: a.rate for a in agg.education_rates}
    assert rates["Bachelors"] == pytest.approx(0.5)
    assert rates["Masters"] == pytest.approx(1.0)


def test_occupation_excludes_unknown_and_sorts_by_rate(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    keys = [a.key for a in agg.occupation_rates]
    assert "?" not in keys
    assert keys == ["Prof-specialty", "Exec-managerial", "Sales"]


def test_sex_rates_tie_broken_by_key(sample_records):
    """Both sexes have a 1/3 high-income rate; alphabetical order decides."""
    agg = build_dashboard_aggregates(sample_records)
    assert [a.key for a in agg.sex_rates] == ["Female", "Male"]
    assert sum(a.total for a in agg.sex_rates) == len(sample_records)


def test_box_summaries_ordered_low_to_high_income(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    assert [s.key for s in agg.age_by_income] == ["<=50K", ">50K"]
    low = agg.age_by_income[0]
    # The NaN age is excluded from the <=50K sample
    assert low.count == 3
    assert (low.min, low.median, low.max) == pytest.approx((25.0, 30.0, 52.0))
    assert [s.key for s in agg.hours_by_income] == ["<=50K", ">50K"]
    assert agg.hours_by_income[0].count == 4


def test_kpis_in_bundle(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    assert agg.kpis.total_records == 6
    assert agg.kpis.median_age == pytest.approx(38.0)


def test_empty_dataset_gives_empty_collections():
    agg = build_dashboard_aggregates(())
    assert agg.kpis == KpiSummary(0, 0.0, None)
    for chart_id in ChartId:
        assert chart_aggregates(agg, chart_id) == ()


def test_build_is_deterministic(sample_records):
    assert build_dashboard_aggregates(sample_records) == build_dashboard_aggregates(sample_records)


def test_chart_aggregates_unknown_chart_raises(sample_records):
    agg = build_dashboard_aggregates(sample_records)
    with pytest.raises(ValueError):
        chart_aggregates(agg, "bogus")


# -----------------------------------------------------------------------------
# DatasetController
# -----------------------------------------------------------------------------


def _failing_loader():
    raise LoadError("Could not load the dataset")


def test_controller_starts_unloaded():
    c = DatasetController()
    assert c.status == DatasetStatus.UNLOADED
    assert c.records is None
    assert c.aggregates is None
    assert not c.is_ready


def test_controller_successful_load(sample_records):
    c = DatasetController()
    agg = c.load(lambda: sample_records)
    assert isinstance(agg, DashboardAggregates)
    assert c.status == DatasetStatus.READY
    assert c.aggregates is agg
    assert c.records == sample_records


def test_controller_begin_load_keeps_current_data(sample_records):
    c = DatasetController()
    agg = c.load(lambda: sample_records)
    c.begin_load()
    assert c.status == DatasetStatus.LOADING
    assert c.aggregates is agg


def test_controller_failed_first_load():
    c = DatasetController()
    assert c.load(_failing_loader) is None
    assert c.status == DatasetStatus.FAILED
    assert c.aggregates is None
    assert isinstance(c.last_error, LoadError)


def test_controller_failed_reload_keeps_previous_dataset(sample_records):
    c = DatasetController()
    agg = c.load(lambda: sample_records)
    assert c.load(_failing_loader) is None
    assert c.status == DatasetStatus.READY
    assert c.aggregates is agg
    assert c.records == sample_records
    assert isinstance(c.last_error, LoadError)


def test_controller_recovers_after_failure(sample_records):
    c = DatasetController()
    c.load(_failing_loader)
    agg = c.load(lambda: sample_records)
    assert agg is not None
    assert c.status == DatasetStatus.READY
    assert c.last_error is None


def test_controller_same_record_set_reuses_aggregates(sample_records):
    """Aggregates are recomputed only when the record set identity changes."""
    c = DatasetController()
    first = c.finish_load(sample_records)
    again = c.finish_load(c.records)
    assert again is first

    new = c.finish_load(tuple(sample_records[:2]))
    assert new is not first
    assert new.kpis.total_records == 2


def test_controller_non_load_error_propagates():
    """Only LoadError is handled; anything else is a bug and propagates."""
    c = DatasetController()

    def boom():
        raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        c.load(boom)
