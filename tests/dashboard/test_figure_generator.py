"""Unit tests for FigureGenerator (Plotly figure dicts)."""

import pytest

from incomedash.dashboard.dashboard_config import DashboardConfigData
from incomedash.dashboard.dashboard_state import CHART_TITLES, ChartId, build_dashboard_aggregates
from incomedash.dashboard.figure_generator import CHART_SIZES, FigureGenerator


@pytest.fixture
def aggregates(sample_records):
    return build_dashboard_aggregates(sample_records)


def test_make_all_figures_covers_every_chart(aggregates):
    figs = FigureGenerator().make_all_figures(aggregates)
    assert set(figs) == set(ChartId)
    for chart_id, fig in figs.items():
        assert "data" in fig
        assert "layout" in fig
        assert fig["layout"]["title"]["text"] == CHART_TITLES[chart_id]


def test_pie_figure(aggregates):
    fig = FigureGenerator().make_figure(ChartId.INCOME_DISTRIBUTION, aggregates)
    (trace,) = fig["data"]
    assert trace["type"] == "pie"
    assert list(trace["labels"]) == ["<=50K", ">50K"]
    assert list(trace["values"]) == [4, 2]


def test_bar_figure_one_shape_per_aggregate(aggregates):
    fig = FigureGenerator().make_figure(ChartId.EDUCATION, aggregates)
    shapes = fig["layout"]["shapes"]
    assert len(shapes) == len(aggregates.education_rates)
    assert all(s["type"] == "rect" for s in shapes)

    # Hover markers carry the category key
    (markers,) = fig["data"]
    assert list(markers["customdata"]) == [a.key for a in aggregates.education_rates]


def test_bar_figure_pixel_frame(aggregates):
    fig = FigureGenerator().make_figure(ChartId.OCCUPATION, aggregates)
    size = CHART_SIZES[ChartId.OCCUPATION]
    assert list(fig["layout"]["xaxis"]["range"]) == [0, size.width]
    assert list(fig["layout"]["yaxis"]["range"]) == [size.height, 0]
    assert list(fig["layout"]["yaxis"]["ticktext"]) == [a.key for a in aggregates.occupation_rates]


def test_box_figure_three_shapes_per_box(aggregates):
    fig = FigureGenerator().make_figure(ChartId.AGE, aggregates)
    assert len(fig["layout"]["shapes"]) == 3 * len(aggregates.age_by_income)
    assert fig["layout"]["xaxis"]["title"]["text"] == "Age"


def test_config_padding_is_used(aggregates):
    tight = FigureGenerator(DashboardConfigData(bar_padding=0.0)).make_figure(ChartId.EDUCATION, aggregates)
    loose = FigureGenerator(DashboardConfigData(bar_padding=0.5)).make_figure(ChartId.EDUCATION, aggregates)

    def width(fig):
        s = fig["layout"]["shapes"][0]
        return s["x1"] - s["x0"]

    assert width(tight) > width(loose)


def test_empty_aggregates_still_render():
    agg = build_dashboard_aggregates(())
    figs = FigureGenerator().make_all_figures(agg)
    assert len(figs) == len(ChartId)


def test_unknown_chart_raises(aggregates):
    with pytest.raises(ValueError):
        FigureGenerator().make_figure("bogus", aggregates)


def test_box_axis_uses_configured_domain(aggregates):
    fig = FigureGenerator().make_figure(ChartId.AGE, aggregates)
    ticktext = list(fig["layout"]["xaxis"]["ticktext"])
    assert (ticktext[0], ticktext[-1]) == ("15", "95")


def test_box_axis_fits_data_when_domain_unset(aggregates):
    """Ages in the sample run from 25 to 52."""
    fig = FigureGenerator(DashboardConfigData(age_domain=None)).make_figure(ChartId.AGE, aggregates)
    ticktext = list(fig["layout"]["xaxis"]["ticktext"])
    assert (ticktext[0], ticktext[-1]) == ("25", "52")


def test_box_axis_unset_domain_without_data_uses_default():
    agg = build_dashboard_aggregates(())
    fig = FigureGenerator(DashboardConfigData(hours_domain=None)).make_figure(ChartId.HOURS, agg)
    ticktext = list(fig["layout"]["xaxis"]["ticktext"])
    assert (ticktext[0], ticktext[-1]) == ("0", "100")
