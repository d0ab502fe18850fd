"""Plotly figure generation for the dashboard.

This module provides the FigureGenerator class for turning chart geometry
into Plotly figure dictionaries. It draws only: every position and size
comes from chart_geometry.py, and hover text comes from interaction.py.
"""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from incomedash.utils.logging import get_logger
from incomedash.dashboard.algorithms.aggregation import CountAggregate, RateAggregate
from incomedash.dashboard.algorithms.quantiles import FiveNumberSummary
from incomedash.dashboard.chart_geometry import (
    BarGeometry,
    BoxPlotGeometry,
    ChartSize,
    horizontal_box_plots,
    horizontal_rate_bars,
    pie_slices,
    vertical_rate_bars,
)
from incomedash.dashboard.dashboard_config import DEFAULT_AGE_DOMAIN, DEFAULT_HOURS_DOMAIN, DashboardConfigData
from incomedash.dashboard.dashboard_state import (
    CHART_TITLES,
    INCOME_ORDER,
    ChartId,
    DashboardAggregates,
    chart_aggregates,
)
from incomedash.dashboard.interaction import format_count_tooltip, format_rate_tooltip, format_summary_tooltip
from incomedash.dashboard.scales import extent_domain

logger = get_logger(__name__)

BLUE = "#60a5fa"
PINK = "#f472b6"
INDIGO = "#818cf8"
INCOME_COLORS = [BLUE, PINK, "#9ca3af"]

# Inner plotting areas in pixels (margins excluded).
CHART_SIZES: dict[ChartId, ChartSize] = {
    ChartId.EDUCATION: ChartSize(width=410, height=260),
    ChartId.AGE: ChartSize(width=410, height=330),
    ChartId.HOURS: ChartSize(width=410, height=330),
    ChartId.OCCUPATION: ChartSize(width=850, height=340),
    ChartId.SEX: ChartSize(width=410, height=260),
    ChartId.MARITAL_STATUS: ChartSize(width=850, height=260),
}

BAR_COLORS: dict[ChartId, str] = {
    ChartId.EDUCATION: BLUE,
    ChartId.OCCUPATION: INDIGO,
    ChartId.SEX: PINK,
    ChartId.MARITAL_STATUS: BLUE,
}


class FigureGenerator:
    """Generates Plotly figure dictionaries from dashboard aggregates.

    Attributes:
        config: Padding, box-plot domains and rate-domain mode.
    """

    def __init__(self, config: DashboardConfigData | None = None) -> None:
        self.config = config if config is not None else DashboardConfigData()

    def make_figure(self, chart_id: ChartId, aggregates: DashboardAggregates) -> dict:
        """Generate the Plotly figure dictionary for one chart.

        Raises:
            ValueError: If chart_id is not a known chart.
        """
        items = chart_aggregates(aggregates, chart_id)
        logger.debug(f"FigureGenerator.make_figure: chart={chart_id.value}, n_items={len(items)}")

        if chart_id == ChartId.INCOME_DISTRIBUTION:
            return self._figure_pie(items)
        if chart_id == ChartId.EDUCATION:
            geom = vertical_rate_bars(
                items, CHART_SIZES[chart_id],
                padding=self.config.bar_padding, domain_mode=self.config.rate_domain_mode,
            )
            return self._figure_bars(chart_id, geom, items)
        if chart_id in (ChartId.OCCUPATION, ChartId.SEX, ChartId.MARITAL_STATUS):
            geom = horizontal_rate_bars(
                items, CHART_SIZES[chart_id],
                padding=self.config.row_padding, domain_mode=self.config.rate_domain_mode,
            )
            return self._figure_bars(chart_id, geom, items)
        if chart_id == ChartId.AGE:
            geom = horizontal_box_plots(
                items, CHART_SIZES[chart_id],
                domain=_box_domain(self.config.age_domain, items, DEFAULT_AGE_DOMAIN), padding=self.config.box_padding,
                category_order=_box_categories(items),
            )
            return self._figure_boxes(chart_id, geom, items, BLUE, "Age")
        if chart_id == ChartId.HOURS:
            geom = horizontal_box_plots(
                items, CHART_SIZES[chart_id],
                domain=_box_domain(self.config.hours_domain, items, DEFAULT_HOURS_DOMAIN), padding=self.config.box_padding,
                category_order=_box_categories(items),
            )
            return self._figure_boxes(chart_id, geom, items, PINK, "Hours Per Week")
        raise ValueError(f"Unknown chart id {chart_id!r}")

    def make_all_figures(self, aggregates: DashboardAggregates) -> dict[ChartId, dict]:
        return {chart_id: self.make_figure(chart_id, aggregates) for chart_id in ChartId}

    def _figure_pie(self, counts: Sequence[CountAggregate]) -> dict:
        slices = pie_slices(counts)
        total = sum(s.count for s in slices)
        fig = go.Figure()
        fig.add_trace(go.Pie(
            labels=[s.key for s in slices],
            values=[s.count for s in slices],
            sort=False,
            direction="clockwise",
            rotation=0,
            marker=dict(colors=INCOME_COLORS[: len(slices)], line=dict(color="white", width=2)),
            hovertext=[format_count_tooltip(c, total) for c in counts],
            hoverinfo="text",
            customdata=[s.key for s in slices],
            textinfo="percent",
        ))
        fig.update_layout(
            title_text=CHART_TITLES[ChartId.INCOME_DISTRIBUTION],
            margin=dict(l=20, r=20, t=40, b=20),
            showlegend=True,
            uirevision="keep",
        )
        return fig.to_dict()

    def _figure_bars(self, chart_id: ChartId, geom: BarGeometry, rates: Sequence[RateAggregate]) -> dict:
        color = BAR_COLORS.get(chart_id, BLUE)
        fig = go.Figure()
        for bar in geom.bars:
            fig.add_shape(
                type="rect",
                x0=bar.x, x1=bar.x + bar.width,
                y0=bar.y, y1=bar.y + bar.height,
                fillcolor=color,
                line=dict(width=0),
            )
        # Invisible markers at bar centers carry the hover text for each key
        tooltips = {a.key: format_rate_tooltip(a) for a in rates}
        fig.add_trace(go.Scatter(
            x=[b.x + b.width / 2.0 for b in geom.bars],
            y=[b.y + b.height / 2.0 for b in geom.bars],
            mode="markers",
            marker=dict(size=max(geom.size.width, geom.size.height) / 40.0, opacity=0),
            customdata=[b.key for b in geom.bars],
            hovertext=[tooltips[b.key] for b in geom.bars],
            hoverinfo="text",
            showlegend=False,
        ))
        self._apply_frame(fig, chart_id, geom.size, geom.orientation, geom.category_ticks, geom.value_ticks)
        return fig.to_dict()

    def _figure_boxes(
        self,
        chart_id: ChartId,
        geom: BoxPlotGeometry,
        summaries: Sequence[FiveNumberSummary],
        color: str,
        value_title: str,
    ) -> dict:
        fig = go.Figure()
        for glyph in geom.boxes:
            fig.add_shape(type="line", x0=glyph.whisker.x0, x1=glyph.whisker.x1,
                          y0=glyph.whisker.y0, y1=glyph.whisker.y1, line=dict(color="black", width=1))
            fig.add_shape(type="rect", x0=glyph.box.x, x1=glyph.box.x + glyph.box.width,
                          y0=glyph.box.y, y1=glyph.box.y + glyph.box.height,
                          fillcolor=color, line=dict(color="black", width=1))
            fig.add_shape(type="line", x0=glyph.median.x0, x1=glyph.median.x1,
                          y0=glyph.median.y0, y1=glyph.median.y1, line=dict(color="black", width=2))
        tooltips = {s.key: format_summary_tooltip(s) for s in summaries}
        fig.add_trace(go.Scatter(
            x=[g.box.x + g.box.width / 2.0 for g in geom.boxes],
            y=[g.box.y + g.box.height / 2.0 for g in geom.boxes],
            mode="markers",
            marker=dict(size=geom.size.height / 10.0, opacity=0),
            customdata=[g.key for g in geom.boxes],
            hovertext=[tooltips[g.key] for g in geom.boxes],
            hoverinfo="text",
            showlegend=False,
        ))
        self._apply_frame(fig, chart_id, geom.size, "h", geom.category_ticks, geom.value_ticks)
        fig.update_layout(xaxis_title=value_title)
        return fig.to_dict()

    def _apply_frame(self, fig: go.Figure, chart_id: ChartId, size: ChartSize, orientation: str,
                     category_ticks, value_ticks) -> None:
        """Pixel-frame axes: x in [0, width], y in [height, 0] (downward)."""
        cat_vals = [t.position for t in category_ticks]
        cat_text = [t.label for t in category_ticks]
        val_vals = [t.position for t in value_ticks]
        val_text = [t.label for t in value_ticks]
        if orientation == "v":
            xaxis = dict(tickvals=cat_vals, ticktext=cat_text, tickangle=-45)
            yaxis = dict(tickvals=val_vals, ticktext=val_text)
        else:
            xaxis = dict(tickvals=val_vals, ticktext=val_text)
            yaxis = dict(tickvals=cat_vals, ticktext=cat_text)
        xaxis.update(range=[0, size.width], showgrid=False, zeroline=False, fixedrange=True)
        yaxis.update(range=[size.height, 0], showgrid=False, zeroline=False, fixedrange=True)
        fig.update_layout(
            title_text=CHART_TITLES[chart_id],
            xaxis=xaxis,
            yaxis=yaxis,
            plot_bgcolor="white",
            margin=dict(l=130 if orientation == "h" else 60, r=30, t=40, b=120 if orientation == "v" else 50),
            hovermode="closest",
            showlegend=False,
            uirevision="keep",
        )


def _box_categories(summaries: Sequence[FiveNumberSummary]) -> list[str]:
    """Income classes always get a slot; other keys follow in summary order."""
    extra = [s.key for s in summaries if s.key not in INCOME_ORDER]
    return list(INCOME_ORDER) + extra


def _box_domain(
    configured: tuple[float, float] | None,
    summaries: Sequence[FiveNumberSummary],
    fallback: tuple[float, float],
) -> tuple[float, float]:
    """Configured axis range, or the observed min/max when none is configured."""
    if configured is not None:
        return configured
    return extent_domain([v for s in summaries for v in (s.min, s.max)], fallback=fallback)
