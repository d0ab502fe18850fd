"""Dashboard page body: KPI cards, chart grid, hover detail and load errors.

DashboardView drives DatasetController from the UI. Loading runs through
run.io_bound; charts are rebuilt only after a load succeeds. Hover events
look up already-computed aggregates through InteractionState.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional, Union

from nicegui import run, ui
from nicegui.events import GenericEventArguments

from incomedash.utils.logging import get_logger
from incomedash.dashboard.dashboard_state import (
    CHART_TITLES,
    ChartId,
    DashboardAggregates,
    DatasetController,
)
from incomedash.dashboard.figure_generator import FigureGenerator
from incomedash.dashboard.interaction import InteractionState
from incomedash.dashboard.kpi import KpiSummary
from incomedash.dashboard.records import LoadError, load_records

logger = get_logger(__name__)

# Charts that span both grid columns.
FULL_WIDTH_CHARTS = {ChartId.OCCUPATION, ChartId.MARITAL_STATUS}

_TAG_RE = re.compile(r"<[^>]+>")


def tooltip_to_plain_text(text: str) -> str:
    """Drop the HTML markup used in Plotly hover text for a plain label."""
    return _TAG_RE.sub("", text.replace("<br>", " | "))


def format_kpis(kpis: KpiSummary) -> dict[str, str]:
    """Display strings for the KPI cards."""
    return {
        "Individuals": f"{kpis.total_records:,}",
        "Earning >50K": f"{kpis.high_income_rate:.1%}",
        "Median Age": "n/a" if kpis.median_age is None else f"{kpis.median_age:g}",
    }


class DashboardView:
    """Owns the page body for one client.

    Attributes:
        csv_path: Dataset file loaded on build() and on reload().
        controller: Dataset lifecycle and the current aggregates.
        interaction: Hover state, passed explicitly to the hover handlers.
    """

    def __init__(self, csv_path: Union[str, Path], figure_generator: Optional[FigureGenerator] = None) -> None:
        self.csv_path = Path(csv_path)
        self.controller = DatasetController()
        self.interaction = InteractionState()
        self.figure_generator = figure_generator if figure_generator is not None else FigureGenerator()

        self._status_label: Optional[ui.label] = None
        self._detail_label: Optional[ui.label] = None
        self._content: Optional[ui.column] = None

    def build(self) -> None:
        with ui.column().classes("w-full max-w-7xl mx-auto gap-4 p-4"):
            ui.label(
                "Exploring factors correlated with income levels from the Adult Census Dataset."
            ).classes("text-gray-600")
            self._status_label = ui.label("Loading data...").classes("w-full text-center p-8")
            self._detail_label = ui.label("").classes("text-sm text-gray-700 min-h-[1.5rem]")
            self._content = ui.column().classes("w-full gap-4")

    async def reload(self) -> None:
        """Load csv_path; on success replace the charts, on failure keep what is shown.

        Reloads may overlap; charts are kept whenever the controller is still
        READY after fail_load().
        """
        self.controller.begin_load()
        try:
            records = await run.io_bound(load_records, self.csv_path)
        except LoadError as e:
            self.controller.fail_load(e)
            self._show_error(str(e), keep_charts=self.controller.is_ready)
            return
        aggregates = self.controller.finish_load(records)
        self._render(aggregates)

    def _show_error(self, message: str, *, keep_charts: bool) -> None:
        if keep_charts:
            ui.notify(f"Reload failed: {message}", type="negative")
            return
        self._content.clear()
        self._status_label.text = message
        self._status_label.classes(replace="w-full text-center p-8 bg-red-100 text-red-700 rounded")
        self._status_label.set_visibility(True)

    def _render(self, aggregates: DashboardAggregates) -> None:
        self._status_label.set_visibility(False)
        self.interaction.clear()
        self._detail_label.text = ""
        self._content.clear()
        with self._content:
            self._build_kpi_row(aggregates.kpis)
            figures = self.figure_generator.make_all_figures(aggregates)
            with ui.grid(columns=2).classes("w-full gap-6"):
                for chart_id, fig in figures.items():
                    self._build_chart(chart_id, fig)

    def _build_kpi_row(self, kpis: KpiSummary) -> None:
        with ui.row().classes("w-full gap-4"):
            for title, value in format_kpis(kpis).items():
                with ui.card().classes("flex-1 items-center"):
                    ui.label(title).classes("text-gray-500")
                    ui.label(value).classes("!text-2xl font-bold")

    def _build_chart(self, chart_id: ChartId, fig: dict) -> None:
        card = ui.card().classes("w-full")
        if chart_id in FULL_WIDTH_CHARTS:
            card.classes("col-span-2")
        with card:
            ui.label(CHART_TITLES[chart_id]).classes("!text-lg font-semibold")
            plot = ui.plotly(fig).classes("w-full h-96")
            plot.on("plotly_hover", lambda e, cid=chart_id: self._on_hover(e, cid))
            plot.on("plotly_unhover", lambda _e: self._on_unhover())

    def _on_hover(self, e: GenericEventArguments, chart_id: ChartId) -> None:
        points = (e.args or {}).get("points") or []
        if not points:
            return
        p0: dict[str, Any] = points[0]
        key = p0.get("customdata") or p0.get("label")
        if isinstance(key, (list, tuple)):
            key = key[0] if key else None
        if key is None:
            return
        self.interaction.hover(chart_id, str(key))
        text = self.interaction.describe(self.controller.aggregates)
        self._detail_label.text = tooltip_to_plain_text(text) if text else ""

    def _on_unhover(self) -> None:
        self.interaction.clear()
        self._detail_label.text = ""
