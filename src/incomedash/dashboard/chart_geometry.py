"""Data-to-geometry mapping for the dashboard charts.

Turns finished aggregates into rectangles, line segments and pie slices in
an SVG-like frame (origin top-left, y grows downward). Positions and sizes
come only from BandScale/LinearScale; the draw adapter (figure_generator.py)
copies these numbers into Plotly shapes without further computation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from incomedash.dashboard.algorithms.aggregation import CountAggregate, RateAggregate
from incomedash.dashboard.algorithms.quantiles import FiveNumberSummary
from incomedash.dashboard.scales import BandScale, LinearScale, RateDomainMode, rate_domain


@dataclass(frozen=True)
class ChartSize:
    """Inner plotting area in pixels (margins excluded)."""
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    key: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Segment:
    key: str
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class AxisTick:
    label: str
    position: float


@dataclass(frozen=True)
class BarGeometry:
    """Bars of a rate chart plus the ticks for both axes.

    orientation is "v" (categories along x) or "h" (categories along y).
    """
    size: ChartSize
    orientation: str
    bars: tuple[Rect, ...]
    category_ticks: tuple[AxisTick, ...]
    value_ticks: tuple[AxisTick, ...]
    value_domain: tuple[float, float]


@dataclass(frozen=True)
class BoxGlyph:
    """One box plot: min-max whisker, q1-q3 box, median line."""
    key: str
    whisker: Segment
    box: Rect
    median: Segment


@dataclass(frozen=True)
class BoxPlotGeometry:
    size: ChartSize
    boxes: tuple[BoxGlyph, ...]
    category_ticks: tuple[AxisTick, ...]
    value_ticks: tuple[AxisTick, ...]
    value_domain: tuple[float, float]


@dataclass(frozen=True)
class PieSlice:
    """Angles in radians, clockwise from 12 o'clock."""
    key: str
    count: int
    fraction: float
    start_angle: float
    end_angle: float


def _percent_ticks(scale: LinearScale, count: int = 5) -> tuple[AxisTick, ...]:
    return tuple(AxisTick(label=f"{t:.0%}", position=scale(t)) for t in scale.ticks(count))


def _number_ticks(scale: LinearScale, count: int = 5) -> tuple[AxisTick, ...]:
    return tuple(AxisTick(label=f"{t:g}", position=scale(t)) for t in scale.ticks(count))


def vertical_rate_bars(
    rates: Sequence[RateAggregate],
    size: ChartSize,
    *,
    padding: float = 0.2,
    domain_mode: RateDomainMode = "max",
) -> BarGeometry:
    """Column chart: one band per key along x, rate along y (0 at the bottom)."""
    x = BandScale([a.key for a in rates], (0.0, size.width), padding)
    domain = rate_domain([a.rate for a in rates], domain_mode)
    y = LinearScale(domain, (size.height, 0.0))

    bars = []
    for a in rates:
        top = y(a.rate)
        bars.append(Rect(key=a.key, x=x(a.key), y=top, width=x.bandwidth, height=size.height - top))
    return BarGeometry(
        size=size,
        orientation="v",
        bars=tuple(bars),
        category_ticks=tuple(AxisTick(label=k, position=x.center(k)) for k in x.domain),
        value_ticks=_percent_ticks(y),
        value_domain=domain,
    )


def horizontal_rate_bars(
    rates: Sequence[RateAggregate],
    size: ChartSize,
    *,
    padding: float = 0.1,
    domain_mode: RateDomainMode = "max",
) -> BarGeometry:
    """Bar chart: one band per key down the y axis (first key on top), rate along x."""
    y = BandScale([a.key for a in rates], (0.0, size.height), padding)
    domain = rate_domain([a.rate for a in rates], domain_mode)
    x = LinearScale(domain, (0.0, size.width))

    bars = tuple(
        Rect(key=a.key, x=0.0, y=y(a.key), width=x(a.rate), height=y.bandwidth)
        for a in rates
    )
    return BarGeometry(
        size=size,
        orientation="h",
        bars=bars,
        category_ticks=tuple(AxisTick(label=k, position=y.center(k)) for k in y.domain),
        value_ticks=_percent_ticks(x),
        value_domain=domain,
    )


def horizontal_box_plots(
    summaries: Sequence[FiveNumberSummary],
    size: ChartSize,
    *,
    domain: tuple[float, float],
    padding: float = 0.1,
    category_order: Optional[Sequence[str]] = None,
) -> BoxPlotGeometry:
    """Horizontal box plots, first category at the bottom.

    Args:
        summaries: One summary per category.
        size: Plotting area.
        domain: Fixed value range for the x axis; values outside are clamped.
        padding: Band padding between boxes.
        category_order: Band order; defaults to the order of summaries. Keys
            listed here without a summary keep an empty slot.
    """
    keys = list(category_order) if category_order is not None else [s.key for s in summaries]
    y = BandScale(keys, (size.height, 0.0), padding)
    x = LinearScale(domain, (0.0, size.width))

    boxes = []
    for s in summaries:
        top = y(s.key)
        if top is None:
            continue
        mid = top + y.bandwidth / 2.0
        boxes.append(BoxGlyph(
            key=s.key,
            whisker=Segment(key=s.key, x0=x(s.min), y0=mid, x1=x(s.max), y1=mid),
            box=Rect(key=s.key, x=x(s.q1), y=top, width=x(s.q3) - x(s.q1), height=y.bandwidth),
            median=Segment(key=s.key, x0=x(s.median), y0=top, x1=x(s.median), y1=top + y.bandwidth),
        ))
    return BoxPlotGeometry(
        size=size,
        boxes=tuple(boxes),
        category_ticks=tuple(AxisTick(label=k, position=y.center(k)) for k in y.domain),
        value_ticks=_number_ticks(x),
        value_domain=x.domain,
    )


def pie_slices(counts: Sequence[CountAggregate]) -> tuple[PieSlice, ...]:
    """Slices in the given order; empty when there is nothing to count."""
    total = sum(c.count for c in counts)
    if total <= 0:
        return ()
    slices = []
    angle = 0.0
    for c in counts:
        fraction = c.count / total
        end = angle + fraction * 2.0 * math.pi
        slices.append(PieSlice(key=c.key, count=c.count, fraction=fraction, start_angle=angle, end_angle=end))
        angle = end
    return tuple(slices)
