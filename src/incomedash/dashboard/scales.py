"""Band and linear scales for mapping aggregates to chart coordinates.

The scales are the only bridge between aggregate values and positions or
sizes; chart_geometry.py uses nothing else. Neither scale decides category
order or domain: the caller passes both in (see rate_domain/extent_domain
for the two domain policies the dashboard uses).
"""

from __future__ import annotations

from typing import Iterable, Literal, Optional, Sequence

import numpy as np

RateDomainMode = Literal["max", "unit"]


class BandScale:
    """Ordinal -> interval scale with equal-width, padded slots.

    With N keys over [r0, r1] the step is (r1 - r0) / N. Each key gets a slot
    of width step * (1 - padding); the remaining step * padding is split
    evenly on both sides of the slot. When r1 < r0 the first key sits at the
    high end of the range (as for a y axis drawn top-down).
    """

    def __init__(
        self,
        domain: Iterable[str],
        range_: tuple[float, float] = (0.0, 1.0),
        padding: float = 0.0,
    ) -> None:
        if not 0.0 <= padding < 1.0:
            raise ValueError(f"padding must be in [0, 1), got {padding}")
        # Collapse duplicates, keep first occurrence (caller order is authoritative)
        self.domain: list[str] = list(dict.fromkeys(domain))
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = float(padding)
        self._index = {k: i for i, k in enumerate(self.domain)}

    @property
    def step(self) -> float:
        """Absolute distance between the starts of adjacent slots."""
        n = len(self.domain)
        if n == 0:
            return 0.0
        r0, r1 = self.range
        return abs(r1 - r0) / n

    @property
    def bandwidth(self) -> float:
        """Width of one slot."""
        return self.step * (1.0 - self.padding)

    def __call__(self, key: str) -> Optional[float]:
        """Low edge of key's slot, or None if key is not in the domain."""
        i = self._index.get(key)
        if i is None:
            return None
        r0, r1 = self.range
        lo = min(r0, r1)
        if r1 < r0:
            i = len(self.domain) - 1 - i
        return lo + i * self.step + self.step * self.padding / 2.0

    def center(self, key: str) -> Optional[float]:
        """Middle of key's slot, or None if key is not in the domain."""
        start = self(key)
        if start is None:
            return None
        return start + self.bandwidth / 2.0


class LinearScale:
    """Numeric -> interval scale, clamped at the range ends.

    v maps to r0 + (v - d0) / (d1 - d0) * (r1 - r0). A degenerate domain
    (d0 == d1) maps every value to r0. NaN maps to NaN.
    """

    def __init__(
        self,
        domain: tuple[float, float] = (0.0, 1.0),
        range_: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        v = float(value)
        if np.isnan(v):
            return float("nan")
        if d0 == d1:
            return r0
        out = r0 + (v - d0) / (d1 - d0) * (r1 - r0)
        return float(min(max(out, min(r0, r1)), max(r0, r1)))

    def ticks(self, count: int = 5) -> list[float]:
        """count evenly spaced domain values from d0 to d1 (inclusive)."""
        d0, d1 = self.domain
        if count < 2 or d0 == d1:
            return [d0]
        return [float(t) for t in np.linspace(d0, d1, count)]


def rate_domain(rates: Sequence[float], mode: RateDomainMode = "max") -> tuple[float, float]:
    """Domain for a rate axis.

    mode="max" gives [0, max(rates)]; mode="unit" gives [0, 1]. Falls back to
    [0, 1] when there are no rates or the largest rate is 0.
    """
    if mode == "unit":
        return (0.0, 1.0)
    if mode != "max":
        raise ValueError(f"Unknown rate domain mode {mode!r}")
    valid = [float(r) for r in rates if not np.isnan(r)]
    if not valid or max(valid) <= 0.0:
        return (0.0, 1.0)
    return (0.0, max(valid))


def extent_domain(
    values: Iterable[float],
    fallback: tuple[float, float] = (0.0, 1.0),
) -> tuple[float, float]:
    """Observed [min, max] of the valid values, or fallback if there are none."""
    arr = np.asarray(list(values), dtype=float)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return (float(fallback[0]), float(fallback[1]))
    return (float(arr.min()), float(arr.max()))
