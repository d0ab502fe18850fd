"""
Quantile algorithm: pure numpy reference.

Linear interpolation between order statistics (Hyndman & Fan type 7, the
default of numpy.quantile and d3.quantile):

    h = p * (n - 1)
    q = v[floor(h)] + (h - floor(h)) * (v[ceil(h)] - v[floor(h)])

Used by every five-number summary and by the dataset-wide median age.
Non-numeric (NaN) values never enter a sample; callers go through
valid_values() first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


@dataclass(frozen=True)
class FiveNumberSummary:
    """Box-plot statistics for one group.

    Attributes:
        key: Group key (e.g. '>50K').
        min, q1, median, q3, max: Ordered so that min <= q1 <= median <= q3 <= max.
        count: Number of valid values summarized.
    """
    key: str
    min: float
    q1: float
    median: float
    q3: float
    max: float
    count: int = 0

    def to_dict(self) -> dict[str, float | str | int]:
        return {
            "key": self.key,
            "min": self.min,
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "max": self.max,
            "count": self.count,
        }


def valid_values(values: Iterable[float]) -> np.ndarray:
    """Return values as a float array with NaN (non-numeric markers) removed."""
    arr = np.asarray(list(values), dtype=float)
    return arr[~np.isnan(arr)]


def quantile(sorted_values: Sequence[float], p: float) -> float:
    """Quantile of an ascending-sorted, NaN-free sample.

    Args:
        sorted_values: Sample sorted ascending. Must not be empty.
        p: Probability in [0, 1].

    Returns:
        Interpolated quantile as a float.

    Raises:
        ValueError: If the sample is empty or p is outside [0, 1].
    """
    n = len(sorted_values)
    if n == 0:
        raise ValueError("quantile() requires a non-empty sample")
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    if n == 1:
        return float(sorted_values[0])

    h = p * (n - 1)
    lo = math.floor(h)
    hi = math.ceil(h)
    v_lo = float(sorted_values[lo])
    v_hi = float(sorted_values[hi])
    return v_lo + (h - lo) * (v_hi - v_lo)


def five_number_summary(values: Iterable[float], key: str = "") -> FiveNumberSummary:
    """Min, quartiles, median and max of the valid values.

    Raises:
        ValueError: If no valid (non-NaN) value remains.
    """
    v = np.sort(valid_values(values))
    if v.size == 0:
        raise ValueError(f"No valid values to summarize for key {key!r}")
    return FiveNumberSummary(
        key=key,
        min=float(v[0]),
        q1=quantile(v, 0.25),
        median=quantile(v, 0.5),
        q3=quantile(v, 0.75),
        max=float(v[-1]),
        count=int(v.size),
    )
