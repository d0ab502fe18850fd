"""Dataset-wide KPIs, computed once per loaded record set."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from incomedash.dashboard.algorithms.quantiles import quantile
from incomedash.dashboard.records import CensusRecord


@dataclass(frozen=True)
class KpiSummary:
    """Headline numbers shown above the charts.

    Attributes:
        total_records: Number of records in the dataset.
        high_income_rate: Share of records earning >50K (0 for an empty dataset).
        median_age: Median of valid ages, or None when there is none.
    """
    total_records: int
    high_income_rate: float
    median_age: Optional[float]

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "high_income_rate": self.high_income_rate,
            "median_age": self.median_age,
        }


def summarize_kpis(records: Sequence[CensusRecord]) -> KpiSummary:
    """Single pass over all records: count, high-income share, valid ages."""
    total = 0
    high = 0
    ages: list[float] = []
    for r in records:
        total += 1
        if r.is_high_income:
            high += 1
        if not math.isnan(r.age):
            ages.append(r.age)

    median_age = quantile(np.sort(np.asarray(ages, dtype=float)), 0.5) if ages else None
    return KpiSummary(
        total_records=total,
        high_income_rate=high / total if total else 0.0,
        median_age=median_age,
    )
