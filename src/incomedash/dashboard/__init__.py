"""Income dashboard core: records, aggregation, scales, geometry and figures."""

from incomedash.dashboard.dashboard_state import (
    ChartId,
    DashboardAggregates,
    DatasetController,
    DatasetStatus,
    build_dashboard_aggregates,
)
from incomedash.dashboard.records import CensusRecord, IncomeClass, LoadError, load_records

__all__ = [
    "CensusRecord",
    "ChartId",
    "DashboardAggregates",
    "DatasetController",
    "DatasetStatus",
    "IncomeClass",
    "LoadError",
    "build_dashboard_aggregates",
    "load_records",
]
