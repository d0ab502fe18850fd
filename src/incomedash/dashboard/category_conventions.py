"""Category conventions for census records.

Single source of truth for sentinel values and the caller-side pre-filter
predicates built on them, so records.py, the aggregation bundle and the
charts agree on what "not recorded" means.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pandas as pd

# Sentinel for a categorical field that is missing/blank in the source file.
NOT_AVAILABLE = "N/A"

# Sentinel for an income label that is neither "<=50K" nor ">50K".
UNKNOWN = "Unknown"

# The Adult dataset writes "?" for values the census did not record.
SOURCE_MISSING = "?"

SENTINEL_VALUES = frozenset({NOT_AVAILABLE, UNKNOWN, SOURCE_MISSING, ""})


def clean_category(value: Any) -> str:
    """Trim a raw categorical cell; unset/blank cells become NOT_AVAILABLE."""
    # None, NaN, pd.NA and NaT
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return NOT_AVAILABLE
    text = str(value).strip()
    return text if text else NOT_AVAILABLE


def is_known(value: Optional[str]) -> bool:
    """True if value is a real category (not None and not a sentinel)."""
    return value is not None and value.strip() not in SENTINEL_VALUES


def known_value(field_of: Callable[[Any], Optional[str]]) -> Callable[[Any], bool]:
    """Build a record predicate keeping only records whose field is a known category.

    Example:
        is_known_occupation = known_value(lambda r: r.occupation)
        records_f = filter_records(records, is_known_occupation)
    """

    def _predicate(record: Any) -> bool:
        return is_known(field_of(record))

    return _predicate
