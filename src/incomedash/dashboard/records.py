"""Record model and CSV loader for the Adult Census Income dataset.

This module defines the immutable CensusRecord row type and the loader that
turns a delimited file into a tuple of records. Everything downstream
(aggregation, KPIs, charts) works on that tuple and never on the DataFrame.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

import pandas as pd

from incomedash.utils.logging import get_logger
from incomedash.dashboard.category_conventions import UNKNOWN as UNKNOWN_LABEL, clean_category

logger = get_logger(__name__)

# Source column names, as they appear in the adult.csv header.
AGE_COL = "age"
HOURS_COL = "hours.per.week"
EDUCATION_NUM_COL = "education.num"
CAPITAL_GAIN_COL = "capital.gain"
CAPITAL_LOSS_COL = "capital.loss"
INCOME_COL = "income"
EDUCATION_COL = "education"
OCCUPATION_COL = "occupation"
SEX_COL = "sex"
MARITAL_STATUS_COL = "marital.status"

NUMERIC_COLUMNS = [AGE_COL, HOURS_COL, EDUCATION_NUM_COL, CAPITAL_GAIN_COL, CAPITAL_LOSS_COL]
CATEGORICAL_COLUMNS = [EDUCATION_COL, OCCUPATION_COL, SEX_COL, MARITAL_STATUS_COL]
REQUIRED_COLUMNS = NUMERIC_COLUMNS + [INCOME_COL] + CATEGORICAL_COLUMNS


class LoadError(Exception):
    """The dataset file is missing, unreadable, or lacks required columns."""


class IncomeClass(Enum):
    """Income bracket of one individual."""
    LE50K = "<=50K"
    GT50K = ">50K"
    UNKNOWN = UNKNOWN_LABEL

    @classmethod
    def parse(cls, raw: object) -> "IncomeClass":
        """Parse a raw income cell. The census test split appends a trailing '.'."""
        text = clean_category(raw).rstrip(".")
        if text == cls.GT50K.value:
            return cls.GT50K
        if text == cls.LE50K.value:
            return cls.LE50K
        return cls.UNKNOWN


@dataclass(frozen=True)
class CensusRecord:
    """One cleaned row of the census table.

    Numeric fields are floats so that a non-numeric source value can be kept
    as ``nan`` instead of being coerced to zero. Categorical fields are
    trimmed and never empty (see category_conventions.NOT_AVAILABLE).
    """
    age: float
    hours_per_week: float
    education_num: float
    capital_gain: float
    capital_loss: float
    income: IncomeClass
    education: str
    occupation: str
    sex: str
    marital_status: str

    @property
    def is_high_income(self) -> bool:
        return self.income is IncomeClass.GT50K


def is_high_income(record: CensusRecord) -> bool:
    """Match predicate used by every high-income rate."""
    return record.is_high_income


def income_label(record: CensusRecord) -> str:
    """Grouping key for income-based aggregates (e.g. '>50K')."""
    return record.income.value


def _numeric_column(df: pd.DataFrame, col: str) -> pd.Series:
    """Coerce a column to float; anything non-numeric becomes NaN."""
    s = df[col]
    if getattr(s.dtype, "kind", None) in ("i", "u", "f"):
        return s.astype(float)
    # astype(float) turns the pd.NA of nullable results into NaN
    return pd.to_numeric(s.astype(str).str.strip(), errors="coerce").astype(float)


def records_from_dataframe(df: pd.DataFrame) -> tuple[CensusRecord, ...]:
    """Clean a raw census DataFrame into an immutable tuple of records.

    Args:
        df: DataFrame with at least REQUIRED_COLUMNS. Extra columns are ignored.

    Returns:
        Tuple of CensusRecord in source row order.

    Raises:
        LoadError: If any required column is missing.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise LoadError(f"Dataset is missing required columns: {', '.join(missing)}")

    numeric = {col: _numeric_column(df, col).tolist() for col in NUMERIC_COLUMNS}
    categorical = {col: [clean_category(v) for v in df[col].tolist()] for col in CATEGORICAL_COLUMNS}
    incomes = [IncomeClass.parse(v) for v in df[INCOME_COL].tolist()]

    records = tuple(
        CensusRecord(
            age=float(numeric[AGE_COL][i]),
            hours_per_week=float(numeric[HOURS_COL][i]),
            education_num=float(numeric[EDUCATION_NUM_COL][i]),
            capital_gain=float(numeric[CAPITAL_GAIN_COL][i]),
            capital_loss=float(numeric[CAPITAL_LOSS_COL][i]),
            income=incomes[i],
            education=categorical[EDUCATION_COL][i],
            occupation=categorical[OCCUPATION_COL][i],
            sex=categorical[SEX_COL][i],
            marital_status=categorical[MARITAL_STATUS_COL][i],
        )
        for i in range(len(df))
    )

    n_bad_age = sum(1 for r in records if math.isnan(r.age))
    if n_bad_age:
        logger.warning(f"{n_bad_age} record(s) have a non-numeric age; excluded from age statistics")
    return records


def load_records(path: Union[str, Path]) -> tuple[CensusRecord, ...]:
    """Read a census CSV from disk and return cleaned records.

    Raises:
        LoadError: If the file is missing, cannot be parsed, or lacks required columns.
    """
    path = Path(path)
    try:
        # Read everything as text; numeric coercion happens per column so that
        # one bad cell turns into NaN rather than failing the whole column.
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise LoadError(f"Could not load the dataset: {path} not found.") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        raise LoadError(f"Could not load the dataset from {path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    records = records_from_dataframe(df)
    logger.info(f"Loaded {len(records)} records from {path}")
    return records
