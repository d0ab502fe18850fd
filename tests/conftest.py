# tests/conftest.py
"""Pytest configuration and shared record fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure incomedash package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def _make_record(
    *,
    age: float = 30.0,
    hours_per_week: float = 40.0,
    education_num: float = 9.0,
    capital_gain: float = 0.0,
    capital_loss: float = 0.0,
    income: str = "<=50K",
    education: str = "HS-grad",
    occupation: str = "Sales",
    sex: str = "Male",
    marital_status: str = "Never-married",
):
    from incomedash.dashboard.records import CensusRecord, IncomeClass

    return CensusRecord(
        age=float(age),
        hours_per_week=float(hours_per_week),
        education_num=float(education_num),
        capital_gain=float(capital_gain),
        capital_loss=float(capital_loss),
        income=IncomeClass.parse(income),
        education=education,
        occupation=occupation,
        sex=sex,
        marital_status=marital_status,
    )


@pytest.fixture
def make_record():
    """Factory for CensusRecord with sensible defaults."""
    return _make_record


@pytest.fixture
def sample_records():
    """Six records covering every chart; one has a non-numeric age and one a '?' occupation."""
    nan = float("nan")
    return (
        _make_record(age=25, hours_per_week=40, education="HS-grad", education_num=9,
                     occupation="Sales", sex="Male", income="<=50K"),
        _make_record(age=38, hours_per_week=50, education="Bachelors", education_num=13,
                     occupation="Exec-managerial", sex="Male", income=">50K"),
        _make_record(age=45, hours_per_week=60, education="Masters", education_num=14,
                     occupation="Prof-specialty", sex="Female", income=">50K"),
        _make_record(age=30, hours_per_week=35, education="HS-grad", education_num=9,
                     occupation="?", sex="Female", income="<=50K"),
        _make_record(age=52, hours_per_week=45, education="Bachelors", education_num=13,
                     occupation="Exec-managerial", sex="Male", income="<=50K"),
        _make_record(age=nan, hours_per_week=40, education="Some-college", education_num=10,
                     occupation="Sales", sex="Female", income="<=50K"),
    )
