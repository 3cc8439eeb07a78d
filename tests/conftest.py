"""
Pytest configuration and shared fixtures.

This module provides common fixtures and utilities used across all tests.
"""

from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import pytest

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def fixtures_dir():
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def nsw_report_html(fixtures_dir):
    """
    Return a trimmed copy of the NSW hourly readings report.

    Two regions, four sites; one site is missing from the coordinate table,
    PM10 is reported over both 1-hour and 24-hour periods, and one reading
    spans two columns.
    """
    return (fixtures_dir / "nsw_report.html").read_text(encoding="utf-8")


# ============================================================================
# Source Descriptors
# ============================================================================


@pytest.fixture
def act_source():
    """Source descriptor for the ACT adapter, pointing at a test URL."""
    return {"name": "ACT Test", "url": "https://example.test/act.json"}


@pytest.fixture
def nsw_source():
    """Source descriptor for the NSW adapter, pointing at a test URL."""
    return {"name": "NSW Test", "url": "https://example.test/nsw/getPage.php"}


# ============================================================================
# Mock Data for API Testing
# ============================================================================


@pytest.fixture
def act_rows():
    """
    Mock rows from the ACT Socrata API.

    Values arrive as strings, as the real API returns them.
    """
    return [
        {
            "name": "Civic",
            "datetime": "2020-01-01T00:00:00.000",
            "no2": "0.01",
            "o3_1hr": "0.02",
            "co": "0.1",
            "pm10": "25.5",
            "pm2_5": "10.2",
            "gps": {"latitude": "-35.3", "longitude": "149.1"},
            ":id": "row-abcd",
        },
        {
            "name": "Monash",
            "datetime": "2020-01-01T01:00:00.000",
            "pm2_5": "8.0",
            "temperature": "21.0",
            "gps": {"latitude": "-35.42", "longitude": "149.09"},
            ":id": "row-efgh",
        },
        {
            "name": "Florey",
            "datetime": "2020-01-01T01:00:00.000",
            "temperature": "22.5",
            "gps": {"latitude": "-35.22", "longitude": "149.04"},
            ":id": "row-ijkl",
        },
    ]


@pytest.fixture
def sample_measurement():
    """A single canonical measurement."""
    return {
        "location": "Randwick",
        "city": "Sydney East",
        "country": "AU",
        "date": {
            "utc": datetime(2019, 12, 13, 13, 0, tzinfo=timezone.utc),
            "local": "2019-12-14T00:00:00+11:00",
        },
        "sourceName": "NSW Test",
        "sourceType": "government",
        "mobile": False,
        "coordinates": {"latitude": -33.9333333, "longitude": 151.2419444},
        "attribution": [{"name": "NSW", "url": "https://www.dpie.nsw.gov.au/"}],
        "averagingPeriod": {"value": 1, "unit": "hours"},
        "parameter": "pm25",
        "value": 8.4,
        "unit": "µg/m³",
    }


# ============================================================================
# Utility Functions
# ============================================================================


class CallbackRecorder:
    """Completion callback that records every invocation."""

    def __init__(self):
        self.calls = []

    def __call__(self, error, data):
        self.calls.append((error, data))

    @property
    def error(self):
        return self.calls[0][0]

    @property
    def data(self):
        return self.calls[0][1]


@pytest.fixture
def recorder():
    """Return a fresh CallbackRecorder."""
    return CallbackRecorder()


def assert_has_columns(df: pd.DataFrame, columns: list[str]):
    """
    Assert that DataFrame has all specified columns.

    Args:
        df: DataFrame to check
        columns: List of required column names
    """
    missing = set(columns) - set(df.columns)
    assert not missing, f"Missing columns: {missing}"


# Make utility functions available to tests
pytest.assert_has_columns = assert_has_columns
