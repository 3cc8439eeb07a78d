"""
Tests for dates.py - timezone-aware timestamp parsing.
"""

from datetime import datetime, timezone

import pandas as pd
import pytest

from airsources.dates import localize, parse_local_timestamp, to_date_info


def test_parse_local_timestamp_summer():
    """Test that a naive timestamp is read as Sydney daylight time."""
    date = parse_local_timestamp("2020-01-01T00:00:00", "Australia/Sydney")

    assert date["local"] == "2020-01-01T00:00:00+11:00"
    assert date["utc"] == datetime(2019, 12, 31, 13, 0, tzinfo=timezone.utc)


def test_parse_local_timestamp_winter():
    """Test that standard time applies outside daylight saving."""
    date = parse_local_timestamp("2020-07-01T12:00:00", "Australia/Sydney")

    assert date["local"] == "2020-07-01T12:00:00+10:00"
    assert date["utc"] == datetime(2020, 7, 1, 2, 0, tzinfo=timezone.utc)


def test_utc_and_local_are_same_instant():
    """Test that both representations describe one instant."""
    date = parse_local_timestamp("2020-03-15T08:30:00", "Australia/Sydney")

    assert pd.Timestamp(date["local"]) == pd.Timestamp(date["utc"])


def test_parse_is_idempotent():
    """Test that reparsing the local string gives the same result."""
    first = parse_local_timestamp("2020-01-01T00:00:00", "Australia/Sydney")
    second = parse_local_timestamp(first["local"], "Australia/Sydney")

    assert first == second


def test_fractional_seconds_are_truncated():
    """Test that milliseconds are dropped from the output."""
    date = parse_local_timestamp("2020-01-01T00:00:00.750", "Australia/Sydney")

    assert date["local"] == "2020-01-01T00:00:00+11:00"
    assert date["utc"].microsecond == 0


def test_offset_aware_input_is_converted():
    """Test that timestamps with an offset are converted, not relabelled."""
    date = parse_local_timestamp("2020-01-01T00:00:00Z", "Australia/Sydney")

    assert date["local"] == "2020-01-01T11:00:00+11:00"


def test_localize_accepts_datetime():
    """Test that naive datetimes are localised."""
    timestamp = localize(datetime(2019, 12, 14, 0, 0), "Australia/Melbourne")

    assert timestamp.isoformat() == "2019-12-14T00:00:00+11:00"


def test_localize_invalid_raises():
    """Test that unparseable strings raise ValueError."""
    with pytest.raises(ValueError):
        localize("not a date", "Australia/Sydney")


def test_to_date_info_requires_aware_timestamp():
    """Test that the utc field is timezone-aware."""
    info = to_date_info(pd.Timestamp("2020-01-01T00:00:00", tz="Australia/Sydney"))

    assert info["utc"].tzinfo is not None
