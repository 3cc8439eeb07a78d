"""
Tests for the NSW data source.

Tests the report table parsing, date handling, averaging-period
deduplication and the callback contract with mocked HTTP responses.
"""

from datetime import datetime, timezone

import pytest
import responses

from airsources.exceptions import FAILURE_TO_LOAD, UNKNOWN_ERROR, FetchError, ParseError
from airsources.sources.nsw import (
    COORDINATES,
    DEFAULT_SOURCE,
    UNITS,
    fetch_data,
    format_data,
    keep_shortest_averaging_period,
    parse_date,
)
from airsources.types import MEASUREMENT_FIELDS


def _find(measurements, location, parameter):
    matches = [
        m
        for m in measurements
        if m["location"] == location and m["parameter"] == parameter
    ]
    assert len(matches) == 1, f"Expected one {parameter} at {location}, got {matches}"
    return matches[0]


def _measurement(location, parameter, period, value=1.0):
    return {
        "location": location,
        "parameter": parameter,
        "value": value,
        "averagingPeriod": {"value": period, "unit": "hours"},
    }


# ============================================================================
# Tests for parse_date()
# ============================================================================


class TestParseDate:
    """Tests for the report timestamp cell."""

    def test_uses_end_of_range(self):
        """Test that the 'to' hour of the range is used."""
        date = parse_date("Hourly average data<br>13 December 2019<br>2 - 3 pm")

        assert date["local"] == "2019-12-13T15:00:00+11:00"
        assert date["utc"] == datetime(2019, 12, 13, 4, 0, tzinfo=timezone.utc)

    def test_12am_rolls_over_to_next_day(self):
        """Test that a range ending at 12am belongs to the following day."""
        date = parse_date("Hourly average data<br>13 December 2019<br>11 - 12 am")

        assert date["local"] == "2019-12-14T00:00:00+11:00"
        assert date["utc"] == datetime(2019, 12, 13, 13, 0, tzinfo=timezone.utc)

    def test_12pm_does_not_roll_over(self):
        """Test that only 12am triggers the day offset."""
        date = parse_date("Hourly average data<br>13 December 2019<br>11 - 12 pm")

        assert date["local"] == "2019-12-13T12:00:00+11:00"

    def test_winter_offset(self):
        """Test that standard time (no daylight saving) is applied in winter."""
        date = parse_date("Hourly average data<br>1 July 2020<br>8 - 9 am")

        assert date["local"] == "2020-07-01T09:00:00+10:00"

    def test_malformed_cell_raises(self):
        """Test that a cell without a range raises."""
        with pytest.raises(IndexError):
            parse_date("13 December 2019")

    def test_unknown_month_raises(self):
        """Test that an unreadable date raises ValueError."""
        with pytest.raises(ValueError):
            parse_date("Hourly average data<br>13 Decembre 2019<br>11 - 12 am")


# ============================================================================
# Tests for keep_shortest_averaging_period()
# ============================================================================


class TestKeepShortestAveragingPeriod:
    """Tests for deduplication by averaging period."""

    def test_keeps_one_hour_over_twenty_four_hour(self):
        """Test that the 1-hour entry survives over the 24-hour one."""
        measurements = [
            _measurement("Randwick", "pm10", 24, value=30.2),
            _measurement("Randwick", "pm10", 1, value=25.0),
        ]

        result = keep_shortest_averaging_period(measurements)

        assert len(result) == 1
        assert result[0]["averagingPeriod"]["value"] == 1
        assert result[0]["value"] == 25.0

    def test_groups_by_location_and_parameter(self):
        """Test that different sites and parameters are kept separately."""
        measurements = [
            _measurement("Randwick", "pm10", 24),
            _measurement("Rozelle", "pm10", 24),
            _measurement("Randwick", "pm25", 24),
        ]

        assert len(keep_shortest_averaging_period(measurements)) == 3

    def test_ties_keep_first(self):
        """Test that equal periods keep the first measurement seen."""
        measurements = [
            _measurement("Randwick", "o3", 1, value=1.0),
            _measurement("Randwick", "o3", 1, value=2.0),
        ]

        assert keep_shortest_averaging_period(measurements)[0]["value"] == 1.0

    def test_preserves_first_seen_order(self):
        """Test that groups stay in the order they first appeared."""
        measurements = [
            _measurement("Randwick", "pm10", 24),
            _measurement("Randwick", "o3", 1),
            _measurement("Randwick", "pm10", 1),
        ]

        result = keep_shortest_averaging_period(measurements)

        assert [m["parameter"] for m in result] == ["pm10", "o3"]

    def test_empty(self):
        """Test that an empty list stays empty."""
        assert keep_shortest_averaging_period([]) == []


# ============================================================================
# Tests for format_data()
# ============================================================================


class TestFormatData:
    """Tests for report-to-measurement conversion."""

    def test_measurement_count(self, nsw_report_html, nsw_source):
        """Test the total after deduplication and filtering."""
        result = format_data(nsw_report_html, nsw_source)

        assert result["name"] == "unused"
        assert len(result["measurements"]) == 12

    def test_shortest_averaging_period_wins(self, nsw_report_html, nsw_source):
        """Test that 1-hour PM10 replaces 24-hour PM10 for the same site."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        pm10 = _find(measurements, "Randwick", "pm10")
        assert pm10["averagingPeriod"] == {"value": 1, "unit": "hours"}
        assert pm10["value"] == pytest.approx(25.0)

    def test_unwanted_parameters_removed(self, nsw_report_html, nsw_source):
        """Test that nephelometer readings are dropped."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert "neph" not in {m["parameter"] for m in measurements}

    def test_pphm_converted_to_ppm(self, nsw_report_html, nsw_source):
        """Test that gases reported in pphm come back in ppm."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        o3 = _find(measurements, "Randwick", "o3")
        assert o3["unit"] == "ppm"
        assert o3["value"] == pytest.approx(0.021)

        no2 = _find(measurements, "Randwick", "no2")
        assert no2["value"] == pytest.approx(0.015)

    def test_particulates_keep_ugm3(self, nsw_report_html, nsw_source):
        """Test that PM2.5 stays in µg/m³ with its value unchanged."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        pm25 = _find(measurements, "Rozelle", "pm25")
        assert pm25["unit"] == "µg/m³"
        assert pm25["value"] == pytest.approx(7.1)

    def test_co_keeps_its_averaging_period(self, nsw_report_html, nsw_source):
        """Test that CO is reported over 8 hours in ppm."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        co = _find(measurements, "Randwick", "co")
        assert co["averagingPeriod"]["value"] == 8
        assert co["unit"] == "ppm"
        assert co["value"] == pytest.approx(0.3)

    def test_region_carried_to_following_rows(self, nsw_report_html, nsw_source):
        """Test that a site without a region cell inherits the previous region."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert _find(measurements, "Rozelle", "o3")["city"] == "Sydney East"
        assert _find(measurements, "Lithgow", "o3")["city"] == "Central Tablelands"

    def test_missing_region_cell_shifts_columns(self, nsw_report_html, nsw_source):
        """Test that values in rows without a region line up with the header."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert _find(measurements, "Rozelle", "o3")["value"] == pytest.approx(0.019)
        assert _find(measurements, "Rozelle", "pm10")["value"] == pytest.approx(22.5)
        assert not [
            m for m in measurements if m["location"] == "Rozelle" and m["parameter"] == "no2"
        ]

    def test_colspan_cells_shift_columns(self, nsw_report_html, nsw_source):
        """Test that a cell spanning two columns keeps later cells aligned."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        bathurst = [m for m in measurements if m["location"] == "Bathurst"]
        assert {m["parameter"] for m in bathurst} == {"pm10", "pm25"}
        assert _find(measurements, "Bathurst", "pm10")["value"] == pytest.approx(40.0)
        assert _find(measurements, "Bathurst", "pm25")["value"] == pytest.approx(12.0)

    def test_known_site_has_coordinates(self, nsw_report_html, nsw_source):
        """Test that coordinates come from the site table."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert _find(measurements, "Randwick", "o3")["coordinates"] == dict(
            COORDINATES["Randwick"]
        )

    def test_unknown_site_has_no_coordinates(self, nsw_report_html, nsw_source):
        """Test that sites missing from the table get no coordinates."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert "coordinates" not in _find(measurements, "Lithgow", "o3")

    def test_all_measurements_share_report_date(self, nsw_report_html, nsw_source):
        """Test that the report date (with 12am rollover) is applied to every row."""
        measurements = format_data(nsw_report_html, nsw_source)["measurements"]

        assert {m["date"]["local"] for m in measurements} == {"2019-12-14T00:00:00+11:00"}

    def test_base_fields(self, nsw_report_html, nsw_source):
        """Test the fixed fields on every measurement."""
        measurement = format_data(nsw_report_html, nsw_source)["measurements"][0]

        assert set(measurement) <= set(MEASUREMENT_FIELDS)
        assert measurement["country"] == "AU"
        assert measurement["sourceName"] == "NSW Test"
        assert measurement["sourceType"] == "government"
        assert measurement["mobile"] is False
        assert "New South Wales" in measurement["attribution"][0]["name"]

    def test_missing_date_cell_raises(self, nsw_report_html, nsw_source):
        """Test that a report without a date cell raises."""
        html = nsw_report_html.replace('class="date"', 'class="title"')

        with pytest.raises(IndexError):
            format_data(html, nsw_source)

    def test_no_table_gives_no_measurements(self, nsw_source):
        """Test that a page with only a date yields an empty list."""
        html = (
            "<table><tr><td class='date'>Hourly average data<br>"
            "13 December 2019<br>2 - 3 pm</td></tr></table>"
        )

        assert format_data(html, nsw_source)["measurements"] == []

    def test_units_table(self):
        """Test the source units for gases and particulates."""
        assert UNITS["no2"] == "pphm"
        assert UNITS["co"] == "ppm"
        assert UNITS["pm25"] == "µg/m³"


# ============================================================================
# Tests for fetch_data()
# ============================================================================


class TestFetchData:
    """Tests for the adapter entry point."""

    @responses.activate
    def test_success(self, nsw_report_html, nsw_source, recorder):
        """Test that the report is fetched, parsed and passed to the callback."""
        responses.add(
            responses.GET, nsw_source["url"], body=nsw_report_html, status=200
        )

        fetch_data(nsw_source, recorder)

        assert len(recorder.calls) == 1
        assert recorder.error is None
        assert len(recorder.data["measurements"]) == 12

    @responses.activate
    def test_non_200_is_transport_failure(self, nsw_report_html, nsw_source, recorder):
        """Test that an error status fails even when the body is a valid report."""
        responses.add(
            responses.GET, nsw_source["url"], body=nsw_report_html, status=404
        )

        fetch_data(nsw_source, recorder)

        assert len(recorder.calls) == 1
        assert isinstance(recorder.error, FetchError)
        assert recorder.error.message == FAILURE_TO_LOAD
        assert recorder.data is None

    @responses.activate
    def test_unexpected_layout_is_parse_failure(self, nsw_source, recorder):
        """Test that a page that is not the report yields the generic error."""
        responses.add(
            responses.GET,
            nsw_source["url"],
            body="<html><body>Service unavailable</body></html>",
            status=200,
        )

        fetch_data(nsw_source, recorder)

        assert len(recorder.calls) == 1
        assert isinstance(recorder.error, ParseError)
        assert recorder.error.message == UNKNOWN_ERROR

    def test_default_source_uses_readings_report(self):
        """Test that the default descriptor targets the raw readings report."""
        assert DEFAULT_SOURCE["url"].endswith("reportid=2")
