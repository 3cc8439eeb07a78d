# Airsources: fetch and standardise government air quality data
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
New South Wales air quality data source.

This module provides the adapter for the NSW Department of Planning,
Industry and Environment air quality network. NSW publishes live readings
only as an HTML report, so the adapter scrapes the report table.

There are two live reports:

- Index values: .../aquisnetnswphp/getPage.php?reportid=1
- Data readings: .../aquisnetnswphp/getPage.php?reportid=2

This source uses the second report since it contains the raw readings
instead of index values.

The report table (``table.aqi``) is laid out as:

- row 0: pollutant names, each in a cell with a help link
  (``<a ...>?</a><br>PM2.5``)
- row 1: averaging periods (``1-hour``, ``24-hour``) under each pollutant
- rows 2+: one row per site; the region cell spans all sites of a region
  so it only appears on the region's first row

Cells may span several columns, so readings are matched to pollutants by
running column index rather than by cell position.
"""

import copy
import re
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType

import pandas as pd
from parsel import Selector, SelectorList

from ..dates import localize, to_date_info
from ..decorators import with_logging
from ..fetcher import fetch_with_callback
from ..registry import register_adapter
from ..types import Callback, DateInfo, Measurement, SourceDescriptor, SourceResult
from ..units import convert_units, remove_unwanted_parameters

logger = getLogger(__name__)

# Configuration
NAME = "nsw"
TIMEZONE = "Australia/Melbourne"

DEFAULT_SOURCE: SourceDescriptor = {
    "name": "NSW - DPIE",
    "url": "https://airquality.environment.nsw.gov.au/aquisnetnswphp/getPage.php?reportid=2",
}

ATTRIBUTION = (
    {
        "name": "State of New South Wales (Department of Planning, Industry and Environment)",
        "url": "https://www.dpie.nsw.gov.au/",
    },
)

PARAMETER_PATTERN = re.compile(r"</a><br>+(.+)")
AVERAGING_PERIOD_PATTERN = re.compile(r"([0-9]+)-hour")

# Not every pollutant is measured in µg/m³
# From: http://www.environment.nsw.gov.au/AQMS/dataindex.htm
UNITS = MappingProxyType({
    "o3": "pphm",
    "no2": "pphm",
    "co": "ppm",
    "neph": "Bsp, 10-4 m-1",
    "so2": "pphm",
    "pm25": "µg/m³",
    "pm10": "µg/m³",
})

# Site coordinates come from the network site information XLSX at
# https://www.environment.nsw.gov.au/topics/air/monitoring-air-quality
# (© State of New South Wales and Office of Environment and Heritage,
# licensed CC BY 4.0), also at
# https://datasets.seed.nsw.gov.au/dataset/air-quality-monitoring-network2b91e
COORDINATES = MappingProxyType({
    "Bargo": {"latitude": -34.3075, "longitude": 150.58},
    "Bringelly": {"latitude": -33.9194444, "longitude": 150.7611111},
    "Camden": {"latitude": -34.0416667, "longitude": 150.6902778},
    "Campbelltown West": {"latitude": -34.0666667, "longitude": 150.7952778},
    "Liverpool": {"latitude": -33.9327778, "longitude": 150.9058333},
    "Oakdale": {"latitude": -34.0530556, "longitude": 150.4972222},
    "Chullora": {"latitude": -33.8938889, "longitude": 151.0452778},
    "Earlwood": {"latitude": -33.9177778, "longitude": 151.1347222},
    "Lindfield": {"latitude": -33.7827778, "longitude": 151.15},
    "Randwick": {"latitude": -33.9333333, "longitude": 151.2419444},
    "Rozelle": {"latitude": -33.8658333, "longitude": 151.1625},
    "Prospect": {"latitude": -33.7947222, "longitude": 150.9125},
    "Richmond": {"latitude": -33.6183333, "longitude": 150.7458333},
    "Vineyard": {"latitude": -33.6577778, "longitude": 150.8466667},
    "St Marys": {"latitude": -33.7972222, "longitude": 150.7658333},
    "Albion Park Sth": {"latitude": -34.5805556, "longitude": 150.7816667},
    "Kembla Grange": {"latitude": -34.4763889, "longitude": 150.8175},
    "Wollongong": {"latitude": -34.4186111, "longitude": 150.8863889},
    "Muswellbrook": {"latitude": -32.2716667, "longitude": 150.8858333},
    "Beresfield": {"latitude": -32.7983333, "longitude": 151.66},
    "Newcastle": {"latitude": -32.9325, "longitude": 151.7583333},
    "Wallsend": {"latitude": -32.8961111, "longitude": 151.6691667},
    "Albury": {"latitude": -36.0516667, "longitude": 146.9741667},
    "Wagga Wagga Nth": {"latitude": -35.1044444, "longitude": 147.3602778},
    "Bathurst": {"latitude": -33.4033333, "longitude": 149.5733333},
    "Tamworth": {"latitude": -31.1105556, "longitude": 150.9141667},
    "Wyong": {"latitude": -32.195, "longitude": 150.6736111},
    "Singleton": {"latitude": -32.5297222, "longitude": 151.1497222},
    "Cook And Phillip": {"latitude": -33.8725, "longitude": 151.213333},
    "Macquarie Park": {"latitude": -33.765278, "longitude": 151.117806},
    "Parramatta North": {"latitude": -33.799444, "longitude": 150.997778},
    "Rouse Hill": {"latitude": -33.682778, "longitude": 150.903611},
    "Orange": {"latitude": -33.274444, "longitude": 149.094444},
    "Armidale": {"latitude": -30.508333, "longitude": 151.661389},
    "Gunnedah": {"latitude": -30.981667, "longitude": 150.260556},
    "Narrabri": {"latitude": -30.318333, "longitude": 149.829167},
    "Goulburn": {"latitude": -34.734444, "longitude": 149.724167},
})


@dataclass
class ColumnInfo:
    """Pollutant and averaging period reported in one table column."""

    parameter: str
    averaging_period: int | None = None


@dataclass
class TableState:
    """State carried through the single pass over the report table."""

    region: str = ""  # Region of the most recent region row
    columns: dict[int, ColumnInfo] = field(default_factory=dict)


# ============================================================================
# ADAPTER ENTRY POINT
# ============================================================================


@with_logging()
def fetch_data(source: SourceDescriptor, callback: Callback) -> None:
    """
    Fetch the NSW readings report and report it through ``callback``.

    The callback is invoked exactly once, as ``callback(error, None)`` or
    ``callback(None, {"name": "unused", "measurements": [...]})``.
    """
    fetch_with_callback(source, format_data, callback)


# ============================================================================
# HTML HELPERS
# ============================================================================


def _inner_html(cell: Selector) -> str:
    return "".join(cell.xpath("node()").getall())


def _text(selection: Selector | SelectorList) -> str:
    return "".join(selection.xpath(".//text()").getall()).strip()


def _colspan(cell: Selector) -> int:
    try:
        return int(cell.attrib.get("colspan", 1)) or 1
    except ValueError:
        return 1


def parse_date(date_html: str) -> DateInfo:
    """
    Parse the report's timestamp cell.

    The cell reads e.g. ``Hourly data<br>13 December 2019<br>11 - 12 am``.
    The reading is stamped with the end of the range. When the end is 12am
    the range closes on the following day, so one day is added:
    ``December 13, 11 - 12 am`` becomes December 14, 12am.

    Args:
        date_html: Inner HTML of the ``td.date`` cell

    Returns:
        DateInfo: The instant in UTC and Australia/Melbourne time

    Raises:
        IndexError, ValueError: If the cell does not have the expected layout
    """
    parts = date_html.split("<br>")

    # We're interested in the 'to' hour and its am/pm indication
    tokens = parts[2].strip().split(" ")
    time = tokens[2] + tokens[3]

    day_offset = 1 if time == "12am" else 0

    naive = pd.to_datetime(f"{parts[1].strip()} {time}", format="%d %B %Y %I%p")
    return to_date_info(localize(naive + pd.Timedelta(days=day_offset), TIMEZONE))


# ============================================================================
# TABLE PARSING
# ============================================================================


def _read_parameters(row: Selector, state: TableState) -> None:
    """Record the pollutant named in each header cell that carries a link."""
    column = 0
    for cell in row.xpath("./*"):
        column += _colspan(cell)

        if cell.xpath(".//a"):
            match = PARAMETER_PATTERN.search(_inner_html(cell))
            parameter = match.group(1).strip().replace(".", "", 1).lower()
            state.columns[column] = ColumnInfo(parameter=parameter)


def _read_averaging_periods(row: Selector, state: TableState) -> None:
    """Attach averaging periods to the pollutant columns found in the header."""
    column = 0
    for cell in row.xpath("./*"):
        column += _colspan(cell)

        period = AVERAGING_PERIOD_PATTERN.search(_inner_html(cell))
        if period:
            # A period under a column with no pollutant means the layout changed
            state.columns[column].averaging_period = int(period.group(1))


def _read_site(
    row: Selector, state: TableState, date: DateInfo, source: SourceDescriptor
) -> list[Measurement]:
    """Turn one site row into measurements, updating the carried region."""
    region_cells = row.css(".region")
    state.region = _text(region_cells) or state.region

    # Rows without their own region cell are one column short
    column = 0 if region_cells else 1

    site = _text(row.css(".site"))

    base: Measurement = {
        "location": site,
        "city": state.region,
        "country": "AU",
        "date": date,
        "sourceName": source["name"],
        "sourceType": "government",
        "mobile": False,
        "attribution": [dict(a) for a in ATTRIBUTION],
    }
    if site in COORDINATES:
        base["coordinates"] = dict(COORDINATES[site])

    measurements = []
    for cell in row.xpath("./*"):
        column += _colspan(cell)

        info = state.columns.get(column)
        text = _text(cell)
        if not text or info is None:
            continue

        if info.averaging_period is None:
            logger.debug(f"No averaging period for {info.parameter} column {column}")
            continue

        try:
            value = float(text)
        except ValueError:
            logger.debug(f"Skipping non-numeric {info.parameter} value {text!r} at {site}")
            continue

        measurement = copy.deepcopy(base)
        measurement["parameter"] = info.parameter
        measurement["unit"] = UNITS.get(info.parameter)
        measurement["value"] = value
        measurement["averagingPeriod"] = {"value": info.averaging_period, "unit": "hours"}
        measurements.append(measurement)

    return measurements


def keep_shortest_averaging_period(measurements: list[Measurement]) -> list[Measurement]:
    """
    Keep one measurement per (location, parameter): the one with the
    shortest averaging period.

    The same pollutant is often reported over several averaging periods
    (e.g. 1-hour and 24-hour PM10). Ties keep the first measurement seen,
    and groups stay in the order they first appeared.
    """
    shortest: dict[tuple[str, str], Measurement] = {}

    for measurement in measurements:
        key = (measurement["location"], measurement["parameter"])
        current = shortest.get(key)
        if (
            current is None
            or measurement["averagingPeriod"]["value"]
            < current["averagingPeriod"]["value"]
        ):
            shortest[key] = measurement

    return list(shortest.values())


def format_data(body: str, source: SourceDescriptor) -> SourceResult:
    """
    Convert the NSW readings report into canonical measurements.

    Args:
        body: HTML of the readings report
        source: Descriptor the report was fetched from

    Returns:
        SourceResult: ``{"name": "unused", "measurements": [...]}``, after
        deduplication, parameter filtering and unit conversion

    Raises:
        Exception: Any parsing failure; the fetcher reports it as a generic
            adapter error
    """
    selector = Selector(text=body)

    date = parse_date(_inner_html(selector.css("td.date")[0]))

    state = TableState()
    measurements = []

    for index, row in enumerate(selector.css("table.aqi tr")):
        if index == 0:
            _read_parameters(row, state)
        elif index == 1:
            _read_averaging_periods(row, state)
        elif row.css(".site"):
            # Only rows with a site cell hold measurements
            measurements.extend(_read_site(row, state, date, source))

    measurements = keep_shortest_averaging_period(measurements)
    measurements = remove_unwanted_parameters(measurements)
    measurements = convert_units(measurements)

    return {"name": "unused", "measurements": measurements}


# ============================================================================
# ADAPTER REGISTRATION
# ============================================================================

register_adapter(
    NAME,
    {
        "name": NAME,
        "fetch_data": fetch_data,
        "format_data": format_data,
        "default_source": DEFAULT_SOURCE,
    },
)
