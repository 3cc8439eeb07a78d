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
ACT Government air quality data source.

This module provides the adapter for the Australian Capital Territory's
air quality monitoring network, published by the ACT Health Protection
Service through the ACT open data portal (a Socrata JSON API).

Each row of the API holds one station reading with one field per pollutant,
e.g. ``{"name": "Civic", "datetime": "...", "no2": "0.01", "pm2_5": "6.4",
"gps": {"latitude": "-35.28", "longitude": "149.13"}}``.

Dataset: https://www.data.act.gov.au/Environment/Air-Quality-Monitoring-Data/94a5-zqnn
"""

import copy
import json
from datetime import datetime
from types import MappingProxyType
from typing import Any

import pandas as pd

from ..decorators import with_logging
from ..dates import parse_local_timestamp
from ..fetcher import fetch_with_callback
from ..registry import register_adapter
from ..types import Callback, Measurement, SourceDescriptor, SourceResult

# Configuration
NAME = "au_act"
TIMEZONE = "Australia/Sydney"
ROW_LIMIT = 1000

DEFAULT_SOURCE: SourceDescriptor = {
    "name": "ACT Government Health",
    "url": "https://www.data.act.gov.au/resource/94a5-zqnn.json",
}

ATTRIBUTION = (
    {
        "name": "Health Protection Service, ACT Government",
        "url": "https://www.data.act.gov.au/Environment/Air-Quality-Monitoring-Data/94a5-zqnn",
    },
)

# Maps ACT field names to standard parameter names, in output order
PARAMETER_MAP = MappingProxyType({
    "no2": "no2",
    "o3_1hr": "o3",
    "co": "co",
    "pm10": "pm10",
    "pm2_5": "pm25",
})

UNITS = MappingProxyType({
    "no2": "ppm",
    "o3": "ppm",
    "co": "ppm",
    "pm10": "µg/m³",
    "pm25": "µg/m³",
})


# ============================================================================
# REQUEST
# ============================================================================


def build_query(now: datetime | None = None) -> dict[str, str]:
    """
    Build the Socrata query selecting the last day of readings.

    Rows newer than 24 hours ago (in Sydney time) are requested, newest
    first, capped at ROW_LIMIT.

    Args:
        now: Reference time, defaults to the current time

    Returns:
        dict: Query parameters for the request
    """
    reference = pd.Timestamp(now) if now is not None else pd.Timestamp.now(tz="UTC")
    if reference.tzinfo is None:
        reference = reference.tz_localize("UTC")

    time_ago = (reference.tz_convert(TIMEZONE) - pd.DateOffset(days=1)).strftime(
        "%Y-%m-%dT%H:%M:%S"
    )

    return {
        "$query": (
            f"select *, :id where (`datetime` > '{time_ago}') "
            f"order by `datetime` desc limit {ROW_LIMIT}"
        )
    }


@with_logging()
def fetch_data(
    source: SourceDescriptor, callback: Callback, now: datetime | None = None
) -> None:
    """
    Fetch the last day of ACT readings and report them through ``callback``.

    The callback is invoked exactly once, as ``callback(error, None)`` or
    ``callback(None, {"name": "unused", "measurements": [...]})``.

    Example:
        >>> fetch_data(DEFAULT_SOURCE, lambda err, data: print(err or data))
    """
    fetch_with_callback(source, _format_body, callback, params=build_query(now))


# ============================================================================
# SCHEMA NORMALISATION
# ============================================================================


def _format_body(body: str, source: SourceDescriptor) -> SourceResult:
    return format_data(json.loads(body), source)


def _base_measurement(row: dict[str, Any], source: SourceDescriptor) -> Measurement:
    """Build the per-station fields shared by every pollutant in a row."""
    return {
        "location": row["name"],
        "city": "Canberra",
        "country": "AU",
        "date": parse_local_timestamp(row["datetime"], TIMEZONE),
        "sourceName": source["name"],
        "sourceType": "government",
        "mobile": False,
        "coordinates": {
            "latitude": float(row["gps"]["latitude"]),
            "longitude": float(row["gps"]["longitude"]),
        },
        "attribution": [dict(a) for a in ATTRIBUTION],
        "averagingPeriod": {"value": 1, "unit": "hours"},
    }


def format_data(data: list[dict[str, Any]], source: SourceDescriptor) -> SourceResult:
    """
    Convert parsed ACT rows into canonical measurements.

    Every row yields one measurement per recognised pollutant field present
    in it; rows without any are skipped.

    Args:
        data: Parsed JSON array from the API
        source: Descriptor the data was fetched from

    Returns:
        SourceResult: ``{"name": "unused", "measurements": [...]}``

    Raises:
        KeyError, TypeError, ValueError: If a row is missing base fields or
            holds unparseable values
    """
    measurements = []

    for row in data:
        base = _base_measurement(row, source)

        for field, parameter in PARAMETER_MAP.items():
            # A null reading is treated as missing rather than as zero
            if row.get(field) is None:
                continue

            measurement = copy.deepcopy(base)
            measurement["parameter"] = parameter
            measurement["value"] = float(row[field])
            measurement["unit"] = UNITS[parameter]
            measurements.append(measurement)

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
