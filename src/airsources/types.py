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
Core type definitions for Airsources.

This module defines the canonical measurement schema and the function
signatures every adapter implements, so that all sources hand back records
of exactly the same shape.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, TypeAlias, TypedDict

if TYPE_CHECKING:
    from .exceptions import AdapterError


class SourceDescriptor(TypedDict):
    """
    Where an adapter fetches from.

    Fields:
        name: Human-readable name of the source, copied into each measurement
        url: Endpoint the adapter requests
    """
    name: str
    url: str


class DateInfo(TypedDict):
    """A single instant, expressed both in UTC and in the source's local time."""
    utc: datetime
    local: str


class Coordinates(TypedDict):
    latitude: float
    longitude: float


class Attribution(TypedDict):
    name: str
    url: str


class AveragingPeriod(TypedDict):
    value: int | float
    unit: str


class Measurement(TypedDict, total=False):
    """
    Canonical schema for one air quality measurement.

    Required fields:
        location: Station name as reported by the source
        city: City or region the station belongs to
        country: ISO 3166-1 alpha-2 country code
        date: Measurement instant (see DateInfo)
        sourceName: Name of the source descriptor the record came from
        sourceType: Kind of operator (e.g., "government")
        mobile: Whether the station moves
        attribution: Data owners to credit
        averagingPeriod: Window the value is averaged over
        parameter: Pollutant code (e.g., "pm25", "no2")
        value: Measured value
        unit: Unit of the value, fixed by parameter

    Optional fields:
        coordinates: Station position, absent when unknown
    """
    location: str
    city: str
    country: str
    date: DateInfo
    sourceName: str
    sourceType: str
    mobile: bool
    coordinates: Coordinates
    attribution: list[Attribution]
    averagingPeriod: AveragingPeriod
    parameter: str
    value: float
    unit: str


class SourceResult(TypedDict):
    """What a successful adapter run hands back."""
    name: str
    measurements: list[Measurement]


# Function type aliases - these define the "interface" for adapters
Formatter: TypeAlias = Callable[[str, SourceDescriptor], SourceResult | None]
"""
A function that turns a raw response body into a SourceResult.

Args:
    body: Raw response text
    source: The descriptor that was fetched

Returns:
    SourceResult | None: Normalised measurements, or None if nothing usable
"""

Callback: TypeAlias = Callable[["AdapterError | None", SourceResult | None], Any]
"""
Completion callback, invoked exactly once per adapter run.

Called as ``callback(error, None)`` on failure or ``callback(None, result)``
on success.
"""

AdapterFetcher: TypeAlias = Callable[[SourceDescriptor, Callback], None]


class AdapterSpec(TypedDict):
    """
    Specification for an adapter.

    An AdapterSpec bundles the functions that together define how to fetch
    and normalise one source, plus the descriptor used when the caller does
    not supply one.
    """
    name: str
    fetch_data: AdapterFetcher
    format_data: Callable[..., SourceResult]
    default_source: SourceDescriptor


# Standard measurement fields - for reference and validation
MEASUREMENT_FIELDS = [
    "location",
    "city",
    "country",
    "date",
    "sourceName",
    "sourceType",
    "mobile",
    "coordinates",
    "attribution",
    "averagingPeriod",
    "parameter",
    "value",
    "unit",
]

# Closed set of pollutant codes a measurement may carry
PARAMETERS = ("no2", "o3", "co", "pm10", "pm25", "so2", "bc")
