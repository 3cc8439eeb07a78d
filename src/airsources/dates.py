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
Timezone-aware timestamp parsing.

Sources report wall-clock times in their own timezone. Each timestamp is
parsed exactly once into a timezone-aware pandas Timestamp, and both the
UTC and the local representation are derived from that one object so they
always describe the same instant.
"""

from datetime import datetime

import pandas as pd

from .types import DateInfo


def localize(value: str | datetime, timezone: str) -> pd.Timestamp:
    """
    Interpret a timestamp in the given timezone.

    Naive values are taken as wall-clock time in ``timezone``. Values that
    already carry an offset are converted into ``timezone``.

    Args:
        value: ISO-8601 string or datetime
        timezone: IANA timezone name (e.g., "Australia/Sydney")

    Returns:
        pd.Timestamp: Timezone-aware timestamp in ``timezone``

    Raises:
        ValueError: If the value cannot be parsed
    """
    timestamp = pd.Timestamp(value)
    if pd.isna(timestamp):
        raise ValueError(f"Cannot parse timestamp: {value!r}")

    if timestamp.tzinfo is None:
        # Ambiguous wall times during the DST fall-back resolve to daylight time
        return timestamp.tz_localize(
            timezone, ambiguous=True, nonexistent="shift_forward"
        )
    return timestamp.tz_convert(timezone)


def to_date_info(timestamp: pd.Timestamp) -> DateInfo:
    """
    Split a timezone-aware timestamp into the canonical ``{utc, local}`` pair.

    ``utc`` is a timezone-aware datetime; ``local`` is an ISO-8601 string
    with the UTC offset, truncated to whole seconds.
    """
    whole_seconds = timestamp.replace(microsecond=0, nanosecond=0)
    return {
        "utc": whole_seconds.tz_convert("UTC").to_pydatetime(),
        "local": whole_seconds.isoformat(),
    }


def parse_local_timestamp(value: str | datetime, timezone: str) -> DateInfo:
    """
    Parse a source timestamp into the canonical date pair.

    Example:
        >>> parse_local_timestamp("2020-01-01T00:00:00", "Australia/Sydney")["local"]
        '2020-01-01T00:00:00+11:00'
    """
    return to_date_info(localize(value, timezone))
