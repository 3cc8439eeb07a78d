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
Parameter filtering and unit standardisation for measurements.

Sources report gases in a mix of mixing-ratio units (pphm, ppb, ppm) and
particulates in several spellings of micrograms per cubic metre. These
helpers bring measurements onto the standard units (ppm for gases, µg/m³
for particulates) and drop parameters that are not part of the standard
set.

All functions return new measurement dicts; inputs are never modified.
"""

from logging import getLogger
from typing import Iterable

from .types import PARAMETERS, Measurement

logger = getLogger(__name__)

# Parameters kept by remove_unwanted_parameters()
ALLOWED_PARAMETERS = frozenset(PARAMETERS)

STANDARD_UGM3 = "µg/m³"
STANDARD_PPM = "ppm"

# Values some sources use to flag an error instead of a reading
ERROR_SENTINELS = (-9999, 9999)

# (standard unit, multiplier, divisor), keyed by lower-cased source unit
# pphm = parts per hundred million, so 1 pphm = 0.01 ppm
UNIT_CONVERSIONS = {
    "pphm": (STANDARD_PPM, 1, 100),
    "ppb": (STANDARD_PPM, 1, 1000),
    "ppt": (STANDARD_PPM, 1, 1_000_000),
    "ppm": (STANDARD_PPM, 1, 1),
    "mg/m3": (STANDARD_UGM3, 1000, 1),
    "mg/m³": (STANDARD_UGM3, 1000, 1),
    "ug/m3": (STANDARD_UGM3, 1, 1),
    "ug/m³": (STANDARD_UGM3, 1, 1),
    "µg/m3": (STANDARD_UGM3, 1, 1),
    "µg/m³": (STANDARD_UGM3, 1, 1),
    "μg/m³": (STANDARD_UGM3, 1, 1),  # Greek mu rather than the micro sign
}


def remove_unwanted_parameters(
    measurements: Iterable[Measurement],
) -> list[Measurement]:
    """
    Keep only measurements whose parameter is in ALLOWED_PARAMETERS.

    Example:
        >>> remove_unwanted_parameters([{"parameter": "neph"}, {"parameter": "pm25"}])
        [{'parameter': 'pm25'}]
    """
    kept = []
    for measurement in measurements:
        if measurement.get("parameter") in ALLOWED_PARAMETERS:
            kept.append(measurement)
        else:
            logger.debug(f"Dropping unwanted parameter {measurement.get('parameter')!r}")
    return kept


def unify_measurement_units(measurement: Measurement) -> Measurement:
    """
    Convert a single measurement to its standard unit.

    Measurements with an unknown unit, a non-numeric value, or a value that
    is an error sentinel (±9999) are returned unchanged (as a copy).

    Args:
        measurement: Measurement with ``value`` and ``unit``

    Returns:
        Measurement: New measurement in the standard unit

    Example:
        >>> unify_measurement_units({"parameter": "no2", "value": 2.5, "unit": "pphm"})
        {'parameter': 'no2', 'value': 0.025, 'unit': 'ppm'}
    """
    converted = dict(measurement)
    unit = measurement.get("unit")
    value = measurement.get("value")

    if not isinstance(unit, str) or not isinstance(value, (int, float)):
        return converted

    if value in ERROR_SENTINELS:
        return converted

    conversion = UNIT_CONVERSIONS.get(unit.strip().lower())
    if conversion is None:
        return converted

    standard_unit, multiplier, divisor = conversion
    converted["unit"] = standard_unit
    converted["value"] = value * multiplier / divisor
    return converted


def convert_units(measurements: Iterable[Measurement]) -> list[Measurement]:
    """Apply unify_measurement_units() to every measurement."""
    return [unify_measurement_units(m) for m in measurements]
