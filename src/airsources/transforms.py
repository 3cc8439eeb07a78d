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
Composable DataFrame transformation functions.

Adapters hand back nested measurement dicts. Callers doing analysis usually
want a flat table instead, so this module provides small, pure DataFrame
transformers and a pipeline that turns canonical measurements into one.

All transformer functions follow the pattern:
    - Take configuration as arguments
    - Return a function that transforms a DataFrame
    - Are pure (no side effects)
    - Are composable

Example:
    >>> to_table = compose(
    ...     rename_columns({"sourceName": "source_name"}),
    ...     sort_values(["location", "parameter"]),
    ... )
    >>> df = to_table(pd.DataFrame(flatten_measurements(measurements)))
"""

from functools import reduce
from typing import Any, Callable, Iterable

import pandas as pd

from .types import Measurement

Transformer = Callable[[pd.DataFrame], pd.DataFrame]

# Column order of the flat measurement table
DATAFRAME_COLUMNS = [
    "location",
    "city",
    "country",
    "date_utc",
    "date_local",
    "parameter",
    "value",
    "unit",
    "averaging_period",
    "averaging_period_unit",
    "latitude",
    "longitude",
    "source_name",
    "source_type",
    "mobile",
    "attribution",
]


def pipe(df: pd.DataFrame, *functions: Transformer) -> pd.DataFrame:
    """
    Apply a series of transformation functions to a DataFrame in sequence.

    Example:
        >>> result = pipe(
        ...     df,
        ...     rename_columns({"sourceName": "source_name"}),
        ...     sort_values("date_utc"),
        ... )
    """
    return reduce(lambda data, func: func(data), functions, df)


def compose(*functions: Transformer) -> Transformer:
    """
    Compose multiple transformer functions into a single function.

    Returns a new function that applies all the given functions in sequence,
    which is useful for building reusable pipelines.
    """

    def composed(df: pd.DataFrame) -> pd.DataFrame:
        return pipe(df, *functions)

    return composed


def rename_columns(mapping: dict[str, str]) -> Transformer:
    """Return a function that renames DataFrame columns."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.rename(columns=mapping)

    return transform


def add_column(name: str, value: Any | Callable[[pd.DataFrame], Any]) -> Transformer:
    """
    Return a function that adds a new column to a DataFrame.

    The value can be either a static value applied to all rows, or a callable
    that takes the DataFrame and returns a value or Series.

    Example:
        >>> transform = add_column("averaging_period_unit", "hours")
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        if callable(value):
            return df.assign(**{name: value(df)})
        else:
            return df.assign(**{name: value})

    return transform


def convert_timestamps(column: str, **kwargs) -> Transformer:
    """
    Return a function that converts a column to datetime type.

    Missing columns are left alone so the pipeline also works on empty frames.

    Args:
        column: Name of the column to convert
        **kwargs: Additional arguments passed to pd.to_datetime()
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        if column not in df.columns:
            return df
        return df.assign(**{column: pd.to_datetime(df[column], **kwargs)})

    return transform


def select_columns(*columns: str) -> Transformer:
    """
    Return a function that selects only specified columns from a DataFrame.

    Columns missing from the DataFrame are added as all-null columns, so the
    result always has exactly the requested layout.
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.reindex(columns=list(columns))

    return transform


def sort_values(by: str | list[str], ascending: bool = True) -> Transformer:
    """Return a function that sorts a DataFrame by specified column(s)."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        if df.empty:
            return df
        return df.sort_values(by=by, ascending=ascending)

    return transform


def reset_index(drop: bool = True) -> Transformer:
    """Return a function that resets the DataFrame index."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.reset_index(drop=drop)

    return transform


def flatten_measurement(measurement: Measurement) -> dict[str, Any]:
    """
    Flatten one canonical measurement into a single-level dict.

    Nested ``date``, ``coordinates`` and ``averagingPeriod`` fields become
    separate keys; attribution names are joined with "; ".
    """
    date = measurement.get("date", {})
    coordinates = measurement.get("coordinates") or {}
    averaging_period = measurement.get("averagingPeriod", {})

    return {
        "location": measurement.get("location"),
        "city": measurement.get("city"),
        "country": measurement.get("country"),
        "date_utc": date.get("utc"),
        "date_local": date.get("local"),
        "parameter": measurement.get("parameter"),
        "value": measurement.get("value"),
        "unit": measurement.get("unit"),
        "averaging_period": averaging_period.get("value"),
        "averaging_period_unit": averaging_period.get("unit"),
        "latitude": coordinates.get("latitude"),
        "longitude": coordinates.get("longitude"),
        "sourceName": measurement.get("sourceName"),
        "sourceType": measurement.get("sourceType"),
        "mobile": measurement.get("mobile"),
        "attribution": "; ".join(a["name"] for a in measurement.get("attribution", [])),
    }


def flatten_measurements(measurements: Iterable[Measurement]) -> list[dict[str, Any]]:
    """Flatten every measurement with flatten_measurement()."""
    return [flatten_measurement(m) for m in measurements]


def create_measurement_normaliser() -> Transformer:
    """
    Create the pipeline that tidies a frame of flattened measurements.

    Returns:
        Transformer: Composed transformation pipeline
    """
    return compose(
        rename_columns({"sourceName": "source_name", "sourceType": "source_type"}),
        convert_timestamps("date_utc", utc=True),
        select_columns(*DATAFRAME_COLUMNS),
        sort_values(["location", "parameter", "date_utc"]),
        reset_index(),
    )


def measurements_to_dataframe(measurements: Iterable[Measurement]) -> pd.DataFrame:
    """
    Convert canonical measurements into a flat DataFrame.

    Args:
        measurements: Measurements as returned in SourceResult["measurements"]

    Returns:
        pd.DataFrame: One row per measurement with DATAFRAME_COLUMNS. An empty
        input yields an empty frame with the same columns.

    Example:
        >>> df = measurements_to_dataframe(result["measurements"])
        >>> df.groupby("parameter")["value"].mean()
    """
    df = pd.DataFrame(flatten_measurements(measurements))
    return create_measurement_normaliser()(df)
