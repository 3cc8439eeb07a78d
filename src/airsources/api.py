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
Clean, user-friendly public API for Airsources.

This module wraps the registry and the callback-style adapters in plain
functions that return values or raise.

Basic usage:
    >>> import airsources
    >>>
    >>> # See what's available
    >>> airsources.list_sources()
    ['au_act', 'nsw']
    >>>
    >>> # Fetch the latest readings from a source's default endpoint
    >>> result = airsources.fetch("nsw")
    >>> len(result["measurements"])
    >>>
    >>> # Or as a flat DataFrame
    >>> df = airsources.fetch_dataframe("au_act")
"""

import pandas as pd

# Import sources to trigger registration
from . import sources as _sources  # noqa: F401
from .exceptions import AdapterError
from .registry import adapter_exists, get_adapter, list_adapters
from .registry import get_default_source as _get_default_source
from .transforms import measurements_to_dataframe
from .types import AdapterSpec, SourceDescriptor, SourceResult


def list_sources() -> list[str]:
    """
    List all available adapters.

    Returns:
        list[str]: Registered adapter names
    """
    return list_adapters()


def _require_adapter(name: str) -> AdapterSpec:
    if not adapter_exists(name):
        available = ", ".join(list_sources())
        raise ValueError(f"Source '{name}' not found. Available sources: {available}")
    return get_adapter(name)


def get_default_source(name: str) -> SourceDescriptor:
    """
    Get the default source descriptor for an adapter.

    The returned dict is a copy and can be edited (e.g. to point at a
    mirror) before being passed to ``fetch()``.

    Raises:
        ValueError: If the adapter is not registered
    """
    _require_adapter(name)
    return _get_default_source(name)


def fetch(name: str, source: SourceDescriptor | None = None) -> SourceResult:
    """
    Run one adapter and return its measurements.

    Args:
        name: Adapter name (e.g., "au_act", "nsw")
        source: Descriptor to fetch from; defaults to the adapter's own

    Returns:
        SourceResult: ``{"name": "unused", "measurements": [...]}``

    Raises:
        ValueError: If the adapter is not registered
        AdapterError: If the source could not be loaded or parsed

    Example:
        >>> try:
        ...     result = airsources.fetch("au_act")
        ... except airsources.AdapterError as e:
        ...     print(e.message)
    """
    adapter = _require_adapter(name)
    if source is None:
        source = _get_default_source(name)

    outcome: dict[str, AdapterError | SourceResult | None] = {}

    def callback(error: AdapterError | None, data: SourceResult | None) -> None:
        outcome["error"] = error
        outcome["data"] = data

    adapter["fetch_data"](source, callback)

    if outcome["error"] is not None:
        raise outcome["error"]
    return outcome["data"]


def fetch_dataframe(name: str, source: SourceDescriptor | None = None) -> pd.DataFrame:
    """
    Run one adapter and return its measurements as a flat DataFrame.

    See ``transforms.measurements_to_dataframe`` for the columns.

    Raises:
        ValueError: If the adapter is not registered
        AdapterError: If the source could not be loaded or parsed
    """
    result = fetch(name, source)
    return measurements_to_dataframe(result["measurements"])
