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
Adapter registry for Airsources.

Each adapter is registered as an AdapterSpec (a bundle of functions plus a
default source descriptor) and can be retrieved by name. Adapters register
themselves when their modules are imported.

Example:
    >>> from airsources.registry import get_adapter
    >>>
    >>> adapter = get_adapter("au_act")
    >>> adapter["fetch_data"](adapter["default_source"], print)
"""

import warnings
from typing import Dict

from .types import AdapterSpec, SourceDescriptor

# The global registry - just a dictionary mapping names to AdapterSpecs
_ADAPTERS: Dict[str, AdapterSpec] = {}


def register_adapter(name: str, spec: AdapterSpec) -> None:
    """
    Register an adapter in the global registry.

    Adapters are identified by name (case-insensitive). If an adapter with
    the same name already exists, it will be replaced with a warning.

    Args:
        name: Unique identifier for the adapter (e.g., "au_act", "nsw")
        spec: AdapterSpec containing the adapter's functions
    """
    normalized_name = name.lower()

    if normalized_name in _ADAPTERS:
        warnings.warn(
            f"Adapter '{normalized_name}' is already registered and will be replaced",
            UserWarning,
            stacklevel=2,
        )

    _ADAPTERS[normalized_name] = spec


def unregister_adapter(name: str) -> bool:
    """
    Remove an adapter from the registry.

    Returns:
        bool: True if the adapter was removed, False if it wasn't registered
    """
    normalized_name = name.lower()

    if normalized_name in _ADAPTERS:
        del _ADAPTERS[normalized_name]
        return True
    return False


def get_adapter(name: str) -> AdapterSpec | None:
    """
    Retrieve a registered adapter by name.

    Args:
        name: Name of the adapter (case-insensitive)

    Returns:
        AdapterSpec | None: The adapter specification, or None if not found
    """
    return _ADAPTERS.get(name.lower())


def list_adapters() -> list[str]:
    """Get a sorted list of all registered adapter names."""
    return sorted(_ADAPTERS.keys())


def adapter_exists(name: str) -> bool:
    """Check if an adapter is registered."""
    return name.lower() in _ADAPTERS


def get_default_source(name: str) -> SourceDescriptor | None:
    """
    Get a copy of the default source descriptor for an adapter.

    Returns:
        SourceDescriptor | None: Descriptor copy, or None if adapter not found
    """
    adapter = get_adapter(name)
    if adapter is None:
        return None

    return dict(adapter["default_source"])


def clear_registry() -> None:
    """
    Clear all registered adapters from the registry.

    This is primarily useful for testing.
    """
    _ADAPTERS.clear()
