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

"""Fetch and standardise government air quality data"""

from .api import fetch, fetch_dataframe, get_default_source, list_sources
from .exceptions import AdapterError, FetchError, ParseError
from .transforms import measurements_to_dataframe

__version__ = "0.1.0"

__all__ = [
    "AdapterError",
    "FetchError",
    "ParseError",
    "fetch",
    "fetch_dataframe",
    "get_default_source",
    "list_sources",
    "measurements_to_dataframe",
]
