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
Exceptions raised by adapters.

Adapters only ever surface two kinds of failure: the source could not be
loaded, or what came back could not be understood. Neither carries detail
beyond its message; the underlying exception is chained for logging.
"""

FAILURE_TO_LOAD = "Failure to load data url."
FAILURE_TO_PARSE = "Failure to parse data."
UNKNOWN_ERROR = "Unknown adapter error."


class AdapterError(Exception):
    """Base class for adapter failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(AdapterError):
    """Transport failure: network error or a non-200 response."""

    def __init__(self, message: str = FAILURE_TO_LOAD):
        super().__init__(message)


class ParseError(AdapterError):
    """The response body could not be turned into measurements."""

    def __init__(self, message: str = UNKNOWN_ERROR):
        super().__init__(message)
