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
Adapters for Airsources.

This package contains one module per government data endpoint. Each module
fetches and normalises its source and registers itself with the global
registry when imported.
"""

# Import adapter modules to trigger their registration
from . import (
    au_act,  # noqa: F401
    nsw,  # noqa: F401
)

__all__ = ["au_act", "nsw"]
