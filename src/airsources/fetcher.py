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
Shared fetch-then-format plumbing for adapters.

Every adapter does the same three things: one bounded GET against its
source URL, one call to its formatter on the response body, and one report
of the outcome. This module implements that pipeline once, in two flavours:

- ``load()`` returns the result or raises an AdapterError
- ``fetch_with_callback()`` reports through a completion callback, which is
  invoked exactly once with either an error or a result
"""

import logging
import math
import os
from typing import Any

import requests

from .exceptions import FAILURE_TO_PARSE, AdapterError, FetchError, ParseError
from .types import Callback, Formatter, SourceDescriptor, SourceResult

logger = logging.getLogger(__name__)

# Configuration
REQUEST_TIMEOUT = 60  # seconds
TIMEOUT_ENV_VAR = "AIRSOURCES_REQUEST_TIMEOUT"


def get_request_timeout() -> float:
    """
    Return the HTTP timeout in seconds.

    Read at call time so AIRSOURCES_REQUEST_TIMEOUT can be changed between
    runs (and in tests).
    """
    override = os.getenv(TIMEOUT_ENV_VAR)
    if not override:
        return REQUEST_TIMEOUT

    try:
        timeout = float(override)
    except ValueError:
        timeout = None

    # requests raises ValueError for timeouts <= 0
    if timeout is None or not math.isfinite(timeout) or timeout <= 0:
        logger.warning(
            f"Ignoring invalid {TIMEOUT_ENV_VAR}={override!r}, "
            f"using {REQUEST_TIMEOUT}s"
        )
        return REQUEST_TIMEOUT

    return timeout


def fetch_body(source: SourceDescriptor, params: dict[str, Any] | None = None) -> str:
    """
    Perform the single GET request for a source.

    Args:
        source: Descriptor naming the URL to fetch
        params: Optional query parameters

    Returns:
        str: Response body

    Raises:
        FetchError: On any transport error or a status other than 200
    """
    url = source["url"]

    try:
        response = requests.get(url, params=params, timeout=get_request_timeout())
    except requests.exceptions.RequestException as e:
        logger.warning(f"Failed to fetch {url}: {e}")
        raise FetchError() from e

    if response.status_code != 200:
        logger.warning(f"Failed to fetch {url}: HTTP {response.status_code}")
        raise FetchError()

    return response.text


def load(
    source: SourceDescriptor,
    formatter: Formatter,
    params: dict[str, Any] | None = None,
) -> SourceResult:
    """
    Fetch a source and format its body into measurements.

    Args:
        source: Descriptor of the source to fetch
        formatter: Adapter-specific body parser
        params: Optional query parameters for the request

    Returns:
        SourceResult: ``{"name": ..., "measurements": [...]}``

    Raises:
        FetchError: If the source could not be loaded
        ParseError: If the body could not be formatted. Whatever went wrong
            inside the formatter is chained, never surfaced directly.
    """
    body = fetch_body(source, params)

    try:
        data = formatter(body, source)
    except Exception as e:
        logger.error(f"Failed to format data from {source['url']}: {e}", exc_info=True)
        raise ParseError() from e

    if data is None:
        raise ParseError(FAILURE_TO_PARSE)

    logger.debug(
        f"Formatted {len(data['measurements'])} measurements from {source['name']}"
    )
    return data


def fetch_with_callback(
    source: SourceDescriptor,
    formatter: Formatter,
    callback: Callback,
    params: dict[str, Any] | None = None,
) -> None:
    """
    Callback flavour of ``load()``.

    The callback is invoked exactly once: ``callback(error, None)`` on
    failure or ``callback(None, result)`` on success. It runs outside the
    error handling, so an exception raised by the callback propagates to
    the caller instead of triggering a second invocation.
    """
    try:
        result = load(source, formatter, params)
    except AdapterError as e:
        callback(e, None)
        return

    callback(None, result)
