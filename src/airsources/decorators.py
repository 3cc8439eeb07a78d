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
Function decorators for cross-cutting concerns.

Adapters stay free of logging boilerplate; entry, exit and failures are
recorded here instead.
"""

import logging
from functools import wraps
from typing import Callable, TypeVar

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable)


def with_logging(logger_name: str | None = None) -> Callable[[F], F]:
    """
    Decorator to log an adapter run.

    The wrapped function must take a source descriptor as its first
    argument. The source name and URL are logged at INFO level on entry,
    and completion on exit. Unexpected errors are logged at ERROR level
    before being re-raised.

    Args:
        logger_name: Name of logger to use. If None, uses the module name.

    Returns:
        Callable: Decorated function with logging

    Example:
        >>> @with_logging("airsources.sources.nsw")
        ... def fetch_data(source, callback):
        ...     ...
    """

    def decorator(func: F) -> F:
        func_logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(source, *args, **kwargs):
            source_name = source.get("name") if isinstance(source, dict) else None
            func_logger.info(
                f"Running {func.__name__} for {source_name}",
                extra={
                    "function": func.__name__,
                    "source_name": source_name,
                    "source_url": source.get("url") if isinstance(source, dict) else None,
                },
            )

            try:
                result = func(source, *args, **kwargs)
            except Exception as e:
                func_logger.error(
                    f"Error in {func.__name__} for {source_name}: {e}",
                    extra={
                        "function": func.__name__,
                        "source_name": source_name,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise

            func_logger.info(
                f"Finished {func.__name__} for {source_name}",
                extra={"function": func.__name__, "source_name": source_name},
            )
            return result

        return wrapper

    return decorator
