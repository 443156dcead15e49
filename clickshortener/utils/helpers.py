"""Helper utilities shared by services and DAOs.

Functions:
    utc_now() -> datetime
        Current time as a timezone-aware UTC datetime (default service clock)
    as_utc(value) -> datetime | None
        Normalize a datetime to UTC, treating naive values as UTC
    get_short_url(base_url, shortcode) -> str
        Get string representation of short URL for a given shortcode
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from clickshortener.utils.helpers import get_short_url
    >>> get_short_url('https://sho.rt/', 'abc123')
    'https://sho.rt/abc123'
"""

import os
import functools
from datetime import datetime, UTC
from collections.abc import Callable


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to UTC

    Naive datetimes are assumed to already be expressed in UTC.

    Example:
        >>> as_utc(datetime(2025, 10, 15, 12, 0))
        datetime.datetime(2025, 10, 15, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def get_short_url(base_url: str, shortcode: str) -> str:
    """Get string representation of shortened URL

    Args:
        base_url (str): public base URL of the service
        shortcode (str): shortcode

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
