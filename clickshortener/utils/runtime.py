"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the service runs on a developer machine, False otherwise.

Example:
    >>> from clickshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from clickshortener.utils.constants import APP_ENV_ENV


def running_locally() -> bool:
    return os.getenv(APP_ENV_ENV, 'local').lower() == 'local'
