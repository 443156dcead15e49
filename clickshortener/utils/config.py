"""Utility functions for application configuration management.

Configuration is stored in **AWS AppConfig**. Each environment (`APP_ENV`)
has a dedicated AppConfig *Environment* within the AppConfig *Application*
identified by `APP_NAME`. The configuration profile holds one JSON document:

    {
        "build": 12,
        "active_backend": "redis",
        "backends": {
            "redis": {"host": "...", "port": 6379, "db": 0},
            "memory": {}
        },
        "service": {
            "base_url": "https://sho.rt",
            "shortcode_length": 8,
            "shortcode_strategy": "random",
            "cache_capacity": 10000
        }
    }

`load_config()` reduces it to the active backend's section plus the service
section. When running locally, a built-in configuration using the in-memory
store is returned and AppConfig is never contacted.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), default `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key prefix for DAOs, or None if `APP_NAME` is not set.

    load_config() -> dict
        Load the service configuration from AWS AppConfig.

Example:
    >>> from clickshortener.utils.config import load_config
    >>> config = load_config()
    >>> config['active_backend']
    'redis'
    >>> config['redis']['host']
    'redis-15501.host.docker.internal'
"""

import os
import json
import copy
import functools
import logging
from collections.abc import Callable

import boto3

from clickshortener.utils.helpers import require_environment
from clickshortener.utils.runtime import running_locally
from clickshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    DEFAULT_BASE_URL,
)


logger = logging.getLogger(__name__)


LOCAL_CONFIG = {
    'active_backend': 'memory',
    'memory': {},
    'service': {
        'base_url': DEFAULT_BASE_URL,
    },
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'clickshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'clickshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _local_config(func: Callable[[], dict]) -> Callable[[], dict]:
    """Decorator: short-circuit `load_config()` with LOCAL_CONFIG when running locally"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> dict:
        if not running_locally():
            return func(*args, **kwargs)

        logger.debug('Running locally. Using built-in configuration (in-memory store).')
        return copy.deepcopy(LOCAL_CONFIG)

    return wrapper


@_local_config
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config() -> dict:
    """Load the service configuration from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Returns:
        dict: {'active_backend': <name>, <name>: {...}, 'service': {...}}

    Raises:
        KeyError: missing environment variables or malformed document.
        botocore.exceptions.ClientError: AppConfig calls failed.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.')

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    backend = config['active_backend']
    data = {
        'active_backend': backend,
        backend: config['backends'][backend],
        'service': config.get('service', {}),
    }
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'build': config.get('build'), 'backend': backend})
    return data
