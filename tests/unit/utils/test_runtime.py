"""Unit tests for runtime utilities in runtime.py.

Test coverage includes:

1. running_locally() behavior
"""

import pytest

from clickshortener.utils.runtime import running_locally
from clickshortener.utils.constants import APP_ENV_ENV


@pytest.mark.parametrize(
    'app_env, expected',
    [
        ('local', True),
        ('LOCAL', True),
        ('dev', False),
        ('prod', False),
    ],
)
def test_running_locally(monkeypatch, app_env, expected):
    monkeypatch.setenv(APP_ENV_ENV, app_env)
    assert running_locally() is expected


def test_running_locally_by_default(monkeypatch):
    monkeypatch.delenv(APP_ENV_ENV, raising=False)
    assert running_locally() is True
