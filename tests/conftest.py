from datetime import datetime, timedelta, UTC

import pytest

from clickshortener.models import ClickEventModel, UrlRecordModel


class FakeClock:
    """Callable clock returning a controllable UTC time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(now) -> FakeClock:
    return FakeClock(now)


@pytest.fixture
def make_record(now):
    """Build UrlRecordModel instances with sensible defaults."""

    def _make_record(code: str = 'abc123', **overrides) -> UrlRecordModel:
        fields = {
            'code': code,
            'long_url': 'https://example.com/test',
            'short_url': f'https://sho.rt/{code}',
            'owner_id': 'user-1',
            'created_at': now,
        }
        fields.update(overrides)
        return UrlRecordModel(**fields)

    return _make_record


@pytest.fixture
def make_click(now):
    def _make_click(user_agent: str | None = 'Mozilla/5.0 Chrome/126.0', referer: str | None = None, **overrides) -> ClickEventModel:
        fields = {'timestamp': now, 'source_ip': '198.51.100.7', 'user_agent': user_agent, 'referer': referer}
        fields.update(overrides)
        return ClickEventModel(**fields)

    return _make_click
