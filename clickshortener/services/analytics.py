"""Click analytics aggregation

Functions:
    classify_browser(user_agent) -> str
        Map a User-Agent header onto a browser label.
    aggregate(record, now) -> StatsModel
        Compute histograms and rates over a record's click log.

Example:
    >>> stats = aggregate(record, now=datetime.now(UTC))
    >>> stats.browser_stats
    {'Chrome': 2, 'Firefox': 1}
    >>> stats.clicks_by_date
    {'2025-10-14': 2, '2025-10-15': 1}
"""

import math
from collections import Counter
from datetime import datetime, UTC

from clickshortener.models import StatsModel, UrlRecordModel
from clickshortener.utils.constants import ONE_DAY_SECONDS


# Checked in order, first substring match wins
BROWSERS = ('Chrome', 'Firefox', 'Safari', 'Edge')
OTHER_BROWSER = 'Other'
DIRECT_REFERRER = 'Direct'


def classify_browser(user_agent: str | None) -> str:
    for browser in BROWSERS:
        if user_agent and browser in user_agent:
            return browser
    return OTHER_BROWSER


def aggregate(record: UrlRecordModel, now: datetime) -> StatsModel:
    """Compute click statistics for one record

    Args:
        record (UrlRecordModel):
            The record whose click log is aggregated. Expired records are
            aggregated like any other.
        now (datetime):
            Current UTC time; end of the averaging window.

    Returns:
        StatsModel:
            - total_clicks: the record's click counter
            - browser_stats / referrer_stats: label -> clicks
            - clicks_by_date: 'YYYY-MM-DD' (UTC) -> clicks, ascending by date
            - last_clicked: timestamp of the last log entry
            - average_clicks_per_day: clicks / whole days since the first
              click (at least 1 day), rounded to 2 decimals
    """
    log = record.click_log
    if not log:
        return StatsModel(total_clicks=record.click_count)

    browsers = Counter(classify_browser(click.user_agent) for click in log)
    referrers = Counter(click.referer or DIRECT_REFERRER for click in log)
    dates = Counter(click.timestamp.astimezone(UTC).date().isoformat() for click in log)

    # The window starts at the first click, not at creation
    elapsed = (now - log[0].timestamp).total_seconds()
    days = max(1, math.ceil(elapsed / ONE_DAY_SECONDS))

    return StatsModel(
        total_clicks=record.click_count,
        browser_stats=dict(browsers),
        referrer_stats=dict(referrers),
        clicks_by_date=dict(sorted(dates.items())),
        last_clicked=log[-1].timestamp,
        average_clicks_per_day=round(record.click_count / days, 2),
    )
