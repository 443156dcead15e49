from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StatsModel:
    """Aggregated click analytics of one short URL.

    Attributes:
        total_clicks (int):
            The record's click counter.
        browser_stats (dict[str, int]):
            Clicks per browser label (Chrome, Firefox, Safari, Edge, Other).
        referrer_stats (dict[str, int]):
            Clicks per referer; visits without a referer count as 'Direct'.
        clicks_by_date (dict[str, int]):
            Clicks per UTC date ('YYYY-MM-DD'), in ascending date order.
        last_clicked (Optional[datetime]):
            Timestamp of the most recent click, None if never clicked.
        average_clicks_per_day (float):
            Clicks per day since the first click, rounded to 2 decimals.
    """
    total_clicks: int = 0
    browser_stats: dict[str, int] = field(default_factory=dict)
    referrer_stats: dict[str, int] = field(default_factory=dict)
    clicks_by_date: dict[str, int] = field(default_factory=dict)
    last_clicked: Optional[datetime] = None
    average_clicks_per_day: float = 0
