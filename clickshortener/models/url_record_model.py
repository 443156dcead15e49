from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ClickEventModel:
    """Represent a single recorded visit to a short URL.

    Attributes:
        timestamp (datetime):
            UTC time of the visit.
        source_ip (Optional[str]):
            Client IP address as seen by the HTTP layer.
        user_agent (Optional[str]):
            Raw `User-Agent` request header.
        referer (Optional[str]):
            Raw `Referer` request header. Absent for direct visits.
    """
    timestamp: datetime
    source_ip: Optional[str] = None
    user_agent: Optional[str] = None
    referer: Optional[str] = None


@dataclass(frozen=True)
class UrlRecordModel:
    """Represent a shortened URL mapping and its click analytics.

    Attributes:
        code (str):
            The unique short identifier of the URL.
        long_url (str):
            The original URL that the short code redirects to.
        short_url (str):
            Display form of the short URL (`<base url>/<code>`).
        owner_id (str):
            Identifier of the principal who created the record.
        created_at (datetime):
            UTC creation time.
        expires_at (Optional[datetime]):
            UTC deadline after which the record is no longer resolvable.
            None if the record never expires.
        click_count (int):
            Number of recorded visits. Always equals `len(click_log)`.
        click_log (tuple[ClickEventModel, ...]):
            Recorded visits in chronological (append) order.
        expired (bool):
            Persisted expiration flag. Once set, it is never cleared.
        qr_code (Optional[str]):
            QR image of the short URL as a data URL.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> record = UrlRecordModel(
        ...     code='abc123',
        ...     long_url='https://example.com/article/123',
        ...     short_url='https://sho.rt/abc123',
        ...     owner_id='user-1',
        ...     created_at=datetime.now(UTC),
        ...     expires_at=datetime.now(UTC) + timedelta(days=1),
        ... )
        >>> record.click_count
        0
        >>> record.is_expired(datetime.now(UTC))
        False
    """
    code: str
    long_url: str
    short_url: str
    owner_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    click_count: int = 0
    click_log: tuple[ClickEventModel, ...] = ()
    expired: bool = False
    qr_code: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expired or (self.expires_at is not None and now > self.expires_at)


@dataclass(frozen=True)
class UrlSummaryModel:
    """Listing view of a UrlRecordModel (no click log, no QR payload)."""
    code: str
    long_url: str
    short_url: str
    click_count: int
    created_at: datetime
    expires_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: UrlRecordModel) -> 'UrlSummaryModel':
        return cls(
            code=record.code,
            long_url=record.long_url,
            short_url=record.short_url,
            click_count=record.click_count,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )
