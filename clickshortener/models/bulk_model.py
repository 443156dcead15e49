from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from clickshortener.models.url_record_model import UrlRecordModel


@dataclass(frozen=True)
class BulkItem:
    """One URL to shorten in a bulk creation request."""
    long_url: str
    custom_alias: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class BulkOutcome:
    """Tagged result of creating one BulkItem.

    Exactly one of `record` (success=True) or `error` (success=False) is set.

    Attributes:
        success (bool):
            Whether the item was shortened.
        original_url (str):
            The item's long URL, as submitted.
        short_url (Optional[str]):
            The new short URL on success.
        record (Optional[UrlRecordModel]):
            The created record on success.
        error (Optional[str]):
            Human-readable failure message.
        error_code (Optional[str]):
            Machine-readable failure code (see clickshortener.exceptions).
    """
    success: bool
    original_url: str
    short_url: Optional[str] = None
    record: Optional[UrlRecordModel] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, original_url: str, record: UrlRecordModel) -> 'BulkOutcome':
        return cls(success=True, original_url=original_url, short_url=record.short_url, record=record)

    @classmethod
    def failed(cls, original_url: str, error: Exception, error_code: str) -> 'BulkOutcome':
        return cls(success=False, original_url=original_url, error=str(error), error_code=error_code)
