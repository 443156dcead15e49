"""In-process implementation of UrlRecordBaseDAO

Records live in a dict guarded by a single lock, so every operation (and in
particular the click increment-and-append) is atomic with respect to other
threads. Intended for local development and tests; the state is lost on
restart and is not shared between processes.

Example:
    >>> dao = UrlRecordMemoryDAO()
    >>> dao.insert(record).find_by_code(record.code) == record
    True
"""

import threading
from dataclasses import replace

from beartype import beartype

from clickshortener.models import ClickEventModel, UrlRecordModel
from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.exceptions import UrlRecordAlreadyExistsError, UrlRecordNotFoundError


class UrlRecordMemoryDAO(UrlRecordBaseDAO):
    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[str, UrlRecordModel] = {}
        self._counter = 0

    def __repr__(self) -> str:
        return f'<{type(self).__name__}>'

    def __len__(self) -> int:
        return len(self._records)

    def _get_or_raise(self, code: str) -> UrlRecordModel:
        try:
            return self._records[code]
        except KeyError:
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.") from None

    @beartype
    def find_by_code(self, code: str, **kwargs) -> UrlRecordModel:
        with self._lock:
            return self._get_or_raise(code)

    @beartype
    def find_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecordModel]:
        with self._lock:
            records = [replace(record, click_log=()) for record in self._records.values() if record.owner_id == owner_id]
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    @beartype
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordMemoryDAO':
        with self._lock:
            if record.code in self._records:
                raise UrlRecordAlreadyExistsError(f"URL record with code '{record.code}' already exists.")
            self._records[record.code] = record
        return self

    @beartype
    def record_click(self, code: str, event: ClickEventModel, **kwargs) -> UrlRecordModel:
        with self._lock:
            record = self._get_or_raise(code)
            updated = replace(record, click_count=record.click_count + 1, click_log=record.click_log + (event,))
            self._records[code] = updated
        return updated

    @beartype
    def delete(self, code: str, **kwargs) -> 'UrlRecordMemoryDAO':
        with self._lock:
            self._get_or_raise(code)
            del self._records[code]
        return self

    @beartype
    def mark_expired(self, code: str, **kwargs) -> 'UrlRecordMemoryDAO':
        with self._lock:
            record = self._get_or_raise(code)
            self._records[code] = replace(record, expired=True)
        return self

    def count(self, increment: bool = False, **kwargs) -> int:
        with self._lock:
            if increment:
                self._counter += 1
            return self._counter
