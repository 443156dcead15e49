"""In-process resolution cache: short code -> UrlRecordModel

The cache fronts the record store on the redirect path. It is shared by all
request threads, so it is split into independent shards, each an LRU map with
its own lock. A code always maps to the same shard (xxhash of the code), and
operations on codes in different shards never wait on each other.

Rules:
    - `get` never returns an expired record: an entry found expired against
      the injected clock is evicted and reported as a miss.
    - `put` is monotonic per record generation: a record with a lower click
      count than the cached one is stale (a slower concurrent writer) and is
      dropped. A record with a different `created_at` is a new generation of
      the code (deleted and created again) and always replaces the cached one.
    - `refresh` only updates a code that is still cached with the same
      generation, so a click confirmed just before a delete can't bring the
      deleted record back.
    - Fills from a store read take a `lease` first. Any invalidation in the
      shard after the lease was taken rejects the fill.
    - Memory is bounded by `capacity` (split evenly across shards, LRU eviction).

Example:
    >>> cache = ResolutionCache(capacity=1000)
    >>> lease = cache.lease(code)
    >>> cache.put(dao.find_by_code(code), lease=lease)
    True
    >>> cache.invalidate(code)
    True
"""

import logging
import threading
from datetime import datetime
from collections.abc import Callable

import xxhash
from cachetools import LRUCache

from clickshortener.models import UrlRecordModel
from clickshortener.utils.helpers import utc_now
from clickshortener.utils.constants import DEFAULT_CACHE_CAPACITY, DEFAULT_CACHE_SHARDS


logger = logging.getLogger(__name__)


class _Shard:
    __slots__ = ('lock', 'entries', 'epoch')

    def __init__(self, capacity: int):
        self.lock = threading.Lock()
        self.entries: LRUCache = LRUCache(maxsize=capacity)
        self.epoch = 0  # bumped by every invalidation


class ResolutionCache:
    """Sharded, expiration-aware LRU cache of URL records.

    Args:
        capacity (int):
            Maximum number of cached records across all shards.
        shards (int):
            Number of independently locked shards.
        clock (Callable[[], datetime]):
            Source of the current UTC time used for expiration checks.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        shards: int = DEFAULT_CACHE_SHARDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if capacity <= 0:
            raise ValueError(f'Cache capacity must be a positive integer (given value: {capacity}).')
        if shards <= 0:
            raise ValueError(f'Cache shards must be a positive integer (given value: {shards}).')

        shards = min(shards, capacity)
        per_shard = -(-capacity // shards)  # ceil division
        self._shards = [_Shard(per_shard) for _ in range(shards)]
        self.clock = clock

    def _shard(self, code: str) -> _Shard:
        return self._shards[xxhash.xxh64_intdigest(code) % len(self._shards)]

    def get(self, code: str) -> UrlRecordModel | None:
        shard = self._shard(code)
        with shard.lock:
            record = shard.entries.get(code)
            if record is None or not record.is_expired(self.clock()):
                return record
            del shard.entries[code]

        logger.debug('Evicted expired record from cache.', extra={'shortcode': code, 'event': 'CACHE_EXPIRED'})
        return None

    def lease(self, code: str) -> int:
        """Take a lease before reading `code` from the store

        Pass the lease to `put`. The fill is rejected if the code's shard saw
        an invalidation in between (e.g. a delete raced the store read).
        Unrelated invalidations in the same shard only cost a missed fill.
        """
        shard = self._shard(code)
        with shard.lock:
            return shard.epoch

    def put(self, record: UrlRecordModel, lease: int | None = None) -> bool:
        """Cache a store-confirmed record

        Args:
            record (UrlRecordModel):
                Record as confirmed by the store.
            lease (int | None):
                Value of `lease(record.code)` taken before the store call.

        Returns:
            bool: False if the lease went stale or a fresher record of the
                  same generation (higher click count) is already cached.
        """
        shard = self._shard(record.code)
        with shard.lock:
            if lease is not None and lease != shard.epoch:
                return False
            cached = shard.entries.get(record.code)
            if cached is not None and cached.created_at == record.created_at and cached.click_count > record.click_count:
                return False
            shard.entries[record.code] = record
            return True

    def refresh(self, record: UrlRecordModel) -> bool:
        """Replace a cached record with a fresher state of the same generation

        Never inserts: a code that isn't cached (or was invalidated) stays out.

        Returns:
            bool: True if the cached record was replaced.
        """
        shard = self._shard(record.code)
        with shard.lock:
            cached = shard.entries.get(record.code)
            if cached is None or cached.created_at != record.created_at or cached.click_count > record.click_count:
                return False
            shard.entries[record.code] = record
            return True

    def invalidate(self, code: str) -> bool:
        shard = self._shard(code)
        with shard.lock:
            shard.epoch += 1
            return shard.entries.pop(code, None) is not None

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.epoch += 1
                shard.entries.clear()

    def __contains__(self, code: str) -> bool:
        shard = self._shard(code)
        with shard.lock:
            return code in shard.entries

    def __len__(self) -> int:
        return sum(len(shard.entries) for shard in self._shards)
