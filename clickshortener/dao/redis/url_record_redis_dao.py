"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO.

Data layout (all keys namespaced by the DAO prefix):
    links:<code>            HASH    record fields (see _dump_record)
    links:<code>:clicks     LIST    JSON encoded click events, oldest first
    users:<owner>:links     ZSET    owner's codes scored by creation timestamp
    links:counter           STRING  global allocation counter

Responsibilities:
    - Insert records atomically, rejecting duplicate codes;
    - Record clicks as a single atomic increment-and-append;
    - Retrieve records by code or by owner;
    - Delete records and persist the expiration flag;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecordModel in a Redis datastore.

Example:
    >>> dao = UrlRecordRedisDAO(prefix="app:dev")
    >>> dao.insert(record)
    <UrlRecordRedisDAO>
    >>> dao.record_click('abc123', ClickEventModel(timestamp=now)).click_count
    1
"""

import json
from datetime import datetime
from typing import Any

from beartype import beartype

from clickshortener.models import ClickEventModel, UrlRecordModel
from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.redis.mixins import RedisClientMixin
from clickshortener.dao.redis.helpers import handle_redis_connection_error
from clickshortener.dao.redis import scripts
from clickshortener.dao.exceptions import UrlRecordAlreadyExistsError, UrlRecordNotFoundError


def _dump_datetime(value: datetime | None) -> str:
    return '' if value is None else value.isoformat()


def _load_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _dump_event(event: ClickEventModel) -> str:
    return json.dumps(
        {
            'timestamp': event.timestamp.isoformat(),
            'source_ip': event.source_ip,
            'user_agent': event.user_agent,
            'referer': event.referer,
        }
    )


def _load_event(raw: str) -> ClickEventModel:
    data = json.loads(raw)
    return ClickEventModel(
        timestamp=datetime.fromisoformat(data['timestamp']),
        source_ip=data.get('source_ip'),
        user_agent=data.get('user_agent'),
        referer=data.get('referer'),
    )


def _dump_record(record: UrlRecordModel) -> dict[str, str]:
    return {
        'code': record.code,
        'long_url': record.long_url,
        'short_url': record.short_url,
        'owner_id': record.owner_id,
        'created_at': _dump_datetime(record.created_at),
        'expires_at': _dump_datetime(record.expires_at),
        'click_count': str(record.click_count),
        'expired': '1' if record.expired else '0',
        'qr_code': record.qr_code or '',
    }


def _load_record(fields: dict[str, str] | list[str], clicks: list[str]) -> UrlRecordModel:
    # HGETALL answers a dict through redis-py but a flat [field, value, ...] list from Lua
    if isinstance(fields, list):
        fields = dict(zip(fields[::2], fields[1::2]))

    return UrlRecordModel(
        code=fields['code'],
        long_url=fields['long_url'],
        short_url=fields['short_url'],
        owner_id=fields['owner_id'],
        created_at=_load_datetime(fields['created_at']),
        expires_at=_load_datetime(fields.get('expires_at')),
        click_count=int(fields.get('click_count', 0)),
        click_log=tuple(_load_event(raw) for raw in clicks),
        expired=fields.get('expired') == '1',
        qr_code=fields.get('qr_code') or None,
    )


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL records

    This class implements the UrlRecordBaseDAO interface using Redis as a data store.
    The client must be created with `decode_responses=True` (the default).

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> dao = UrlRecordRedisDAO(redis_host="localhost", prefix="shortener:test")
        >>> dao.insert(record)
        <UrlRecordRedisDAO>
        >>> dao.find_by_code("abc123").long_url
        'https://example.com'
    """

    def __repr__(self) -> str:
        return f'<{type(self).__name__}>'

    @handle_redis_connection_error
    @beartype
    def find_by_code(self, code: str, **kwargs) -> UrlRecordModel:
        """Retrieve a stored URL record by code

        The record hash and its click log are read in one MULTI/EXEC
        transaction, so `click_count` always matches the log length.

        Raises:
            UrlRecordNotFoundError:
                If the record does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.find_by_code('abc123')
            UrlRecordModel(code='abc123', long_url='https://example.com', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(self.keys.link_key(code))
            pipe.lrange(self.keys.link_clicks_key(code), 0, -1)
            fields, clicks = pipe.execute()

        if not fields:
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")

        return _load_record(fields, clicks)

    @handle_redis_connection_error
    @beartype
    def find_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecordModel]:
        """Retrieve all records of an owner, newest first

        Only the record hashes are read: listed records carry an empty
        `click_log`, while `click_count` is the stored counter. Codes deleted
        between reading the owner index and reading the records are skipped.
        """
        codes = self.redis.zrevrange(self.keys.owner_links_key(owner_id), 0, -1)
        if not codes:
            return []

        with self.redis.pipeline(transaction=True) as pipe:
            for code in codes:
                pipe.hgetall(self.keys.link_key(code))
            results = pipe.execute()

        return [_load_record(fields, []) for fields in results if fields]

    @handle_redis_connection_error
    @beartype
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordRedisDAO':
        """Insert a URL record into Redis

        The existence check, the hash write and the owner index update run
        inside one Lua script, so two concurrent inserts of the same code
        can never both succeed and a duplicate never overwrites a record.

        Returns:
            UrlRecordRedisDAO: self (for method chaining)

        Raises:
            UrlRecordAlreadyExistsError:
                If a record with the same code already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(record.code)
        owner_links_key = self.keys.owner_links_key(record.owner_id)

        field_values: list[Any] = []
        for field, value in _dump_record(record).items():
            field_values.extend((field, value))

        # fmt: off
        inserted = self.redis.eval(scripts.INSERT_RECORD, 2,
                                   link_key, owner_links_key,
                                   record.code, record.created_at.timestamp(), *field_values)
        # fmt: on
        if not inserted:
            raise UrlRecordAlreadyExistsError(f"URL record with code '{record.code}' already exists.")

        if record.click_log:
            self.redis.rpush(self.keys.link_clicks_key(record.code), *(_dump_event(event) for event in record.click_log))
        return self

    @handle_redis_connection_error
    @beartype
    def record_click(self, code: str, event: ClickEventModel, **kwargs) -> UrlRecordModel:
        """Increment the click counter and append a click event

        NOTE: HINCRBY and RPUSH run in the same Lua script. Issuing them as
              separate commands (or as read-then-write from the client) would
              let concurrent clicks interleave:

              (request 1): HGET links:<code> click_count       => 5
              (request 2): HGET links:<code> click_count       => 5
              (request 1): HSET links:<code> click_count 6
              (request 2): HSET links:<code> click_count 6     => one click lost

        Returns:
            UrlRecordModel: the record as it is right after this click.

        Raises:
            UrlRecordNotFoundError:
                If the record does not exist (e.g. deleted concurrently).
            DataStoreError:
                If Redis connectivity issues occur.
        """
        # fmt: off
        result = self.redis.eval(scripts.RECORD_CLICK, 2,
                                 self.keys.link_key(code), self.keys.link_clicks_key(code),
                                 _dump_event(event))
        # fmt: on
        if result is None:
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")

        fields, clicks = result
        return _load_record(fields, clicks)

    @handle_redis_connection_error
    @beartype
    def delete(self, code: str, **kwargs) -> 'UrlRecordRedisDAO':
        link_key = self.keys.link_key(code)
        owner_id = self.redis.hget(link_key, 'owner_id')
        if owner_id is None:
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(link_key, self.keys.link_clicks_key(code))
            pipe.zrem(self.keys.owner_links_key(owner_id), code)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def mark_expired(self, code: str, **kwargs) -> 'UrlRecordRedisDAO':
        if not self.redis.eval(scripts.MARK_EXPIRED, 1, self.keys.link_key(code)):
            raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")
        return self

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global allocation counter

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        return int(self.redis.get(self.keys.counter_key()) or 0)
