from clickshortener.dao.redis.redis_key_schema import RedisKeySchema
from clickshortener.dao.redis.mixins import RedisClientMixin
from clickshortener.dao.redis.url_record_redis_dao import UrlRecordRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'UrlRecordRedisDAO',
]
