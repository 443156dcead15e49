"""Wire a UrlService from configuration

The HTTP layer builds one service per process at startup:

    >>> from clickshortener.utils import initialize_logging
    >>> from clickshortener.factory import create_url_service
    >>> initialize_logging()
    >>> service = create_url_service()

`config` has the shape returned by `clickshortener.utils.config.load_config()`:

    {
        'active_backend': 'redis',
        'redis': {'host': 'localhost', 'port': 6379, 'db': 0},
        'service': {'base_url': 'https://sho.rt', 'shortcode_length': 8, ...}
    }
"""

import logging

from clickshortener.cache import ResolutionCache
from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.memory import UrlRecordMemoryDAO
from clickshortener.dao.redis import UrlRecordRedisDAO
from clickshortener.services import CodeGenerator, UrlService
from clickshortener.utils.config import app_prefix, load_config
from clickshortener.utils.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_CACHE_SHARDS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SHORTCODE_LENGTH,
    SHORTCODE_STRATEGY_RANDOM,
)


logger = logging.getLogger(__name__)


def create_dao(config: dict) -> UrlRecordBaseDAO:
    backend = config['active_backend']
    if backend == 'redis':
        redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}
        return UrlRecordRedisDAO(**redis_config, prefix=app_prefix())
    if backend == 'memory':
        return UrlRecordMemoryDAO()
    raise ValueError(f'Unknown record store backend: {backend!r}.')


def create_url_service(config: dict | None = None) -> UrlService:
    if config is None:
        config = load_config()
    settings = config.get('service', {})

    dao = create_dao(config)
    cache = ResolutionCache(
        capacity=int(settings.get('cache_capacity', DEFAULT_CACHE_CAPACITY)),
        shards=int(settings.get('cache_shards', DEFAULT_CACHE_SHARDS)),
    )
    generator = CodeGenerator(
        dao,
        length=int(settings.get('shortcode_length', DEFAULT_SHORTCODE_LENGTH)),
        strategy=settings.get('shortcode_strategy', SHORTCODE_STRATEGY_RANDOM),
        salt=settings.get('shortcode_salt'),
    )

    logger.info(
        'URL service initialized.',
        extra={'backend': config['active_backend'], 'strategy': generator.strategy},
    )
    return UrlService(
        dao=dao,
        cache=cache,
        generator=generator,
        base_url=settings.get('base_url', DEFAULT_BASE_URL),
        max_retries=int(settings.get('max_retries', DEFAULT_MAX_RETRIES)),
    )
