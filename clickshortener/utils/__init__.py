from clickshortener.utils.config import app_env, app_name, app_prefix, load_config
from clickshortener.utils.helpers import utc_now, as_utc, get_short_url, require_environment
from clickshortener.utils.shortener import random_shortcode, sequential_shortcode
from clickshortener.utils.logging import initialize_logging
from clickshortener.utils.qr import encode_as_image


__all__ = [
    'random_shortcode',
    'sequential_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'utc_now',
    'as_utc',
    'get_short_url',
    'require_environment',
    'initialize_logging',
    'encode_as_image',
]
