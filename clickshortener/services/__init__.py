from clickshortener.services.code_generator import CodeGenerator
from clickshortener.services.click_recorder import ClickRecorder
from clickshortener.services.analytics import aggregate, classify_browser
from clickshortener.services.url_service import UrlService


__all__ = [
    'CodeGenerator',
    'ClickRecorder',
    'aggregate',
    'classify_browser',
    'UrlService',
]
