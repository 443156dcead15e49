"""Structured JSON logging for the shortener

Call `initialize_logging()` once from the HTTP layer's entrypoint, before the
service is built. Every line written to stdout is one JSON object; whatever a
caller passes through `extra=` becomes a top-level key:

    >>> logger.info('Short URL created.', extra={'shortcode': 'abc123', 'event': 'URL_CREATED'})
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "clickshortener.services.url_service", "message": "Short URL created.",
     "shortcode": "abc123", "event": "URL_CREATED"}

Values json can't encode (datetimes, exceptions, ...) are written with str().
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from clickshortener.utils.constants import LOG_LEVEL_ENV


# Attributes every LogRecord carries; anything else on a record came from `extra`
RESERVED_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'taskName'}

# AWS SDK and HTTP client loggers are chatty at INFO/DEBUG
NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _timestamp(created: float) -> str:
    moment = datetime.fromtimestamp(created, tz=UTC)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, its `extra` fields and any traceback as one JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': _timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update((key, value) for key, value in vars(record).items() if key not in RESERVED_RECORD_ATTRS)

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            entry['stack'] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Send JSON lines to stdout at `level`, or LOG_LEVEL (INFO when unset)

    Loggers of the AWS SDK and urllib3 are held at WARNING whatever the level.
    """
    level = (level or os.getenv(LOG_LEVEL_ENV) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in NOISY_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
