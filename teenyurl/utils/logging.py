"""JSON logging for the lambda handlers

Every handler package calls `initialize_logging()` from its `__init__.py`, so
logging is configured before the handler module creates its logger. Records
are written to stdout one JSON object per line, which CloudWatch indexes as-is:

{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "teenyurl.registry.link_registry",
    "message": "Created short link.",
    "app": "teenyurl",
    "env": "prod",
    "shortcode": "aB3x"
}

Fields passed through `extra={...}` become top-level keys.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from teenyurl.constants import ENV


# Attributes every LogRecord carries; anything else on a record came from `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))) | {'message', 'asctime'}

# Chatty third-party loggers capped at WARNING
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, its extras and fixed deployment fields as JSON"""

    def __init__(self, static_fields: dict[str, str] | None = None):
        super().__init__()
        self.static_fields = {k: v for k, v in (static_fields or {}).items() if v}

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.static_fields,
        }
        log.update((k, v) for k, v in vars(record).items() if k not in _RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    static_fields = {
        'app': os.getenv(ENV.App.APP_NAME),
        'env': os.getenv(ENV.App.APP_ENV),
    }
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {'()': JsonFormatter, 'static_fields': static_fields},
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
