"""
Structured logging configuration for DealerDesk.

JSON lines in production, coloured single-line output in development.
Request-scoped fields (dealer id, identity) are attached with LogContext.
They live in a ContextVar, so concurrent requests on different threads
never see each other's fields. Records emitted inside a Flask request
also carry its method and path.
"""

import os
import sys
import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from flask import has_request_context, request


_log_fields: ContextVar[dict] = ContextVar('dealerdesk_log_fields', default={})


def context_fields() -> dict:
    """Fields set by the enclosing LogContext blocks in this thread/task."""
    return dict(_log_fields.get())


def _request_fields() -> dict:
    if not has_request_context():
        return {}
    return {'method': request.method, 'path': request.path}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for gunicorn / log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'source': f'{record.module}:{record.lineno}',
        }
        entry.update(_request_fields())
        entry.update(_log_fields.get())
        entry.update(getattr(record, 'extra', None) or {})

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output. Dealer id, when known, is shown before the message."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        reset = self.RESET if color else ''
        extra = {**_log_fields.get(), **(getattr(record, 'extra', None) or {})}
        dealer = extra.pop('dealer_id', None)

        line = (f'{color}[{datetime.fromtimestamp(record.created):%H:%M:%S}] '
                f'{record.levelname:8}{reset} {record.name:32} ')
        if dealer:
            line += f'[{str(dealer)[:8]}] '
        line += record.getMessage()
        if extra:
            line += ' | ' + ' '.join(f'{k}={v}' for k, v in extra.items())
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = 'INFO',
    json_format: Optional[bool] = None,
    logger_name: str = 'dealerdesk'
) -> logging.Logger:
    """Configure and return the application logger.

    Safe to call more than once (tests build many apps): existing handlers
    on the logger are replaced, not stacked.

    Args:
        level: Log level name
        json_format: Force JSON on/off. None picks JSON under gunicorn or PRODUCTION=true.
        logger_name: Root of the application logger tree.
    """
    if json_format is None:
        json_format = os.environ.get('PRODUCTION', '').lower() == 'true' or \
                      'gunicorn' in os.environ.get('SERVER_SOFTWARE', '')

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else DevelopmentFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = 'dealerdesk') -> logging.Logger:
    """Get a logger instance, e.g. get_logger('dealerdesk.customers')."""
    return logging.getLogger(name)


class LogContext:
    """Attach fields to every record logged inside the block.

        with LogContext(logger, dealer_id=dealer['id']):
            ...

    Nested blocks merge their fields. The fields are read by the formatters
    at emit time and are local to the current thread or task.
    The logger argument is kept for call-site readability only.
    """

    def __init__(self, logger: logging.Logger, **fields):
        self.logger = logger
        self.fields = fields
        self._token = None

    def __enter__(self):
        self._token = _log_fields.set({**_log_fields.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_fields.reset(self._token)
        self._token = None
        return False


def log_with_context(logger: logging.Logger, level: int, message: str, **context):
    """Emit one record with extra fields, without a LogContext block."""
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, '(unknown file)', 0, message, (), None)
    record.extra = context
    logger.handle(record)
