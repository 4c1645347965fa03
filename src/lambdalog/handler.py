# src/lambdalog/handler.py: Bridge from the standard logging package.
# This module registers the JSON provider as a back end of Python's logging
# pipeline. JsonLoggingHandler routes each logging.LogRecord to the provider's
# logger for the record's name, and setup_logging installs it on the root
# logger from a loaded configuration.

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Optional

from .config import LambdaLogConfig
from .levels import EventId, LogLevel
from .provider import JsonLoggerProvider
from .serializer import JsonSerializer
from .sink import StreamSink


def _format_record(record: logging.LogRecord, error: Optional[BaseException]) -> str:
    return record.getMessage()


class JsonLoggingHandler(logging.Handler):
    """
    A logging handler that emits records through a JsonLoggerProvider.

    The event id is read from ``extra={"event_id": ...}`` and the exception from
    ``exc_info``. Level filtering by the provider's options applies on top of the
    handler's own level.
    """

    def __init__(self, provider: JsonLoggerProvider, level: int = logging.NOTSET):
        super().__init__(level)
        self.provider = provider

    def emit(self, record: logging.LogRecord) -> None:
        try:
            json_logger = self.provider.create_logger(record.name)
            error = record.exc_info[1] if record.exc_info else None
            json_logger.log(
                LogLevel.from_stdlib(record.levelno),
                EventId.coerce(getattr(record, "event_id", None)),
                record,
                error,
                _format_record,
            )
        except Exception:
            self.handleError(record)

    def begin_scope(self, value):
        """Push a scope that applies to records emitted through this handler."""
        return self.provider.begin_scope(value)


def build_provider(config: LambdaLogConfig) -> JsonLoggerProvider:
    """Create a provider from a loaded configuration."""
    return JsonLoggerProvider(
        config.to_options(),
        sink=StreamSink(default=config.output.stream),
        serializer=JsonSerializer(indent=config.output.indent),
    )


def setup_logging(config: Optional[LambdaLogConfig] = None) -> JsonLoggerProvider:
    """
    Configure the root logger to emit JSON records.

    Returns the provider behind the installed handler so callers can push
    scopes or obtain category loggers directly.
    """
    config = config or LambdaLogConfig()
    provider = build_provider(config)

    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'handlers': {
            'json': {
                '()': JsonLoggingHandler,
                'provider': provider,
            },
        },
        'root': {
            'handlers': ['json'],
            'level': config.stdlib_level(),
        },
    })
    return provider
