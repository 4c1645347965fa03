# src/lambdalog/__init__.py
"""Structured JSON logging with ambient scopes."""

__version__ = "0.1.0"

from .config import LambdaLogConfig, LoggingOptions, load_config
from .entry import ErrorInfo, LogEntry, build_entry
from .handler import JsonLoggingHandler, setup_logging
from .levels import EventId, LogLevel
from .logger import JsonLogger
from .provider import DEFAULT_CATEGORY_NAME, JsonLoggerProvider
from .scope import (
    ContextScopeProvider,
    NamedPair,
    NamedPairs,
    NullScopeProvider,
    Opaque,
    ScopeGuard,
    ScopeProvider,
)
from .serializer import JsonSerializer, serialize
from .sink import StreamSink
from .util.errors import ConfigError, InvalidArgumentError, LambdaLogError, SerializationError

__all__ = [
    "ConfigError",
    "ContextScopeProvider",
    "DEFAULT_CATEGORY_NAME",
    "ErrorInfo",
    "EventId",
    "InvalidArgumentError",
    "JsonLogger",
    "JsonLoggerProvider",
    "JsonLoggingHandler",
    "JsonSerializer",
    "LambdaLogConfig",
    "LambdaLogError",
    "LogEntry",
    "LogLevel",
    "LoggingOptions",
    "NamedPair",
    "NamedPairs",
    "NullScopeProvider",
    "Opaque",
    "ScopeGuard",
    "ScopeProvider",
    "SerializationError",
    "StreamSink",
    "build_entry",
    "load_config",
    "serialize",
    "setup_logging",
]
