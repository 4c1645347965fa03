# src/lambdalog/provider.py: Logger factory and cache.
# The provider hands out exactly one JsonLogger per category name and owns the
# scope-provider cell those loggers share. Replacing the scope provider swaps
# the cell's content, so loggers created earlier observe the change on their
# next log call.

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from .config import LoggingOptions
from .logger import JsonLogger
from .scope import (
    ContextScopeProvider,
    NullScopeProvider,
    ScopeGuard,
    ScopeProvider,
    ScopeProviderRef,
    released_guard,
)
from .serializer import JsonSerializer
from .sink import Sink, StreamSink
from .util.errors import InvalidArgumentError
from .util.log import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORY_NAME = "Default"


class JsonLoggerProvider:
    """
    Creates and caches JsonLogger instances.

    Args:
        options: Shared by every logger this provider creates.
        sink: Receives each serialized record. Defaults to stdout.
        serializer: Renders records. Defaults to compact JSON.

    Raises:
        InvalidArgumentError: If options is None.
    """

    def __init__(
        self,
        options: LoggingOptions,
        sink: Optional[Sink] = None,
        serializer: Optional[JsonSerializer] = None,
    ):
        if options is None:
            raise InvalidArgumentError("options is required")

        self._options = options
        self._sink = sink if sink is not None else StreamSink()
        self._serializer = serializer if serializer is not None else JsonSerializer()
        self._loggers: Dict[str, JsonLogger] = {}
        self._lock = threading.Lock()
        self._scope_ref = ScopeProviderRef(
            ContextScopeProvider() if options.include_scopes else NullScopeProvider.INSTANCE
        )

    @property
    def options(self) -> LoggingOptions:
        return self._options

    @property
    def scope_provider(self) -> Optional[ScopeProvider]:
        return self._scope_ref.get()

    def get_or_create_logger(self, category_name: Optional[str] = None) -> JsonLogger:
        """Return the logger for category_name, creating it on first use."""
        name = category_name or DEFAULT_CATEGORY_NAME

        with self._lock:
            existing = self._loggers.get(name)
            if existing is not None:
                return existing
            created = JsonLogger(name, self._options, self._scope_ref, self._sink, self._serializer)
            self._loggers[name] = created

        logger.debug(f"Created logger for category '{name}'.")
        return created

    create_logger = get_or_create_logger

    def set_scope_provider(self, scope_provider: Optional[ScopeProvider]) -> None:
        """Make scope_provider the active provider for every logger, cached or not."""
        self._scope_ref.set(scope_provider)
        with self._lock:
            count = len(self._loggers)
        logger.debug(f"Scope provider replaced with {type(scope_provider).__name__} for {count} cached loggers.")

    def begin_scope(self, value: Any) -> ScopeGuard:
        """Push value on the active scope provider."""
        scope_provider = self._scope_ref.get()
        if scope_provider is None:
            return released_guard()
        return scope_provider.push(value)

    def __contains__(self, category_name: str) -> bool:
        with self._lock:
            return (category_name or DEFAULT_CATEGORY_NAME) in self._loggers

    def categories(self) -> List[str]:
        """The category names cached so far, in creation order."""
        with self._lock:
            return list(self._loggers)
