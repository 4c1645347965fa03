# src/lambdalog/logger.py: Per-category JSON logger.
# A JsonLogger is bound to one category, the provider's shared options and the
# provider's scope-provider cell. It decides whether an event is enabled, builds
# the record, serializes it and hands the text to the sink.

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from .config import LoggingOptions
from .entry import build_entry
from .levels import EventId, LogLevel
from .scope import ScopeGuard, ScopeProvider, ScopeProviderRef, released_guard
from .serializer import JsonSerializer
from .sink import Sink, StreamSink
from .util.errors import InvalidArgumentError

Formatter = Callable[[Any, Optional[BaseException]], str]


class _MessageState:
    """State for the convenience methods: a %-style message and its arguments."""
    __slots__ = ("message", "args")

    def __init__(self, message: str, args: tuple):
        self.message = message
        self.args = args

    def __str__(self) -> str:
        return self.message % self.args if self.args else self.message

def _format_message(state: _MessageState, error: Optional[BaseException]) -> str:
    return str(state)


class JsonLogger:
    def __init__(
        self,
        category: str,
        options: LoggingOptions,
        scope_ref: Optional[ScopeProviderRef] = None,
        sink: Optional[Sink] = None,
        serializer: Optional[JsonSerializer] = None,
    ):
        self._category = category
        self._options = options
        self._scope_ref = scope_ref if scope_ref is not None else ScopeProviderRef()
        self._sink = sink if sink is not None else StreamSink()
        self._serializer = serializer if serializer is not None else JsonSerializer()

    @property
    def category(self) -> str:
        return self._category

    @property
    def options(self) -> LoggingOptions:
        return self._options

    @property
    def scope_provider(self) -> Optional[ScopeProvider]:
        return self._scope_ref.get()

    def is_enabled(self, level: LogLevel) -> bool:
        return self._options.filter is None or self._options.filter(self._category, level)

    def begin_scope(self, value: Any) -> ScopeGuard:
        """Push value as a scope; use the result as a context manager."""
        scope_provider = self._scope_ref.get()
        if scope_provider is None:
            return released_guard()
        return scope_provider.push(value)

    def log(
        self,
        level: LogLevel,
        event_id: Union[EventId, int, None],
        state: Any,
        error: Optional[BaseException],
        formatter: Optional[Formatter],
    ) -> None:
        """
        Log one event.

        Args:
            level: The event's severity.
            event_id: An EventId or a bare integer id.
            state: The caller's state, handed to the formatter.
            error: The exception to attach, if any.
            formatter: Renders (state, error) into the record's text.

        Raises:
            InvalidArgumentError: If formatter is None.
        """
        if formatter is None:
            raise InvalidArgumentError("formatter is required")

        if not self.is_enabled(level):
            return

        text = formatter(state, error)
        entry = build_entry(
            level,
            self._category,
            EventId.coerce(event_id),
            text,
            error,
            self._options,
            self._scope_ref.get(),
        )

        output = self._serializer.serialize(entry)
        if self._options.include_newline:
            output += "\n"
        self._sink(output)

    # --- Convenience methods ---

    def log_message(
        self,
        level: LogLevel,
        message: str,
        *args: Any,
        event_id: Union[EventId, int, None] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.log(level, event_id, _MessageState(message, args), error, _format_message)

    def trace(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.TRACE, message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.DEBUG, message, *args, **kwargs)

    def information(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.INFORMATION, message, *args, **kwargs)

    info = information

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log_message(LogLevel.CRITICAL, message, *args, **kwargs)

    def exception(self, message: str, *args: Any, error: BaseException, **kwargs: Any) -> None:
        """Log at Error level with error attached."""
        self.log_message(LogLevel.ERROR, message, *args, error=error, **kwargs)

    def __repr__(self) -> str:
        return f"JsonLogger(category={self._category!r})"
