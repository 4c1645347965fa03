# src/lambdalog/entry.py: Record assembly.
# This module builds the ordered record for a single log event. It merges the
# active scopes with the event's own fields according to the configured field
# set. The record holds PascalCase field names; the serializer applies the
# external naming policy.

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, List, Optional

from .config import LoggingOptions
from .levels import EventId, LogLevel
from .scope import NamedPair, NamedPairs, Opaque, ScopeProvider, ScopeValue

LOG_LEVEL_FIELD = "LogLevel"
SCOPE_FIELD = "Scope"
CATEGORY_FIELD = "Category"
EVENT_ID_FIELD = "EventId"
TEXT_FIELD = "Text"
EXCEPTION_FIELD = "Exception"


@dataclass(frozen=True)
class ErrorInfo:
    """The exception field: the error message and its stack trace."""
    error: Optional[str]
    stack_trace: Optional[str]

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorInfo":
        # An exception that was never raised has no traceback.
        stack_trace = None
        if error.__traceback__ is not None:
            stack_trace = "".join(traceback.format_tb(error.__traceback__))
        return cls(error=str(error), stack_trace=stack_trace)


class LogEntry(dict):
    """
    The fields of one log event, in insertion order.

    Unnamed scope values are gathered into a list stored under the Scope field,
    which is only created when the first one arrives.
    """

    def __init__(self):
        super().__init__()
        self._scope_items: List[Any] = []

    def add_scope(self, value: Any) -> None:
        """Append an unnamed scope value; None values are dropped."""
        if value is None:
            return
        self._scope_items.append(value)
        self[SCOPE_FIELD] = self._scope_items


def _collect(scope: ScopeValue, scopes: List[ScopeValue]) -> None:
    scopes.append(scope)

def apply_scopes(entry: LogEntry, scope_provider: ScopeProvider) -> None:
    """
    Merge the active scopes into entry.

    Scopes arrive innermost first. Unnamed values keep that order in the Scope
    list. Named pairs are written outermost first with last-write-wins, so the
    most recently pushed scope decides the value of a shared name.
    """
    scopes: List[ScopeValue] = []
    scope_provider.for_each_scope(_collect, scopes)

    for scope in scopes:
        if isinstance(scope, Opaque):
            entry.add_scope(scope.value)

    for scope in reversed(scopes):
        if isinstance(scope, NamedPairs):
            for name, value in scope.pairs:
                entry[name] = value
        elif isinstance(scope, NamedPair):
            entry[scope.name] = scope.value


def build_entry(
    level: LogLevel,
    category: str,
    event_id: EventId,
    text: str,
    error: Optional[BaseException],
    options: LoggingOptions,
    scope_provider: Optional[ScopeProvider],
) -> LogEntry:
    """
    Build the record for one event.

    Field order: LogLevel, scope contributions, Category, EventId, Text,
    Exception. Each optional field is governed by its include_* option.
    """
    entry = LogEntry()

    if options.include_log_level:
        entry[LOG_LEVEL_FIELD] = level.label

    if options.include_scopes and scope_provider is not None:
        apply_scopes(entry, scope_provider)

    if options.include_category:
        entry[CATEGORY_FIELD] = category

    if options.include_event_id:
        entry[EVENT_ID_FIELD] = event_id.id

    entry[TEXT_FIELD] = text

    if options.include_exception and error is not None:
        entry[EXCEPTION_FIELD] = ErrorInfo.from_exception(error)

    return entry
