# src/lambdalog/levels.py: Log levels and event identifiers.
# This module defines the ordered severity scale used by records and filters,
# the mapping to and from the standard library's numeric levels, and the
# EventId value attached to each event.

from __future__ import annotations

import logging
from enum import IntEnum
from typing import NamedTuple, Optional, Union


class LogLevel(IntEnum):
    """Severity of an event. Rendered on the wire by its label ("Error")."""
    TRACE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5
    NONE = 6

    @property
    def label(self) -> str:
        return _LABELS[self]

    def __str__(self) -> str:
        return self.label

    @classmethod
    def parse(cls, value: Union["LogLevel", str, int]) -> "LogLevel":
        """
        Parse a level from a LogLevel, a name or an integer.

        Names are case-insensitive and accept the standard library spellings
        ("INFO", "WARN", "FATAL") as well as the labels ("Information").
        """
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _ALIASES:
                return _ALIASES[key]
            if key.isdigit():
                return cls(int(key))
        raise ValueError(f"Invalid log level: {value!r}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> "LogLevel":
        """Map a standard library numeric level onto the scale."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFORMATION
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE

    def to_stdlib(self) -> int:
        return _STDLIB_LEVELS[self]


_LABELS = {
    LogLevel.TRACE: "Trace",
    LogLevel.DEBUG: "Debug",
    LogLevel.INFORMATION: "Information",
    LogLevel.WARNING: "Warning",
    LogLevel.ERROR: "Error",
    LogLevel.CRITICAL: "Critical",
    LogLevel.NONE: "None",
}

_ALIASES = {label.lower(): level for level, label in _LABELS.items()}
_ALIASES.update({
    "info": LogLevel.INFORMATION,
    "warn": LogLevel.WARNING,
    "fatal": LogLevel.CRITICAL,
})

# TRACE sits below DEBUG; NONE sits above everything the stdlib emits.
_STDLIB_LEVELS = {
    LogLevel.TRACE: 5,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFORMATION: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.NONE: logging.CRITICAL + 10,
}


class EventId(NamedTuple):
    """Identifies a kind of event. Only the numeric id reaches the record."""
    id: int = 0
    name: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["EventId", int, None]) -> "EventId":
        if value is None:
            return cls()
        if isinstance(value, EventId):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Invalid event id: {value!r}")
