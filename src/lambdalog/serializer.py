# src/lambdalog/serializer.py: JSON rendering of records.
# This module turns a LogEntry into its canonical text. Record field names are
# converted to camel case, absent fields are omitted, and every value is
# converted explicitly so that an unsupported type fails with an error naming
# the field it came from instead of being silently coerced.

from __future__ import annotations

import dataclasses
import enum
import json
import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import PurePath
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

from .entry import ErrorInfo
from .util.errors import SerializationError


def camel_case(name: str) -> str:
    """
    Lower the leading run of capitals: 'LogLevel' -> 'logLevel',
    'ID' -> 'id', 'URLPath' -> 'urlPath'. Other characters are kept.
    """
    if not name or not name[0].isupper():
        return name

    chars = list(name)
    for i, char in enumerate(chars):
        if not char.isupper():
            break
        # Keep the capital that starts the next word ('URLPath' -> 'urlPath').
        if i > 0 and i + 1 < len(chars) and chars[i + 1].islower():
            break
        chars[i] = char.lower()
    return "".join(chars)


class JsonSerializer:
    """
    Renders records as JSON.

    With indent=None the output is a single compact line; with an integer it is
    pretty-printed. Both forms parse back to the same ordered structure.
    """

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent

    def serialize(self, entry: Mapping[str, Any]) -> str:
        payload = {}
        for name, value in entry.items():
            if value is None:
                continue
            field = camel_case(str(name))
            payload[field] = self._convert(value, field, frozenset())

        try:
            if self.indent is None:
                return json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
            return json.dumps(payload, ensure_ascii=False, allow_nan=False, indent=self.indent)
        except ValueError as e:
            raise SerializationError(f"Record could not be rendered as JSON: {e}") from e

    def _convert(self, value: Any, path: str, parents: frozenset) -> Any:
        """
        Convert value to plain JSON types, failing fast on anything else.

        parents holds the ids of the containers enclosing value, so a container
        that holds itself is reported instead of recursing forever.
        """
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, int) and not isinstance(value, enum.Enum):
            return value
        if isinstance(value, float):
            if not math.isfinite(value):
                raise SerializationError(f"Field '{path}' holds a non-finite float: {value!r}", path)
            return value
        if isinstance(value, ErrorInfo):
            return {"error": value.error, "stackTrace": value.stack_trace}
        if isinstance(value, enum.Enum):
            return self._convert(value.value, path, parents)
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        if isinstance(value, (UUID, PurePath)):
            return str(value)
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise SerializationError(f"Field '{path}' holds a non-finite decimal: {value!r}", path)
            # Rendered as a string so no digits are lost.
            return str(value)
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json")
        if id(value) in parents:
            raise SerializationError(f"Field '{path}' contains a circular reference", path)
        parents = parents | {id(value)}
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {
                field.name: self._convert(getattr(value, field.name), f"{path}.{field.name}", parents)
                for field in dataclasses.fields(value)
            }
        if isinstance(value, Mapping):
            converted = {}
            for key, item in value.items():
                if isinstance(key, bool) or not isinstance(key, (str, int)):
                    raise SerializationError(
                        f"Field '{path}' has a key of unsupported type {type(key).__name__}", path
                    )
                converted[str(key)] = self._convert(item, f"{path}.{key}", parents)
            return converted
        if isinstance(value, (list, tuple)):
            return [self._convert(item, f"{path}[{i}]", parents) for i, item in enumerate(value)]
        raise SerializationError(
            f"Field '{path}' holds a value of unsupported type {type(value).__name__}", path
        )


def serialize(entry: Mapping[str, Any], indent: Optional[int] = None) -> str:
    """Render entry with a one-off serializer."""
    return JsonSerializer(indent).serialize(entry)
