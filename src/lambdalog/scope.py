# src/lambdalog/scope.py: Ambient scope tracking.
# This module implements a Strategy pattern for scope providers. A scope is a
# value pushed for the lifetime of a 'with' block and attached to every record
# logged inside it. The tracking provider keeps one stack per execution path in
# a context variable, so threads and asyncio tasks never see each other's
# scopes; the null provider does no bookkeeping at all when scopes are off.

from __future__ import annotations

import contextvars
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Optional, Tuple, TypeVar, Union

T = TypeVar("T")


# --- Scope values ---

@dataclass(frozen=True)
class NamedPairs:
    """An ordered sequence of (name, value) pairs, flattened into the record."""
    pairs: Tuple[Tuple[str, Any], ...]

@dataclass(frozen=True)
class NamedPair:
    """A single (name, value) pair, flattened into the record."""
    name: str
    value: Any

@dataclass(frozen=True)
class Opaque:
    """A value with no name, collected under the record's Scope list."""
    value: Any

ScopeValue = Union[NamedPairs, NamedPair, Opaque]


def _is_pair(item: Any) -> bool:
    return isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)

def to_scope_value(value: Any) -> ScopeValue:
    """
    Classify a pushed value into one of the three scope shapes.

    Mappings and non-empty lists or tuples made only of (str, value) pairs are
    NamedPairs; a lone (str, value) tuple is a NamedPair; anything else,
    including strings, is Opaque.
    """
    if isinstance(value, (NamedPairs, NamedPair, Opaque)):
        return value
    if isinstance(value, Mapping):
        return NamedPairs(tuple((str(key), item) for key, item in value.items()))
    if _is_pair(value):
        return NamedPair(value[0], value[1])
    if isinstance(value, (list, tuple)) and value and all(_is_pair(item) for item in value):
        return NamedPairs(tuple(value))
    return Opaque(value)


# --- Guards ---

class ScopeGuard:
    """
    Context manager returned by push(). Releasing it removes exactly the scope
    it was created for; only the first release has any effect.
    """

    def __init__(self, release: Optional[Callable[[], None]] = None):
        self._release = release
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        return self._release is None

    def close(self) -> None:
        with self._lock:
            release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> "ScopeGuard":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def released_guard() -> ScopeGuard:
    """A guard with nothing to release, for callers with no active provider."""
    return ScopeGuard()


# --- Providers ---

class ScopeProvider(ABC):
    """Abstract base class for a scope provider."""

    @abstractmethod
    def push(self, value: Any) -> ScopeGuard:
        """Make value the innermost scope of the current execution path."""
        pass

    @abstractmethod
    def for_each_scope(self, visitor: Callable[[ScopeValue, T], None], state: T) -> None:
        """Call visitor(scope, state) for each active scope, innermost first."""
        pass


class _ScopeNode:
    __slots__ = ("value", "parent")

    def __init__(self, value: ScopeValue, parent: Optional["_ScopeNode"]):
        self.value = value
        self.parent = parent


# Maps each ContextScopeProvider's key to the head of its stack. A single
# variable is shared by every provider; the mapping is replaced, never mutated.
_active_scopes: contextvars.ContextVar[Mapping[object, _ScopeNode]] = contextvars.ContextVar(
    "lambdalog_scopes", default=MappingProxyType({})
)


class ContextScopeProvider(ScopeProvider):
    """
    Tracks scopes per execution path.

    The current stack is an immutable linked list whose head is stored under
    this provider's key in a module-level context variable. Pushing sets a new
    head; releasing restores the head's parent and drops the key once the stack
    is empty. New threads start with an empty stack and asyncio tasks inherit a
    copy of their creator's stack, so changes made on one path are never
    visible on another. Creating providers adds no context variables.
    """

    def __init__(self):
        self._key = object()

    def _head(self) -> Optional[_ScopeNode]:
        return _active_scopes.get().get(self._key)

    def _set_head(self, node: Optional[_ScopeNode]) -> None:
        heads = dict(_active_scopes.get())
        if node is None:
            heads.pop(self._key, None)
        else:
            heads[self._key] = node
        _active_scopes.set(MappingProxyType(heads))

    def push(self, value: Any) -> ScopeGuard:
        node = _ScopeNode(to_scope_value(value), self._head())
        self._set_head(node)
        return ScopeGuard(lambda: self._set_head(node.parent))

    def for_each_scope(self, visitor: Callable[[ScopeValue, T], None], state: T) -> None:
        node = self._head()
        while node is not None:
            visitor(node.value, state)
            node = node.parent


class NullScopeProvider(ScopeProvider):
    """A provider that tracks nothing, used when scopes are disabled."""

    INSTANCE: "NullScopeProvider"

    def push(self, value: Any) -> ScopeGuard:
        return released_guard()

    def for_each_scope(self, visitor: Callable[[ScopeValue, T], None], state: T) -> None:
        pass

NullScopeProvider.INSTANCE = NullScopeProvider()


class ScopeProviderRef:
    """
    Shared, swappable reference to the active scope provider.

    A provider hands the same cell to every logger it creates, so replacing the
    content once is observed by all of them on their next log call.
    """

    def __init__(self, provider: Optional[ScopeProvider] = None):
        self._provider = provider
        self._lock = threading.Lock()

    def get(self) -> Optional[ScopeProvider]:
        with self._lock:
            return self._provider

    def set(self, provider: Optional[ScopeProvider]) -> None:
        with self._lock:
            self._provider = provider
