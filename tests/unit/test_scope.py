# tests/unit/test_scope.py: Unit tests for scope providers and scope values.

import asyncio
import contextvars
import threading

import pytest

from lambdalog.scope import (
    ContextScopeProvider,
    NamedPair,
    NamedPairs,
    NullScopeProvider,
    Opaque,
    ScopeGuard,
    ScopeProviderRef,
    to_scope_value,
)

def active_scopes(provider):
    """Collect the active scopes, innermost first."""
    seen = []
    provider.for_each_scope(lambda scope, acc: acc.append(scope), seen)
    return seen

@pytest.mark.parametrize(
    "value, expected",
    [
        ({"RequestId": "abc"}, NamedPairs((("RequestId", "abc"),))),
        ([("a", 1), ("b", 2)], NamedPairs((("a", 1), ("b", 2)))),
        (("UserId", 42), NamedPair("UserId", 42)),
        ("plain text", Opaque("plain text")),
        (7, Opaque(7)),
        ([1, 2], Opaque([1, 2])),
        ([], Opaque([])),
    ],
)
def test_to_scope_value_classifies_shapes(value, expected):
    """Tests that pushed values are classified into the three scope shapes."""
    assert to_scope_value(value) == expected

def test_to_scope_value_keeps_explicit_variants():
    """Tests that an already-classified value is passed through unchanged."""
    pair = NamedPair("k", "v")
    assert to_scope_value(pair) is pair

def test_for_each_scope_is_innermost_first():
    """Tests that iteration runs from the most recent push to the oldest."""
    provider = ContextScopeProvider()
    with provider.push("A"):
        with provider.push("B"):
            with provider.push("C"):
                assert active_scopes(provider) == [Opaque("C"), Opaque("B"), Opaque("A")]
            assert active_scopes(provider) == [Opaque("B"), Opaque("A")]

def test_lifo_release_leaves_stack_empty():
    """Tests that releasing B then A leaves no active scope."""
    provider = ContextScopeProvider()
    guard_a = provider.push("A")
    guard_b = provider.push("B")

    guard_b.close()
    assert active_scopes(provider) == [Opaque("A")]
    guard_a.close()
    assert active_scopes(provider) == []

def test_guard_releases_only_once():
    """Tests that a second release of the same guard has no effect."""
    provider = ContextScopeProvider()
    outer = provider.push("outer")
    inner = provider.push("inner")

    inner.close()
    inner.close()

    assert inner.released
    assert active_scopes(provider) == [Opaque("outer")]
    outer.close()

def test_guard_releases_on_exception():
    """Tests that leaving a with block through an exception releases the scope."""
    provider = ContextScopeProvider()
    with pytest.raises(RuntimeError):
        with provider.push("doomed"):
            raise RuntimeError("boom")
    assert active_scopes(provider) == []

def test_providers_do_not_share_stacks():
    """Tests that two tracking providers keep separate stacks."""
    first = ContextScopeProvider()
    second = ContextScopeProvider()
    with first.push("only-first"):
        assert active_scopes(second) == []

def test_threads_have_disjoint_stacks():
    """Tests that scopes pushed on one thread are invisible to another."""
    provider = ContextScopeProvider()
    pushed = threading.Event()
    checked = threading.Event()
    seen_by_other = []

    def pusher():
        with provider.push("thread-a"):
            pushed.set()
            checked.wait(timeout=5)

    def observer():
        pushed.wait(timeout=5)
        seen_by_other.extend(active_scopes(provider))
        checked.set()

    threads = [threading.Thread(target=pusher), threading.Thread(target=observer)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert seen_by_other == []
    assert active_scopes(provider) == []

def test_asyncio_tasks_have_disjoint_stacks():
    """Tests that concurrent tasks each see only their own scopes."""
    provider = ContextScopeProvider()

    async def worker(name):
        with provider.push(name):
            await asyncio.sleep(0)
            return active_scopes(provider)

    async def run():
        return await asyncio.gather(worker("task-1"), worker("task-2"))

    first, second = asyncio.run(run())
    assert first == [Opaque("task-1")]
    assert second == [Opaque("task-2")]

def test_null_provider_tracks_nothing():
    """Tests that the null provider returns an inert guard and visits nothing."""
    provider = NullScopeProvider.INSTANCE
    with provider.push({"RequestId": "abc"}) as guard:
        assert isinstance(guard, ScopeGuard)
        assert guard.released
        assert active_scopes(provider) == []

def test_scope_provider_ref_swap():
    """Tests that the reference cell returns whatever was last stored."""
    first = ContextScopeProvider()
    second = ContextScopeProvider()
    ref = ScopeProviderRef(first)
    assert ref.get() is first
    ref.set(second)
    assert ref.get() is second
    ref.set(None)
    assert ref.get() is None

def test_many_providers_share_one_context_variable():
    """Tests that short-lived providers leave no per-instance state in the context."""
    def push_and_release_with_fresh_providers():
        for _ in range(100):
            provider = ContextScopeProvider()
            with provider.push({"Request": 1}):
                assert len(active_scopes(provider)) == 1
            assert active_scopes(provider) == []
        return len(contextvars.copy_context())

    assert contextvars.Context().run(push_and_release_with_fresh_providers) == 1

def test_released_provider_keeps_other_stacks():
    """Tests that emptying one provider's stack leaves another provider's scopes."""
    first, second = ContextScopeProvider(), ContextScopeProvider()
    with second.push("kept"):
        with first.push("dropped"):
            pass
        assert active_scopes(first) == []
        assert active_scopes(second) == [Opaque("kept")]
